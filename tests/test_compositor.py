"""Tests for tabterm.compositor."""
from __future__ import annotations

from tabterm.compositor import decoration_heights, render_frame, tabs_view
from tabterm.navigation import Navigator
from tabterm.state import Key, KeyPress, Resize
from tabterm.utility import DEFAULT_LAYOUT, LayoutConfig


def frame_lines(navigator, state) -> list[str]:
    frame = render_frame(state, navigator.pages, navigator.themes, navigator.layout)
    return frame.plain.split("\n")


def test_ready_frame_fills_the_terminal(navigator, ready):
    lines = frame_lines(navigator, ready)

    assert len(lines) == 24
    assert lines[0] == "tabterm Intro • Skills • Contact"
    assert lines[1] == ""
    assert lines[2].startswith("─ Intro ─")
    assert len(lines[2]) == ready.viewport.width
    assert lines[3] == "  intro 0"
    assert lines[-2].endswith("  0%")
    assert lines[-1] == "q Quit • ? Toggle help"


def test_footer_shows_theme_and_percent(themed):
    state, _ = themed.transition(themed.initial_state(), Resize(80, 24))
    state, _ = themed.transition(state, KeyPress(Key.BOTTOM))

    footer = frame_lines(themed, state)[-2]
    assert footer.endswith(" dark ─100%")


def test_expanded_help_lists_bindings(navigator, ready):
    state, _ = navigator.transition(ready, KeyPress(Key.TOGGLE_HELP))
    state, _ = navigator.transition(state, Resize(400, 24))

    help_line = frame_lines(navigator, state)[-1]
    assert "←/h Previous page" in help_line
    assert "→/l Next page" in help_line
    assert "Next theme" not in help_line


def test_expanded_help_mentions_themes_when_enabled(themed):
    state, _ = themed.transition(themed.initial_state(), Resize(400, 24))
    state, _ = themed.transition(state, KeyPress(Key.TOGGLE_HELP))

    assert "t Next theme" in frame_lines(themed, state)[-1]


def test_active_tab_is_bold(navigator, ready):
    state, _ = navigator.transition(ready, KeyPress(Key.NEXT))
    row = tabs_view(state, navigator.pages, DEFAULT_LAYOUT)

    bold = [row.plain[span.start:span.end] for span in row.spans if getattr(span.style, "bold", False)]
    assert bold == ["Skills"]


def test_decoration_heights_are_one_line(navigator, ready):
    assert decoration_heights(ready, navigator.pages, navigator.themes, navigator.layout) == (1, 1)


def test_uninitialized_frame_has_no_viewport(navigator):
    lines = frame_lines(navigator, navigator.initial_state())
    assert len(lines) == 3


def test_zero_sized_frame(navigator):
    state, _ = navigator.transition(navigator.initial_state(), Resize(0, 0))
    lines = frame_lines(navigator, state)
    assert all(line == "" for line in lines)


def test_goodbye_frame(navigator, ready):
    state, _ = navigator.transition(ready, KeyPress(Key.QUIT))
    lines = frame_lines(navigator, state)

    assert len(lines) == 3
    assert lines[0].startswith("╭") and lines[0].endswith("╮")
    assert lines[1] == "│ Thanks for reading! :D │"
    assert lines[2].startswith("╰") and lines[2].endswith("╯")
    assert len({len(line) for line in lines}) == 1


def test_custom_title(pages, renderer):
    navigator = Navigator(pages, [], renderer, LayoutConfig(title="str1ke "))
    state, _ = navigator.transition(navigator.initial_state(), Resize(80, 24))
    assert frame_lines(navigator, state)[0].startswith("str1ke Intro")
