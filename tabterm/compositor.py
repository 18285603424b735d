"""
Pure view functions: navigation state in, a Rich text frame out.
"""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

from tabterm.pages import Page
from tabterm.state import KEY_BINDINGS, Key, NavigationState, Status
from tabterm.utility import LayoutConfig


def theme_name(state: NavigationState, themes: Sequence[str]) -> str | None:
    if not themes:
        return None
    return themes[state.active_theme]


def _fit(text: Text, width: int) -> Text:
    width = max(0, width)
    text.truncate(width, overflow="ellipsis" if width > 1 else "crop")
    return text


def _rule(text: Text, width: int, layout: LayoutConfig, *, before: bool) -> Text:
    """Pad ``text`` with the rule character up to ``width`` columns."""
    fill = Text(layout.rule_char * max(0, width - text.cell_len), style=layout.rule_color)
    line = fill + text if before else text + fill
    line.truncate(max(0, width), overflow="crop")
    return line


def header_view(state: NavigationState, pages: Sequence[Page], layout: LayoutConfig) -> Text:
    title = Text.assemble(
        (layout.rule_char, layout.rule_color),
        " ",
        (pages[state.active_page].name, Style(bold=True, color=layout.highlight_color)),
        " ",
    )
    return _rule(title, state.viewport.width, layout, before=False)


def footer_view(state: NavigationState, themes: Sequence[str], layout: LayoutConfig) -> Text:
    info = Text()
    theme = theme_name(state, themes)
    if theme is not None:
        info.append(f" {theme} ", style=layout.inactive_color)
        info.append(layout.rule_char, style=layout.rule_color)
    info.append(f"{state.viewport.scroll_percent() * 100:3.0f}%")
    return _rule(info, state.viewport.width, layout, before=True)


def decoration_heights(
    state: NavigationState,
    pages: Sequence[Page],
    themes: Sequence[str],
    layout: LayoutConfig,
) -> tuple[int, int]:
    """Rows taken by the header and footer lines around the viewport."""
    header = header_view(state, pages, layout)
    footer = footer_view(state, themes, layout)
    return len(header.plain.split("\n")), len(footer.plain.split("\n"))


def tabs_view(state: NavigationState, pages: Sequence[Page], layout: LayoutConfig) -> Text:
    row = Text(layout.title, style=Style(color=layout.title_color))
    active = Style(bold=True, color=layout.highlight_color)
    inactive = Style(dim=True, color=layout.inactive_color)

    for i, page in enumerate(pages):
        row.append(page.name, style=active if i == state.active_page else inactive)
        if i != len(pages) - 1:
            row.append(layout.separator, style=layout.separator_color)

    return _fit(row, state.terminal_width)


def help_view(state: NavigationState, themes: Sequence[str], layout: LayoutConfig) -> Text:
    """Short help normally, every binding when the help panel is expanded."""
    entries = [
        binding for binding in KEY_BINDINGS
        if (state.help_expanded or binding.short)
        and (themes or binding.key is not Key.TOGGLE_THEME)
    ]
    line = Text(style=layout.help_color)
    for i, binding in enumerate(entries):
        if i:
            line.append(layout.separator, style=Style(dim=True))
        line.append(binding.help_key, style=Style(bold=True))
        line.append(f" {binding.description}")
    return _fit(line, state.terminal_width)


def goodbye_view(layout: LayoutConfig) -> Text:
    """The framed message shown once on the way out."""
    inner = cell_len(layout.goodbye_message) + 2
    frame = box.ROUNDED
    style = Style(color=layout.goodbye_color)
    return Text("\n").join([
        Text(frame.get_top([inner]), style=style),
        Text(f"{frame.head_left} {layout.goodbye_message} {frame.head_right}", style=style),
        Text(frame.get_bottom([inner]), style=style),
    ])


def render_frame(
    state: NavigationState,
    pages: Sequence[Page],
    themes: Sequence[str],
    layout: LayoutConfig,
) -> Text:
    """Compose the full screen for ``state``."""
    if state.status is Status.QUITTING:
        return goodbye_view(layout)

    rows = [tabs_view(state, pages, layout), Text()]
    if state.viewport.ready:
        indent = Text(" " * layout.body_indent)
        rows.append(header_view(state, pages, layout))
        rows.extend(indent + line for line in state.viewport.visible_slice())
        rows.append(footer_view(state, themes, layout))
    rows.append(help_view(state, themes, layout))

    frame = Text("\n").join(rows)
    frame.no_wrap = True
    frame.overflow = "crop"
    return frame
