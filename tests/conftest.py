from __future__ import annotations

import pytest
from rich.text import Text

from tabterm.navigation import Navigator
from tabterm.pages import Page
from tabterm.render import RenderError
from tabterm.state import Resize


class StubRenderer:
    """Renders each page as a fixed number of numbered lines."""

    def __init__(self, heights: dict[str, int] | None = None, default: int = 50):
        self.heights = heights or {}
        self.default = default
        self.calls: list[tuple[str, int, str | None]] = []
        self.fail = False

    def render(self, markdown: str, wrap_width: int, theme_id: str | None = None) -> Text:
        self.calls.append((markdown, wrap_width, theme_id))
        if self.fail:
            raise RenderError("boom")
        count = self.heights.get(markdown, self.default)
        return Text("\n".join(f"{markdown} {i}" for i in range(count)))


@pytest.fixture
def pages() -> list[Page]:
    return [
        Page(name="Intro", content="intro", order=1),
        Page(name="Skills", content="skills", order=2),
        Page(name="Contact", content="contact", order=3),
    ]


@pytest.fixture
def renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture
def navigator(pages, renderer) -> Navigator:
    return Navigator(pages, [], renderer)


@pytest.fixture
def themed(pages, renderer) -> Navigator:
    return Navigator(pages, ["dark", "light"], renderer)


@pytest.fixture
def ready(navigator):
    state, _ = navigator.transition(navigator.initial_state(), Resize(80, 24))
    return state


@pytest.fixture
def page_dir(tmp_path):
    directory = tmp_path / "pages"
    directory.mkdir()
    (directory / "1 - Intro.md").write_text("# Intro\n\nHello there.\n", encoding="utf-8")
    (directory / "2 - Skills.md").write_text("- Python\n- Textual\n", encoding="utf-8")
    (directory / "3 - Contact.md").write_text("Write *soon*.\n", encoding="utf-8")
    return directory


@pytest.fixture
def theme_dir(tmp_path):
    directory = tmp_path / "themes"
    for name, colour in (("light", "#383a42"), ("dark", "#abb2bf")):
        (directory / name).mkdir(parents=True)
        (directory / name / "theme.json").write_text(f'{{"text": "{colour}"}}', encoding="utf-8")
    return directory
