from __future__ import annotations

from dataclasses import dataclass

from textual import events
from textual.message import Message
from textual.widgets import Static


@dataclass(frozen=True)
class LayoutConfig:
    """Read-only styling and layout constants shared by the state machine and compositor."""

    title: str = "tabterm "
    title_color: str = "#F38BA8"
    highlight_color: str = "#CBA6F7"
    inactive_color: str = "#6C7086"
    separator: str = " • "
    separator_color: str = "#FFFFFF"
    rule_char: str = "─"
    rule_color: str = "#6C7086"
    help_color: str = "#F38BA8"
    goodbye_color: str = "#F38BA8"
    goodbye_message: str = "Thanks for reading! :D"
    # columns taken by the frame around the viewport
    frame_padding: int = 4
    # columns between the viewport edge and the wrapped text
    wrap_padding: int = 4
    body_indent: int = 2
    # tabs row, blank separator line, help line
    vertical_margin: int = 3


DEFAULT_LAYOUT = LayoutConfig()


APP_CSS = """
$background: #1a1a1a;
$surface: #21252b;

Screen {
    background: $background;
    overflow: hidden;
}

PageFrame {
    width: 100%;
    height: 100%;
    padding: 0;
    background: $background;
    color: #abb2bf;
}
"""


class PageFrame(Static):
    """The single widget showing the composed frame."""

    class Scrolled(Message):
        """Posted when the mouse wheel moves over the frame."""
        def __init__(self, delta: int):
            super().__init__()
            self.delta = delta

    def __init__(self):
        super().__init__(id="frame")

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.stop()
        self.post_message(self.Scrolled(1))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.stop()
        self.post_message(self.Scrolled(-1))
