"""
Scrollable window over a page's rendered lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from rich.text import Text


@dataclass(frozen=True)
class Viewport:
    """Rendered content plus a scroll window over it.

    Every operation returns a new viewport; ``y_offset`` is always kept
    within ``[0, max_offset]``.
    """

    width: int = 0
    height: int = 0
    y_offset: int = 0
    lines: tuple[Text, ...] = field(default=(), repr=False)
    ready: bool = False

    @property
    def content_height(self) -> int:
        return len(self.lines)

    @property
    def max_offset(self) -> int:
        return max(0, self.content_height - self.height)

    @property
    def at_top(self) -> bool:
        return self.y_offset <= 0

    @property
    def at_bottom(self) -> bool:
        return self.y_offset >= self.max_offset

    def _clamped(self, offset: int) -> int:
        return min(max(0, offset), self.max_offset)

    def resize(self, width: int, height: int) -> "Viewport":
        resized = replace(self, width=max(0, width), height=max(0, height), ready=True)
        return replace(resized, y_offset=resized._clamped(self.y_offset))

    def set_content(self, content: Text) -> "Viewport":
        """Replace the content; the scroll offset is clamped, not reset."""
        lines = tuple(content.split("\n", allow_blank=True)) if content.plain else ()
        updated = replace(self, lines=lines)
        return replace(updated, y_offset=updated._clamped(self.y_offset))

    def scroll(self, delta: int) -> "Viewport":
        return replace(self, y_offset=self._clamped(self.y_offset + delta))

    def page_up(self) -> "Viewport":
        return self.scroll(-max(1, self.height))

    def page_down(self) -> "Viewport":
        return self.scroll(max(1, self.height))

    def half_page_up(self) -> "Viewport":
        return self.scroll(-max(1, self.height // 2))

    def half_page_down(self) -> "Viewport":
        return self.scroll(max(1, self.height // 2))

    def goto_top(self) -> "Viewport":
        return replace(self, y_offset=0)

    def goto_bottom(self) -> "Viewport":
        return replace(self, y_offset=self.max_offset)

    def scroll_percent(self) -> float:
        if self.content_height <= self.height:
            return 0.0
        return self.y_offset / (self.content_height - self.height)

    def visible_slice(self) -> list[Text]:
        """The ``height`` lines starting at ``y_offset`` (fewer at the end)."""
        if self.height <= 0:
            return []
        return list(self.lines[self.y_offset:self.y_offset + self.height])
