"""
Navigation data model: key variants, events, effects and the state aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tabterm.viewport import Viewport


class Key(Enum):
    QUIT = "quit"
    NEXT = "next"
    PREV = "prev"
    TOGGLE_HELP = "toggle_help"
    TOGGLE_THEME = "toggle_theme"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HALF_PAGE_UP = "half_page_up"
    HALF_PAGE_DOWN = "half_page_down"
    TOP = "top"
    BOTTOM = "bottom"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyBinding:
    key: Key
    keys: tuple[str, ...]
    help_key: str
    description: str
    short: bool = False


KEY_BINDINGS = (
    KeyBinding(Key.PREV, ("left", "h"), "←/h", "Previous page"),
    KeyBinding(Key.NEXT, ("right", "l", "tab"), "→/l", "Next page"),
    KeyBinding(Key.SCROLL_UP, ("up", "k"), "↑/k", "Scroll up"),
    KeyBinding(Key.SCROLL_DOWN, ("down", "j"), "↓/j", "Scroll down"),
    KeyBinding(Key.PAGE_UP, ("pageup", "b"), "pgup/b", "Page up"),
    KeyBinding(Key.PAGE_DOWN, ("pagedown", "space", "f"), "pgdn/f", "Page down"),
    KeyBinding(Key.HALF_PAGE_UP, ("u", "ctrl+u"), "u", "Half page up"),
    KeyBinding(Key.HALF_PAGE_DOWN, ("d", "ctrl+d"), "d", "Half page down"),
    KeyBinding(Key.TOP, ("home", "g"), "home/g", "Go to top"),
    KeyBinding(Key.BOTTOM, ("end", "G"), "end/G", "Go to bottom"),
    KeyBinding(Key.TOGGLE_THEME, ("t",), "t", "Next theme"),
    KeyBinding(Key.QUIT, ("q", "esc", "escape", "ctrl+c"), "q", "Quit", short=True),
    KeyBinding(Key.TOGGLE_HELP, ("?", "question_mark"), "?", "Toggle help", short=True),
)

_KEY_NAMES = {name: binding.key for binding in KEY_BINDINGS for name in binding.keys}


def resolve_key(name: str) -> Key:
    """Map a raw terminal key name to its navigation key."""
    return _KEY_NAMES.get(name, Key.UNKNOWN)


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPress:
    key: Key


class Effect(Enum):
    RERENDER_VIEWPORT = "rerender_viewport"
    CLEAR_SCREEN = "clear_screen"
    QUIT = "quit"


class Status(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    QUITTING = "quitting"


@dataclass(frozen=True)
class NavigationState:
    """Everything that changes while the reader runs. Replaced, never mutated."""

    status: Status = Status.UNINITIALIZED
    active_page: int = 0
    active_theme: int = 0
    last_key: str = ""
    help_expanded: bool = False
    viewport: Viewport = field(default_factory=Viewport)
    terminal_width: int = 0
    terminal_height: int = 0
