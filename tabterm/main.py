#!/usr/bin/env python3
"""
tabterm - tabbed terminal reader for an ordered set of markdown pages.

Installation:
    pip install textual rich markdown-it-py[linkify] pygments

Usage:
    tabterm --pages assets/pages --themes assets/themes
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding

from tabterm.compositor import render_frame
from tabterm.navigation import Event, Navigator
from tabterm.pages import LoadError, load_pages, load_themes
from tabterm.render import MarkdownRenderer
from tabterm.state import KEY_BINDINGS, Effect, Key, KeyPress, Resize, Status, resolve_key
from tabterm.utility import APP_CSS, DEFAULT_LAYOUT, LayoutConfig, PageFrame

logger = logging.getLogger(__name__)

DEFAULT_PAGES_DIR = Path("assets/pages")
DEFAULT_THEMES_DIR = Path("assets/themes")
# raw key names Textual reports under another name
TERMINAL_ALIASES = {"?", "esc"}


# ============================================================================
# Main Application
# ============================================================================

class TabTerm(App):
    """Tabbed markdown pages with themes and a scrollable viewport."""

    CSS = APP_CSS

    BINDINGS = [
        Binding(name, f"dispatch_key({name!r})", show=False, priority=True)
        for binding in KEY_BINDINGS
        for name in binding.keys
        if name not in TERMINAL_ALIASES
    ]

    TITLE = "tabterm"

    def __init__(self, navigator: Navigator):
        super().__init__()
        self.navigator = navigator
        self.nav_state = navigator.initial_state()
        self.farewell: Optional[Text] = None

    def compose(self) -> ComposeResult:
        yield PageFrame()

    def on_mount(self) -> None:
        """Size the viewport if the driver's first resize came before the frame existed."""
        if self.nav_state.status is Status.UNINITIALIZED:
            self.apply_event(Resize(self.size.width, self.size.height))
        else:
            self.show_frame()

    def on_resize(self, event: events.Resize) -> None:
        self.apply_event(Resize(event.size.width, event.size.height))

    def action_dispatch_key(self, name: str) -> None:
        self.apply_event(KeyPress(resolve_key(name)))

    def on_page_frame_scrolled(self, message: PageFrame.Scrolled) -> None:
        self.apply_event(KeyPress(Key.SCROLL_DOWN if message.delta > 0 else Key.SCROLL_UP))

    def apply_event(self, event: Event) -> None:
        """Feed one event through the state machine and apply its effects."""
        self.nav_state, effects = self.navigator.transition(self.nav_state, event)

        for effect in effects:
            if effect is Effect.CLEAR_SCREEN:
                self.refresh(layout=True)
            elif effect is Effect.QUIT:
                self.farewell = self.compose_frame()
                self.exit(return_code=0)
                return

        self.show_frame()

    def compose_frame(self) -> Text:
        nav = self.navigator
        return render_frame(self.nav_state, nav.pages, nav.themes, nav.layout)

    def show_frame(self) -> None:
        for frame in self.query(PageFrame):
            frame.update(self.compose_frame())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabterm",
        description="Browse an ordered set of markdown pages as tabs.",
        epilog=(
            "Controls: ←/h and →/l/tab switch pages, ↑/↓ scroll, "
            "t cycles themes, ? toggles help, q quits."
        ),
    )
    parser.add_argument(
        "--pages", type=Path, default=DEFAULT_PAGES_DIR,
        help="directory of '<order> - <name>.md' pages (default: %(default)s)",
    )
    themes = parser.add_mutually_exclusive_group()
    themes.add_argument(
        "--themes", type=Path, default=DEFAULT_THEMES_DIR,
        help="directory of theme folders holding theme.json (default: %(default)s)",
    )
    themes.add_argument("--no-themes", action="store_true", help="disable theming")
    parser.add_argument("--title", default=DEFAULT_LAYOUT.title.strip(), help="title shown before the tabs")
    parser.add_argument("--log-file", type=Path, help="write debug logs to this file")
    return parser


def configure_logging(log_file: Optional[Path]) -> None:
    """Log to a file when asked; the terminal belongs to the reader."""
    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_navigator(args: argparse.Namespace) -> Navigator:
    pages = load_pages(args.pages)
    themes = [] if args.no_themes else load_themes(args.themes)
    theme_dir = None if args.no_themes else args.themes
    layout = LayoutConfig(title=f"{args.title} ")
    return Navigator(pages, themes, MarkdownRenderer(theme_dir), layout)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    try:
        navigator = build_navigator(args)
    except LoadError as e:
        logger.error("Startup failed: %s", e)
        print(f"tabterm: {e}", file=sys.stderr)
        return 1

    app = TabTerm(navigator)
    try:
        app.run()
    except OSError as e:
        logger.exception("Terminal I/O failed")
        print(f"tabterm: {e}", file=sys.stderr)
        return 1

    if app.farewell is not None:
        Console().print(app.farewell)
    return app.return_code or 0


if __name__ == '__main__':
    sys.exit(main())
