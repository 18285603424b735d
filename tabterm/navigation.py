"""
The navigation state machine.

``Navigator.transition`` takes the current ``NavigationState`` and one event
and returns the next state plus the effects the event loop has to apply.
States move ``UNINITIALIZED -> READY -> QUITTING``; once quitting, nothing
changes any more.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence, Union

from rich.text import Text

from tabterm.compositor import decoration_heights
from tabterm.pages import Page
from tabterm.render import MarkdownRenderer, RenderError
from tabterm.state import (
    Effect,
    Key,
    KeyPress,
    NavigationState,
    Resize,
    Status,
)
from tabterm.utility import DEFAULT_LAYOUT, LayoutConfig
from tabterm.viewport import Viewport

logger = logging.getLogger(__name__)

Event = Union[Resize, KeyPress]
Transition = tuple[NavigationState, tuple[Effect, ...]]


class Navigator:
    """Owns the immutable collaborators every transition needs."""

    def __init__(
        self,
        pages: Sequence[Page],
        themes: Sequence[str],
        renderer: MarkdownRenderer,
        layout: LayoutConfig = DEFAULT_LAYOUT,
    ):
        if not pages:
            raise ValueError("Navigator needs at least one page")
        self.pages = tuple(pages)
        self.themes = tuple(themes)
        self.renderer = renderer
        self.layout = layout

    @property
    def theming(self) -> bool:
        return bool(self.themes)

    def initial_state(self) -> NavigationState:
        return NavigationState()

    def transition(self, state: NavigationState, event: Event) -> Transition:
        if state.status is Status.QUITTING:
            return state, ()
        if isinstance(event, Resize):
            return self._on_resize(state, event)
        if isinstance(event, KeyPress):
            return self._on_key(state, event.key)
        return state, ()

    def _render(self, state: NavigationState) -> Optional[Text]:
        """Render the active page at the viewport's wrap width, or None on failure."""
        page = self.pages[state.active_page]
        theme = self.themes[state.active_theme] if self.theming else None
        wrap_width = state.viewport.width - self.layout.wrap_padding
        try:
            return self.renderer.render(page.content, wrap_width, theme)
        except RenderError:
            logger.warning("Rendering page %r with theme %r failed", page.name, theme, exc_info=True)
            return None

    def _on_resize(self, state: NavigationState, event: Resize) -> Transition:
        width, height = max(0, event.width), max(0, event.height)
        viewport_width = max(0, width - self.layout.frame_padding)

        sized = replace(
            state,
            terminal_width=width,
            terminal_height=height,
            viewport=replace(state.viewport, width=viewport_width),
        )
        header_height, footer_height = decoration_heights(sized, self.pages, self.themes, self.layout)
        viewport_height = max(0, height - header_height - footer_height - self.layout.vertical_margin)

        if not state.viewport.ready:
            viewport = Viewport(width=viewport_width, height=viewport_height, ready=True)
        else:
            viewport = state.viewport.resize(viewport_width, viewport_height)
        sized = replace(sized, status=Status.READY, viewport=viewport)

        content = self._render(sized)
        if content is None:
            return sized, (Effect.CLEAR_SCREEN,)
        return (
            replace(sized, viewport=viewport.set_content(content)),
            (Effect.RERENDER_VIEWPORT, Effect.CLEAR_SCREEN),
        )

    def _on_key(self, state: NavigationState, key: Key) -> Transition:
        pages = len(self.pages)

        if key is Key.QUIT:
            logger.debug("Quit requested on page %d", state.active_page)
            return replace(state, status=Status.QUITTING), (Effect.QUIT,)

        if key is Key.NEXT:
            state = replace(state, active_page=(state.active_page + 1) % pages, last_key="→")
        elif key is Key.PREV:
            state = replace(state, active_page=(state.active_page - 1 + pages) % pages, last_key="←")
        elif key is Key.TOGGLE_THEME and self.theming:
            state = replace(state, active_theme=(state.active_theme + 1) % len(self.themes))
        elif key is Key.TOGGLE_HELP:
            return replace(state, help_expanded=not state.help_expanded), ()
        elif key is Key.TOGGLE_THEME:
            return state, ()

        effects: tuple[Effect, ...] = ()
        if key in (Key.NEXT, Key.PREV, Key.TOGGLE_THEME) and state.viewport.ready:
            content = self._render(state)
            if content is not None:
                state = replace(state, viewport=state.viewport.set_content(content))
                effects = (Effect.RERENDER_VIEWPORT,)

        viewport = _scrolled(state.viewport, key)
        if viewport is not state.viewport:
            state = replace(state, viewport=viewport)
        return state, effects


def _scrolled(viewport: Viewport, key: Key) -> Viewport:
    if key is Key.SCROLL_UP:
        return viewport.scroll(-1)
    if key is Key.SCROLL_DOWN:
        return viewport.scroll(1)
    if key is Key.PAGE_UP:
        return viewport.page_up()
    if key is Key.PAGE_DOWN:
        return viewport.page_down()
    if key is Key.HALF_PAGE_UP:
        return viewport.half_page_up()
    if key is Key.HALF_PAGE_DOWN:
        return viewport.half_page_down()
    if key is Key.TOP:
        return viewport.goto_top()
    if key is Key.BOTTOM:
        return viewport.goto_bottom()
    return viewport
