"""
Page and theme repositories.

Pages live in a single directory, one markdown file per tab, named
``<order> - <name>.md`` (for example ``1 - Intro.md``). Themes are the
sub-directories of a theme directory, each holding a ``theme.json``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".md"
ORDER_DELIMITER = " - "


class LoadError(Exception):
    """Raised when pages or themes cannot be loaded. Always fatal."""


@dataclass(frozen=True)
class Page:
    """A single markdown document shown as a tab."""

    name: str
    content: str
    order: int


def parse_page_filename(filename: str) -> tuple[int, str]:
    """Split ``"1 - Intro.md"`` into ``(1, "Intro")``."""
    head = len(ORDER_DELIMITER) + 1
    if not filename.endswith(PAGE_SUFFIX) or len(filename) <= head + len(PAGE_SUFFIX):
        raise LoadError(f"Page file name must look like '1 - Name.md': {filename!r}")
    if not filename[0].isdigit():
        raise LoadError(f"Page file name must start with its order digit: {filename!r}")
    if filename[1:head] != ORDER_DELIMITER:
        raise LoadError(f"Page file name must use {ORDER_DELIMITER!r} after the order: {filename!r}")

    name = filename[head:-len(PAGE_SUFFIX)]
    if not name.strip():
        raise LoadError(f"Page file name has no display name: {filename!r}")
    return int(filename[0]), name


def load_pages(directory: str | Path) -> list[Page]:
    """Load every page in ``directory``, sorted by order."""
    directory = Path(directory)
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise LoadError(f"Failed to read page directory {directory}: {e}") from e

    pages: dict[int, Page] = {}
    for entry in entries:
        if not entry.is_file():
            raise LoadError(f"Not a page file: {entry}")

        order, name = parse_page_filename(entry.name)
        if order in pages:
            raise LoadError(
                f"Duplicate page order {order}: {pages[order].name!r} and {name!r}"
            )

        try:
            content = entry.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Failed to read page {entry}: {e}") from e

        pages[order] = Page(name=name, content=content, order=order)

    if not pages:
        raise LoadError(f"No pages found in {directory}")

    ordered = sorted(pages.values(), key=lambda page: page.order)
    logger.info("Loaded %d pages from %s", len(ordered), directory)
    return ordered


def load_themes(directory: str | Path) -> list[str]:
    """List theme identifiers (sub-directory names) in ``directory``, sorted."""
    directory = Path(directory)
    try:
        themes = sorted({entry.name for entry in directory.iterdir() if entry.is_dir()})
    except OSError as e:
        raise LoadError(f"Theme retrieval failed for {directory}: {e}") from e

    logger.info("Loaded %d themes from %s", len(themes), directory)
    return themes
