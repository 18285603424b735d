"""
Markdown rendering for the page viewport.

Markdown is parsed with markdown-it-py and turned into wrapped Rich text,
one line per terminal row. Styles come from the active theme's
``theme.json``; anything a theme leaves out falls back to the One Dark
palette below.
"""

from __future__ import annotations

import io
import json
import logging
import re
from pathlib import Path
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token
from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.syntax import Syntax
from rich.text import Text

logger = logging.getLogger(__name__)

THEME_FILE = "theme.json"

DEFAULT_STYLES = {
    "text": "#abb2bf",
    "h1": "bold #ffffff on #0051a8",
    "h2": "bold #c678dd",
    "h3": "bold underline #56b6c2",
    "h4": "bold #e5c07b",
    "h5": "bold #98c379",
    "h6": "bold #abb2bf",
    "strong": "bold #e5c07b",
    "em": "italic",
    "strike": "strike",
    "code_inline": "#e06c75 on #2c313a",
    "link": "underline #61afef",
    "quote": "#abb2bf",
    "quote_bar": "#98c379",
    "bullet": "#61afef",
    "number": "#e5c07b",
    "checkbox": "#5c6370",
    "checkbox_done": "#98c379",
    "rule": "#0051a8",
    "table": "#abb2bf",
}
DEFAULT_CODE_THEME = "monokai"
DEFAULT_CODE_BACKGROUND = "#2c313a"

LIST_MARKER = re.compile(r'^(\s*)([-*+]|\d+[.)])\s+')
CODE_INDENT = 4


class RenderError(Exception):
    """Raised when a page cannot be rendered with the requested theme."""


def normalize_markdown(text: str) -> str:
    """
    Remove accidental leading spaces from Markdown lines,
    but preserve:
      - fenced code blocks
      - indented code blocks (4+ spaces after a blank line)
      - list items and their continuation lines
      - empty lines (paragraphs)
    """
    normalized = []
    in_fenced_code = False
    in_indented_code = False
    in_list = False
    after_blank = True

    for line in text.splitlines():
        stripped = line.lstrip()

        if stripped.startswith(("```", "~~~")):
            in_fenced_code = not in_fenced_code
            after_blank = False
            normalized.append(line)
            continue

        if in_fenced_code:
            normalized.append(line)
            continue

        if not stripped:
            after_blank = True
            normalized.append(line)
            continue

        expanded = line.expandtabs(4)
        indent = len(expanded) - len(expanded.lstrip())
        starts_code = after_blank or in_indented_code
        after_blank = False
        if indent >= CODE_INDENT and starts_code and not in_list:
            in_indented_code = True
            normalized.append(line)
            continue
        in_indented_code = False

        if LIST_MARKER.match(line):
            in_list = True
            normalized.append(line)
            continue

        # Indented text right after a list item belongs to that item
        if in_list and line != stripped:
            normalized.append(line)
            continue

        in_list = False
        normalized.append(stripped)

    return "\n".join(normalized)


class ThemeStyles:
    """Resolved Rich styles for one theme."""

    def __init__(self, styles: dict[str, Style], code_theme: str, code_background: str):
        self.styles = styles
        self.code_theme = code_theme
        self.code_background = code_background

    def __getitem__(self, element: str) -> Style:
        return self.styles.get(element) or self.styles["text"]

    @classmethod
    def from_mapping(cls, mapping: dict) -> "ThemeStyles":
        merged = dict(DEFAULT_STYLES)
        code_theme = mapping.get("code_theme", DEFAULT_CODE_THEME)
        code_background = mapping.get("code_background", DEFAULT_CODE_BACKGROUND)
        merged.update(
            (key, value) for key, value in mapping.items()
            if key not in ("code_theme", "code_background")
        )

        styles = {}
        for element, definition in merged.items():
            if not isinstance(definition, str):
                raise RenderError(f"Style for {element!r} must be a string, got {definition!r}")
            try:
                styles[element] = Style.parse(definition)
            except StyleSyntaxError as e:
                raise RenderError(f"Invalid style for {element!r}: {e}") from e
        return cls(styles, code_theme, code_background)


class MarkdownRenderer:
    """Render markdown to wrapped, styled terminal text."""

    def __init__(self, theme_dir: Optional[str | Path] = None):
        self.theme_dir = Path(theme_dir) if theme_dir else None
        self._themes: dict[Optional[str], ThemeStyles] = {}
        self._parser = MarkdownIt("gfm-like").enable(["table", "strikethrough"])
        self._console = Console(file=io.StringIO(), color_system=None, legacy_windows=False)

    def theme(self, theme_id: Optional[str]) -> ThemeStyles:
        """Load (once) the styles for ``theme_id``; ``None`` means built-in defaults."""
        if theme_id in self._themes:
            return self._themes[theme_id]

        if theme_id is None:
            styles = ThemeStyles.from_mapping({})
        else:
            if self.theme_dir is None:
                raise RenderError(f"No theme directory configured for theme {theme_id!r}")
            path = self.theme_dir / theme_id / THEME_FILE
            try:
                mapping = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                raise RenderError(f"Failed to load theme {theme_id!r} from {path}: {e}") from e
            if not isinstance(mapping, dict):
                raise RenderError(f"Theme file {path} must contain a JSON object")
            styles = ThemeStyles.from_mapping(mapping)
            logger.debug("Loaded theme %r from %s", theme_id, path)

        self._themes[theme_id] = styles
        return styles

    def render(self, markdown: str, wrap_width: int, theme_id: Optional[str] = None) -> Text:
        """Render ``markdown`` wrapped to ``wrap_width`` columns."""
        styles = self.theme(theme_id)
        try:
            tokens = self._parser.parse(normalize_markdown(markdown))
            lines = _BlockWriter(styles, self._console).blocks(tokens, max(1, wrap_width))
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Failed to render markdown: {e}") from e
        return Text("\n").join(lines)


def _closing(tokens: list[Token], start: int) -> int:
    """Index of the token closing the block opened at ``start``."""
    level = tokens[start].level
    for i in range(start + 1, len(tokens)):
        if tokens[i].nesting == -1 and tokens[i].level == level:
            return i
    return len(tokens) - 1


def _prefixed(lines: list[Text], first: Text, rest: Text) -> list[Text]:
    return [(first if i == 0 else rest) + line for i, line in enumerate(lines)]


class _BlockWriter:
    """Turns markdown-it block tokens into lines of Rich text."""

    def __init__(self, styles: ThemeStyles, console: Console):
        self.styles = styles
        self.console = console

    def wrap(self, text: Text, width: int) -> list[Text]:
        return list(text.wrap(self.console, max(1, width), overflow="fold"))

    def blocks(self, tokens: list[Token], width: int, compact: bool = False) -> list[Text]:
        """Render a token run, separating blocks by a blank line unless ``compact``."""
        rendered: list[list[Text]] = []
        i = 0

        while i < len(tokens):
            token = tokens[i]

            if token.type == "heading_open":
                level = int(token.tag[1])
                rendered.append(self.heading(level, tokens[i + 1], width))
                i = _closing(tokens, i) + 1

            elif token.type == "paragraph_open":
                rendered.append(self.wrap(self.inline(tokens[i + 1]), width))
                i = _closing(tokens, i) + 1

            elif token.type in ("fence", "code_block"):
                if token.content.strip():
                    rendered.append(self.code(token.content, token.info, width))
                i += 1

            elif token.type == "blockquote_open":
                close = _closing(tokens, i)
                inner = self.blocks(tokens[i + 1:close], width - 2)
                for line in inner:
                    line.stylize_before(self.styles["quote"])
                bar = Text("│ ", style=self.styles["quote_bar"])
                rendered.append(_prefixed(inner, bar, bar))
                i = close + 1

            elif token.type in ("bullet_list_open", "ordered_list_open"):
                close = _closing(tokens, i)
                rendered.append(self.list_items(tokens[i:close + 1], width))
                i = close + 1

            elif token.type == "table_open":
                close = _closing(tokens, i)
                rendered.append(self.table(tokens[i:close + 1], width))
                i = close + 1

            elif token.type == "hr":
                rendered.append([Text("─" * width, style=self.styles["rule"])])
                i += 1

            elif token.type == "html_block":
                rendered.append(self.wrap(Text(token.content.rstrip(), style=self.styles["text"]), width))
                i += 1

            else:
                i += 1

        lines: list[Text] = []
        for block in rendered:
            if lines and not compact:
                lines.append(Text())
            lines.extend(block)
        return lines

    def heading(self, level: int, token: Token, width: int) -> list[Text]:
        text = self.inline(token)
        text.stylize(self.styles[f"h{level}"])
        lines = self.wrap(text, width)
        if level <= 2:
            for line in lines:
                line.align("center", width)
        return lines

    def code(self, code: str, language: str, width: int) -> list[Text]:
        syntax = Syntax(
            code.rstrip(),
            language.strip() or "text",
            theme=self.styles.code_theme,
            background_color=self.styles.code_background,
            word_wrap=False,
        )
        highlighted = syntax.highlight(code.rstrip())
        lines = []
        for line in highlighted.split("\n"):
            lines.extend(self.wrap(Text("  ") + line, width))
        return lines

    def list_items(self, tokens: list[Token], width: int) -> list[Text]:
        opening = tokens[0]
        numbered = opening.type == "ordered_list_open"
        number = int(opening.attrGet("start") or 1) if numbered else 1
        lines: list[Text] = []

        i = 1
        while i < len(tokens) - 1:
            if tokens[i].type != "list_item_open":
                i += 1
                continue

            close = _closing(tokens, i)
            body = tokens[i + 1:close]
            marker = self._task_marker(body)
            if marker is None:
                if numbered:
                    marker = Text(f"{number}. ", style=self.styles["number"])
                else:
                    marker = Text("• ", style=self.styles["bullet"])

            inner = self.blocks(body, width - marker.cell_len, compact=True) or [Text()]
            lines.extend(_prefixed(inner, marker, Text(" " * marker.cell_len)))
            number += 1
            i = close + 1

        return lines

    def _task_marker(self, body: list[Token]) -> Optional[Text]:
        """Strip a ``[ ]`` / ``[x]`` prefix from the item's first inline token."""
        inline = next((token for token in body if token.type == "inline"), None)
        if inline is None or not inline.children:
            return None

        first = inline.children[0]
        if first.type != "text":
            return None
        if first.content.startswith("[ ] "):
            first.content = first.content[4:]
            return Text("☐ ", style=self.styles["checkbox"])
        if first.content.startswith(("[x] ", "[X] ")):
            first.content = first.content[4:]
            return Text("✓ ", style=self.styles["checkbox_done"])
        return None

    def table(self, tokens: list[Token], width: int) -> list[Text]:
        """Render GFM tables as aligned plain text."""
        rows: list[list[str]] = []
        current_row: list[str] = []
        cell_text = ""

        for token in tokens:
            if token.type in ("th_open", "td_open"):
                cell_text = ""
            elif token.type == "inline":
                cell_text += self.inline(token).plain
            elif token.type in ("th_close", "td_close"):
                current_row.append(cell_text.strip())
            elif token.type == "tr_close":
                if current_row:
                    rows.append(current_row)
                current_row = []

        if not rows:
            return []

        num_cols = max(len(row) for row in rows)
        col_widths = [
            max(len(row[i]) if i < len(row) else 0 for row in rows)
            for i in range(num_cols)
        ]

        def render_row(row: list[str]) -> str:
            return "  ".join(
                (row[i] if i < len(row) else "").ljust(col_widths[i])
                for i in range(num_cols)
            ).rstrip()

        plain = [render_row(rows[0]), "  ".join("-" * w for w in col_widths)]
        plain.extend(render_row(row) for row in rows[1:])

        lines = []
        for row in plain:
            line = Text(row, style=self.styles["table"])
            line.truncate(width, overflow="crop")
            lines.append(line)
        return lines

    def inline(self, token: Token) -> Text:
        """Render an inline token with emphasis, code spans and links."""
        text = Text()
        base = self.styles["text"]
        if not token.children:
            text.append(token.content, base)
            return text

        style_stack = [base]
        for child in token.children:
            if child.type == "text":
                text.append(child.content, style_stack[-1])

            elif child.type == "code_inline":
                text.append(child.content, self.styles["code_inline"])

            elif child.type == "strong_open":
                style_stack.append(style_stack[-1] + self.styles["strong"])

            elif child.type == "em_open":
                style_stack.append(style_stack[-1] + self.styles["em"])

            elif child.type == "s_open":
                style_stack.append(style_stack[-1] + self.styles["strike"])

            elif child.type == "link_open":
                href = child.attrGet("href") or ""
                style_stack.append(style_stack[-1] + self.styles["link"] + Style(link=href or None))

            elif child.type == "image":
                alt = child.content or child.attrGet("src") or ""
                text.append(f"[image: {alt}]", style_stack[-1] + Style(italic=True))

            elif child.type in ("strong_close", "em_close", "s_close", "link_close"):
                if len(style_stack) > 1:
                    style_stack.pop()

            elif child.type == "softbreak":
                text.append(" ")

            elif child.type == "hardbreak":
                text.append("\n")

            elif child.type == "html_inline":
                text.append(child.content, style_stack[-1])

        return text
