#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/utils/highlight.py
"""Syntax highlighting for fenced code blocks using Pygments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from md2view.constants import DEPS_HIGHLIGHT
from md2view.exceptions import ValidationError
from md2view.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightedCode:
    """Highlighted code markup plus the style's background color."""

    html: str
    background_color: Optional[str] = None


@requires_dependencies("highlight", DEPS_HIGHLIGHT)
def highlight_code(code: str, language: str, theme: str) -> HighlightedCode:
    """Highlight ``code`` as inline-styled HTML spans.

    Unknown languages fall back to plain text so a typo in an info string
    never breaks rendering.

    Parameters
    ----------
    code : str
        Source code to highlight
    language : str
        Lexer alias taken from the code block's info string, may be empty
    theme : str
        Pygments style name (e.g., "monokai")

    Returns
    -------
    HighlightedCode
        Markup without a surrounding ``<pre>`` and the style background

    Raises
    ------
    ValidationError
        If ``theme`` is not a known Pygments style
    DependencyError
        If Pygments is not installed

    """
    from pygments import highlight
    from pygments.formatters import HtmlFormatter
    from pygments.lexers import TextLexer, get_lexer_by_name
    from pygments.styles import get_style_by_name
    from pygments.util import ClassNotFound

    try:
        style = get_style_by_name(theme)
    except ClassNotFound as e:
        raise ValidationError(
            f"Unknown Pygments style: {theme!r}", parameter_name="theme", parameter_value=theme, original_error=e
        ) from e

    try:
        lexer = get_lexer_by_name(language) if language else TextLexer()
    except ClassNotFound:
        logger.debug("No Pygments lexer for %r, highlighting as plain text", language)
        lexer = TextLexer()

    formatter = HtmlFormatter(style=style, noclasses=True, nowrap=True)
    return HighlightedCode(html=highlight(code, lexer, formatter), background_color=style.background_color)
