#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the md2view library.

This module centralizes hardcoded values used across md2view so they can be
discovered and overridden in one place.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Parsing Defaults - Event source configuration
3. Rendering Constants - Class names, stylesheet resources
4. Dependency Specifications - Optional packages
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

LinkType = Literal["inline", "reference", "autolink", "email", "wikilink"]
Alignment = Literal["left", "center", "right"]
MetadataKind = Literal["yaml"]

# =============================================================================
# Parsing Defaults
# =============================================================================

DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_FOOTNOTES = True
DEFAULT_PARSE_STRIKETHROUGH = True
DEFAULT_PARSE_TASKLISTS = True
DEFAULT_PARSE_MATH = True
DEFAULT_PARSE_FRONT_MATTER = True
DEFAULT_PARSE_HTML = True
DEFAULT_SMART_PUNCTUATION = False

DEFAULT_WIKILINKS = False
DEFAULT_HARD_LINE_BREAKS = False

# Task list markers recognized at the start of a list item
TASK_MARKER_UNCHECKED = "[ ]"
TASK_MARKERS_CHECKED = ("[x]", "[X]")

# =============================================================================
# Rendering Constants
# =============================================================================

CSS_CLASS_MATH = "math"
CSS_CLASS_MATH_INLINE = "math-inline"
CSS_CLASS_MATH_DISPLAY = "math-display"
CSS_CLASS_FOOTNOTE_DEFINITION = "footnote-definition"
CSS_CLASS_FOOTNOTE_LABEL = "footnote-definition-label"
CSS_CLASS_HIGHLIGHT = "highlight"
CSS_CLASS_LANGUAGE_PREFIX = "language-"

FOOTNOTE_ID_PREFIX = "fn-"

# KaTeX stylesheet mounted for documents containing math
KATEX_STYLESHEET_REL = "stylesheet"
KATEX_STYLESHEET_HREF = "https://cdn.jsdelivr.net/npm/katex@0.16.7/dist/katex.min.css"
KATEX_STYLESHEET_INTEGRITY = "sha384-3UiQGuEI4TTMaFmGIZumfRPtfKQ3trwQE2JgosJxCnGmQpL/lJdjpcHkaaFwHlcI"
KATEX_STYLESHEET_CROSSORIGIN = "anonymous"

# HTML elements that never carry children
VOID_ELEMENTS = frozenset({"br", "hr", "img", "input", "link"})

# =============================================================================
# Dependency Specifications
# =============================================================================

# (install_name, import_name, version_spec)
DEPS_HIGHLIGHT = [("Pygments", "pygments", ">=2.15.0")]
