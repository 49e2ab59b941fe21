"""md2view - render markdown into view trees for arbitrary UI frameworks.

md2view turns markdown into a tree of views built by a host framework. The
source is parsed into a flat stream of ``(Event, SourceRange)`` pairs, and a
stack-based renderer rebuilds the document structure from it, attaching to
every rendered node a click handler that reports the exact range of source
text the node came from.

The host framework is reached only through ``ViewContext``, an abstract base
class enumerating the operations the renderer needs (create an element, a
text leaf, a checkbox, wrap a click handler, mount a stylesheet, ...).
``VdomContext`` is a ready-made implementation producing an in-memory tree
that can be inspected or serialized to HTML.

Key Features
------------
- Click-to-source navigation for every rendered node
- Link and image overrides, custom HTML-like components
- Task lists with click interception, tables, footnotes
- TeX math with automatic KaTeX stylesheet registration
- Frontmatter capture and optional Pygments code highlighting

Requirements
------------
- Python 3.10+
- markdown-it-py and mdit-py-plugins for parsing
- Pygments (optional) for code highlighting

Examples
--------
Rendering to HTML:

    >>> from md2view import markdown_to_html
    >>> html = markdown_to_html("# Title")

Reacting to clicks:

    >>> from md2view import MarkdownProps, VdomContext, render_markdown
    >>> clicks = []
    >>> cx = VdomContext(MarkdownProps(on_click=clicks.append))
    >>> view = render_markdown(cx, "Hello")
    >>> _ = view.find("span").click()
    >>> clicks[0].position
    SourceRange(start=0, end=5)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "md2view requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from md2view.api import markdown_to_html, render_events, render_markdown
from md2view.click import MarkdownClickHandler, MarkdownMouseEvent
from md2view.events import SourceRange
from md2view.exceptions import (
    DependencyError,
    Md2ViewError,
    RenderingError,
    StructuralMismatchError,
    ValidationError,
)
from md2view.options import MarkdownProps, ParseOptions
from md2view.parsers.markdown import MarkdownEventSource
from md2view.renderers.base import ComponentProps, ElementAttributes, HtmlElement, LinkDescription, ViewContext
from md2view.renderers.engine import Renderer
from md2view.renderers.vdom import Slot, VdomContext

__all__ = [
    "__version__",
    # API
    "render_markdown",
    "render_events",
    "markdown_to_html",
    # Configuration
    "MarkdownProps",
    "ParseOptions",
    # Events and parsing
    "SourceRange",
    "MarkdownEventSource",
    # Rendering
    "Renderer",
    "ViewContext",
    "HtmlElement",
    "ElementAttributes",
    "LinkDescription",
    "ComponentProps",
    "VdomContext",
    "Slot",
    # Clicks
    "MarkdownClickHandler",
    "MarkdownMouseEvent",
    # Exceptions
    "Md2ViewError",
    "ValidationError",
    "RenderingError",
    "StructuralMismatchError",
    "DependencyError",
]
