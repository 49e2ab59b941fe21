#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markdown parsing and rendering.

This module defines the parse-time extension switches and the per-render
configuration record consumed by the renderer.
"""
# src/md2view/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from md2view.constants import (
    DEFAULT_HARD_LINE_BREAKS,
    DEFAULT_PARSE_FOOTNOTES,
    DEFAULT_PARSE_FRONT_MATTER,
    DEFAULT_PARSE_HTML,
    DEFAULT_PARSE_MATH,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_PARSE_TASKLISTS,
    DEFAULT_SMART_PUNCTUATION,
    DEFAULT_WIKILINKS,
)
from md2view.exceptions import ValidationError
from md2view.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ParseOptions(CloneFrozenMixin):
    """Markdown extensions recognized by the event source.

    CommonMark is always enabled; each flag adds one extension on top.

    Parameters
    ----------
    tables : bool, default True
        Recognize GFM pipe tables
    footnotes : bool, default True
        Recognize footnote references and definitions
    strikethrough : bool, default True
        Recognize ``~~struck~~`` spans
    tasklists : bool, default True
        Recognize ``[ ]``/``[x]`` markers at the start of list items
    math : bool, default True
        Recognize ``$inline$`` and ``$$display$$`` TeX math
    front_matter : bool, default True
        Recognize a YAML frontmatter block at the top of the document
    html : bool, default True
        Recognize raw HTML (required for custom components)
    smart_punctuation : bool, default False
        Replace quotes and dashes with typographic equivalents

    """

    tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Recognize GFM pipe tables", "importance": "core"},
    )
    footnotes: bool = field(
        default=DEFAULT_PARSE_FOOTNOTES,
        metadata={"help": "Recognize footnote references and definitions", "importance": "core"},
    )
    strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={"help": "Recognize ~~strikethrough~~ spans", "importance": "core"},
    )
    tasklists: bool = field(
        default=DEFAULT_PARSE_TASKLISTS,
        metadata={"help": "Recognize [ ] and [x] task markers in list items", "importance": "core"},
    )
    math: bool = field(
        default=DEFAULT_PARSE_MATH,
        metadata={"help": "Recognize $inline$ and $$display$$ TeX math", "importance": "core"},
    )
    front_matter: bool = field(
        default=DEFAULT_PARSE_FRONT_MATTER,
        metadata={"help": "Recognize a YAML frontmatter block at the top of the document", "importance": "core"},
    )
    html: bool = field(
        default=DEFAULT_PARSE_HTML,
        metadata={"help": "Recognize raw HTML blocks and inline tags", "importance": "advanced"},
    )
    smart_punctuation: bool = field(
        default=DEFAULT_SMART_PUNCTUATION,
        metadata={"help": "Replace straight quotes and dashes with typographic ones", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownProps(CloneFrozenMixin):
    """Configuration for a single render pass.

    Handler and callback values are whatever the host framework's
    ``ViewContext`` produces and accepts; md2view never calls them directly
    but always through the context. Every field is optional.

    Parameters
    ----------
    on_click : Handler or None, default None
        Receives a ``MarkdownMouseEvent`` whenever a rendered node is clicked
    render_links : callback or None, default None
        Receives a ``LinkDescription`` for every link and image and returns
        the view to use instead of the default anchor/image
    components : mapping of str to callback, default empty
        Custom component callbacks keyed by tag name; each receives
        ``ComponentProps`` and returns a view
    frontmatter : Setter or None, default None
        Destination for the raw frontmatter text
    wikilinks : bool, default False
        Recognize ``[[target]]`` and ``[[target|label]]`` links
    hard_line_breaks : bool, default False
        Render every soft line break as a hard break
    parse_options : ParseOptions
        Markdown extensions to recognize
    theme : str or None, default None
        Pygments style used to highlight fenced code blocks; ``None``
        disables highlighting

    """

    on_click: Optional[Any] = field(
        default=None,
        metadata={"help": "Handler receiving a MarkdownMouseEvent for clicks on rendered nodes"},
    )
    render_links: Optional[Any] = field(
        default=None,
        metadata={"help": "Callback replacing default rendering of links and images"},
    )
    components: Mapping[str, Any] = field(
        default_factory=dict,
        metadata={"help": "Custom component callbacks keyed by tag name"},
    )
    frontmatter: Optional[Any] = field(
        default=None,
        metadata={"help": "Setter receiving the raw frontmatter text"},
    )
    wikilinks: bool = field(
        default=DEFAULT_WIKILINKS,
        metadata={"help": "Recognize [[target]] and [[target|label]] links", "importance": "core"},
    )
    hard_line_breaks: bool = field(
        default=DEFAULT_HARD_LINE_BREAKS,
        metadata={"help": "Render soft line breaks as hard breaks", "importance": "core"},
    )
    parse_options: ParseOptions = field(
        default_factory=ParseOptions,
        metadata={"help": "Markdown extensions recognized by the parser", "importance": "advanced"},
    )
    theme: Optional[str] = field(
        default=None,
        metadata={"help": "Pygments style name for code block highlighting", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate component registry keys.

        Raises
        ------
        ValidationError
            If a component name is not a non-empty string

        """
        for name in self.components:
            if not isinstance(name, str) or not name:
                raise ValidationError(
                    f"Component names must be non-empty strings, got {name!r}",
                    parameter_name="components",
                    parameter_value=name,
                )


__all__ = ["ParseOptions", "MarkdownProps"]
