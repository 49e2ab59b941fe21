#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/events.py
"""Position-tagged markdown events.

A parsed markdown document reaches the renderer as a flat sequence of
``(Event, SourceRange)`` pairs. Structure is expressed with ``Start`` and
``End`` markers carrying a tag; everything else is a leaf.

Event Variants
--------------
Structural markers:
    - Start(tag), End(tag)

Leaves:
    - Text, Code, Html, FootnoteReference
    - SoftBreak, HardBreak, Rule
    - TaskListMarker, InlineMath, DisplayMath

Tags
----
Block-level tags:
    - Paragraph, Heading, BlockQuote, List, Item
    - Table, TableHead, TableRow, TableCell
    - CodeBlock, HtmlBlock, FootnoteDefinition, MetadataBlock

Inline tags:
    - Emphasis, Strong, Strikethrough, Link, Image, Component

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Iterator, Optional, Tuple, Union

from md2view.constants import Alignment, LinkType, MetadataKind


@dataclass(frozen=True)
class SourceRange:
    """Half-open interval ``[start, end)`` of offsets into the markdown source.

    Offsets are indices into the source ``str``.

    Parameters
    ----------
    start : int
        First offset covered by the range
    end : int
        Offset just past the covered text

    Raises
    ------
    ValueError
        If either bound is negative or ``start > end``

    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate range bounds."""
        if self.start < 0 or self.end < 0:
            raise ValueError(f"SourceRange bounds must be non-negative, got {self.start}..{self.end}")
        if self.start > self.end:
            raise ValueError(f"SourceRange start must not exceed end, got {self.start}..{self.end}")

    def __len__(self) -> int:
        """Return the number of offsets covered."""
        return self.end - self.start

    def slice(self, source: str) -> str:
        """Return the part of ``source`` covered by this range."""
        return source[self.start : self.end]

    def extend_to(self, end: int) -> SourceRange:
        """Return a range with the same start and a new end."""
        return SourceRange(self.start, end)


# ============================================================================
# Tags
# ============================================================================


class Tag:
    """Base class for construct tags carried by ``Start``/``End`` events.

    ``kind`` names the structural category; an ``End`` closes a ``Start``
    when both tags share the same kind.
    """

    kind: ClassVar[str] = ""


@dataclass(frozen=True)
class Paragraph(Tag):
    """Paragraph block."""

    kind: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class Heading(Tag):
    """ATX or setext heading.

    Parameters
    ----------
    level : int
        Heading level, 1 through 6

    """

    kind: ClassVar[str] = "heading"

    level: int = 1

    def __post_init__(self) -> None:
        """Validate heading level."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {self.level}")


@dataclass(frozen=True)
class BlockQuote(Tag):
    """Block quote."""

    kind: ClassVar[str] = "block_quote"


@dataclass(frozen=True)
class List(Tag):
    """Ordered or unordered list.

    Parameters
    ----------
    start : int or None, default = None
        First number of an ordered list; ``None`` for a bullet list

    """

    kind: ClassVar[str] = "list"

    start: Optional[int] = None

    @property
    def ordered(self) -> bool:
        """Whether this is a numbered list."""
        return self.start is not None


@dataclass(frozen=True)
class Item(Tag):
    """List item."""

    kind: ClassVar[str] = "item"


@dataclass(frozen=True)
class Table(Tag):
    """Table block.

    Parameters
    ----------
    alignments : tuple of Alignment or None
        Column alignments as declared by the delimiter row

    """

    kind: ClassVar[str] = "table"

    alignments: Tuple[Optional[Alignment], ...] = ()


@dataclass(frozen=True)
class TableHead(Tag):
    """Header row of a table; contains cells directly."""

    kind: ClassVar[str] = "table_head"


@dataclass(frozen=True)
class TableRow(Tag):
    """Body row of a table."""

    kind: ClassVar[str] = "table_row"


@dataclass(frozen=True)
class TableCell(Tag):
    """Table cell.

    Parameters
    ----------
    alignment : Alignment or None, default = None
        Alignment of the column this cell belongs to

    """

    kind: ClassVar[str] = "table_cell"

    alignment: Optional[Alignment] = None


@dataclass(frozen=True)
class CodeBlock(Tag):
    """Fenced or indented code block.

    Parameters
    ----------
    info : str, default = ""
        Info string of a fenced block; empty for indented blocks

    """

    kind: ClassVar[str] = "code_block"

    info: str = ""

    @property
    def language(self) -> str:
        """First word of the info string."""
        return self.info.split()[0] if self.info.strip() else ""


@dataclass(frozen=True)
class HtmlBlock(Tag):
    """Raw HTML block."""

    kind: ClassVar[str] = "html_block"


@dataclass(frozen=True)
class FootnoteDefinition(Tag):
    """Footnote definition.

    Parameters
    ----------
    label : str
        Footnote label as written in the source

    """

    kind: ClassVar[str] = "footnote_definition"

    label: str = ""


@dataclass(frozen=True)
class MetadataBlock(Tag):
    """Frontmatter block at the top of the document.

    Parameters
    ----------
    metadata_kind : MetadataKind, default = "yaml"
        Syntax of the frontmatter payload

    """

    kind: ClassVar[str] = "metadata_block"

    metadata_kind: MetadataKind = "yaml"


@dataclass(frozen=True)
class Emphasis(Tag):
    """Emphasized span."""

    kind: ClassVar[str] = "emphasis"


@dataclass(frozen=True)
class Strong(Tag):
    """Strongly emphasized span."""

    kind: ClassVar[str] = "strong"


@dataclass(frozen=True)
class Strikethrough(Tag):
    """Struck-through span."""

    kind: ClassVar[str] = "strikethrough"


@dataclass(frozen=True)
class Link(Tag):
    """Hyperlink.

    Parameters
    ----------
    link_type : LinkType
        How the link was written
    dest_url : str
        Resolved destination
    title : str, default = ""
        Optional link title

    """

    kind: ClassVar[str] = "link"

    link_type: LinkType = "inline"
    dest_url: str = ""
    title: str = ""


@dataclass(frozen=True)
class Image(Tag):
    """Image; its children are the alternative text.

    Parameters
    ----------
    link_type : LinkType
        How the image reference was written
    dest_url : str
        Image source
    title : str, default = ""
        Optional image title

    """

    kind: ClassVar[str] = "image"

    link_type: LinkType = "inline"
    dest_url: str = ""
    title: str = ""


@dataclass(frozen=True)
class Component(Tag):
    """Custom component invocation written as an HTML-like tag.

    Parameters
    ----------
    name : str
        Component name as written in the tag
    attributes : tuple of (str, str)
        Raw attribute pairs in source order

    """

    kind: ClassVar[str] = "component"

    name: str = ""
    attributes: Tuple[Tuple[str, str], ...] = ()


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class Start:
    """Opens a construct."""

    tag: Tag


@dataclass(frozen=True)
class End:
    """Closes the innermost open construct of the same kind."""

    tag: Tag


@dataclass(frozen=True)
class Text:
    """Plain text."""

    text: str


@dataclass(frozen=True)
class Code:
    """Inline code span."""

    text: str


@dataclass(frozen=True)
class Html:
    """Raw HTML passed through verbatim."""

    html: str


@dataclass(frozen=True)
class FootnoteReference:
    """Reference to a footnote definition."""

    label: str


@dataclass(frozen=True)
class SoftBreak:
    """Line ending inside a paragraph."""


@dataclass(frozen=True)
class HardBreak:
    """Forced line break."""


@dataclass(frozen=True)
class Rule:
    """Thematic break."""


@dataclass(frozen=True)
class TaskListMarker:
    """Checkbox at the start of a task list item."""

    checked: bool


@dataclass(frozen=True)
class InlineMath:
    """Inline TeX math."""

    text: str


@dataclass(frozen=True)
class DisplayMath:
    """Display TeX math."""

    text: str


Event = Union[
    Start,
    End,
    Text,
    Code,
    Html,
    FootnoteReference,
    SoftBreak,
    HardBreak,
    Rule,
    TaskListMarker,
    InlineMath,
    DisplayMath,
]
PositionedEvent = Tuple[Event, SourceRange]


def hard_line_breaks(events: Iterable[PositionedEvent]) -> Iterator[PositionedEvent]:
    """Yield events with every ``SoftBreak`` replaced by ``HardBreak``."""
    for event, position in events:
        if isinstance(event, SoftBreak):
            yield HardBreak(), position
        else:
            yield event, position


__all__ = [
    "SourceRange",
    "Tag",
    "Paragraph",
    "Heading",
    "BlockQuote",
    "List",
    "Item",
    "Table",
    "TableHead",
    "TableRow",
    "TableCell",
    "CodeBlock",
    "HtmlBlock",
    "FootnoteDefinition",
    "MetadataBlock",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Link",
    "Image",
    "Component",
    "Start",
    "End",
    "Text",
    "Code",
    "Html",
    "FootnoteReference",
    "SoftBreak",
    "HardBreak",
    "Rule",
    "TaskListMarker",
    "InlineMath",
    "DisplayMath",
    "Event",
    "PositionedEvent",
    "hard_line_breaks",
]
