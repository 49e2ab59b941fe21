#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/parsers/markdown.py
"""Markdown to positioned event stream.

This module adapts the flat token stream of markdown-it-py into the
``(Event, SourceRange)`` sequence consumed by the renderer. markdown-it
already emits paired ``*_open``/``*_close`` tokens, so the adaptation is a
single pass that maps token types to tags and attaches source ranges.

Block ranges come from the line maps markdown-it records on block tokens.
Inline tokens carry no positions, so their ranges are found by scanning
forward through the enclosing block for the token's source text; escapes and
entities are found by their original markup. When the text cannot be found
(smart punctuation, for example) the event gets a zero-width range at the
scan position. Table cells are split on the row's unescaped ``|`` delimiters.
Every range lies inside the source.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from md2view.constants import TASK_MARKER_UNCHECKED, TASK_MARKERS_CHECKED, Alignment, LinkType
from md2view.events import (
    BlockQuote,
    Code,
    CodeBlock,
    Component,
    DisplayMath,
    Emphasis,
    End,
    FootnoteDefinition,
    FootnoteReference,
    HardBreak,
    Heading,
    Html,
    HtmlBlock,
    Image,
    InlineMath,
    Item,
    Link,
    List,
    MetadataBlock,
    Paragraph,
    PositionedEvent,
    Rule,
    SoftBreak,
    SourceRange,
    Start,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableHead,
    TableRow,
    Tag,
    TaskListMarker,
    Text,
)
from md2view.options.markdown import ParseOptions
from md2view.parsers.wikilinks import wikilinks_plugin
from md2view.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_OPEN_TAG = re.compile(
    r"^<([A-Za-z][\w.-]*)((?:\s+[^\s=>/]+(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?)*)\s*(/?)>$"
)
_CLOSE_TAG = re.compile(r"^</([A-Za-z][\w.-]*)\s*>$")
_WRAPPED_TAG = re.compile(r"^(<([A-Za-z][\w.-]*)[^>]*>)(.*)</\2\s*>$", re.DOTALL)
_ATTRIBUTE = re.compile(r"([^\s=>/]+)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'=<>`]+)))?")
_TEXT_ALIGN = re.compile(r"text-align:\s*(left|center|right)")
_LINE_ENDING = re.compile(r"\r\n|\r|\n")

# Inline markdown-it tokens mapped straight to tags
_INLINE_TAGS = {
    "em_open": Emphasis,
    "strong_open": Strong,
    "s_open": Strikethrough,
}


def parse_attributes(raw: str) -> tuple[tuple[str, str], ...]:
    """Split the attribute part of an HTML-like tag into (name, value) pairs.

    Attributes written without a value get an empty string.
    """
    pairs = []
    for match in _ATTRIBUTE.finditer(raw):
        name, double, single, bare = match.groups()
        value = next((v for v in (double, single, bare) if v is not None), "")
        pairs.append((name, value))
    return tuple(pairs)


@dataclass
class _OpenTag:
    tag: Tag
    position: SourceRange
    index: int


class MarkdownEventSource:
    """Parse markdown into a positioned event stream.

    Parameters
    ----------
    options : ParseOptions or None, default = None
        Extensions to recognize; all but smart punctuation by default
    wikilinks : bool, default = False
        Recognize ``[[target]]`` and ``[[target|label]]``
    component_names : iterable of str, default = ()
        HTML tag names treated as custom components. Tags starting with an
        uppercase letter are always treated as components.

    Examples
    --------
        >>> source = MarkdownEventSource()
        >>> events = source.parse("# Title\\n\\nSome *text*.")
        >>> events[0]
        (Start(tag=Heading(level=1)), SourceRange(start=0, end=8))

    """

    def __init__(
        self,
        options: ParseOptions | None = None,
        wikilinks: bool = False,
        component_names: Iterable[str] = (),
    ):
        """Initialize the event source and its markdown-it instance."""
        self.options = options or ParseOptions()
        self.wikilinks = wikilinks
        self.component_names = frozenset(component_names)
        self._md = self._create_parser()

    def _create_parser(self) -> MarkdownIt:
        options = self.options
        md = MarkdownIt("commonmark", {"html": options.html, "typographer": options.smart_punctuation})
        # keep escapes and entities as separate text_special tokens carrying their source markup
        md.disable("text_join")
        if options.tables:
            md.enable("table")
        if options.strikethrough:
            md.enable("strikethrough")
        if options.smart_punctuation:
            md.enable(["replacements", "smartquotes"])
        if options.front_matter:
            md.use(front_matter_plugin)
        if options.footnotes:
            md.use(footnote_plugin)
        if options.math:
            md.use(dollarmath_plugin, double_inline=True)
        if self.wikilinks:
            md.use(wikilinks_plugin)
        return md

    def is_component(self, name: str) -> bool:
        """Whether an HTML tag named ``name`` invokes a custom component."""
        return name in self.component_names or name[:1].isupper()

    def parse(self, source: str) -> list[PositionedEvent]:
        """Parse ``source`` into a well-nested event list.

        Parameters
        ----------
        source : str
            Markdown text

        Returns
        -------
        list of (Event, SourceRange)
            Events in document order

        """
        with debug_timer(logger, "Parsing markdown events"):
            builder = _EventBuilder(self, source, base=0, limit=len(source))
            builder.build(self._md.parse(source))
        logger.debug("Parsed %d events from %d characters", len(builder.events), len(source))
        return builder.events

    def _parse_fragment(self, source: str, base: int, limit: int) -> list[PositionedEvent]:
        builder = _EventBuilder(self, source, base=base, limit=limit)
        builder.build(self._md.parse(source))
        return builder.events


class _EventBuilder:
    """Converts one markdown-it token list into events.

    ``source`` may be a fragment of the document starting at ``base``;
    every emitted range is shifted by ``base`` and clamped to ``limit``.
    """

    def __init__(self, parser: MarkdownEventSource, source: str, base: int, limit: int):
        self.parser = parser
        self.options = parser.options
        self.source = source
        self.base = base
        self.limit = limit
        self.events: list[PositionedEvent] = []

        # tags with an emitted Start and no End yet
        self._open: list[_OpenTag] = []
        # one entry per open markdown-it token; None when it emitted nothing
        self._tokens: list[Optional[Tag]] = []

        # markdown-it counts lines on \n, \r\n and \r only
        self._line_starts = [0] + [match.end() for match in _LINE_ENDING.finditer(source)]
        if self._line_starts[-1] != len(source):
            self._line_starts.append(len(source))

        self._cursor = 0
        self._hi = len(source)
        self._last_end = 0
        self._item_fresh = False
        self._inline_map: Optional[list[int]] = None
        # table row being split into cells
        self._row_cursor = 0
        self._row_end = 0

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def _range(self, start: int, end: int) -> SourceRange:
        start = min(max(self.base + start, 0), self.limit)
        end = min(max(self.base + end, start), self.limit)
        return SourceRange(start, end)

    def _line_offset(self, line: int) -> int:
        return self._line_starts[min(line, len(self._line_starts) - 1)]

    def _block_range(self, token: Token) -> SourceRange:
        if token.map:
            start, end = self._line_offset(token.map[0]), self._line_offset(token.map[1])
            self._last_end = end
            return self._range(start, end)
        if self._open:
            return self._open[-1].position
        return self._range(0, len(self.source))

    def _here(self) -> SourceRange:
        return self._range(self._cursor, self._cursor)

    def _locate(self, needle: str) -> SourceRange:
        """Find ``needle`` at or after the cursor and advance past it."""
        if not needle:
            return self._here()
        idx = self.source.find(needle, self._cursor, self._hi)
        if idx < 0:
            return self._here()
        self._cursor = idx + len(needle)
        return self._range(idx, self._cursor)

    def _locate_delimited(self, opener: str, content: str, closer: str) -> SourceRange:
        start = self.source.find(opener, self._cursor, self._hi)
        if start < 0:
            return self._locate(content)
        body = self.source.find(content, start + len(opener), self._hi) if content else start + len(opener)
        if body < 0:
            body = start + len(opener)
        end = self.source.find(closer, body + len(content), self._hi)
        end = end + len(closer) if end >= 0 else body + len(content)
        self._cursor = end
        return self._range(start, end)

    def _locate_link_end(self) -> tuple[SourceRange, LinkType]:
        """Range of the ``](dest)``, ``][ref]`` or ``]`` closing a link."""
        idx = self.source.find("]", self._cursor, self._hi)
        if idx < 0:
            return self._here(), "inline"

        end = idx + 1
        link_type: LinkType = "reference"
        if self.source.startswith("(", end):
            depth = 0
            for pos in range(end, self._hi):
                char = self.source[pos]
                if char == "\\":
                    continue
                if char == "(":
                    depth += 1
                elif char == ")":
                    depth -= 1
                    if depth == 0:
                        end = pos + 1
                        link_type = "inline"
                        break
        elif self.source.startswith("[", end):
            close = self.source.find("]", end + 1, self._hi)
            if close >= 0:
                end = close + 1

        self._cursor = end
        return self._range(idx, end), link_type

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit(self, event: object, position: SourceRange) -> None:
        self.events.append((event, position))  # type: ignore[arg-type]

    def _start(self, tag: Tag, position: SourceRange) -> None:
        self._open.append(_OpenTag(tag, position, len(self.events)))
        self._emit(Start(tag), position)

    def _end(self, position: Optional[SourceRange] = None) -> None:
        opened = self._open.pop()
        if position is None:
            position = self._range(0, 0) if not self.events else self.events[-1][1]
            position = SourceRange(position.end, position.end)
        self._emit(End(opened.tag), position)

    def _retag(self, opened: _OpenTag, tag: Tag) -> None:
        """Replace the tag of an already emitted Start event."""
        opened.tag = tag
        _, position = self.events[opened.index]
        self.events[opened.index] = (Start(tag), position)

    def _close_components(self, depth: int = 0) -> None:
        while len(self._open) > depth and self._open[-1].tag.kind == Component.kind:
            self._end()

    def _close_token(self, position: SourceRange) -> None:
        tag = self._tokens.pop()
        if tag is None:
            return
        self._close_components()
        self._end(position)

    def _close_block(self) -> None:
        tag = self._tokens.pop()
        if tag is None:
            return
        self._close_components()
        opened = self._open[-1].position
        if isinstance(tag, TableCell):
            self._end(opened)
            return
        last_end = self._range(self._last_end, self._last_end).end
        self._end(SourceRange(opened.start, max(opened.end, last_end)))

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def build(self, tokens: Sequence[Token]) -> None:
        for index, token in enumerate(tokens):
            if token.nesting == 1:
                if token.type == "tr_open":
                    self._begin_row(token)
                tag = self._block_tag(tokens, index)
                self._tokens.append(tag)
                if isinstance(tag, FootnoteDefinition):
                    self._start(tag, self._footnote_range(tag.label, tokens, index))
                elif isinstance(tag, TableCell):
                    self._start(tag, self._cell_range())
                elif tag is not None:
                    self._start(tag, self._block_range(token))
                self._item_fresh = token.type == "list_item_open" or (
                    self._item_fresh and token.type == "paragraph_open"
                )
            elif token.nesting == -1:
                self._close_block()
                self._item_fresh = False
            else:
                self._block_leaf(token)
                if token.type != "inline":
                    self._item_fresh = False

        self._close_components()
        if self._open:
            # markdown-it output is balanced; anything left is a programming error
            raise RuntimeError(f"Unclosed tokens after markdown parse: {[o.tag.kind for o in self._open]}")

    def _block_tag(self, tokens: Sequence[Token], index: int) -> Optional[Tag]:
        token = tokens[index]
        kind = token.type
        if kind == "paragraph_open":
            return None if token.hidden else Paragraph()
        if kind == "heading_open":
            return Heading(level=int(token.tag[1:]))
        if kind == "blockquote_open":
            return BlockQuote()
        if kind == "bullet_list_open":
            return List(start=None)
        if kind == "ordered_list_open":
            return List(start=int(token.attrGet("start") or 1))
        if kind == "list_item_open":
            return Item()
        if kind == "table_open":
            return Table(alignments=self._table_alignments(tokens, index))
        if kind == "thead_open":
            return TableHead()
        if kind == "tr_open":
            return None if self._tokens and isinstance(self._tokens[-1], TableHead) else TableRow()
        if kind in ("th_open", "td_open"):
            return TableCell(alignment=self._cell_alignment(token))
        if kind == "footnote_open":
            return FootnoteDefinition(label=self._footnote_label(token))
        # tbody_open, footnote_block_open and unknown plugin containers
        return None

    @staticmethod
    def _cell_alignment(token: Token) -> Optional[Alignment]:
        match = _TEXT_ALIGN.search(str(token.attrGet("style") or ""))
        return match.group(1) if match else None  # type: ignore[return-value]

    def _table_alignments(self, tokens: Sequence[Token], index: int) -> tuple[Optional[Alignment], ...]:
        alignments = []
        for token in tokens[index + 1 :]:
            if token.type == "th_open":
                alignments.append(self._cell_alignment(token))
            elif token.type == "tr_close":
                break
        return tuple(alignments)

    def _footnote_label(self, token: Token) -> str:
        meta = token.meta or {}
        return str(meta.get("label") or meta.get("id", 0) + 1)

    def _footnote_range(self, label: str, tokens: Sequence[Token], index: int) -> SourceRange:
        """Range of the ``[^label]:`` marker opening a footnote definition.

        Definitions are moved to the end of the token stream, so the marker
        is searched backwards from the first line of the definition body.
        """
        marker = f"[^{label}]:"
        limit = len(self.source)
        for token in tokens[index + 1 :]:
            if token.type == "footnote_close":
                break
            if token.map:
                limit = self._line_offset(token.map[0] + 1)
                break

        idx = self.source.rfind(marker, 0, limit)
        if idx < 0:
            return self._range(self._last_end, self._last_end)
        self._last_end = idx + len(marker)
        return self._range(idx, idx + len(marker))

    def _begin_row(self, token: Token) -> None:
        if token.map:
            start, end = self._line_offset(token.map[0]), self._line_offset(token.map[1])
        else:
            position = self._open[-1].position if self._open else self._range(0, len(self.source))
            start, end = position.start - self.base, position.end - self.base
        while end > start and self.source[end - 1] in "\r\n":
            end -= 1
        while start < end and self.source[start] in " \t":
            start += 1
        self._row_cursor, self._row_end = start, end

    def _cell_range(self) -> SourceRange:
        """Range from the cell's leading ``|`` up to the next unescaped ``|``."""
        start = pos = self._row_cursor
        if self.source.startswith("|", pos):
            pos += 1
        while pos < self._row_end and self.source[pos] != "|":
            pos += 2 if self.source[pos] == "\\" else 1
        end = min(pos, self._row_end)
        self._row_cursor = end
        return self._range(start, end)

    def _block_leaf(self, token: Token) -> None:
        kind = token.type
        position = self._block_range(token)

        if kind == "inline":
            self._inline(token, position)
        elif kind in ("fence", "code_block"):
            self._start(CodeBlock(info=token.info.strip()), position)
            self._emit(Text(token.content), self._find_in(token.content, position))
            self._end(position)
        elif kind == "hr":
            self._emit(Rule(), position)
        elif kind == "html_block":
            self._html_block(token.content, position)
        elif kind == "front_matter":
            self._start(MetadataBlock(), position)
            self._emit(Text(token.content), self._find_in(token.content, position))
            self._end(position)
        elif kind in ("math_block", "math_block_label"):
            self._emit(DisplayMath(token.content.strip()), position)
        else:
            logger.debug("Ignoring unsupported markdown-it token %r", kind)

    def _find_in(self, text: str, position: SourceRange) -> SourceRange:
        local_start, local_end = position.start - self.base, position.end - self.base
        idx = self.source.find(text, local_start, local_end) if text else -1
        if idx < 0:
            return position
        return self._range(idx, idx + len(text))

    def _html_block(self, content: str, position: SourceRange) -> None:
        stripped = content.strip()

        opening = _OPEN_TAG.match(stripped)
        if opening and self.parser.is_component(opening.group(1)):
            name, raw_attributes, self_closing = opening.groups()
            self._start(Component(name=name, attributes=parse_attributes(raw_attributes)), position)
            if self_closing:
                self._end(position)
            return

        closing = _CLOSE_TAG.match(stripped)
        if closing and self._closes_component(closing.group(1)):
            self._end(position)
            return

        wrapped = _WRAPPED_TAG.match(stripped)
        if wrapped:
            opening = _OPEN_TAG.match(wrapped.group(1))
            if opening and not opening.group(3) and self.parser.is_component(opening.group(1)):
                self._wrapped_component(opening, wrapped.group(3), position)
                return

        self._start(HtmlBlock(), position)
        self._emit(Html(content), position)
        self._end(position)

    def _closes_component(self, name: str) -> bool:
        if not self._open:
            return False
        top = self._open[-1].tag
        return isinstance(top, Component) and top.name == name

    def _wrapped_component(self, opening: re.Match[str], inner: str, position: SourceRange) -> None:
        name, raw_attributes, _ = opening.groups()
        self._start(Component(name=name, attributes=parse_attributes(raw_attributes)), position)

        local = self.source.find(inner, position.start - self.base, position.end - self.base) if inner else -1
        base = self.base + local if local >= 0 else position.start
        for event, event_position in self.parser._parse_fragment(inner, base, self.limit):
            self._emit(event, event_position)

        self._end(position)

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _inline(self, token: Token, position: SourceRange) -> None:
        # sibling inlines on the same lines (table cells) continue the scan
        if token.map is None or token.map != self._inline_map:
            self._cursor = position.start - self.base
        self._hi = position.end - self.base
        self._inline_map = token.map
        depth = len(self._open)

        children = list(token.children or [])
        if self._item_fresh and self.options.tasklists and children:
            children = self._task_marker(children)

        self._inline_children(children)
        self._close_components(depth)

    def _task_marker(self, children: list[Token]) -> list[Token]:
        first = children[0]
        if first.type != "text":
            return children

        marker = first.content[:3]
        rest = first.content[3:]
        if marker != TASK_MARKER_UNCHECKED and marker not in TASK_MARKERS_CHECKED:
            return children
        if rest and not rest[0].isspace():
            return children
        if not rest and len(children) > 1 and children[1].type not in ("softbreak", "hardbreak"):
            return children

        self._emit(TaskListMarker(checked=marker in TASK_MARKERS_CHECKED), self._locate(marker))
        remainder = rest[1:] if rest else ""
        if not remainder:
            return children[1:]
        text = Token("text", "", 0, content=remainder)
        return [text, *children[1:]]

    def _inline_children(self, children: Sequence[Token]) -> None:
        for index, token in enumerate(children):
            kind = token.type

            if kind == "text":
                if token.content:
                    self._emit(Text(token.content), self._locate(token.content))
            elif kind == "text_special":
                # escapes and entities: content is decoded, markup is the source text
                self._emit(Text(token.content), self._locate(token.markup or token.content))
            elif kind == "code_inline":
                self._emit(Code(token.content), self._locate_delimited(token.markup, token.content, token.markup))
            elif kind == "softbreak":
                self._emit(SoftBreak(), self._locate("\n"))
            elif kind == "hardbreak":
                self._emit(HardBreak(), self._hard_break_range())
            elif kind in _INLINE_TAGS:
                tag = _INLINE_TAGS[kind]()
                self._tokens.append(tag)
                self._start(tag, self._locate(token.markup))
            elif kind in ("em_close", "strong_close", "s_close"):
                self._close_token(self._locate(token.markup))
            elif kind == "link_open":
                self._link_open(token, children, index)
            elif kind == "link_close":
                self._link_close(token)
            elif kind == "wikilink_open":
                tag = Link(link_type="wikilink", dest_url=str(token.attrGet("href") or ""))
                self._tokens.append(tag)
                self._start(tag, self._locate("[["))
            elif kind == "wikilink_close":
                self._close_token(self._locate("]]"))
            elif kind == "image":
                self._image(token)
            elif kind == "html_inline":
                self._html_inline(token.content)
            elif kind == "math_inline":
                self._emit(InlineMath(token.content), self._locate_delimited("$", token.content, "$"))
            elif kind == "math_inline_double":
                self._emit(DisplayMath(token.content), self._locate_delimited("$$", token.content, "$$"))
            elif kind == "footnote_ref":
                label = self._footnote_label(token)
                self._emit(FootnoteReference(label), self._locate(f"[^{label}]"))
            elif kind == "footnote_anchor":
                continue
            else:
                logger.debug("Ignoring unsupported inline token %r", kind)

    def _hard_break_range(self) -> SourceRange:
        idx = self.source.find("\n", self._cursor, self._hi)
        if idx < 0:
            return self._here()
        start = idx
        while start > self._cursor and self.source[start - 1] in " \\":
            start -= 1
        self._cursor = idx + 1
        return self._range(start, idx + 1)

    def _link_open(self, token: Token, children: Sequence[Token], index: int) -> None:
        href = str(token.attrGet("href") or "")
        title = str(token.attrGet("title") or "")

        if token.markup == "autolink":
            label = children[index + 1].content if index + 1 < len(children) else ""
            link_type: LinkType = "email" if href.startswith("mailto:") and not label.startswith("mailto:") else "autolink"
            tag = Link(link_type=link_type, dest_url=href, title=title)
            self._tokens.append(tag)
            self._start(tag, self._locate("<"))
            return

        tag = Link(link_type="inline", dest_url=href, title=title)
        self._tokens.append(tag)
        self._start(tag, self._locate("["))

    def _link_close(self, token: Token) -> None:
        if token.markup == "autolink":
            self._close_token(self._locate(">"))
            return

        self._close_components()
        position, link_type = self._locate_link_end()
        opened = self._open[-1]
        if isinstance(opened.tag, Link) and opened.tag.link_type != link_type:
            self._retag(opened, Link(link_type=link_type, dest_url=opened.tag.dest_url, title=opened.tag.title))
        self._close_token(position)

    def _image(self, token: Token) -> None:
        tag = Image(
            link_type="inline",
            dest_url=str(token.attrGet("src") or ""),
            title=str(token.attrGet("title") or ""),
        )
        self._start(tag, self._locate("!["))
        depth = len(self._open)
        self._inline_children(token.children or [])
        self._close_components(depth)

        position, link_type = self._locate_link_end()
        if link_type != tag.link_type:
            self._retag(self._open[-1], Image(link_type=link_type, dest_url=tag.dest_url, title=tag.title))
        self._end(position)

    def _html_inline(self, content: str) -> None:
        opening = _OPEN_TAG.match(content)
        if opening and self.parser.is_component(opening.group(1)):
            name, raw_attributes, self_closing = opening.groups()
            position = self._locate(content)
            self._start(Component(name=name, attributes=parse_attributes(raw_attributes)), position)
            if self_closing:
                self._end(position)
            return

        closing = _CLOSE_TAG.match(content)
        if closing and self._closes_component(closing.group(1)):
            self._end(self._locate(content))
            return

        self._emit(Html(content), self._locate(content))


__all__ = ["MarkdownEventSource", "parse_attributes"]
