#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/renderers/engine.py
"""Event stream to view tree rendering.

The ``Renderer`` walks a flat ``(Event, SourceRange)`` sequence once. Every
``Start`` pushes a frame on an explicit stack, leaves are rendered straight
into the innermost frame, and every ``End`` pops its frame and turns the
collected children into one view according to the construct's kind. The
stack replaces recursion, so a malformed stream fails with a
``StructuralMismatchError`` instead of corrupting the tree.

Closing a frame dispatches to ``_close_<kind>``, mirroring the visitor
methods of the other renderers.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

from md2view.constants import (
    CSS_CLASS_FOOTNOTE_DEFINITION,
    CSS_CLASS_FOOTNOTE_LABEL,
    CSS_CLASS_HIGHLIGHT,
    CSS_CLASS_LANGUAGE_PREFIX,
    CSS_CLASS_MATH,
    CSS_CLASS_MATH_DISPLAY,
    CSS_CLASS_MATH_INLINE,
    FOOTNOTE_ID_PREFIX,
    KATEX_STYLESHEET_CROSSORIGIN,
    KATEX_STYLESHEET_HREF,
    KATEX_STYLESHEET_INTEGRITY,
    KATEX_STYLESHEET_REL,
)
from md2view.events import (
    Code,
    CodeBlock,
    DisplayMath,
    End,
    FootnoteReference,
    HardBreak,
    Html,
    HtmlBlock,
    Image,
    InlineMath,
    MetadataBlock,
    PositionedEvent,
    Rule,
    SoftBreak,
    SourceRange,
    Start,
    TableHead,
    Tag,
    TaskListMarker,
    Text,
)
from md2view.exceptions import RenderingError, StructuralMismatchError
from md2view.renderers.base import (
    BLOCK_QUOTE,
    CODE,
    DIV,
    EMPHASIS,
    LIST_ITEM,
    PARAGRAPH,
    PRE,
    SPAN,
    STRIKETHROUGH,
    STRONG,
    SUPERSCRIPT,
    TABLE,
    TABLE_CELL,
    TABLE_HEAD,
    TABLE_HEADER_CELL,
    TABLE_ROW,
    UNORDERED_LIST,
    ComponentProps,
    ElementAttributes,
    HtmlElement,
    LinkDescription,
    ViewContext,
)
from md2view.utils.highlight import highlight_code
from md2view.utils.html_utils import escape_html

logger = logging.getLogger(__name__)

V = TypeVar("V")
H = TypeVar("H")

# Frames whose leaves are concatenated as raw text instead of rendered
_RAW_TEXT_KINDS = frozenset({CodeBlock.kind, HtmlBlock.kind, MetadataBlock.kind})


@dataclass
class _Frame:
    """Accumulator for a construct between its Start and End events."""

    tag: Tag
    start: int
    children: list[Any] = field(default_factory=list)
    text: list[str] = field(default_factory=list)


def _raw_text(event: Any) -> str:
    """Source text a leaf contributes to a raw-text frame."""
    if isinstance(event, (Text, Code, InlineMath, DisplayMath)):
        return event.text
    if isinstance(event, Html):
        return event.html
    if isinstance(event, (SoftBreak, HardBreak)):
        return "\n"
    return ""


class Renderer(Generic[V, H]):
    """Rebuild the document tree from a flat event stream.

    Parameters
    ----------
    context : ViewContext
        Host framework capabilities and render configuration

    Examples
    --------
        >>> from md2view.renderers.vdom import VdomContext
        >>> from md2view.events import Start, End, Text, Paragraph, SourceRange
        >>> events = [
        ...     (Start(Paragraph()), SourceRange(0, 5)),
        ...     (Text("hello"), SourceRange(0, 5)),
        ...     (End(Paragraph()), SourceRange(0, 5)),
        ... ]
        >>> views = Renderer(VdomContext()).render(events)

    """

    def __init__(self, context: ViewContext[V, H]):
        """Initialize the renderer for one context."""
        self.context = context
        self.props = context.props
        self._stack: list[_Frame] = []
        self._output: list[V] = []

    def render(self, events: Iterable[PositionedEvent]) -> list[V]:
        """Render every event and return the top-level views in order.

        Parameters
        ----------
        events : iterable of (Event, SourceRange)
            Well-nested event stream

        Returns
        -------
        list of View
            Top-level views

        Raises
        ------
        StructuralMismatchError
            If an ``End`` has no matching ``Start`` or constructs remain open
            when the stream ends

        """
        self._stack = []
        self._output = []
        count = 0

        for event, position in events:
            count += 1
            self._handle(event, position)

        if self._stack:
            frame = self._stack[-1]
            self._stack = []
            raise StructuralMismatchError(
                expected=frame.tag.kind, found=None, position=SourceRange(frame.start, frame.start)
            )

        output, self._output = self._output, []
        logger.debug("Rendered %d events into %d top-level views", count, len(output))
        return output

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _handle(self, event: Any, position: SourceRange) -> None:
        if isinstance(event, Start):
            self._stack.append(_Frame(tag=event.tag, start=position.start))
        elif isinstance(event, End):
            self._close(event.tag, position)
        elif self._stack and self._stack[-1].tag.kind in _RAW_TEXT_KINDS:
            self._stack[-1].text.append(_raw_text(event))
        else:
            if isinstance(event, (Text, Code)):
                # alt text of enclosing images, including nested spans
                for frame in self._stack:
                    if frame.tag.kind == Image.kind:
                        frame.text.append(event.text)
            self._append(self._render_leaf(event, position))

    def _append(self, view: V) -> None:
        if self._stack:
            self._stack[-1].children.append(view)
        else:
            self._output.append(view)

    def _close(self, tag: Tag, position: SourceRange) -> None:
        if not self._stack:
            raise StructuralMismatchError(expected=None, found=tag.kind, position=position)

        frame = self._stack[-1]
        if frame.tag.kind != tag.kind:
            raise StructuralMismatchError(expected=frame.tag.kind, found=tag.kind, position=position)
        self._stack.pop()

        span = SourceRange(frame.start, max(frame.start, position.end))
        closer = getattr(self, f"_close_{frame.tag.kind}")
        self._append(closer(frame, span))

    def _children(self, frame: _Frame) -> V:
        return self.context.create_fragment(frame.children)

    def _wrap(self, element: HtmlElement, frame: _Frame, span: SourceRange, **kwargs: Any) -> V:
        return self.context.create_element(element, self._children(frame), self.context.clickable(span, **kwargs))

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def _render_leaf(self, event: Any, position: SourceRange) -> V:
        cx = self.context
        if isinstance(event, Text):
            return cx.render_text(event.text, position)
        if isinstance(event, Code):
            return cx.render_code(event.text, position)
        if isinstance(event, Html):
            return cx.create_element(SPAN, cx.create_empty(), cx.clickable(position, inner_html=event.html))
        if isinstance(event, SoftBreak):
            return cx.create_text("\n")
        if isinstance(event, HardBreak):
            return cx.create_line_break()
        if isinstance(event, Rule):
            return cx.render_rule(position)
        if isinstance(event, TaskListMarker):
            return cx.render_tasklist_marker(event.checked, position)
        if isinstance(event, InlineMath):
            return self._render_math(event.text, position, display=False)
        if isinstance(event, DisplayMath):
            return self._render_math(event.text, position, display=True)
        if isinstance(event, FootnoteReference):
            anchor = cx.create_anchor(cx.create_text(event.label), f"#{FOOTNOTE_ID_PREFIX}{event.label}")
            return cx.create_element(SUPERSCRIPT, anchor, cx.clickable(position))
        raise RenderingError(f"Unsupported event: {event!r}", rendering_stage="traversal")

    def _render_math(self, tex: str, position: SourceRange, display: bool) -> V:
        # registered per math node; the host deduplicates identical links
        self.context.mount_stylesheet(
            KATEX_STYLESHEET_REL,
            KATEX_STYLESHEET_HREF,
            KATEX_STYLESHEET_INTEGRITY,
            KATEX_STYLESHEET_CROSSORIGIN,
        )
        element = DIV if display else SPAN
        mode = CSS_CLASS_MATH_DISPLAY if display else CSS_CLASS_MATH_INLINE
        attributes = self.context.clickable(position, classes=[CSS_CLASS_MATH, mode])
        return self.context.create_element(element, self.context.create_text(tex), attributes)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _close_paragraph(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(PARAGRAPH, frame, span)

    def _close_heading(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(HtmlElement.heading(frame.tag.level), frame, span)  # type: ignore[attr-defined]

    def _close_block_quote(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(BLOCK_QUOTE, frame, span)

    def _close_list(self, frame: _Frame, span: SourceRange) -> V:
        start = frame.tag.start  # type: ignore[attr-defined]
        element = UNORDERED_LIST if start is None else HtmlElement.ordered_list(start)
        return self._wrap(element, frame, span)

    def _close_item(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(LIST_ITEM, frame, span)

    def _close_table(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(TABLE, frame, span)

    def _close_table_head(self, frame: _Frame, span: SourceRange) -> V:
        row = self.context.element(TABLE_ROW, self._children(frame))
        return self.context.create_element(TABLE_HEAD, row, self.context.clickable(span))

    def _close_table_row(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(TABLE_ROW, frame, span)

    def _close_table_cell(self, frame: _Frame, span: SourceRange) -> V:
        in_head = bool(self._stack) and self._stack[-1].tag.kind == TableHead.kind
        alignment = frame.tag.alignment  # type: ignore[attr-defined]
        style = f"text-align: {alignment}" if alignment else None
        return self._wrap(TABLE_HEADER_CELL if in_head else TABLE_CELL, frame, span, style=style)

    def _close_code_block(self, frame: _Frame, span: SourceRange) -> V:
        code = "".join(frame.text)
        language = frame.tag.language  # type: ignore[attr-defined]
        classes = [f"{CSS_CLASS_LANGUAGE_PREFIX}{language}"] if language else []

        if self.props.theme:
            highlighted = highlight_code(code, language, self.props.theme)
            class_attr = f' class="{escape_html(" ".join(classes))}"' if classes else ""
            attributes: ElementAttributes[H] = self.context.clickable(
                span,
                classes=[CSS_CLASS_HIGHLIGHT],
                style=f"background-color: {highlighted.background_color}" if highlighted.background_color else None,
                inner_html=f"<code{class_attr}>{highlighted.html}</code>",
            )
            return self.context.create_element(PRE, self.context.create_empty(), attributes)

        inner = self.context.create_element(CODE, self.context.create_text(code), ElementAttributes(classes=classes))
        return self.context.create_element(PRE, inner, self.context.clickable(span))

    def _close_html_block(self, frame: _Frame, span: SourceRange) -> V:
        attributes = self.context.clickable(span, inner_html="".join(frame.text))
        return self.context.create_element(DIV, self.context.create_empty(), attributes)

    def _close_footnote_definition(self, frame: _Frame, span: SourceRange) -> V:
        label = frame.tag.label  # type: ignore[attr-defined]
        marker = self.context.create_element(
            SUPERSCRIPT, self.context.create_text(label), ElementAttributes(classes=[CSS_CLASS_FOOTNOTE_LABEL])
        )
        attributes = self.context.clickable(
            span, classes=[CSS_CLASS_FOOTNOTE_DEFINITION], id=f"{FOOTNOTE_ID_PREFIX}{label}"
        )
        return self.context.create_element(DIV, self.context.create_fragment([marker, *frame.children]), attributes)

    def _close_metadata_block(self, frame: _Frame, span: SourceRange) -> V:
        if self.props.frontmatter is not None:
            self.context.set(self.props.frontmatter, "".join(frame.text))
        else:
            logger.debug("Discarding frontmatter at %d..%d: no destination configured", span.start, span.end)
        return self.context.create_empty()

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _close_emphasis(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(EMPHASIS, frame, span)

    def _close_strong(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(STRONG, frame, span)

    def _close_strikethrough(self, frame: _Frame, span: SourceRange) -> V:
        return self._wrap(STRIKETHROUGH, frame, span)

    def _close_link(self, frame: _Frame, span: SourceRange) -> V:
        tag = frame.tag
        link: LinkDescription[V] = LinkDescription(
            url=tag.dest_url,  # type: ignore[attr-defined]
            content=self._children(frame),
            title=tag.title,  # type: ignore[attr-defined]
            link_type=tag.link_type,  # type: ignore[attr-defined]
            image=False,
        )
        return self.context.render_link(link)

    def _close_image(self, frame: _Frame, span: SourceRange) -> V:
        tag = frame.tag
        link: LinkDescription[V] = LinkDescription(
            url=tag.dest_url,  # type: ignore[attr-defined]
            content=self._children(frame),
            title=tag.title,  # type: ignore[attr-defined]
            link_type=tag.link_type,  # type: ignore[attr-defined]
            image=True,
            alt="".join(frame.text),
        )
        return self.context.render_link(link)

    def _close_component(self, frame: _Frame, span: SourceRange) -> V:
        name = frame.tag.name  # type: ignore[attr-defined]
        callback = self.props.components.get(name)
        if callback is None:
            logger.debug("Component %r is not registered; rendering nothing", name)
            self.context.send_debug_info([f"unregistered component: {name} at {span.start}..{span.end}"])
            return self.context.create_empty()

        props: ComponentProps[V] = ComponentProps(
            name=name,
            attributes=list(frame.tag.attributes),  # type: ignore[attr-defined]
            children=self._children(frame),
        )
        return self.context.call_view_callback(callback, props)


__all__ = ["Renderer"]
