#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/renderers/base.py
"""View capability interface required from a host UI framework.

The renderer never builds concrete UI nodes itself. It asks a ``ViewContext``
to construct elements, text leaves, fragments, anchors, images and
checkboxes, to wrap plain functions into host event handlers, and to invoke
user callbacks. Supporting a new framework means subclassing ``ViewContext``
for that framework's view and handler types.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from md2view.click import MarkdownClickHandler
from md2view.constants import LinkType
from md2view.events import SourceRange
from md2view.options.markdown import MarkdownProps

logger = logging.getLogger(__name__)

V = TypeVar("V")
H = TypeVar("H")
T = TypeVar("T")


@dataclass(frozen=True)
class HtmlElement:
    """Kind of element to construct.

    Parameters
    ----------
    name : str
        HTML tag name
    level : int or None, default = None
        Heading level for ``h1``-``h6``
    start : int or None, default = None
        First number of an ordered list

    """

    name: str
    level: Optional[int] = None
    start: Optional[int] = None

    @classmethod
    def heading(cls, level: int) -> HtmlElement:
        """Heading element of the given level."""
        return cls(f"h{level}", level=level)

    @classmethod
    def ordered_list(cls, start: int) -> HtmlElement:
        """Ordered list whose numbering begins at ``start``."""
        return cls("ol", start=start)


DIV = HtmlElement("div")
SPAN = HtmlElement("span")
PARAGRAPH = HtmlElement("p")
BLOCK_QUOTE = HtmlElement("blockquote")
UNORDERED_LIST = HtmlElement("ul")
LIST_ITEM = HtmlElement("li")
TABLE = HtmlElement("table")
TABLE_HEAD = HtmlElement("thead")
TABLE_ROW = HtmlElement("tr")
TABLE_HEADER_CELL = HtmlElement("th")
TABLE_CELL = HtmlElement("td")
EMPHASIS = HtmlElement("em")
STRONG = HtmlElement("strong")
STRIKETHROUGH = HtmlElement("del")
PRE = HtmlElement("pre")
CODE = HtmlElement("code")
SUPERSCRIPT = HtmlElement("sup")


@dataclass
class ElementAttributes(Generic[H]):
    """Attributes attached to a constructed element.

    Parameters
    ----------
    classes : list of str
        CSS classes
    style : str or None
        Inline style declarations
    inner_html : str or None
        Raw HTML inserted as the element's content, verbatim
    on_click : Handler or None
        Host click handler
    id : str or None
        Element identifier

    """

    classes: list[str] = field(default_factory=list)
    style: Optional[str] = None
    inner_html: Optional[str] = None
    on_click: Optional[H] = None
    id: Optional[str] = None


@dataclass
class LinkDescription(Generic[V]):
    """A link or image handed to the ``render_links`` override.

    Parameters
    ----------
    url : str
        Destination of the link or source of the image
    content : View
        Already-rendered children of the link (the alt text view for images)
    title : str
        Link title, often empty
    link_type : LinkType
        How the link was written in the source
    image : bool
        Whether this describes an image
    alt : str
        Plain alternative text of an image; empty for links

    """

    url: str
    content: V
    title: str = ""
    link_type: LinkType = "inline"
    image: bool = False
    alt: str = ""


@dataclass
class ComponentProps(Generic[V]):
    """Arguments passed to a custom component callback.

    Parameters
    ----------
    name : str
        Component name as written in the source
    attributes : list of (str, str)
        Raw attribute pairs in source order
    children : View
        Rendered content between the opening and closing tags

    """

    name: str
    attributes: list[tuple[str, str]]
    children: V

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first attribute value named ``key``."""
        for name, value in self.attributes:
            if name == key:
                return value
        return default


class ViewContext(ABC, Generic[V, H]):
    """Host framework capabilities used by the renderer.

    ``V`` is the framework's view type and ``H`` its click handler type.
    Subclasses implement the construction primitives; the ``render_*``
    helpers compose them and may be overridden for framework-specific
    markup.

    Parameters
    ----------
    props : MarkdownProps or None, default = None
        Configuration of the render pass. Defaults are used when omitted.

    """

    def __init__(self, props: MarkdownProps | None = None):
        """Initialize the context with render configuration."""
        self.props: MarkdownProps = props or MarkdownProps()

    # ------------------------------------------------------------------
    # Construction primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def create_element(self, element: HtmlElement, inside: V, attributes: ElementAttributes[H]) -> V:
        """Construct ``element`` wrapping ``inside`` with ``attributes``."""

    @abstractmethod
    def create_rule(self, attributes: ElementAttributes[H]) -> V:
        """Construct a horizontal rule."""

    @abstractmethod
    def create_line_break(self) -> V:
        """Construct a line break."""

    @abstractmethod
    def create_fragment(self, children: Sequence[V]) -> V:
        """Group sibling views without a wrapper element."""

    @abstractmethod
    def create_anchor(self, content: V, href: str) -> V:
        """Construct a hyperlink around ``content``."""

    @abstractmethod
    def create_image(self, src: str, alt: str) -> V:
        """Construct an image."""

    @abstractmethod
    def create_text(self, text: str) -> V:
        """Construct a text leaf."""

    @abstractmethod
    def create_checkbox(self, checked: bool, attributes: ElementAttributes[H]) -> V:
        """Construct a checkbox input."""

    def create_empty(self) -> V:
        """Construct a node that renders nothing."""
        return self.create_fragment([])

    def element(self, element: HtmlElement, inside: V) -> V:
        """Construct ``element`` without attributes."""
        return self.create_element(element, inside, ElementAttributes())

    # ------------------------------------------------------------------
    # Side effects and callbacks
    # ------------------------------------------------------------------

    @abstractmethod
    def mount_stylesheet(self, rel: str, href: str, integrity: str, crossorigin: str) -> None:
        """Register a stylesheet link; repeated identical calls must be harmless."""

    @abstractmethod
    def set(self, setter: Any, value: Any) -> None:
        """Write ``value`` into a host output slot."""

    @abstractmethod
    def call_handler(self, handler: Any, value: Any) -> None:
        """Invoke a host handler with ``value``."""

    @abstractmethod
    def call_view_callback(self, callback: Any, value: Any) -> V:
        """Invoke a view-returning user callback with ``value``."""

    @abstractmethod
    def make_handler(self, function: Callable[[Any], None]) -> H:
        """Wrap a plain function into a host click handler."""

    def send_debug_info(self, info: list[str]) -> None:
        """Receive diagnostics about degraded rendering.

        The default implementation only logs; hosts may surface the
        messages elsewhere.
        """
        for line in info:
            logger.debug(line)

    # ------------------------------------------------------------------
    # Composite helpers
    # ------------------------------------------------------------------

    def make_md_callback(self, position: SourceRange, intercept: bool = False) -> H:
        """Click handler reporting ``position`` to ``props.on_click``."""
        return self.make_handler(MarkdownClickHandler(self, position, intercept=intercept))

    def clickable(self, position: SourceRange, **kwargs: Any) -> ElementAttributes[H]:
        """Attributes carrying a click handler for ``position``."""
        return ElementAttributes(on_click=self.make_md_callback(position), **kwargs)

    def render_text(self, text: str, position: SourceRange) -> V:
        """Text leaf wrapped in a clickable span."""
        return self.create_element(SPAN, self.create_text(text), self.clickable(position))

    def render_code(self, text: str, position: SourceRange) -> V:
        """Inline code span."""
        return self.create_element(CODE, self.create_text(text), self.clickable(position))

    def render_rule(self, position: SourceRange) -> V:
        """Clickable horizontal rule."""
        return self.create_rule(self.clickable(position))

    def render_tasklist_marker(self, checked: bool, position: SourceRange) -> V:
        """Checkbox whose activation is reported instead of toggled.

        The handler prevents the host's default action, so the checkbox
        state only changes when the ``on_click`` consumer re-renders.
        """
        attributes: ElementAttributes[H] = ElementAttributes(on_click=self.make_md_callback(position, intercept=True))
        return self.create_checkbox(checked, attributes)

    def render_link(self, link: LinkDescription[V]) -> V:
        """Link or image, through the ``render_links`` override when configured."""
        if self.props.render_links is not None:
            return self.call_view_callback(self.props.render_links, link)
        if link.image:
            return self.create_image(link.url, link.alt or link.title)
        return self.create_anchor(link.content, link.url)


__all__ = [
    "HtmlElement",
    "ElementAttributes",
    "LinkDescription",
    "ComponentProps",
    "ViewContext",
    "DIV",
    "SPAN",
    "PARAGRAPH",
    "BLOCK_QUOTE",
    "UNORDERED_LIST",
    "LIST_ITEM",
    "TABLE",
    "TABLE_HEAD",
    "TABLE_ROW",
    "TABLE_HEADER_CELL",
    "TABLE_CELL",
    "EMPHASIS",
    "STRONG",
    "STRIKETHROUGH",
    "PRE",
    "CODE",
    "SUPERSCRIPT",
]
