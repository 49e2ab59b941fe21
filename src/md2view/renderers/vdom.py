#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/renderers/vdom.py
"""In-memory virtual DOM backend.

``VdomContext`` implements the view capability interface with plain Python
objects: ``VNode`` elements, ``VText`` leaves and ``VFragment`` sibling
groups. Handlers are ordinary callables, view callbacks are functions
returning nodes, and output slots are ``Slot`` instances. The resulting tree
can be inspected, clicked, and serialized to HTML.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Sequence, Union

from md2view.constants import VOID_ELEMENTS
from md2view.events import SourceRange
from md2view.renderers.base import ElementAttributes, HtmlElement, ViewContext
from md2view.utils.html_utils import escape_html, render_attributes

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass
class PointerEvent:
    """Pointer event delivered to ``VNode`` click handlers."""

    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass
class Slot:
    """Writable destination, e.g. for frontmatter."""

    value: Any = None

    def set(self, value: Any) -> None:
        self.value = value


@dataclass
class VText:
    """Text leaf."""

    text: str

    def to_html(self) -> str:
        return escape_html(self.text)

    @property
    def text_content(self) -> str:
        return self.text

    def walk(self) -> Iterator[VNode]:
        return iter(())


@dataclass
class VFragment:
    """Ordered siblings without a wrapper element."""

    children: list[View] = field(default_factory=list)

    def to_html(self) -> str:
        return "".join(child.to_html() for child in self.children)

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self.children)

    def walk(self) -> Iterator[VNode]:
        for child in self.children:
            yield from child.walk()

    def find_all(self, tag: str) -> list[VNode]:
        """All descendant elements named ``tag`` in document order."""
        return [node for node in self.walk() if node.tag == tag]

    def find(self, tag: str) -> Optional[VNode]:
        """First descendant element named ``tag``."""
        return next((node for node in self.walk() if node.tag == tag), None)


@dataclass
class VNode:
    """Element node.

    Parameters
    ----------
    tag : str
        HTML tag name
    attrs : dict
        Attributes other than class, style and id
    children : list of View
        Child views
    classes : list of str
        CSS classes
    style : str or None
        Inline style
    id : str or None
        Element identifier
    on_click : callable or None
        Click handler receiving a ``PointerEvent``
    inner_html : str or None
        Raw HTML content; replaces ``children`` when serializing

    """

    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[View] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)
    style: Optional[str] = None
    id: Optional[str] = None
    on_click: Optional[Handler] = None
    inner_html: Optional[str] = None

    @property
    def position(self) -> Optional[SourceRange]:
        """Source range reported by this node's click handler, if any."""
        return getattr(self.on_click, "position", None)

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self.children)

    def walk(self) -> Iterator[VNode]:
        """Yield this node and every descendant element, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, tag: str) -> list[VNode]:
        """All elements named ``tag`` in this subtree, in document order."""
        return [node for node in self.walk() if node.tag == tag]

    def find(self, tag: str) -> Optional[VNode]:
        """First element named ``tag`` in this subtree."""
        return next((node for node in self.walk() if node.tag == tag), None)

    def click(self, event: Optional[PointerEvent] = None) -> PointerEvent:
        """Simulate activation: run the handler, then the default action.

        The only default action modelled is toggling a checkbox, which is
        skipped when the handler called ``prevent_default``.
        """
        event = event or PointerEvent()
        if self.on_click is not None:
            self.on_click(event)
        if not event.default_prevented and self.tag == "input" and self.attrs.get("type") == "checkbox":
            self.attrs["checked"] = not self.attrs.get("checked", False)
        return event

    def to_html(self) -> str:
        attrs: dict[str, Any] = {}
        if self.id:
            attrs["id"] = self.id
        if self.classes:
            attrs["class"] = " ".join(self.classes)
        if self.style:
            attrs["style"] = self.style
        attrs.update(self.attrs)
        position = self.position
        if position is not None:
            attrs["data-source-range"] = f"{position.start}-{position.end}"

        opening = f"<{self.tag}{render_attributes(attrs)}>"
        if self.tag in VOID_ELEMENTS:
            return opening
        inner = self.inner_html if self.inner_html is not None else "".join(c.to_html() for c in self.children)
        return f"{opening}{inner}</{self.tag}>"


View = Union[VNode, VText, VFragment]


def _flatten(views: Sequence[View]) -> list[View]:
    children: list[View] = []
    for view in views:
        if isinstance(view, VFragment):
            children.extend(view.children)
        else:
            children.append(view)
    return children


class VdomContext(ViewContext[View, Handler]):
    """View context producing a virtual DOM.

    Parameters
    ----------
    props : MarkdownProps or None, default = None
        Render configuration

    Attributes
    ----------
    stylesheets : dict of str to VNode
        Mounted ``<link>`` nodes keyed by href; repeated mounts are merged
    stylesheet_mounts : int
        Number of ``mount_stylesheet`` calls received
    debug_info : list of str
        Diagnostics reported through ``send_debug_info``

    Examples
    --------
        >>> from md2view import render_markdown
        >>> cx = VdomContext()
        >>> html = render_markdown(cx, "*hi*").to_html()

    """

    def __init__(self, props: Any = None):
        """Initialize the context."""
        super().__init__(props)
        self.stylesheets: dict[str, VNode] = {}
        self.stylesheet_mounts = 0
        self.debug_info: list[str] = []

    def create_element(self, element: HtmlElement, inside: View, attributes: ElementAttributes[Handler]) -> View:
        attrs: dict[str, Any] = {}
        if element.start is not None and element.start != 1:
            attrs["start"] = element.start
        return VNode(
            tag=element.name,
            attrs=attrs,
            children=[] if attributes.inner_html is not None else _flatten([inside]),
            classes=list(attributes.classes),
            style=attributes.style,
            id=attributes.id,
            on_click=attributes.on_click,
            inner_html=attributes.inner_html,
        )

    def create_rule(self, attributes: ElementAttributes[Handler]) -> View:
        return VNode("hr", classes=list(attributes.classes), style=attributes.style, on_click=attributes.on_click)

    def create_line_break(self) -> View:
        return VNode("br")

    def create_fragment(self, children: Sequence[View]) -> View:
        return VFragment(_flatten(children))

    def create_anchor(self, content: View, href: str) -> View:
        return VNode("a", attrs={"href": href}, children=_flatten([content]))

    def create_image(self, src: str, alt: str) -> View:
        return VNode("img", attrs={"src": src, "alt": alt})

    def create_text(self, text: str) -> View:
        return VText(text)

    def create_checkbox(self, checked: bool, attributes: ElementAttributes[Handler]) -> View:
        return VNode(
            "input",
            attrs={"type": "checkbox", "checked": checked},
            classes=list(attributes.classes),
            on_click=attributes.on_click,
        )

    def mount_stylesheet(self, rel: str, href: str, integrity: str, crossorigin: str) -> None:
        self.stylesheet_mounts += 1
        if href not in self.stylesheets:
            self.stylesheets[href] = VNode(
                "link", attrs={"rel": rel, "href": href, "integrity": integrity, "crossorigin": crossorigin}
            )

    def set(self, setter: Any, value: Any) -> None:
        setter.set(value)

    def call_handler(self, handler: Any, value: Any) -> None:
        handler(value)

    def call_view_callback(self, callback: Any, value: Any) -> View:
        return callback(value)

    def make_handler(self, function: Callable[[Any], None]) -> Handler:
        return function

    def send_debug_info(self, info: list[str]) -> None:
        super().send_debug_info(info)
        self.debug_info.extend(info)

    def head_html(self) -> str:
        """Serialized ``<link>`` tags for every mounted stylesheet."""
        return "".join(link.to_html() for link in self.stylesheets.values())


__all__ = ["PointerEvent", "Slot", "VText", "VFragment", "VNode", "View", "VdomContext"]
