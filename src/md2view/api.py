#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/api.py
"""Public entry points for md2view.

``render_markdown`` is the usual entry point: it parses markdown source into
positioned events and renders them through a host ``ViewContext``.
``render_events`` renders an event stream produced elsewhere, and
``markdown_to_html`` is a convenience wrapper around the virtual DOM backend.

"""

from __future__ import annotations

import logging
from typing import Iterable, TypeVar

from md2view.events import PositionedEvent, hard_line_breaks
from md2view.options.markdown import MarkdownProps
from md2view.parsers.markdown import MarkdownEventSource
from md2view.renderers.base import ViewContext
from md2view.renderers.engine import Renderer
from md2view.renderers.vdom import VdomContext
from md2view.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

V = TypeVar("V")
H = TypeVar("H")


def render_events(context: ViewContext[V, H], events: Iterable[PositionedEvent]) -> V:
    """Render a position-tagged event stream into a single view.

    Parameters
    ----------
    context : ViewContext
        Host framework capabilities; ``context.props`` configures the pass
    events : iterable of (Event, SourceRange)
        Well-nested event stream

    Returns
    -------
    View
        Fragment holding the top-level views in document order

    Raises
    ------
    StructuralMismatchError
        If the event stream is not well nested

    """
    if context.props.hard_line_breaks:
        events = hard_line_breaks(events)

    with debug_timer(logger, "Rendering events"):
        views = Renderer(context).render(events)
    return context.create_fragment(views)


def render_markdown(context: ViewContext[V, H], source: str) -> V:
    """Parse markdown ``source`` and render it through ``context``.

    Parameters
    ----------
    context : ViewContext
        Host framework capabilities; ``context.props`` selects the parse
        extensions, wikilinks, components and overrides

    source : str
        Markdown text

    Returns
    -------
    View
        Fragment holding the rendered document

    Examples
    --------
        >>> from md2view.renderers.vdom import VdomContext
        >>> view = render_markdown(VdomContext(), "Hello *world*")
        >>> view.text_content
        'Hello world'

    """
    props = context.props
    event_source = MarkdownEventSource(
        options=props.parse_options,
        wikilinks=props.wikilinks,
        component_names=props.components.keys(),
    )
    events = event_source.parse(source)
    return render_events(context, events)


def markdown_to_html(source: str, props: MarkdownProps | None = None) -> str:
    """Render markdown to an HTML string with the virtual DOM backend.

    Stylesheet links requested during rendering (KaTeX for math) are
    prepended to the output.

    Parameters
    ----------
    source : str
        Markdown text
    props : MarkdownProps or None, default = None
        Render configuration

    Returns
    -------
    str
        Serialized HTML

    """
    context = VdomContext(props)
    body = render_markdown(context, source).to_html()
    return context.head_html() + body


__all__ = ["render_events", "render_markdown", "markdown_to_html"]
