#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/click.py
"""Click-to-source event adapter.

Every clickable node produced by the renderer carries a ``MarkdownClickHandler``:
a small value object pairing the node's ``SourceRange`` with the render
context. When the host framework activates it with a pointer event, the
handler wraps that event in a ``MarkdownMouseEvent`` and forwards it to the
single ``on_click`` callback configured in ``MarkdownProps``.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from md2view.events import SourceRange

if TYPE_CHECKING:
    from md2view.renderers.base import ViewContext

E = TypeVar("E")


@dataclass(frozen=True)
class MarkdownMouseEvent(Generic[E]):
    """A host pointer event tagged with the markdown range that was clicked.

    Parameters
    ----------
    mouse_event : E
        The original event delivered by the host framework
    position : SourceRange
        Range of markdown source that produced the clicked node

    """

    mouse_event: E
    position: SourceRange


@dataclass(frozen=True)
class MarkdownClickHandler:
    """Dispatches clicks on one rendered node to the configured callback.

    Parameters
    ----------
    context : ViewContext
        Render context whose props hold the ``on_click`` callback
    position : SourceRange
        Range of the node this handler is attached to
    intercept : bool, default False
        Prevent the host's default action and stop propagation before
        dispatching (used for task list checkboxes)

    """

    context: ViewContext[Any, Any]
    position: SourceRange
    intercept: bool = False

    def __call__(self, mouse_event: Any) -> None:
        """Forward ``mouse_event`` as a ``MarkdownMouseEvent``."""
        if self.intercept:
            mouse_event.prevent_default()
            mouse_event.stop_propagation()

        callback = self.context.props.on_click
        if callback is None:
            return
        self.context.call_handler(callback, MarkdownMouseEvent(mouse_event=mouse_event, position=self.position))


__all__ = ["MarkdownMouseEvent", "MarkdownClickHandler"]
