#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the markdown click event adapter."""

import pytest
from utils import rng

from md2view.click import MarkdownClickHandler, MarkdownMouseEvent
from md2view.options import MarkdownProps
from md2view.renderers.vdom import PointerEvent, VdomContext


@pytest.mark.unit
class TestMarkdownClickHandler:
    """Tests for MarkdownClickHandler dispatch."""

    def test_dispatches_position_and_event(self, make_context, clicks):
        context = make_context()
        handler = MarkdownClickHandler(context, rng(3, 7))
        event = PointerEvent()

        handler(event)

        assert clicks == [MarkdownMouseEvent(mouse_event=event, position=rng(3, 7))]
        assert not event.default_prevented

    def test_no_callback_is_silent(self):
        context = VdomContext(MarkdownProps())
        handler = MarkdownClickHandler(context, rng(0, 1))
        handler(PointerEvent())

    def test_intercept_prevents_default_and_propagation(self, make_context, clicks):
        handler = MarkdownClickHandler(make_context(), rng(0, 3), intercept=True)
        event = PointerEvent()

        handler(event)

        assert event.default_prevented
        assert event.propagation_stopped
        assert len(clicks) == 1

    def test_intercept_without_callback(self):
        handler = MarkdownClickHandler(VdomContext(), rng(0, 3), intercept=True)
        event = PointerEvent()
        handler(event)
        assert event.default_prevented

    def test_callback_invoked_through_context(self, clicks):
        calls = []

        class RecordingContext(VdomContext):
            def call_handler(self, handler, value):
                calls.append(value.position)
                super().call_handler(handler, value)

        context = RecordingContext(MarkdownProps(on_click=clicks.append))
        MarkdownClickHandler(context, rng(1, 2))(PointerEvent())

        assert calls == [rng(1, 2)]
        assert clicks[0].position == rng(1, 2)

    def test_handlers_are_values(self):
        context = VdomContext()
        assert MarkdownClickHandler(context, rng(0, 1)) == MarkdownClickHandler(context, rng(0, 1))
