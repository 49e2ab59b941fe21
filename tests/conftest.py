"""Pytest configuration and shared fixtures for the md2view test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

from typing import Any, Callable, List

import pytest

from md2view.options import MarkdownProps
from md2view.renderers.vdom import VdomContext


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")


@pytest.fixture
def clicks() -> List[Any]:
    """Collect every MarkdownMouseEvent delivered to ``on_click``."""
    return []


@pytest.fixture
def make_context(clicks) -> Callable[..., VdomContext]:
    """Build a VdomContext whose ``on_click`` records into ``clicks``.

    Keyword arguments are forwarded to ``MarkdownProps``.
    """

    def _make(**kwargs: Any) -> VdomContext:
        kwargs.setdefault("on_click", clicks.append)
        return VdomContext(MarkdownProps(**kwargs))

    return _make

