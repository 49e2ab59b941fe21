"""Helpers shared by md2view tests."""

from typing import Any, List, Tuple

from md2view.events import End, SourceRange, Start, Tag


def rng(start: int, end: int) -> SourceRange:
    """Shorthand for building source ranges in event fixtures."""
    return SourceRange(start, end)


def wrap(tag: Tag, position: SourceRange, *inner: Tuple[Any, SourceRange]) -> List[Tuple[Any, SourceRange]]:
    """Events for ``tag`` opened and closed around ``inner`` at ``position``."""
    return [(Start(tag), position), *inner, (End(tag), position)]


def assert_ranges_within(events, source: str) -> None:
    """Assert every event range lies inside ``source``."""
    for event, position in events:
        assert 0 <= position.start <= position.end <= len(source), f"{event!r} at {position} is out of bounds"
