#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/parsers/__init__.py
"""Markdown parsing into position-tagged event streams."""

from md2view.parsers.markdown import MarkdownEventSource, parse_attributes

__all__ = ["MarkdownEventSource", "parse_attributes"]
