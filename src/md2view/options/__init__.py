#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration records for md2view.

``ParseOptions`` selects the markdown extensions recognized by the event
source; ``MarkdownProps`` is the per-render configuration read by the
renderer.
"""

from __future__ import annotations

from md2view.options.base import CloneFrozenMixin
from md2view.options.markdown import MarkdownProps, ParseOptions

__all__ = ["CloneFrozenMixin", "MarkdownProps", "ParseOptions"]
