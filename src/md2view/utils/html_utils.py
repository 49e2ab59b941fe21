#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/utils/html_utils.py
"""HTML-related utility helpers."""

from __future__ import annotations

from html import escape as _html_escape
from typing import Mapping, Optional


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled."""
    if not enabled:
        return text
    return _html_escape(text)


def render_attributes(attrs: Mapping[str, Optional[str | bool | int]]) -> str:
    """Serialize an attribute mapping, leading space included.

    ``True`` renders a bare boolean attribute; ``False`` and ``None`` drop
    the attribute.
    """
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape_html(str(value))}"')
    return "".join(parts)


__all__ = ["escape_html", "render_attributes"]
