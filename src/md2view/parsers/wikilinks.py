#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/parsers/wikilinks.py
"""markdown-it plugin recognizing ``[[target]]`` and ``[[target|label]]``.

Emits ``wikilink_open``, ``text`` and ``wikilink_close`` tokens; the open
token carries the target in its ``href`` attribute.
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline


def wikilinks_plugin(md: MarkdownIt) -> None:
    """Register the wikilink rule ahead of regular links."""
    md.inline.ruler.before("link", "wikilink", _wikilink_rule)


def _wikilink_rule(state: StateInline, silent: bool) -> bool:
    src = state.src
    pos = state.pos
    if not src.startswith("[[", pos):
        return False

    end = src.find("]]", pos + 2, state.posMax)
    if end < 0:
        return False

    body = src[pos + 2 : end]
    if not body.strip() or "\n" in body or "[" in body:
        return False

    if not silent:
        target, _, label = body.partition("|")

        token = state.push("wikilink_open", "a", 1)
        token.attrs = {"href": target.strip()}
        token.markup = "[["

        token = state.push("text", "", 0)
        token.content = (label or target).strip()

        token = state.push("wikilink_close", "a", -1)
        token.markup = "]]"

    state.pos = end + 2
    return True
