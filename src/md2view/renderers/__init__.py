#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2view/renderers/__init__.py
"""Renderers turning event streams into host framework views.

``base`` defines the view capability interface, ``engine`` the stack-based
renderer, and ``vdom`` an in-memory backend with HTML serialization.
"""

from md2view.renderers.base import ViewContext
from md2view.renderers.engine import Renderer
from md2view.renderers.vdom import VdomContext

__all__ = ["ViewContext", "Renderer", "VdomContext"]
