"""Tree and summary renderers."""

from __future__ import annotations

from .styles import RenderStyle, strip_styles
from .tree import TreeRenderer

__all__ = ["RenderStyle", "TreeRenderer", "strip_styles"]
