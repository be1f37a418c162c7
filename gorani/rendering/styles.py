"""ANSI styling classes for decorated tree output."""

from __future__ import annotations

import re
from enum import Enum

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
WHITE = "\033[37m"
BRIGHT_GREEN = "\033[92m"

_ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")


class RenderStyle(Enum):
    PLAIN = "plain"
    DECORATED = "decorated"


class StyleClass(Enum):
    DIRECTORY = BOLD + CYAN
    FILE = YELLOW
    EXPORTED_FUNCTION = BOLD + BRIGHT_GREEN
    FUNCTION = BOLD + GREEN
    PARAMETER = MAGENTA
    RETURN_TYPE = BLUE
    CONNECTOR = WHITE
    ERROR = BOLD + RED


def paint(text: str, style_class: StyleClass, style: RenderStyle) -> str:
    """Wrap ``text`` in the class colour when rendering decorated output."""
    if style is RenderStyle.PLAIN or not text:
        return text
    return f"{style_class.value}{text}{RESET}"


def strip_styles(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)


__all__ = ["RenderStyle", "StyleClass", "paint", "strip_styles"]
