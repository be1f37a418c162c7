"""Caller-supplied callbacks for interactive input."""

from __future__ import annotations

import getpass
from typing import Protocol

_AFFIRMATIVE = {"y", "yes"}


class Confirm(Protocol):
    def __call__(self, question: str) -> bool: ...


class ReadSecret(Protocol):
    def __call__(self, prompt: str) -> str: ...


class ReadLine(Protocol):
    def __call__(self, prompt: str) -> str: ...


def is_affirmative(answer: str | None) -> bool:
    return (answer or "").strip().lower() in _AFFIRMATIVE


def terminal_confirm(question: str) -> bool:
    """Ask a yes/no question on the terminal; anything but y/yes declines."""
    try:
        answer = input(f"{question} (y/N): ")
    except EOFError:
        return False
    return is_affirmative(answer)


def terminal_read_line(prompt: str) -> str:
    return input(prompt).strip()


def terminal_read_secret(prompt: str) -> str:
    return getpass.getpass(prompt).strip()


def decline(question: str) -> bool:
    return False


__all__ = [
    "Confirm",
    "ReadLine",
    "ReadSecret",
    "decline",
    "is_affirmative",
    "terminal_confirm",
    "terminal_read_line",
    "terminal_read_secret",
]
