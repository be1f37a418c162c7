"""Reasoning service adapters."""

from .client import ReasoningClient, ReasoningRequest

__all__ = ["ReasoningClient", "ReasoningRequest"]
