"""Shared helpers: identity generation and logging setup."""

from chatbot_registry.utils.identity import generate_id, now

__all__ = ["generate_id", "now"]
