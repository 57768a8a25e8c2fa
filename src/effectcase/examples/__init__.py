"""Example programs built from the console primitives."""

from .welcome import ask_name, welcome, welcome_with_reason

__all__ = ["ask_name", "welcome", "welcome_with_reason"]
