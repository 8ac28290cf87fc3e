"""Memory helpers for the 6502 core."""

from .memory import ADDRESS_SPACE, Memory, MemoryError

__all__ = [
    "ADDRESS_SPACE",
    "Memory",
    "MemoryError",
]
