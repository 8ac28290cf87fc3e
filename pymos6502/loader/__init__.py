"""Loaders for 6502 program images."""

from __future__ import annotations

from .program import (
    PROGRAM_LOAD_ADDRESS,
    RESET_VECTOR,
    ProgramImage,
    ProgramLoadError,
    install_image,
    install_program,
    read_program,
)

__all__ = [
    "PROGRAM_LOAD_ADDRESS",
    "RESET_VECTOR",
    "ProgramImage",
    "ProgramLoadError",
    "install_image",
    "install_program",
    "read_program",
]
