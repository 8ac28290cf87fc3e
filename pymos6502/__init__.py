"""Instruction-level MOS 6502 emulator core.

The package hosts the flat memory, the CPU (register file, addressing-mode
resolver, instruction table and execution engine), the program loader, a
small machine/config layer used by ``run.py``, and debug/trace utilities.
"""

from __future__ import annotations

from . import bus, utils, loader, cpu, system

__all__: list[str] = [
    "bus",
    "cpu",
    "loader",
    "system",
    "utils",
]
