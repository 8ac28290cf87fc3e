"""Exceptions raised by the 6502 core."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised when the fetched byte has no instruction-table entry."""

    def __init__(self, opcode: int, pc: int) -> None:
        super().__init__(f"illegal opcode {opcode:#04x} at ${pc:04X}")
        self.opcode = opcode
        self.pc = pc


class AddressingModeError(CPUError):
    """Raised when an addressing mode with no effective address is resolved."""
