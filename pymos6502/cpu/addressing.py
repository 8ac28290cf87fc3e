"""Effective-address resolution for the 6502 addressing modes.

The resolver only reads memory. ``state.pc`` must point at the first
trailing byte of the instruction being executed; advancing the program
counter past those bytes is the execution engine's job.

Index additions use the width of the mode: zero-page relative modes wrap
within page zero, absolute relative modes wrap at ``0xFFFF``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymos6502.bus import Memory

from .errors import AddressingModeError
from .opcodes import AddressingMode

if TYPE_CHECKING:
    from .core import CPUState


def _read_zero_page_word(memory: Memory, pointer: int) -> int:
    low = memory.read(pointer & 0xFF)
    high = memory.read((pointer + 1) & 0xFF)
    return (high << 8) | low


def _read_word_page_wrapped(memory: Memory, pointer: int) -> int:
    # The high byte never carries into the next page: ($10FF) reads $10FF/$1000.
    low = memory.read(pointer)
    high = memory.read((pointer & 0xFF00) | ((pointer + 1) & 0x00FF))
    return (high << 8) | low


def resolve_address(mode: AddressingMode, state: "CPUState", memory: Memory) -> int:
    """Return the effective address for ``mode`` at the current program counter."""

    pc = state.pc
    if mode is AddressingMode.IMMEDIATE:
        return pc
    if mode is AddressingMode.ZERO_PAGE:
        return memory.read(pc)
    if mode is AddressingMode.ABSOLUTE:
        return memory.read16(pc)
    if mode is AddressingMode.ZERO_PAGE_X:
        return (memory.read(pc) + state.x) & 0xFF
    if mode is AddressingMode.ZERO_PAGE_Y:
        return (memory.read(pc) + state.y) & 0xFF
    if mode is AddressingMode.ABSOLUTE_X:
        return (memory.read16(pc) + state.x) & 0xFFFF
    if mode is AddressingMode.ABSOLUTE_Y:
        return (memory.read16(pc) + state.y) & 0xFFFF
    if mode is AddressingMode.INDIRECT_X:
        pointer = (memory.read(pc) + state.x) & 0xFF
        return _read_zero_page_word(memory, pointer)
    if mode is AddressingMode.INDIRECT_Y:
        base = _read_zero_page_word(memory, memory.read(pc))
        return (base + state.y) & 0xFFFF
    if mode is AddressingMode.RELATIVE:
        displacement = memory.read(pc)
        if displacement & 0x80:
            displacement -= 0x100
        return (pc + 1 + displacement) & 0xFFFF
    if mode is AddressingMode.INDIRECT:
        return _read_word_page_wrapped(memory, memory.read16(pc))
    raise AddressingModeError(f"unsupported addressing mode: {mode.name}")
