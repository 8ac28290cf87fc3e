"""CPU package for the 6502 emulator."""

from .addressing import resolve_address
from .core import MOS6502, CPUState, STACK_BASE, STACK_RESET
from .errors import AddressingModeError, CPUError, IllegalOpcodeError
from .flags import update_zero_negative
from .opcodes import OPCODE_TABLE, AddressingMode, Instruction
from . import flags, opcodes

__all__ = [
    "MOS6502",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "AddressingModeError",
    "AddressingMode",
    "Instruction",
    "OPCODE_TABLE",
    "STACK_BASE",
    "STACK_RESET",
    "resolve_address",
    "update_zero_negative",
    "flags",
    "opcodes",
]
