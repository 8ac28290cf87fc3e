"""Opcode metadata for the MOS 6502 CPU."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Iterable, List, Mapping, Sequence


class AddressingMode(Enum):
    """Rules for turning an instruction's trailing bytes into an address."""

    IMMEDIATE = auto()
    ZERO_PAGE = auto()
    ABSOLUTE = auto()
    ZERO_PAGE_X = auto()
    ZERO_PAGE_Y = auto()
    ABSOLUTE_X = auto()
    ABSOLUTE_Y = auto()
    INDIRECT_X = auto()
    INDIRECT_Y = auto()
    RELATIVE = auto()
    INDIRECT = auto()
    NONE = auto()


OPERAND_LENGTHS: Final[Mapping[AddressingMode, int]] = {
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
    AddressingMode.RELATIVE: 1,
    AddressingMode.INDIRECT: 2,
    AddressingMode.NONE: 0,
}


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single 6502 opcode."""

    opcode: int
    mnemonic: str
    mode: AddressingMode
    length: int
    handler: str
    register: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"opcode out of range: {self.opcode}")
        expected = OPERAND_LENGTHS[self.mode]
        if self.length != expected:
            raise ValueError(
                f"{self.mnemonic} ({self.opcode:#04x}) declares {self.length} operand bytes, "
                f"{self.mode.name} takes {expected}")


class OpcodeTable:
    """Mutable builder for the 256-entry instruction table."""

    _TABLE_SIZE: Final[int] = 0x100

    def __init__(self) -> None:
        self._table: List[Instruction | None] = [None] * self._TABLE_SIZE

    def register(self, instruction: Instruction) -> None:
        opcode = instruction.opcode
        if self._table[opcode] is not None:
            existing = self._table[opcode]
            raise ValueError(
                f"opcode {opcode:#04x} already registered as {existing.mnemonic}")
        self._table[opcode] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[Instruction | None]:
        return tuple(self._table)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[Instruction | None]:
    """Build a 256-entry instruction lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


_M = AddressingMode


def _group(mnemonic: str, handler: str, modes: Iterable[tuple[int, AddressingMode]],
           register: str | None = None) -> List[Instruction]:
    return [
        Instruction(opcode, mnemonic, mode, OPERAND_LENGTHS[mode], handler, register)
        for opcode, mode in modes
    ]


_ALU_MODES = (
    _M.IMMEDIATE, _M.ZERO_PAGE, _M.ZERO_PAGE_X, _M.ABSOLUTE,
    _M.ABSOLUTE_X, _M.ABSOLUTE_Y, _M.INDIRECT_X, _M.INDIRECT_Y,
)


def _alu(base: int) -> List[tuple[int, AddressingMode]]:
    # Group-one opcodes share a column layout: imm, zp, zp,x, abs, abs,x, abs,y, (zp,x), (zp),y
    offsets = (0x09, 0x05, 0x15, 0x0D, 0x1D, 0x19, 0x01, 0x11)
    return [(base + offset, mode) for offset, mode in zip(offsets, _ALU_MODES)]


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # Halt
    Instruction(0x00, "BRK", _M.NONE, 0, "op_brk"),
    Instruction(0xEA, "NOP", _M.NONE, 0, "op_nop"),
    # Loads
    *_group("LDA", "op_load", _alu(0xA0), register="A"),
    *_group("LDX", "op_load", [
        (0xA2, _M.IMMEDIATE), (0xA6, _M.ZERO_PAGE), (0xB6, _M.ZERO_PAGE_Y),
        (0xAE, _M.ABSOLUTE), (0xBE, _M.ABSOLUTE_Y),
    ], register="X"),
    *_group("LDY", "op_load", [
        (0xA0, _M.IMMEDIATE), (0xA4, _M.ZERO_PAGE), (0xB4, _M.ZERO_PAGE_X),
        (0xAC, _M.ABSOLUTE), (0xBC, _M.ABSOLUTE_X),
    ], register="Y"),
    # Stores
    *_group("STA", "op_store", [
        (opcode, mode) for opcode, mode in _alu(0x80) if mode is not _M.IMMEDIATE
    ], register="A"),
    *_group("STX", "op_store", [
        (0x86, _M.ZERO_PAGE), (0x96, _M.ZERO_PAGE_Y), (0x8E, _M.ABSOLUTE),
    ], register="X"),
    *_group("STY", "op_store", [
        (0x84, _M.ZERO_PAGE), (0x94, _M.ZERO_PAGE_X), (0x8C, _M.ABSOLUTE),
    ], register="Y"),
    # Arithmetic and logic
    *_group("ADC", "op_adc", _alu(0x60)),
    *_group("SBC", "op_sbc", _alu(0xE0)),
    *_group("AND", "op_and", _alu(0x20)),
    *_group("ORA", "op_ora", _alu(0x00)),
    *_group("EOR", "op_eor", _alu(0x40)),
    *_group("CMP", "op_compare", _alu(0xC0), register="A"),
    *_group("CPX", "op_compare", [
        (0xE0, _M.IMMEDIATE), (0xE4, _M.ZERO_PAGE), (0xEC, _M.ABSOLUTE),
    ], register="X"),
    *_group("CPY", "op_compare", [
        (0xC0, _M.IMMEDIATE), (0xC4, _M.ZERO_PAGE), (0xCC, _M.ABSOLUTE),
    ], register="Y"),
    *_group("BIT", "op_bit", [(0x24, _M.ZERO_PAGE), (0x2C, _M.ABSOLUTE)]),
    # Shifts and rotates
    Instruction(0x0A, "ASL", _M.NONE, 0, "op_asl_accumulator"),
    Instruction(0x4A, "LSR", _M.NONE, 0, "op_lsr_accumulator"),
    Instruction(0x2A, "ROL", _M.NONE, 0, "op_rol_accumulator"),
    Instruction(0x6A, "ROR", _M.NONE, 0, "op_ror_accumulator"),
    *_group("ASL", "op_asl_memory", [
        (0x06, _M.ZERO_PAGE), (0x16, _M.ZERO_PAGE_X), (0x0E, _M.ABSOLUTE), (0x1E, _M.ABSOLUTE_X),
    ]),
    *_group("LSR", "op_lsr_memory", [
        (0x46, _M.ZERO_PAGE), (0x56, _M.ZERO_PAGE_X), (0x4E, _M.ABSOLUTE), (0x5E, _M.ABSOLUTE_X),
    ]),
    *_group("ROL", "op_rol_memory", [
        (0x26, _M.ZERO_PAGE), (0x36, _M.ZERO_PAGE_X), (0x2E, _M.ABSOLUTE), (0x3E, _M.ABSOLUTE_X),
    ]),
    *_group("ROR", "op_ror_memory", [
        (0x66, _M.ZERO_PAGE), (0x76, _M.ZERO_PAGE_X), (0x6E, _M.ABSOLUTE), (0x7E, _M.ABSOLUTE_X),
    ]),
    # INC/DEC memory
    *_group("INC", "op_inc_memory", [
        (0xE6, _M.ZERO_PAGE), (0xF6, _M.ZERO_PAGE_X), (0xEE, _M.ABSOLUTE), (0xFE, _M.ABSOLUTE_X),
    ]),
    *_group("DEC", "op_dec_memory", [
        (0xC6, _M.ZERO_PAGE), (0xD6, _M.ZERO_PAGE_X), (0xCE, _M.ABSOLUTE), (0xDE, _M.ABSOLUTE_X),
    ]),
    # INC/DEC register
    Instruction(0xE8, "INX", _M.NONE, 0, "op_inc_register", register="X"),
    Instruction(0xC8, "INY", _M.NONE, 0, "op_inc_register", register="Y"),
    Instruction(0xCA, "DEX", _M.NONE, 0, "op_dec_register", register="X"),
    Instruction(0x88, "DEY", _M.NONE, 0, "op_dec_register", register="Y"),
    # Transfers
    Instruction(0xAA, "TAX", _M.NONE, 0, "op_tax"),
    Instruction(0xA8, "TAY", _M.NONE, 0, "op_tay"),
    Instruction(0x8A, "TXA", _M.NONE, 0, "op_txa"),
    Instruction(0x98, "TYA", _M.NONE, 0, "op_tya"),
    Instruction(0xBA, "TSX", _M.NONE, 0, "op_tsx"),
    Instruction(0x9A, "TXS", _M.NONE, 0, "op_txs"),
    # Branches
    Instruction(0x10, "BPL", _M.RELATIVE, 1, "op_branch_bpl"),
    Instruction(0x30, "BMI", _M.RELATIVE, 1, "op_branch_bmi"),
    Instruction(0x50, "BVC", _M.RELATIVE, 1, "op_branch_bvc"),
    Instruction(0x70, "BVS", _M.RELATIVE, 1, "op_branch_bvs"),
    Instruction(0x90, "BCC", _M.RELATIVE, 1, "op_branch_bcc"),
    Instruction(0xB0, "BCS", _M.RELATIVE, 1, "op_branch_bcs"),
    Instruction(0xD0, "BNE", _M.RELATIVE, 1, "op_branch_bne"),
    Instruction(0xF0, "BEQ", _M.RELATIVE, 1, "op_branch_beq"),
    # Jumps and subroutines
    Instruction(0x4C, "JMP", _M.ABSOLUTE, 2, "op_jmp"),
    Instruction(0x6C, "JMP", _M.INDIRECT, 2, "op_jmp"),
    Instruction(0x20, "JSR", _M.ABSOLUTE, 2, "op_jsr"),
    Instruction(0x60, "RTS", _M.NONE, 0, "op_rts"),
    Instruction(0x40, "RTI", _M.NONE, 0, "op_rti"),
    # Stack operations
    Instruction(0x48, "PHA", _M.NONE, 0, "op_pha"),
    Instruction(0x08, "PHP", _M.NONE, 0, "op_php"),
    Instruction(0x68, "PLA", _M.NONE, 0, "op_pla"),
    Instruction(0x28, "PLP", _M.NONE, 0, "op_plp"),
    # Flag operations
    Instruction(0x18, "CLC", _M.NONE, 0, "op_clc"),
    Instruction(0x38, "SEC", _M.NONE, 0, "op_sec"),
    Instruction(0x58, "CLI", _M.NONE, 0, "op_cli"),
    Instruction(0x78, "SEI", _M.NONE, 0, "op_sei"),
    Instruction(0xB8, "CLV", _M.NONE, 0, "op_clv"),
    Instruction(0xD8, "CLD", _M.NONE, 0, "op_cld"),
    Instruction(0xF8, "SED", _M.NONE, 0, "op_sed"),
)


OPCODE_TABLE: Sequence[Instruction | None] = build_instruction_table(DEFAULT_INSTRUCTIONS)
