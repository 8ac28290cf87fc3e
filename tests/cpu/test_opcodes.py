"""Tests for the declarative instruction table."""

from __future__ import annotations

import pytest

from pymos6502.cpu import MOS6502
from pymos6502.cpu.opcodes import (
    DEFAULT_INSTRUCTIONS,
    OPCODE_TABLE,
    OPERAND_LENGTHS,
    AddressingMode,
    Instruction,
    OpcodeTable,
    build_instruction_table,
)


def test_table_has_one_slot_per_byte() -> None:
    assert len(OPCODE_TABLE) == 0x100
    assert isinstance(OPCODE_TABLE, tuple)


def test_table_covers_official_instruction_set() -> None:
    entries = [entry for entry in OPCODE_TABLE if entry is not None]
    mnemonics = {entry.mnemonic for entry in entries}

    assert len(entries) == 151
    assert len(mnemonics) == 56


def test_entries_sit_at_their_own_opcode() -> None:
    for opcode, entry in enumerate(OPCODE_TABLE):
        if entry is not None:
            assert entry.opcode == opcode


def test_every_handler_exists_on_the_cpu() -> None:
    for instruction in DEFAULT_INSTRUCTIONS:
        assert callable(getattr(MOS6502, instruction.handler, None)), instruction


@pytest.mark.parametrize(
    ("opcode", "mnemonic", "mode", "length"),
    [
        (0x00, "BRK", AddressingMode.NONE, 0),
        (0xA9, "LDA", AddressingMode.IMMEDIATE, 1),
        (0xA5, "LDA", AddressingMode.ZERO_PAGE, 1),
        (0xB5, "LDA", AddressingMode.ZERO_PAGE_X, 1),
        (0xAD, "LDA", AddressingMode.ABSOLUTE, 2),
        (0xBD, "LDA", AddressingMode.ABSOLUTE_X, 2),
        (0xB9, "LDA", AddressingMode.ABSOLUTE_Y, 2),
        (0xA1, "LDA", AddressingMode.INDIRECT_X, 1),
        (0xB1, "LDA", AddressingMode.INDIRECT_Y, 1),
        (0x69, "ADC", AddressingMode.IMMEDIATE, 1),
        (0x71, "ADC", AddressingMode.INDIRECT_Y, 1),
        (0xB6, "LDX", AddressingMode.ZERO_PAGE_Y, 1),
        (0x96, "STX", AddressingMode.ZERO_PAGE_Y, 1),
        (0x6C, "JMP", AddressingMode.INDIRECT, 2),
        (0xD0, "BNE", AddressingMode.RELATIVE, 1),
        (0x0A, "ASL", AddressingMode.NONE, 0),
    ],
)
def test_known_entries(opcode: int, mnemonic: str, mode: AddressingMode, length: int) -> None:
    entry = OPCODE_TABLE[opcode]

    assert entry is not None
    assert entry.mnemonic == mnemonic
    assert entry.mode is mode
    assert entry.length == length


@pytest.mark.parametrize("opcode", [0x02, 0x89, 0x9C, 0xFF])
def test_unofficial_opcodes_are_absent(opcode: int) -> None:
    assert OPCODE_TABLE[opcode] is None


def test_lengths_follow_addressing_mode() -> None:
    for instruction in DEFAULT_INSTRUCTIONS:
        assert instruction.length == OPERAND_LENGTHS[instruction.mode]


def test_instruction_rejects_out_of_range_opcode() -> None:
    with pytest.raises(ValueError):
        Instruction(0x100, "BAD", AddressingMode.NONE, 0, "op_nop")


def test_instruction_rejects_inconsistent_length() -> None:
    with pytest.raises(ValueError, match="operand bytes"):
        Instruction(0xA9, "LDA", AddressingMode.IMMEDIATE, 2, "op_load", register="A")


def test_instruction_is_immutable() -> None:
    entry = OPCODE_TABLE[0xA9]
    with pytest.raises(AttributeError):
        entry.length = 2  # type: ignore[misc]


def test_builder_rejects_duplicates() -> None:
    table = OpcodeTable()
    table.register(Instruction(0xEA, "NOP", AddressingMode.NONE, 0, "op_nop"))

    with pytest.raises(ValueError, match="already registered"):
        table.register(Instruction(0xEA, "NOP", AddressingMode.NONE, 0, "op_nop"))


def test_custom_table_can_be_built() -> None:
    table = build_instruction_table([Instruction(0x42, "NOP", AddressingMode.NONE, 0, "op_nop")])

    assert table[0x42] is not None
    assert sum(entry is not None for entry in table) == 1
