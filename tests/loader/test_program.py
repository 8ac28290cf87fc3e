"""Tests for program image loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from pymos6502.bus import Memory
from pymos6502.cpu import MOS6502
from pymos6502.loader import (
    PROGRAM_LOAD_ADDRESS,
    RESET_VECTOR,
    ProgramImage,
    ProgramLoadError,
    install_image,
    install_program,
    read_program,
)


def test_install_program_copies_image_and_sets_reset_vector() -> None:
    memory = Memory()
    program = bytes([0xA9, 0x05, 0x00])

    install_program(memory, program)

    assert memory.snapshot(PROGRAM_LOAD_ADDRESS, len(program)) == program
    assert memory.read16(RESET_VECTOR) == PROGRAM_LOAD_ADDRESS == 0x8000
    assert memory.read(0xFFFC) == 0x00
    assert memory.read(0xFFFD) == 0x80


def test_load_then_reset_round_trip() -> None:
    cpu = MOS6502()
    cpu.load(bytes([0xEA]))
    assert cpu.memory.read16(0xFFFC) == 0x8000

    cpu.reset()
    assert cpu.program_counter == 0x8000


def test_custom_load_address() -> None:
    memory = Memory()
    install_program(memory, bytes([0xEA, 0x00]), load_address=0x0600)

    assert memory.read16(RESET_VECTOR) == 0x0600
    assert memory.read(0x0600) == 0xEA


def test_cpu_load_address_is_configurable() -> None:
    cpu = MOS6502(load_address=0x0600)
    cpu.load_and_run(bytes([0xA9, 0x03, 0x00]))

    assert cpu.accumulator == 0x03
    assert cpu.program_counter == 0x0603


def test_empty_program_halts_immediately() -> None:
    cpu = MOS6502()

    assert cpu.load_and_run(b"") == 1
    assert cpu.halted


def test_oversized_program_is_rejected() -> None:
    memory = Memory()

    with pytest.raises(ProgramLoadError):
        install_program(memory, bytes(0x8001))


def test_program_filling_region_keeps_reset_vector() -> None:
    memory = Memory()
    install_program(memory, bytes([0xEA]) * 0x8000)

    assert memory.read16(RESET_VECTOR) == 0x8000


def test_read_program_from_path(tmp_path: Path) -> None:
    path = tmp_path / "hello.bin"
    path.write_bytes(bytes([0xA9, 0x01, 0x00]))

    image = read_program(path)

    assert image == ProgramImage(bytes([0xA9, 0x01, 0x00]), 0x8000, "hello")
    assert len(image) == 3
    assert image.end_address == 0x8002


def test_read_program_rejects_oversized_file(tmp_path: Path) -> None:
    path = tmp_path / "big.bin"
    path.write_bytes(bytes(0x201))

    with pytest.raises(ProgramLoadError, match="big.bin"):
        read_program(path, load_address=0xFE00)


def test_install_image_uses_image_address() -> None:
    memory = Memory()
    install_image(memory, ProgramImage(bytes([0x00]), load_address=0xC000))

    assert memory.read16(RESET_VECTOR) == 0xC000
