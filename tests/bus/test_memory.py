"""Unit tests for the flat 6502 memory."""

import pytest

from pymos6502.bus import ADDRESS_SPACE, Memory, MemoryError


def test_memory_starts_zero_filled() -> None:
    memory = Memory()

    assert memory.size == ADDRESS_SPACE == 0x10000
    assert memory.snapshot() == bytes(0x10000)


def test_read_write_byte() -> None:
    memory = Memory()
    memory.write(0x1234, 0xAB)

    assert memory.read(0x1234) == 0xAB
    assert memory.read(0x1235) == 0x00


def test_write_masks_value_to_a_byte() -> None:
    memory = Memory()
    memory.write(0x0000, 0x1FF)

    assert memory.read(0x0000) == 0xFF


def test_addresses_wrap_to_sixteen_bits() -> None:
    memory = Memory()
    memory.write(0x10010, 0x5A)

    assert memory.read(0x0010) == 0x5A


def test_word_access_is_little_endian() -> None:
    memory = Memory()
    memory.write16(0x0200, 0xABCD)

    assert memory.read(0x0200) == 0xCD
    assert memory.read(0x0201) == 0xAB
    assert memory.read16(0x0200) == 0xABCD


def test_read16_at_last_address_wraps_high_byte() -> None:
    memory = Memory()
    memory.write(0xFFFF, 0x34)
    memory.write(0x0000, 0x12)

    assert memory.read16(0xFFFF) == 0x1234


def test_write16_at_last_address_wraps_high_byte() -> None:
    memory = Memory()
    memory.write16(0xFFFF, 0xBEEF)

    assert memory.read(0xFFFF) == 0xEF
    assert memory.read(0x0000) == 0xBE


def test_load_image_and_snapshot() -> None:
    memory = Memory()
    memory.load_image(0x8000, bytes([1, 2, 3]))

    assert memory.snapshot(0x7FFF, 5) == bytes([0, 1, 2, 3, 0])


def test_load_image_past_end_raises() -> None:
    memory = Memory()

    with pytest.raises(MemoryError):
        memory.load_image(0xFFFE, bytes([1, 2, 3]))


def test_clear_zero_fills() -> None:
    memory = Memory()
    memory.write(0x4000, 0x77)
    memory.clear()

    assert memory.read(0x4000) == 0x00
    assert len(memory.snapshot()) == 0x10000


def test_size_is_fixed() -> None:
    with pytest.raises(MemoryError):
        Memory(size=0x800)
