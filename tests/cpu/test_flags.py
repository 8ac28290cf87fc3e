"""Tests for the status register helpers."""

from __future__ import annotations

from pymos6502.cpu.flags import (
    FLAG_C,
    FLAG_I,
    FLAG_N,
    FLAG_U,
    FLAG_V,
    FLAG_Z,
    POWER_ON_STATUS,
    describe,
    get_flag,
    set_flag,
    update_zero_negative,
)


def test_bit_positions_match_hardware_layout() -> None:
    assert FLAG_C == 1 << 0
    assert FLAG_Z == 1 << 1
    assert FLAG_V == 1 << 6
    assert FLAG_N == 1 << 7
    assert POWER_ON_STATUS == 0b0010_0100
    assert POWER_ON_STATUS == FLAG_U | FLAG_I


def test_update_zero_negative_over_every_byte_and_status() -> None:
    other_bits = 0xFF & ~(FLAG_Z | FLAG_N)
    for status in (0x00, 0xFF, POWER_ON_STATUS, FLAG_C | FLAG_V):
        for value in range(0x100):
            updated = update_zero_negative(status, value)

            assert get_flag(updated, FLAG_Z) == (value == 0)
            assert get_flag(updated, FLAG_N) == bool(value & 0x80)
            assert updated & other_bits == status & other_bits


def test_update_zero_negative_masks_wide_results() -> None:
    assert get_flag(update_zero_negative(0x00, 0x100), FLAG_Z)
    assert not get_flag(update_zero_negative(0x00, 0x180), FLAG_Z)
    assert get_flag(update_zero_negative(0x00, 0x180), FLAG_N)


def test_set_flag_only_touches_requested_bit() -> None:
    assert set_flag(0x00, FLAG_C, True) == 0x01
    assert set_flag(0xFF, FLAG_C, False) == 0xFE
    assert set_flag(0x24, FLAG_V, True) == 0x64
    assert set_flag(0x64, FLAG_V, False) == 0x24


def test_describe_renders_flag_letters() -> None:
    assert describe(0x00) == "........"
    assert describe(0xFF) == "NV-BDIZC"
    assert describe(POWER_ON_STATUS) == "..-..I.."
