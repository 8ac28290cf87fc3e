"""Status register layout and the shared zero/negative flag updater."""

from __future__ import annotations

FLAG_C = 0x01  # carry
FLAG_Z = 0x02  # zero
FLAG_I = 0x04  # interrupt disable
FLAG_D = 0x08  # decimal
FLAG_B = 0x10  # break (only meaningful in pushed copies)
FLAG_U = 0x20  # unused, reads back as 1
FLAG_V = 0x40  # overflow
FLAG_N = 0x80  # negative

POWER_ON_STATUS = FLAG_U | FLAG_I


def get_flag(status: int, flag: int) -> bool:
    return (status & flag) != 0


def set_flag(status: int, flag: int, enabled: bool) -> int:
    if enabled:
        return (status | flag) & 0xFF
    return status & ~flag & 0xFF


def update_zero_negative(status: int, result: int) -> int:
    """Return ``status`` with Z and N derived from the 8-bit ``result``.

    Every other bit of ``status`` passes through unchanged.
    """

    result &= 0xFF
    status = set_flag(status, FLAG_Z, result == 0)
    return set_flag(status, FLAG_N, (result & 0x80) != 0)


def describe(status: int) -> str:
    """Render ``status`` as the conventional ``NV-BDIZC`` string."""

    letters = "NV-BDIZC"
    return "".join(
        letter if status & (0x80 >> index) else "."
        for index, letter in enumerate(letters)
    )
