"""Flat 64 KiB memory for the 6502 core.

Every address handed to this module is clamped to the 16-bit address space,
so no out-of-range access is reachable through ``read``/``write``. Multi-byte
accesses are little-endian and wrap from ``0xFFFF`` back to ``0x0000``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ADDRESS_SPACE = 0x10000


def _mask16(value: int) -> int:
    """Clamp ``value`` to the 16-bit address space of the 6502."""

    return value & 0xFFFF


class MemoryError(Exception):
    """Raised when memory is used outside of its documented contract."""


@dataclass
class Memory:
    """Zero-filled byte store covering the whole address space."""

    size: int = ADDRESS_SPACE
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size != ADDRESS_SPACE:
            raise MemoryError(f"memory size must be {ADDRESS_SPACE:#x}, got {self.size:#x}")
        self._data = bytearray(self.size)

    def read(self, address: int) -> int:
        return self._data[_mask16(address)]

    def write(self, address: int, value: int) -> None:
        self._data[_mask16(address)] = value & 0xFF

    def read16(self, address: int) -> int:
        low = self.read(address)
        high = self.read(_mask16(address + 1))
        return (high << 8) | low

    def write16(self, address: int, value: int) -> None:
        self.write(address, value & 0xFF)
        self.write(_mask16(address + 1), (value >> 8) & 0xFF)

    def load_image(self, start: int, data: bytes) -> None:
        """Copy ``data`` verbatim into memory beginning at ``start``."""

        start = _mask16(start)
        end = start + len(data)
        if end > self.size:
            raise MemoryError(
                f"image of {len(data)} bytes at {start:#06x} runs past the end of memory")
        self._data[start:end] = data

    def snapshot(self, start: int = 0, length: int = ADDRESS_SPACE) -> bytes:
        start = _mask16(start)
        return bytes(self._data[start:start + length])

    def clear(self) -> None:
        self._data[:] = bytes(self.size)
