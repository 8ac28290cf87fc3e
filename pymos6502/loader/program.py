"""Raw program images and their installation into memory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pymos6502.bus import ADDRESS_SPACE, Memory

PROGRAM_LOAD_ADDRESS = 0x8000
RESET_VECTOR = 0xFFFC


class ProgramLoadError(RuntimeError):
    """Raised when a program image cannot be placed in memory."""


@dataclass
class ProgramImage:
    """A byte sequence together with the address it is meant to run from."""

    data: bytes
    load_address: int = PROGRAM_LOAD_ADDRESS
    name: str = ""

    def __len__(self) -> int:
        return len(self.data)

    @property
    def end_address(self) -> int:
        return self.load_address + len(self.data) - 1


def install_program(
    memory: Memory,
    data: bytes,
    load_address: int = PROGRAM_LOAD_ADDRESS,
    reset_vector: int = RESET_VECTOR,
) -> None:
    """Copy ``data`` to ``load_address`` and point the reset vector at it."""

    if not 0 <= load_address < ADDRESS_SPACE:
        raise ProgramLoadError(f"load address {load_address:#x} outside the address space")
    if load_address + len(data) > ADDRESS_SPACE:
        raise ProgramLoadError(
            f"program of {len(data)} bytes does not fit at {load_address:#06x}")
    memory.load_image(load_address, bytes(data))
    memory.write16(reset_vector, load_address)


def install_image(memory: Memory, image: ProgramImage, reset_vector: int = RESET_VECTOR) -> None:
    install_program(memory, image.data, image.load_address, reset_vector)


def read_program(path: Path, load_address: int = PROGRAM_LOAD_ADDRESS) -> ProgramImage:
    """Read a raw binary program image from the filesystem."""

    with path.open("rb") as handle:
        data = handle.read()
    if load_address + len(data) > ADDRESS_SPACE:
        raise ProgramLoadError(
            f"{path.name}: {len(data)} bytes do not fit at {load_address:#06x}")
    return ProgramImage(data=data, load_address=load_address, name=path.stem)
