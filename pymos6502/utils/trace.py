"""Bounded history of executed instructions for post-mortem diagnostics."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List


@dataclass(frozen=True)
class TraceEntry:
    """Registers as they stood after the instruction fetched at ``pc``."""

    pc: int
    opcode: int | None
    mnemonic: str
    a: int
    x: int
    y: int
    sp: int
    status: int
    halted: bool
    note: str = ""

    def markers(self) -> str:
        parts = ["HALT"] if self.halted else []
        if self.note:
            parts.append(self.note)
        return ",".join(parts) or "-"

    def render(self) -> str:
        opcode = "--" if self.opcode is None else f"{self.opcode:02X}"
        return (
            f"pc={self.pc:04X} opcode={opcode} {self.mnemonic or '?':<4} "
            f"A={self.a:02X} X={self.x:02X} Y={self.y:02X} SP={self.sp:02X} P={self.status:02X} "
            f"flags={self.markers()}"
        )


class TraceRecorder:
    """Keeps the last ``capacity`` steps; older ones fall off the front."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._history: Deque[TraceEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._history.maxlen or 0

    def __len__(self) -> int:
        return len(self._history)

    def record_step(
        self,
        pc: int,
        cpu_state,
        opcode: int | None,
        *,
        halted: bool,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        """Append a step; ``cpu_state`` needs ``a``, ``x``, ``y``, ``sp`` and ``status``."""

        self._history.append(
            TraceEntry(
                pc & 0xFFFF,
                None if opcode is None else opcode & 0xFF,
                mnemonic,
                cpu_state.a & 0xFF,
                cpu_state.x & 0xFF,
                cpu_state.y & 0xFF,
                cpu_state.sp & 0xFF,
                cpu_state.status & 0xFF,
                halted,
                note,
            )
        )

    def entries(self, limit: int | None = None) -> Iterator[TraceEntry]:
        """Yield entries oldest first, restricted to the newest ``limit``."""

        skip = 0 if limit is None else max(len(self._history) - max(limit, 0), 0)
        for index, entry in enumerate(self._history):
            if index >= skip:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def format_entries(self, limit: int | None = None) -> List[str]:
        return [entry.render() for entry in self.entries(limit)]
