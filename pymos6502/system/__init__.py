"""6502 system assembly helpers."""

from __future__ import annotations

from .machine import InstructionBudgetExceeded, Machine, MachineConfig, create_machine

__all__ = [
    "InstructionBudgetExceeded",
    "MachineConfig",
    "Machine",
    "create_machine",
]
