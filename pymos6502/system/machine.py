"""Machine assembly and host-side run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymos6502.bus import Memory
from pymos6502.cpu import MOS6502
from pymos6502.loader import PROGRAM_LOAD_ADDRESS, ProgramImage, install_image
from pymos6502.utils import TraceRecorder, debug_log


class InstructionBudgetExceeded(RuntimeError):
    """Raised when a program does not halt within the configured budget."""

    def __init__(self, budget: int, pc: int) -> None:
        super().__init__(f"instruction budget of {budget} exhausted at ${pc:04X}")
        self.budget = budget
        self.pc = pc


@dataclass
class MachineConfig:
    """Runtime configuration for a 6502 machine."""

    load_address: int = PROGRAM_LOAD_ADDRESS
    max_instructions: Optional[int] = None
    trace_capacity: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.load_address <= 0xFFFF:
            raise ValueError(f"load address {self.load_address:#x} outside the address space")
        if self.max_instructions is not None and self.max_instructions <= 0:
            raise ValueError("max_instructions must be positive")
        if self.trace_capacity < 0:
            raise ValueError("trace_capacity must not be negative")


@dataclass
class Machine:
    """Aggregates the CPU with its memory and diagnostics."""

    config: MachineConfig
    memory: Memory
    cpu: MOS6502
    trace: TraceRecorder | None = None

    def run(self) -> int:
        """Run from the current PC, enforcing the configured budget."""

        budget = self.config.max_instructions
        if budget is None:
            return self.cpu.run()

        def _check_budget(cpu: MOS6502) -> None:
            if cpu.instruction_count >= budget:
                raise InstructionBudgetExceeded(budget, cpu.state.pc)

        return self.cpu.run(_check_budget)

    def run_program(self, program: bytes | ProgramImage) -> int:
        """Load ``program``, reset the CPU and run it to the halt opcode."""

        if isinstance(program, ProgramImage):
            install_image(self.memory, program, self.cpu.RESET_VECTOR)
        else:
            self.cpu.load(program)
        self.cpu.reset()
        executed = self.run()
        debug_log("machine", "halted after %d instructions pc=%04x", executed, self.cpu.state.pc)
        return executed


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a 6502 machine with the requested configuration."""

    config = config or MachineConfig()
    memory = Memory()
    trace = TraceRecorder(config.trace_capacity) if config.trace_capacity else None
    cpu = MOS6502(memory, load_address=config.load_address, trace=trace)
    return Machine(config=config, memory=memory, cpu=cpu, trace=trace)
