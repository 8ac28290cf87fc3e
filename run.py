"""Command-line entry point for the 6502 emulator core.

Loads a raw binary program at the load address, points the reset vector at
it, runs until the halt opcode (``0x00``) and prints the final register file.
Set ``MOS6502_DEBUG=cpu`` (or ``all``) for per-instruction logging.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pymos6502.cpu import CPUError
from pymos6502.cpu.flags import describe
from pymos6502.loader import PROGRAM_LOAD_ADDRESS, ProgramLoadError, read_program
from pymos6502.system import InstructionBudgetExceeded, MachineConfig, create_machine


def _address(value: str) -> int:
    try:
        address = int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid address: {value}") from exc
    if not 0 <= address <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"address out of range: {value}")
    return address


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="Run a raw 6502 program image until it halts",
    )
    parser.add_argument(
        "program",
        type=Path,
        help="Path to the raw binary program image",
    )
    parser.add_argument(
        "--load-address",
        type=_address,
        default=PROGRAM_LOAD_ADDRESS,
        help="Address the image is copied to (default: 0x8000)",
    )
    parser.add_argument(
        "--max-instructions",
        type=int,
        default=None,
        help="Abort if the program has not halted after this many instructions",
    )
    parser.add_argument(
        "--trace",
        type=int,
        default=0,
        metavar="N",
        help="Print the last N executed instructions",
    )
    return parser


def format_registers(cpu) -> str:
    state = cpu.snapshot()
    return (
        f"A={state.a:02X} X={state.x:02X} Y={state.y:02X} "
        f"SP={state.sp:02X} PC={state.pc:04X} P={state.status:02X} [{describe(state.status)}]"
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.program.exists():
        parser.error(f"Program file not found: {args.program}")
    if args.max_instructions is not None and args.max_instructions <= 0:
        parser.error("--max-instructions must be positive")
    if args.trace < 0:
        parser.error("--trace must not be negative")

    config = MachineConfig(
        load_address=args.load_address,
        max_instructions=args.max_instructions,
        trace_capacity=args.trace,
    )
    machine = create_machine(config)
    try:
        image = read_program(args.program, args.load_address)
        executed = machine.run_program(image)
    except (ProgramLoadError, CPUError, InstructionBudgetExceeded) as exc:
        if machine.trace is not None:
            for line in machine.trace.format_entries():
                print(line)
        parser.exit(1, f"run.py: {exc}\n")

    if machine.trace is not None:
        for line in machine.trace.format_entries():
            print(line)
    print(f"halted after {executed} instructions")
    print(format_registers(machine.cpu))
    return 0


if __name__ == "__main__":
    sys.exit(main())
