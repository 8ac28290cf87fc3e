"""MOS 6502 register file and fetch-decode-execute engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Optional, Sequence

from pymos6502.bus import Memory
from pymos6502.loader import PROGRAM_LOAD_ADDRESS, RESET_VECTOR, install_program
from pymos6502.utils import TraceRecorder, debug_enabled, debug_log

from .addressing import resolve_address
from .errors import CPUError, IllegalOpcodeError
from .flags import (
    FLAG_B,
    FLAG_C,
    FLAG_D,
    FLAG_I,
    FLAG_N,
    FLAG_U,
    FLAG_V,
    FLAG_Z,
    POWER_ON_STATUS,
    get_flag,
    set_flag,
    update_zero_negative,
)
from .opcodes import AddressingMode, Instruction, OPCODE_TABLE

STACK_BASE = 0x0100
STACK_RESET = 0xFD


@dataclass
class CPUState:
    """Snapshot of the 6502 register file."""

    a: int = 0x00
    x: int = 0x00
    y: int = 0x00
    status: int = POWER_ON_STATUS
    pc: int = 0x0000
    sp: int = STACK_RESET

    def clone(self) -> "CPUState":
        return CPUState(self.a, self.x, self.y, self.status, self.pc, self.sp)


StepCallback = Callable[["MOS6502"], None]


@dataclass
class MOS6502:
    """Instruction-level 6502 interpreter over a flat 64 KiB memory."""

    memory: Memory = field(default_factory=Memory)
    instruction_table: Sequence[Instruction | None] = field(default=OPCODE_TABLE)
    load_address: int = PROGRAM_LOAD_ADDRESS
    trace: Optional[TraceRecorder] = None

    RESET_VECTOR: ClassVar[int] = RESET_VECTOR

    state: CPUState = field(default_factory=CPUState)
    halted: bool = False
    instruction_count: int = 0
    _jump_target: int | None = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # Host interface

    def load(self, program: bytes) -> None:
        """Copy ``program`` into the load region and install the reset vector."""

        install_program(self.memory, program, self.load_address, self.RESET_VECTOR)
        if debug_enabled("loader"):
            debug_log("loader", "loaded %d bytes at %04x", len(program), self.load_address)

    def reset(self) -> None:
        """Restore power-on registers and load the reset vector into PC."""

        self.state = CPUState()
        self.halted = False
        self.instruction_count = 0
        self._jump_target = None
        self.state.pc = self.memory.read16(self.RESET_VECTOR)
        if debug_enabled("cpu"):
            debug_log("cpu", "reset pc=%04x", self.state.pc)

    def run(self, callback: StepCallback | None = None) -> int:
        """Execute until the halt opcode and return the number of instructions run.

        ``callback`` is invoked with the CPU before every instruction; raising
        from it aborts the run.
        """

        executed = 0
        while not self.halted:
            if callback is not None:
                callback(self)
            self.step()
            executed += 1
        return executed

    def load_and_run(self, program: bytes, callback: StepCallback | None = None) -> int:
        self.load(program)
        self.reset()
        return self.run(callback)

    def step(self) -> Instruction | None:
        """Execute a single instruction and return its table entry."""

        if self.halted:
            return None

        pc_before = self.state.pc
        opcode = self._read_byte(pc_before)
        instruction = self._decode(opcode, pc_before)
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%02x %s", pc_before, opcode, instruction.mnemonic)

        self.state.pc = (pc_before + 1) & 0xFFFF
        self._jump_target = None
        try:
            handler(instruction)
        except CPUError:
            self.state.pc = pc_before
            raise

        jumped = self._jump_target is not None
        if jumped:
            self.state.pc = self._jump_target
        elif not self.halted:
            self.state.pc = (self.state.pc + instruction.length) & 0xFFFF
        self.instruction_count += 1

        if self.trace is not None:
            taken = jumped and instruction.mode is AddressingMode.RELATIVE
            self.trace.record_step(
                pc_before,
                self.state,
                opcode,
                halted=self.halted,
                mnemonic=instruction.mnemonic,
                note="taken" if taken else "",
            )
        return instruction

    # ------------------------------------------------------------------
    # Read-only inspection

    @property
    def accumulator(self) -> int:
        return self.state.a

    @property
    def index_x(self) -> int:
        return self.state.x

    @property
    def index_y(self) -> int:
        return self.state.y

    @property
    def status(self) -> int:
        return self.state.status

    @property
    def program_counter(self) -> int:
        return self.state.pc

    @property
    def stack_pointer(self) -> int:
        return self.state.sp

    def flag(self, flag: int) -> bool:
        return get_flag(self.state.status, flag)

    def snapshot(self) -> CPUState:
        return self.state.clone()

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_brk(self, _: Instruction) -> None:
        """Halt the interpreter loop."""

        self.halted = True
        if debug_enabled("cpu"):
            debug_log("cpu", "halt at pc=%04x", (self.state.pc - 1) & 0xFFFF)

    def op_nop(self, _: Instruction) -> None:
        """No operation."""

    def op_load(self, instruction: Instruction) -> None:
        register = self._require_register(instruction)
        value = self._read_operand(instruction)
        self._set_register(register, value)
        self._update_nz_flags(value)

    def op_store(self, instruction: Instruction) -> None:
        register = self._require_register(instruction)
        address = self._resolve(instruction.mode)
        self._write_byte(address, self._get_register(register))

    def op_adc(self, instruction: Instruction) -> None:
        self._add_with_carry(self._read_operand(instruction))

    def op_sbc(self, instruction: Instruction) -> None:
        self._add_with_carry(self._read_operand(instruction) ^ 0xFF)

    def op_and(self, instruction: Instruction) -> None:
        self.state.a &= self._read_operand(instruction)
        self._update_nz_flags(self.state.a)

    def op_ora(self, instruction: Instruction) -> None:
        self.state.a |= self._read_operand(instruction)
        self._update_nz_flags(self.state.a)

    def op_eor(self, instruction: Instruction) -> None:
        self.state.a ^= self._read_operand(instruction)
        self._update_nz_flags(self.state.a)

    def op_compare(self, instruction: Instruction) -> None:
        register = self._require_register(instruction)
        operand = self._read_operand(instruction)
        value = self._get_register(register)
        self._set_flag(FLAG_C, value >= operand)
        self._update_nz_flags((value - operand) & 0xFF)

    def op_bit(self, instruction: Instruction) -> None:
        operand = self._read_operand(instruction)
        self._set_flag(FLAG_Z, (self.state.a & operand) == 0)
        self._set_flag(FLAG_V, get_flag(operand, FLAG_V))
        self._set_flag(FLAG_N, get_flag(operand, FLAG_N))

    def op_asl_accumulator(self, _: Instruction) -> None:
        self.state.a = self._op_asl(self.state.a)

    def op_lsr_accumulator(self, _: Instruction) -> None:
        self.state.a = self._op_lsr(self.state.a)

    def op_rol_accumulator(self, _: Instruction) -> None:
        self.state.a = self._op_rol(self.state.a)

    def op_ror_accumulator(self, _: Instruction) -> None:
        self.state.a = self._op_ror(self.state.a)

    def op_asl_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_asl)

    def op_lsr_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_lsr)

    def op_rol_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_rol)

    def op_ror_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_ror)

    def op_inc_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_inc)

    def op_dec_memory(self, instruction: Instruction) -> None:
        self._modify_memory(instruction, self._op_dec)

    def op_inc_register(self, instruction: Instruction) -> None:
        register = self._require_register(instruction)
        self._set_register(register, self._op_inc(self._get_register(register)))

    def op_dec_register(self, instruction: Instruction) -> None:
        register = self._require_register(instruction)
        self._set_register(register, self._op_dec(self._get_register(register)))

    def op_tax(self, _: Instruction) -> None:
        self.state.x = self.state.a
        self._update_nz_flags(self.state.x)

    def op_tay(self, _: Instruction) -> None:
        self.state.y = self.state.a
        self._update_nz_flags(self.state.y)

    def op_txa(self, _: Instruction) -> None:
        self.state.a = self.state.x
        self._update_nz_flags(self.state.a)

    def op_tya(self, _: Instruction) -> None:
        self.state.a = self.state.y
        self._update_nz_flags(self.state.a)

    def op_tsx(self, _: Instruction) -> None:
        self.state.x = self.state.sp
        self._update_nz_flags(self.state.x)

    def op_txs(self, _: Instruction) -> None:
        self.state.sp = self.state.x

    def op_branch_bpl(self, instruction: Instruction) -> None:
        self._branch_if(instruction, not self._get_flag(FLAG_N))

    def op_branch_bmi(self, instruction: Instruction) -> None:
        self._branch_if(instruction, self._get_flag(FLAG_N))

    def op_branch_bvc(self, instruction: Instruction) -> None:
        self._branch_if(instruction, not self._get_flag(FLAG_V))

    def op_branch_bvs(self, instruction: Instruction) -> None:
        self._branch_if(instruction, self._get_flag(FLAG_V))

    def op_branch_bcc(self, instruction: Instruction) -> None:
        self._branch_if(instruction, not self._get_flag(FLAG_C))

    def op_branch_bcs(self, instruction: Instruction) -> None:
        self._branch_if(instruction, self._get_flag(FLAG_C))

    def op_branch_bne(self, instruction: Instruction) -> None:
        self._branch_if(instruction, not self._get_flag(FLAG_Z))

    def op_branch_beq(self, instruction: Instruction) -> None:
        self._branch_if(instruction, self._get_flag(FLAG_Z))

    def op_jmp(self, instruction: Instruction) -> None:
        self._jump(self._resolve(instruction.mode))

    def op_jsr(self, instruction: Instruction) -> None:
        target = self._resolve(instruction.mode)
        # The pushed address is the last byte of the JSR, not the next opcode.
        self._push_word((self.state.pc + instruction.length - 1) & 0xFFFF)
        self._jump(target)

    def op_rts(self, _: Instruction) -> None:
        self._jump((self._pull_word() + 1) & 0xFFFF)

    def op_rti(self, _: Instruction) -> None:
        self._apply_pulled_status(self._pull_byte())
        self._jump(self._pull_word())

    def op_pha(self, _: Instruction) -> None:
        self._push_byte(self.state.a)

    def op_php(self, _: Instruction) -> None:
        self._push_byte(self.state.status | FLAG_B | FLAG_U)

    def op_pla(self, _: Instruction) -> None:
        self.state.a = self._pull_byte()
        self._update_nz_flags(self.state.a)

    def op_plp(self, _: Instruction) -> None:
        self._apply_pulled_status(self._pull_byte())

    def op_clc(self, _: Instruction) -> None:
        self._set_flag(FLAG_C, False)

    def op_sec(self, _: Instruction) -> None:
        self._set_flag(FLAG_C, True)

    def op_cli(self, _: Instruction) -> None:
        self._set_flag(FLAG_I, False)

    def op_sei(self, _: Instruction) -> None:
        self._set_flag(FLAG_I, True)

    def op_clv(self, _: Instruction) -> None:
        self._set_flag(FLAG_V, False)

    def op_cld(self, _: Instruction) -> None:
        self._set_flag(FLAG_D, False)

    def op_sed(self, _: Instruction) -> None:
        self._set_flag(FLAG_D, True)

    # ------------------------------------------------------------------
    # Memory helpers

    def _read_byte(self, address: int) -> int:
        return self.memory.read(address & 0xFFFF)

    def _write_byte(self, address: int, value: int) -> None:
        self.memory.write(address & 0xFFFF, value & 0xFF)

    def _resolve(self, mode: AddressingMode) -> int:
        return resolve_address(mode, self.state, self.memory)

    def _read_operand(self, instruction: Instruction) -> int:
        return self._read_byte(self._resolve(instruction.mode))

    def _modify_memory(self, instruction: Instruction, mutate: Callable[[int], int]) -> int:
        address = self._resolve(instruction.mode)
        result = mutate(self._read_byte(address)) & 0xFF
        self._write_byte(address, result)
        return result

    def _decode(self, opcode: int, pc: int) -> Instruction:
        instruction = self.instruction_table[opcode]
        if instruction is None:
            if debug_enabled("cpu"):
                debug_log("cpu", "illegal opcode %02x at %04x", opcode, pc)
            raise IllegalOpcodeError(opcode, pc)
        return instruction

    # ------------------------------------------------------------------
    # Control-flow helpers

    def _jump(self, address: int) -> None:
        self._jump_target = address & 0xFFFF

    def _branch_if(self, instruction: Instruction, condition: bool) -> None:
        if condition:
            self._jump(self._resolve(instruction.mode))

    # ------------------------------------------------------------------
    # Stack helpers

    def _push_byte(self, value: int) -> None:
        self._write_byte(STACK_BASE | self.state.sp, value)
        self.state.sp = (self.state.sp - 1) & 0xFF

    def _pull_byte(self) -> int:
        self.state.sp = (self.state.sp + 1) & 0xFF
        return self._read_byte(STACK_BASE | self.state.sp)

    def _push_word(self, value: int) -> None:
        self._push_byte((value >> 8) & 0xFF)
        self._push_byte(value & 0xFF)

    def _pull_word(self) -> int:
        low = self._pull_byte()
        high = self._pull_byte()
        return (high << 8) | low

    def _apply_pulled_status(self, value: int) -> None:
        self.state.status = (value & ~FLAG_B | FLAG_U) & 0xFF

    # ------------------------------------------------------------------
    # Register helpers

    def _get_register(self, which: str) -> int:
        if which == "A":
            return self.state.a
        if which == "X":
            return self.state.x
        if which == "Y":
            return self.state.y
        raise CPUError(f"unknown register {which}")

    def _set_register(self, which: str, value: int) -> None:
        value &= 0xFF
        if which == "A":
            self.state.a = value
        elif which == "X":
            self.state.x = value
        elif which == "Y":
            self.state.y = value
        else:
            raise CPUError(f"unknown register {which}")

    def _require_register(self, instruction: Instruction) -> str:
        if instruction.register is None:
            raise CPUError(f"instruction {instruction.mnemonic} missing register metadata")
        return instruction.register

    # ------------------------------------------------------------------
    # Flag helpers

    def _set_flag(self, flag: int, enabled: bool) -> None:
        self.state.status = set_flag(self.state.status, flag, enabled)

    def _get_flag(self, flag: int) -> bool:
        return get_flag(self.state.status, flag)

    def _update_nz_flags(self, value: int) -> None:
        self.state.status = update_zero_negative(self.state.status, value)

    def _add_with_carry(self, operand: int) -> None:
        a = self.state.a & 0xFF
        operand &= 0xFF
        carry = 1 if self._get_flag(FLAG_C) else 0
        total = a + operand + carry
        result = total & 0xFF

        self._set_flag(FLAG_C, total > 0xFF)
        overflow = (~(a ^ operand) & (a ^ result) & 0x80) != 0
        self._set_flag(FLAG_V, overflow)
        self.state.a = result
        self._update_nz_flags(result)

    # ------------------------------------------------------------------
    # 8-bit operation helpers

    def _op_inc(self, value: int) -> int:
        result = (value + 1) & 0xFF
        self._update_nz_flags(result)
        return result

    def _op_dec(self, value: int) -> int:
        result = (value - 1) & 0xFF
        self._update_nz_flags(result)
        return result

    def _op_asl(self, value: int) -> int:
        result = (value << 1) & 0xFF
        self._set_flag(FLAG_C, (value & 0x80) != 0)
        self._update_nz_flags(result)
        return result

    def _op_lsr(self, value: int) -> int:
        result = value >> 1
        self._set_flag(FLAG_C, (value & 0x01) != 0)
        self._update_nz_flags(result)
        return result

    def _op_rol(self, value: int) -> int:
        carry_in = 1 if self._get_flag(FLAG_C) else 0
        result = ((value << 1) | carry_in) & 0xFF
        self._set_flag(FLAG_C, (value & 0x80) != 0)
        self._update_nz_flags(result)
        return result

    def _op_ror(self, value: int) -> int:
        carry_in = 0x80 if self._get_flag(FLAG_C) else 0
        result = (value >> 1) | carry_in
        self._set_flag(FLAG_C, (value & 0x01) != 0)
        self._update_nz_flags(result)
        return result
