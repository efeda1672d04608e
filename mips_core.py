# mips_core.py
import enum
import logging
from typing import List, Dict, Any, Optional

from mips_decode import DecodedInstruction, decode, format_decoded
from mips_errors import IllegalInstruction, MemoryFault, SimulatorFault
from mips_state import ProcessorState, RA, WORD_BYTES
import mips_word as w

logger = logging.getLogger(__name__)

DEFAULT_RUN_LIMIT = 10000


class RunState(enum.Enum):
    RUNNING = 'running'
    HALTED = 'halted'


class MipsCore:
    _OPCODE_HANDLERS = {
        0x00: '_exec_special',
        0x02: '_exec_j',
        0x03: '_exec_jal',
        0x04: '_exec_beq',
        0x05: '_exec_bne',
        0x06: '_exec_blez',
        0x07: '_exec_bgtz',
        0x08: '_exec_addi',
        0x09: '_exec_addi',
        0x0A: '_exec_slti',
        0x0B: '_exec_sltiu',
        0x0C: '_exec_andi',
        0x0D: '_exec_ori',
        0x0E: '_exec_xori',
        0x0F: '_exec_lui',
        0x20: '_exec_lb',
        0x21: '_exec_lh',
        0x23: '_exec_lw',
        0x24: '_exec_lbu',
        0x25: '_exec_lhu',
        0x28: '_exec_sb',
        0x29: '_exec_sh',
        0x2B: '_exec_sw',
    }
    _FUNCT_HANDLERS = {
        0x00: '_exec_sll',
        0x02: '_exec_srl',
        0x03: '_exec_sra',
        0x04: '_exec_sllv',
        0x06: '_exec_srlv',
        0x07: '_exec_srav',
        0x08: '_exec_jr',
        0x09: '_exec_jalr',
        0x10: '_exec_mfhi',
        0x11: '_exec_mthi',
        0x12: '_exec_mflo',
        0x13: '_exec_mtlo',
        0x18: '_exec_mult',
        0x19: '_exec_multu',
        0x1A: '_exec_div',
        0x1B: '_exec_divu',
        0x20: '_exec_add',
        0x21: '_exec_add',
        0x22: '_exec_sub',
        0x23: '_exec_sub',
        0x24: '_exec_and',
        0x25: '_exec_or',
        0x26: '_exec_xor',
        0x27: '_exec_nor',
        0x2A: '_exec_slt',
        0x2B: '_exec_sltu',
    }

    def __init__(self, instr_words: List[int], state: Optional[ProcessorState] = None):
        self.program = [x & w.MASK32 for x in instr_words]
        self._boot(state if state is not None else ProcessorState())
        logger.info('Loaded %d instructions (%d bytes)', len(self.program), self.state.program_end)

    def _boot(self, state: ProcessorState) -> None:
        self.state = state
        self.state.load_program(self.program)
        self.status = RunState.RUNNING
        self.fault: Optional[SimulatorFault] = None
        self.step_count = 0
        self._mem_access: Optional[Dict[str, Any]] = None

    @property
    def halted(self) -> bool:
        return self.status is RunState.HALTED

    def reset(self) -> None:
        self._boot(ProcessorState())

    def step(self) -> RunState:
        if self.halted:
            return self.status
        st = self.state
        pc = st.pc
        instr = st.fetch(pc)
        if instr is None:
            if pc == st.program_end:
                logger.info('Program finished at pc=0x%08x after %d steps', pc, self.step_count)
                self.status = RunState.HALTED
                return self.status
            self._halt_with(MemoryFault('no instruction at address', pc=pc))
        next_pc = w.add(pc, WORD_BYTES)
        dec = decode(instr)
        logger.debug('pc=0x%08x word=0x%08x %s', pc, instr, format_decoded(dec))
        self._mem_access = None
        try:
            target = self._dispatch(dec, next_pc)
        except SimulatorFault as e:
            if e.pc is None:
                e.pc = pc
            if e.word is None:
                e.word = instr
            self._halt_with(e)
        if target is not None:
            logger.debug('Control transfer to 0x%08x', target)
            st.pc = target
        else:
            st.pc = next_pc
        st.refresh_zero()
        self.step_count += 1
        return self.status

    def run(self, max_steps: Optional[int] = None) -> RunState:
        steps = 0
        while not self.halted:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
        return self.status

    def trace_step(self) -> Dict[str, Any]:
        if self.halted:
            return {'status': 'halted'}
        pc = self.state.pc
        instr = self.state.fetch(pc)
        action: Dict[str, Any] = {'pc': pc, 'instr': instr}
        if instr is not None:
            action['decoded'] = decode(instr)
        try:
            self.step()
        except SimulatorFault as e:
            action['status'] = 'fault'
            action['fault'] = str(e)
            return action
        if self.halted:
            action['status'] = 'finished'
            return action
        if self._mem_access is not None:
            action['mem_access'] = self._mem_access
        action['status'] = 'ok'
        action['step'] = self.step_count
        action['regs_snapshot'] = self.state.registers.copy()
        return action

    def run_n(self, n: int) -> List[Dict[str, Any]]:
        actions = []
        for _ in range(n):
            if self.halted:
                break
            actions.append(self.trace_step())
        return actions

    def _halt_with(self, fault: SimulatorFault) -> None:
        self.status = RunState.HALTED
        self.fault = fault
        logger.error('Halted on %s: %s', fault.kind, fault)
        raise fault

    def _dispatch(self, d: DecodedInstruction, next_pc: int) -> Optional[int]:
        handler_name = self._OPCODE_HANDLERS.get(d.opcode)
        if handler_name is None:
            raise IllegalInstruction(f'undefined opcode 0x{d.opcode:02x}')
        return getattr(self, handler_name)(d, next_pc)

    def _exec_special(self, d: DecodedInstruction, next_pc: int) -> Optional[int]:
        handler_name = self._FUNCT_HANDLERS.get(d.funct)
        if handler_name is None:
            raise IllegalInstruction(f'undefined funct 0x{d.funct:02x}')
        return getattr(self, handler_name)(d, next_pc)

    def _rs(self, d: DecodedInstruction) -> int:
        return self.state.read_reg(d.rs)

    def _rt(self, d: DecodedInstruction) -> int:
        return self.state.read_reg(d.rt)

    def _simm(self, d: DecodedInstruction) -> int:
        return w.sign_extend(d.imm16, 16)

    def _uimm(self, d: DecodedInstruction) -> int:
        return w.zero_extend(d.imm16, 16)

    # branches and jumps

    def _branch_target(self, d: DecodedInstruction, next_pc: int) -> int:
        return w.add(next_pc, w.sign_extend(d.imm16 << 2, 18))

    def _exec_beq(self, d, next_pc):
        if self._rs(d) == self._rt(d):
            return self._branch_target(d, next_pc)
        return None

    def _exec_bne(self, d, next_pc):
        if self._rs(d) != self._rt(d):
            return self._branch_target(d, next_pc)
        return None

    def _exec_blez(self, d, next_pc):
        if w.compare_signed(self._rs(d), 0) <= 0:
            return self._branch_target(d, next_pc)
        return None

    def _exec_bgtz(self, d, next_pc):
        if w.compare_signed(self._rs(d), 0) > 0:
            return self._branch_target(d, next_pc)
        return None

    def _exec_j(self, d, next_pc):
        return w.logical_shift_left(d.address26, 2)

    def _exec_jal(self, d, next_pc):
        self.state.write_reg(RA, next_pc)
        return w.logical_shift_left(d.address26, 2)

    def _exec_jr(self, d, next_pc):
        return self._rs(d)

    def _exec_jalr(self, d, next_pc):
        target = self._rs(d)
        self.state.write_reg(d.rd, next_pc)
        return target

    # immediate arithmetic / logic

    def _exec_addi(self, d, next_pc):
        self.state.write_reg(d.rt, w.add(self._rs(d), self._simm(d)))

    def _exec_slti(self, d, next_pc):
        self.state.write_reg(d.rt, 1 if w.compare_signed(self._rs(d), self._simm(d)) < 0 else 0)

    def _exec_sltiu(self, d, next_pc):
        self.state.write_reg(d.rt, 1 if w.compare_unsigned(self._rs(d), self._simm(d)) < 0 else 0)

    def _exec_andi(self, d, next_pc):
        self.state.write_reg(d.rt, w.bitwise_and(self._rs(d), self._uimm(d)))

    def _exec_ori(self, d, next_pc):
        self.state.write_reg(d.rt, w.bitwise_or(self._rs(d), self._uimm(d)))

    def _exec_xori(self, d, next_pc):
        self.state.write_reg(d.rt, w.bitwise_xor(self._rs(d), self._uimm(d)))

    def _exec_lui(self, d, next_pc):
        self.state.write_reg(d.rt, w.logical_shift_left(self._uimm(d), 16))

    # loads / stores

    def _addr(self, d: DecodedInstruction) -> int:
        return w.add(self._rs(d), self._simm(d))

    def _load(self, d, value):
        addr = self._addr(d)
        self.state.write_reg(d.rt, value(addr))
        self._mem_access = {'type': 'read', 'addr': addr, 'value': self.state.read_reg(d.rt)}

    def _store(self, d, store, size):
        addr = self._addr(d)
        value = self._rt(d) & ((1 << (8 * size)) - 1)
        store(addr, value)
        self._mem_access = {'type': 'write', 'addr': addr, 'value': value}

    def _exec_lb(self, d, next_pc):
        self._load(d, lambda a: self.state.load_byte(a, signed=True))

    def _exec_lh(self, d, next_pc):
        self._load(d, lambda a: self.state.load_half(a, signed=True))

    def _exec_lw(self, d, next_pc):
        self._load(d, self.state.load_word)

    def _exec_lbu(self, d, next_pc):
        self._load(d, lambda a: self.state.load_byte(a, signed=False))

    def _exec_lhu(self, d, next_pc):
        self._load(d, lambda a: self.state.load_half(a, signed=False))

    def _exec_sb(self, d, next_pc):
        self._store(d, self.state.store_byte, 1)

    def _exec_sh(self, d, next_pc):
        self._store(d, self.state.store_half, 2)

    def _exec_sw(self, d, next_pc):
        self._store(d, self.state.store_word, 4)

    # R-type shifts

    def _exec_sll(self, d, next_pc):
        self.state.write_reg(d.rd, w.logical_shift_left(self._rt(d), d.shamt))

    def _exec_srl(self, d, next_pc):
        self.state.write_reg(d.rd, w.logical_shift_right(self._rt(d), d.shamt))

    def _exec_sra(self, d, next_pc):
        self.state.write_reg(d.rd, w.arithmetic_shift_right(self._rt(d), d.shamt))

    def _exec_sllv(self, d, next_pc):
        self.state.write_reg(d.rd, w.logical_shift_left(self._rt(d), self._rs(d) & 0x1F))

    def _exec_srlv(self, d, next_pc):
        self.state.write_reg(d.rd, w.logical_shift_right(self._rt(d), self._rs(d) & 0x1F))

    def _exec_srav(self, d, next_pc):
        self.state.write_reg(d.rd, w.arithmetic_shift_right(self._rt(d), self._rs(d) & 0x1F))

    # HI/LO

    def _exec_mfhi(self, d, next_pc):
        self.state.write_reg(d.rd, self.state.hi)

    def _exec_mthi(self, d, next_pc):
        self.state.hi = self._rs(d)

    def _exec_mflo(self, d, next_pc):
        self.state.write_reg(d.rd, self.state.lo)

    def _exec_mtlo(self, d, next_pc):
        self.state.lo = self._rs(d)

    def _exec_mult(self, d, next_pc):
        self.state.hi, self.state.lo = w.multiply_signed(self._rs(d), self._rt(d))

    def _exec_multu(self, d, next_pc):
        self.state.hi, self.state.lo = w.multiply_unsigned(self._rs(d), self._rt(d))

    def _exec_div(self, d, next_pc):
        self.state.lo, self.state.hi = w.divide_signed(self._rs(d), self._rt(d))

    def _exec_divu(self, d, next_pc):
        self.state.lo, self.state.hi = w.divide_unsigned(self._rs(d), self._rt(d))

    # ALU register-register

    def _exec_add(self, d, next_pc):
        self.state.write_reg(d.rd, w.add(self._rs(d), self._rt(d)))

    def _exec_sub(self, d, next_pc):
        self.state.write_reg(d.rd, w.sub(self._rs(d), self._rt(d)))

    def _exec_and(self, d, next_pc):
        self.state.write_reg(d.rd, w.bitwise_and(self._rs(d), self._rt(d)))

    def _exec_or(self, d, next_pc):
        self.state.write_reg(d.rd, w.bitwise_or(self._rs(d), self._rt(d)))

    def _exec_xor(self, d, next_pc):
        self.state.write_reg(d.rd, w.bitwise_xor(self._rs(d), self._rt(d)))

    def _exec_nor(self, d, next_pc):
        self.state.write_reg(d.rd, w.bitwise_nor(self._rs(d), self._rt(d)))

    def _exec_slt(self, d, next_pc):
        self.state.write_reg(d.rd, 1 if w.compare_signed(self._rs(d), self._rt(d)) < 0 else 0)

    def _exec_sltu(self, d, next_pc):
        self.state.write_reg(d.rd, 1 if w.compare_unsigned(self._rs(d), self._rt(d)) < 0 else 0)
