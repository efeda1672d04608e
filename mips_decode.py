# mips_decode.py
from typing import NamedTuple

from mips_word import sign_extend

R_FUNCTS = {
    0x00: 'sll',
    0x02: 'srl',
    0x03: 'sra',
    0x04: 'sllv',
    0x06: 'srlv',
    0x07: 'srav',
    0x08: 'jr',
    0x09: 'jalr',
    0x10: 'mfhi',
    0x11: 'mthi',
    0x12: 'mflo',
    0x13: 'mtlo',
    0x18: 'mult',
    0x19: 'multu',
    0x1A: 'div',
    0x1B: 'divu',
    0x20: 'add',
    0x21: 'addu',
    0x22: 'sub',
    0x23: 'subu',
    0x24: 'and',
    0x25: 'or',
    0x26: 'xor',
    0x27: 'nor',
    0x2A: 'slt',
    0x2B: 'sltu',
}
I_OPCODES = {
    0x04: 'beq',
    0x05: 'bne',
    0x06: 'blez',
    0x07: 'bgtz',
    0x08: 'addi',
    0x09: 'addiu',
    0x0A: 'slti',
    0x0B: 'sltiu',
    0x0C: 'andi',
    0x0D: 'ori',
    0x0E: 'xori',
    0x0F: 'lui',
    0x20: 'lb',
    0x21: 'lh',
    0x23: 'lw',
    0x24: 'lbu',
    0x25: 'lhu',
    0x28: 'sb',
    0x29: 'sh',
    0x2B: 'sw',
}
J_OPCODES = {
    0x02: 'j',
    0x03: 'jal',
}

# name -> number, for building programs by mnemonic
FUNCT = {name: code for code, name in R_FUNCTS.items()}
OPCODE = {name: code for code, name in {**I_OPCODES, **J_OPCODES}.items()}


class DecodedInstruction(NamedTuple):
    word: int
    opcode: int
    rs: int
    rt: int
    rd: int
    shamt: int
    funct: int
    imm16: int
    address26: int

    @property
    def format(self) -> str:
        if self.opcode == 0:
            return 'R'
        if self.opcode in J_OPCODES:
            return 'J'
        return 'I'


def decode(instr: int) -> DecodedInstruction:
    instr &= 0xFFFFFFFF
    return DecodedInstruction(
        word=instr,
        opcode=(instr >> 26) & 0x3F,
        rs=(instr >> 21) & 0x1F,
        rt=(instr >> 16) & 0x1F,
        rd=(instr >> 11) & 0x1F,
        shamt=(instr >> 6) & 0x1F,
        funct=instr & 0x3F,
        imm16=instr & 0xFFFF,
        address26=instr & 0x03FFFFFF,
    )


def encode_r(funct: int, rd: int = 0, rs: int = 0, rt: int = 0, shamt: int = 0) -> int:
    return (
        ((rs & 0x1F) << 21)
        | ((rt & 0x1F) << 16)
        | ((rd & 0x1F) << 11)
        | ((shamt & 0x1F) << 6)
        | (funct & 0x3F)
    )


def encode_i(opcode: int, rt: int = 0, rs: int = 0, imm: int = 0) -> int:
    return (
        ((opcode & 0x3F) << 26)
        | ((rs & 0x1F) << 21)
        | ((rt & 0x1F) << 16)
        | (imm & 0xFFFF)
    )


def encode_j(opcode: int, address: int) -> int:
    return ((opcode & 0x3F) << 26) | (address & 0x03FFFFFF)


def mnemonic(d: DecodedInstruction) -> str:
    if d.opcode == 0:
        return R_FUNCTS.get(d.funct, f'unknown_r(0x{d.funct:02x})')
    if d.opcode in J_OPCODES:
        return J_OPCODES[d.opcode]
    return I_OPCODES.get(d.opcode, f'unknown_i(0x{d.opcode:02x})')


def _simm(d: DecodedInstruction) -> int:
    imm = sign_extend(d.imm16, 16)
    return imm - 0x100000000 if imm & 0x80000000 else imm


def format_decoded(d: DecodedInstruction) -> str:
    name = mnemonic(d)
    if d.opcode == 0:
        if d.word == 0:
            return 'nop'
        if name in ('sll', 'srl', 'sra'):
            return f'{name} ${d.rd}, ${d.rt}, {d.shamt}'
        if name in ('sllv', 'srlv', 'srav'):
            return f'{name} ${d.rd}, ${d.rt}, ${d.rs}'
        if name == 'jr' or name in ('mthi', 'mtlo'):
            return f'{name} ${d.rs}'
        if name in ('mfhi', 'mflo'):
            return f'{name} ${d.rd}'
        if name == 'jalr':
            return f'{name} ${d.rd}, ${d.rs}'
        if name in ('mult', 'multu', 'div', 'divu'):
            return f'{name} ${d.rs}, ${d.rt}'
        if name.startswith('unknown'):
            return name
        return f'{name} ${d.rd}, ${d.rs}, ${d.rt}'
    if d.opcode in J_OPCODES:
        return f'{name} 0x{d.address26 << 2:08x}'
    if name in ('beq', 'bne'):
        return f'{name} ${d.rs}, ${d.rt}, {_simm(d)}'
    if name in ('blez', 'bgtz'):
        return f'{name} ${d.rs}, {_simm(d)}'
    if name in ('andi', 'ori', 'xori'):
        return f'{name} ${d.rt}, ${d.rs}, 0x{d.imm16:04x}'
    if name == 'lui':
        return f'{name} ${d.rt}, 0x{d.imm16:04x}'
    if name in ('lb', 'lh', 'lw', 'lbu', 'lhu', 'sb', 'sh', 'sw'):
        return f'{name} ${d.rt}, {_simm(d)}(${d.rs})'
    if name.startswith('unknown'):
        return name
    return f'{name} ${d.rt}, ${d.rs}, {_simm(d)}'
