# mips_state.py
from typing import Dict, List, Optional

from mips_word import MASK32, sign_extend, to_signed64

NUM_REGISTERS = 32
RA = 31
WORD_BYTES = 4


class ProcessorState:
    def __init__(self):
        self.registers: List[int] = [0] * NUM_REGISTERS
        self.hi = 0
        self.lo = 0
        self.pc = 0
        self.instruction_memory: Dict[int, int] = {}  # byte-address -> word
        self.data_memory: Dict[int, int] = {}  # byte-address -> byte
        self._loaded = False

    def load_program(self, words: List[int]) -> None:
        if self._loaded:
            raise RuntimeError('instruction memory is already loaded')
        for index, w in enumerate(words):
            self.instruction_memory[index * WORD_BYTES] = w & MASK32
        self._loaded = True

    @property
    def program_end(self) -> int:
        return len(self.instruction_memory) * WORD_BYTES

    def fetch(self, addr: int) -> Optional[int]:
        return self.instruction_memory.get(addr)

    def read_reg(self, n: int) -> int:
        if n == 0:
            return 0
        return self.registers[n]

    def write_reg(self, n: int, value: int) -> None:
        if n != 0:
            self.registers[n] = value & MASK32

    def refresh_zero(self) -> None:
        self.registers[0] = 0

    # big-endian: most significant byte at the lowest address
    def _read(self, addr: int, size: int) -> int:
        value = 0
        for i in range(size):
            value = (value << 8) | self.data_memory.get((addr + i) & MASK32, 0)
        return value

    def _write(self, addr: int, size: int, value: int) -> None:
        for i in range(size):
            shift = 8 * (size - 1 - i)
            self.data_memory[(addr + i) & MASK32] = (value >> shift) & 0xFF

    def load_byte(self, addr: int, signed: bool = True) -> int:
        v = self._read(addr, 1)
        return sign_extend(v, 8) if signed else v

    def load_half(self, addr: int, signed: bool = True) -> int:
        v = self._read(addr, 2)
        return sign_extend(v, 16) if signed else v

    def load_word(self, addr: int) -> int:
        return self._read(addr, 4)

    def store_byte(self, addr: int, value: int) -> None:
        self._write(addr, 1, value)

    def store_half(self, addr: int, value: int) -> None:
        self._write(addr, 2, value)

    def store_word(self, addr: int, value: int) -> None:
        self._write(addr, 4, value)

    def memory_words(self) -> Dict[int, int]:
        """Non-zero data memory grouped into aligned big-endian words."""
        words = {}
        for base in sorted({a & ~0x3 for a in self.data_memory}):
            value = self.load_word(base)
            if value:
                words[base] = value
        return words

    def dump_lines(self) -> List[str]:
        lines = []
        for i in range(0, NUM_REGISTERS, 4):
            cells = [f'${n:<2} = 0x{self.registers[n]:08x}' for n in range(i, i + 4)]
            lines.append('  '.join(cells))
        lines.append(f'hi  = 0x{self.hi:08x}  lo  = 0x{self.lo:08x}  pc  = 0x{self.pc:08x}')
        for addr, value in self.memory_words().items():
            lines.append(f'[0x{addr:08x}] = 0x{value:08x} ({to_signed64(value)})')
        return lines
