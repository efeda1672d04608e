# mips_errors.py
from typing import Optional


class SimulatorFault(Exception):
    kind = 'fault'

    def __init__(self, message: str, pc: Optional[int] = None, word: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pc = pc
        self.word = word

    def __str__(self) -> str:
        parts = [self.message]
        if self.pc is not None:
            parts.append(f'pc=0x{self.pc:08x}')
        if self.word is not None:
            parts.append(f'word=0x{self.word:08x}')
        return ' '.join(parts)


class IllegalInstruction(SimulatorFault):
    kind = 'illegal_instruction'


class MemoryFault(SimulatorFault):
    kind = 'memory_fault'


class ArithmeticFault(SimulatorFault):
    kind = 'arithmetic_fault'


class LoaderError(Exception):
    def __init__(self, message: str, line_no: Optional[int] = None):
        if line_no is not None:
            message = f'line {line_no}: {message}'
        super().__init__(message)
        self.line_no = line_no
