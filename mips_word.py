# mips_word.py
"""32-bit word arithmetic.

Words are plain ints in [0, 2**32). Every operation here masks its result
back into that range, so arithmetic wraps modulo 2**32 the way the hardware
does. Signed values only appear at the edges (to_signed64, from_signed) and
inside the signed compare/multiply/divide helpers.
"""
from typing import Tuple

from mips_errors import ArithmeticFault

WORD_BITS = 32
MASK32 = 0xFFFFFFFF
SIGN_BIT = 0x80000000


def from_signed(value: int) -> int:
    return value & MASK32


def to_signed64(a: int) -> int:
    """Signed value of a word as a host int (diagnostics and tests)."""
    a &= MASK32
    return a - 0x100000000 if a & SIGN_BIT else a


def sign_bit(a: int) -> int:
    return (a >> 31) & 1


def complement(a: int) -> int:
    """Two's-complement negation: ~a + 1."""
    return add(~a & MASK32, 1)


def add(a: int, b: int) -> int:
    return (a + b) & MASK32


def sub(a: int, b: int) -> int:
    return add(a, complement(b))


def bitwise_and(a: int, b: int) -> int:
    return a & b & MASK32


def bitwise_or(a: int, b: int) -> int:
    return (a | b) & MASK32


def bitwise_xor(a: int, b: int) -> int:
    return (a ^ b) & MASK32


def bitwise_nor(a: int, b: int) -> int:
    return ~(a | b) & MASK32


def logical_shift_left(a: int, amount: int) -> int:
    return (a << (amount & 0x1F)) & MASK32


def logical_shift_right(a: int, amount: int) -> int:
    return (a & MASK32) >> (amount & 0x1F)


def arithmetic_shift_left(a: int, amount: int) -> int:
    return logical_shift_left(a, amount)


def arithmetic_shift_right(a: int, amount: int) -> int:
    amount &= 0x1F
    result = (a & MASK32) >> amount
    if sign_bit(a) and amount:
        result |= (MASK32 << (WORD_BITS - amount)) & MASK32
    return result


def _cmp(x: int, y: int) -> int:
    return (x > y) - (x < y)


def compare_unsigned(a: int, b: int) -> int:
    """Returns -1, 0 or 1 ordering a and b as unsigned magnitudes."""
    return _cmp(a & MASK32, b & MASK32)


def compare_signed(a: int, b: int) -> int:
    """Returns -1, 0 or 1 ordering a and b as two's-complement values."""
    if sign_bit(a) != sign_bit(b):
        return -1 if sign_bit(a) else 1
    return compare_unsigned(a, b)


def sign_extend(value: int, width: int) -> int:
    """Widen the low `width` bits of value to a word, replicating bit width-1."""
    mask = (1 << width) - 1
    value &= mask
    if value & (1 << (width - 1)):
        value |= MASK32 & ~mask
    return value


def zero_extend(value: int, width: int) -> int:
    return value & ((1 << width) - 1) & MASK32


def multiply_signed(a: int, b: int) -> Tuple[int, int]:
    product = (to_signed64(a) * to_signed64(b)) & 0xFFFFFFFFFFFFFFFF
    return (product >> 32) & MASK32, product & MASK32


def multiply_unsigned(a: int, b: int) -> Tuple[int, int]:
    product = (a & MASK32) * (b & MASK32)
    return (product >> 32) & MASK32, product & MASK32


def divide_signed(a: int, b: int) -> Tuple[int, int]:
    """Returns (quotient, remainder), truncating toward zero."""
    if b & MASK32 == 0:
        raise ArithmeticFault('signed division by zero')
    n, d = to_signed64(a), to_signed64(b)
    q = abs(n) // abs(d)
    if (n < 0) != (d < 0):
        q = -q
    r = n - q * d
    return q & MASK32, r & MASK32


def divide_unsigned(a: int, b: int) -> Tuple[int, int]:
    if b & MASK32 == 0:
        raise ArithmeticFault('unsigned division by zero')
    a &= MASK32
    b &= MASK32
    return a // b, a % b
