import pytest

import mips_word as w
from mips_errors import ArithmeticFault

SAMPLES = [0, 1, 2, 5, 0x7FFFFFFF, 0x80000000, 0x80000001, 0xFFFFFFFE, 0xFFFFFFFF, 0x12345678, 0xAABBCCDD]


@pytest.mark.parametrize("a", SAMPLES)
def test_complement_is_additive_inverse(a):
    assert w.add(a, w.complement(a)) == 0


@pytest.mark.parametrize("a", SAMPLES)
@pytest.mark.parametrize("b", [0, 1, 0x7FFFFFFF, 0x80000000, 0xFFFFFFFF, 0xDEADBEEF])
def test_sub_undoes_add(a, b):
    assert w.sub(w.add(a, b), b) == a


def test_add_wraps():
    assert w.add(0xFFFFFFFF, 1) == 0
    assert w.add(0x7FFFFFFF, 1) == 0x80000000


def test_sub_wraps_below_zero():
    assert w.sub(0, 1) == 0xFFFFFFFF
    assert w.sub(3, 5) == w.from_signed(-2)


def test_bitwise_ops():
    assert w.bitwise_and(0xF0F0F0F0, 0xFF00FF00) == 0xF000F000
    assert w.bitwise_or(0xF0F0F0F0, 0x0F0F0F0F) == 0xFFFFFFFF
    assert w.bitwise_xor(0xFFFF0000, 0xFF00FF00) == 0x00FFFF00
    assert w.bitwise_nor(0, 0) == 0xFFFFFFFF
    assert w.bitwise_nor(0xFFFF0000, 0x0000FF00) == 0x000000FF


def test_shifts_mask_amount_and_discard_bits():
    assert w.logical_shift_left(0x80000001, 1) == 0x00000002
    assert w.logical_shift_left(1, 33) == 2
    assert w.logical_shift_right(0x80000000, 31) == 1
    assert w.logical_shift_right(0xFFFFFFFF, 4) == 0x0FFFFFFF


def test_arithmetic_shift_right_preserves_sign():
    assert w.arithmetic_shift_right(0x80000000, 4) == 0xF8000000
    assert w.arithmetic_shift_right(0xFFFFFFF0, 2) == 0xFFFFFFFC
    assert w.arithmetic_shift_right(0x40000000, 4) == 0x04000000
    assert w.arithmetic_shift_right(0x80000000, 0) == 0x80000000
    assert w.arithmetic_shift_right(0x80000000, 31) == 0xFFFFFFFF


def test_arithmetic_shift_left_matches_logical():
    for a in SAMPLES:
        assert w.arithmetic_shift_left(a, 3) == w.logical_shift_left(a, 3)


def test_signed_and_unsigned_compare_diverge_on_sign_bit():
    minus_one = 0xFFFFFFFF
    assert w.compare_unsigned(0, minus_one) == -1
    assert w.compare_signed(0, minus_one) == 1
    assert w.compare_signed(0x80000000, 0x7FFFFFFF) == -1
    assert w.compare_unsigned(0x80000000, 0x7FFFFFFF) == 1
    assert w.compare_signed(0xFFFFFFFE, 0xFFFFFFFF) == -1
    assert w.compare_signed(7, 7) == 0
    assert w.compare_unsigned(7, 7) == 0


def test_to_signed64():
    assert w.to_signed64(0xFFFFFFFF) == -1
    assert w.to_signed64(0x80000000) == -(2 ** 31)
    assert w.to_signed64(0x7FFFFFFF) == 2 ** 31 - 1


@pytest.mark.parametrize("x", [0x8000, 0x8001, 0xFFFF, 0xABCD])
def test_sign_extend_negative_16(x):
    assert w.to_signed64(w.sign_extend(x, 16)) == x - 2 ** 16


@pytest.mark.parametrize("x", [0, 1, 0x7FFF, 0x1234])
def test_sign_extend_positive_16(x):
    assert w.sign_extend(x, 16) == x


def test_sign_extend_branch_offset_width():
    assert w.sign_extend(0xFFFF << 2, 18) == w.from_signed(-4)
    assert w.sign_extend(0x0001 << 2, 18) == 4


def test_zero_extend():
    assert w.zero_extend(0xFFFF, 16) == 0x0000FFFF
    assert w.zero_extend(0x1FFFF, 16) == 0xFFFF


def test_multiply_splits_product():
    assert w.multiply_unsigned(0xFFFFFFFF, 0xFFFFFFFF) == (0xFFFFFFFE, 0x00000001)
    assert w.multiply_signed(0xFFFFFFFF, 0xFFFFFFFF) == (0, 1)
    assert w.multiply_signed(w.from_signed(-2), 3) == (0xFFFFFFFF, w.from_signed(-6))
    assert w.multiply_unsigned(0x10000, 0x10000) == (1, 0)


def test_divide_truncates_toward_zero():
    assert w.divide_signed(w.from_signed(-7), 2) == (w.from_signed(-3), w.from_signed(-1))
    assert w.divide_signed(7, w.from_signed(-2)) == (w.from_signed(-3), 1)
    assert w.divide_unsigned(0xFFFFFFFF, 2) == (0x7FFFFFFF, 1)


def test_divide_int_min_by_minus_one_wraps():
    assert w.divide_signed(0x80000000, 0xFFFFFFFF) == (0x80000000, 0)


@pytest.mark.parametrize("divide", [w.divide_signed, w.divide_unsigned])
def test_divide_by_zero_faults(divide):
    with pytest.raises(ArithmeticFault):
        divide(10, 0)
