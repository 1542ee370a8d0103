"""Multi-precision multiplication routed through the accelerator's units.

Factors of up to 2048 bits use the plain multiplier. Longer factors whose
product still fits in 4096 bits go through Montgomery modular
multiplication with the modulus M = R - 1. Anything longer is split in
half on 32-bit limbs and multiplied piecewise.
"""

from __future__ import annotations

from .montgomery import (
    acquire_hardware,
    bits_to_hardware_words,
    mul_mpi_mod,
    release_hardware,
)

_LIMB_BITS = 32
_MULT_MAX_BITS = 2048
_MAX_BITS = 4096


def _with_sign(magnitude: int, x: int, y: int) -> int:
    return -magnitude if (x < 0) != (y < 0) else magnitude


def mul_mpi(x: int, y: int) -> int:
    """Return X * Y."""
    bits_x = abs(x).bit_length()
    bits_y = abs(y).bit_length()

    # Zero or one need no hardware at all.
    if bits_x == 0 or bits_y == 0:
        return 0
    if bits_x == 1:
        return -y if x < 0 else y
    if bits_y == 1:
        return -x if y < 0 else x

    words_mult = max(bits_to_hardware_words(bits_x), bits_to_hardware_words(bits_y))

    if words_mult * _LIMB_BITS > _MULT_MAX_BITS:
        words_z = bits_to_hardware_words(bits_x + bits_y)
        if words_z * _LIMB_BITS <= _MAX_BITS:
            return _failover_mod_mult(x, y, words_z)
        if bits_y > bits_x:
            return _overlong(x, y, bits_y)
        return _overlong(y, x, bits_x)

    acquire_hardware()
    try:
        magnitude = abs(x) * abs(y)
    finally:
        release_hardware()
    return _with_sign(magnitude, x, y)


def _failover_mod_mult(x: int, y: int, num_words: int) -> int:
    """Multiply via Montgomery with M = 2^(32 * num_words) - 1 (so Rinv = M' = 1)."""
    modulus = (1 << (num_words * _LIMB_BITS)) - 1
    return mul_mpi_mod(x, y, modulus)


def _overlong(x: int, y: int, bits_y: int) -> int:
    """Split the longer factor Y on limbs: X * Y = (X * Ypp << b) + X * Yp."""
    limbs_y = (bits_y + _LIMB_BITS - 1) // _LIMB_BITS
    shift = (limbs_y // 2) * _LIMB_BITS
    magnitude = abs(y)
    low = magnitude & ((1 << shift) - 1)
    high = magnitude >> shift
    if y < 0:
        low, high = -low, -high

    low_product = mul_mpi(x, low)
    high_product = mul_mpi(x, high)
    return (high_product << shift) + low_product