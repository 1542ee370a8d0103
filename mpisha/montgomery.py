"""Montgomery modular arithmetic modelled on a 512-bit-block RSA accelerator.

Operands are Python integers. The accelerator works on little-endian
32-bit words in blocks of 16 words (512 bits), up to 4096 bits. Operands
longer than the operation width are truncated, as the accelerator's
memory blocks hold only that many words.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_WORD_BITS = 32
_WORD_MASK = (1 << _WORD_BITS) - 1
_BLOCK_WORDS = 16
_MAX_BITS = 4096

_hardware_lock = threading.Lock()


class NotAcceptableError(ValueError):
    """An operand is too long for the accelerator."""


def acquire_hardware() -> None:
    """Take exclusive use of the accelerator, blocking until it is free.

    The lock is not recursive: do not acquire it twice from one thread.
    """
    _hardware_lock.acquire()


def release_hardware() -> None:
    """Give up the accelerator; raises RuntimeError if it was not held."""
    _hardware_lock.release()


@contextmanager
def _hardware() -> Iterator[None]:
    acquire_hardware()
    try:
        yield
    finally:
        release_hardware()


def hardware_words_needed(value: int) -> int:
    """Words needed to hold ``value``, rounded up to a whole 16-word block."""
    words = max(1, (abs(value).bit_length() + _WORD_BITS - 1) // _WORD_BITS)
    return (words + _BLOCK_WORDS - 1) & ~(_BLOCK_WORDS - 1)


def bits_to_hardware_words(num_bits: int) -> int:
    """Convert a bit count to words, rounded up to a whole 512-bit block."""
    return ((num_bits + 511) // 512) * _BLOCK_WORDS


def modular_inverse(modulus: int) -> int:
    """Return M' = -M^-1 mod 2^32, from the lowest word of the modulus."""
    n = abs(modulus) & _WORD_MASK
    t = 1
    half = 2
    full = 4
    for _ in range(2, 33):
        if (n * t) % full >= half:
            t += half
        half <<= 1
        full <<= 1
    return (_WORD_MASK - t + 1) & _WORD_MASK


def calculate_rinv(modulus: int, num_words: int) -> int:
    """Return R^2 mod M, where R = 2^(32 * num_words)."""
    if modulus == 0:
        raise ZeroDivisionError("modulus is zero")
    if modulus < 0:
        raise ValueError("modulus must not be negative")
    return (1 << (num_words * _WORD_BITS * 2)) % modulus


def _to_block(value: int, num_words: int) -> int:
    return abs(value) & ((1 << (num_words * _WORD_BITS)) - 1)


def _montgomery(a: int, b: int, modulus: int, mprime: int, num_words: int) -> int:
    """Word-serial Montgomery product a * b * R^-1 mod M."""
    t = a * b
    for _ in range(num_words):
        u = ((t & _WORD_MASK) * mprime) & _WORD_MASK
        t = (t + u * modulus) >> _WORD_BITS
    if t >= modulus:
        t -= modulus
    return _to_block(t, num_words)


def mul_mpi_mod(x: int, y: int, modulus: int) -> int:
    """Return (X * Y) mod M; the result carries the sign of X times Y."""
    num_words = hardware_words_needed(modulus)
    rinv = calculate_rinv(modulus, num_words)
    mprime = modular_inverse(modulus)

    m_block = _to_block(modulus, num_words)
    with _hardware():
        stage = _montgomery(
            _to_block(x, num_words), _to_block(rinv, num_words), m_block, mprime, num_words
        )
        magnitude = _montgomery(stage, _to_block(y, num_words), m_block, mprime, num_words)

    negative = (x < 0) != (y < 0)
    return -magnitude if negative else magnitude


def exp_mod(x: int, y: int, modulus: int, rinv: int | None = None) -> int:
    """Return X^Y mod M.

    ``rinv`` is an optional cached R^2 mod M for the operation width (see
    :func:`calculate_rinv`); it is computed when not given. Operands whose
    width exceeds 4096 bits raise :class:`NotAcceptableError`.
    """
    num_words = max(
        _BLOCK_WORDS,
        hardware_words_needed(x),
        hardware_words_needed(y),
        hardware_words_needed(modulus),
    )
    if num_words * _WORD_BITS > _MAX_BITS:
        raise NotAcceptableError(
            f"operands need {num_words * _WORD_BITS} bits, more than {_MAX_BITS}"
        )

    if rinv is None:
        rinv = calculate_rinv(modulus, num_words)
    mprime = modular_inverse(modulus)

    m_block = _to_block(modulus, num_words)
    r_block = _to_block(rinv, num_words)
    exponent = _to_block(y, num_words)
    with _hardware():
        base = _montgomery(_to_block(x, num_words), r_block, m_block, mprime, num_words)
        acc = _montgomery(1, r_block, m_block, mprime, num_words)
        for bit in bin(exponent)[2:] if exponent else ():
            acc = _montgomery(acc, acc, m_block, mprime, num_words)
            if bit == "1":
                acc = _montgomery(acc, base, m_block, mprime, num_words)
        return _montgomery(acc, 1, m_block, mprime, num_words)