"""SHA-1 message digest with a shared engine and software fallback.

The first context to process a block takes the single shared SHA engine;
contexts that find it busy run in software. Both give the same digest.
A copied context always runs in software.
"""

from __future__ import annotations

import struct
import threading
from enum import Enum
from typing import Optional

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_BLOCK_SIZE = 64

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
_PADDING = b"\x80" + bytes(63)

_engine_lock = threading.Lock()


class Mode(Enum):
    """Where a context's digest state lives."""

    UNUSED = "unused"
    HARDWARE = "hardware"
    SOFTWARE = "software"


def _rotl(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK32


def _compress(state: list[int], block: bytes) -> None:
    w = list(struct.unpack(">16I", block))
    for t in range(16, 80):
        w.append(_rotl(w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16], 1))

    a, b, c, d, e = state
    for t, word in enumerate(w):
        if t < 20:
            f = d ^ (b & (c ^ d))
            k = 0x5A827999
        elif t < 40:
            f = b ^ c ^ d
            k = 0x6ED9EBA1
        elif t < 60:
            f = (b & c) | (d & (b | c))
            k = 0x8F1BBCDC
        else:
            f = b ^ c ^ d
            k = 0xCA62C1D6
        temp = (_rotl(a, 5) + f + e + k + word) & _MASK32
        e, d, c, b, a = d, c, _rotl(b, 30), a, temp

    for i, value in enumerate((a, b, c, d, e)):
        state[i] = (state[i] + value) & _MASK32


class Sha1:
    """Incremental SHA-1 hash."""

    name = "sha1"
    digest_size = 20
    block_size = _BLOCK_SIZE

    def __init__(self, data: bytes = b"") -> None:
        self.mode = Mode.UNUSED
        self._state: list[int] = list(_INITIAL_STATE)
        self._total = 0
        self._buffer = bytearray()
        self.reset()
        if data:
            self.update(data)

    def _release_engine(self) -> None:
        if getattr(self, "mode", None) is Mode.HARDWARE:
            _engine_lock.release()
            self.mode = Mode.SOFTWARE

    def reset(self) -> None:
        """Start a new digest, giving up the engine if this context held it."""
        self._release_engine()
        self._state = list(_INITIAL_STATE)
        self._total = 0
        self._buffer = bytearray()
        self.mode = Mode.UNUSED

    def process(self, block: bytes) -> None:
        """Run the compression function on one 64-byte block.

        This does not count the block towards the message length.
        """
        block = bytes(block)
        if len(block) != _BLOCK_SIZE:
            raise ValueError(f"block must be {_BLOCK_SIZE} bytes, got {len(block)}")
        if self.mode is Mode.UNUSED:
            if _engine_lock.acquire(blocking=False):
                self.mode = Mode.HARDWARE
            else:
                self.mode = Mode.SOFTWARE
        _compress(self._state, block)

    def update(self, data: bytes) -> None:
        """Feed more message bytes."""
        view = memoryview(data).cast("B")
        if not view:
            return
        self._total = (self._total + len(view)) & _MASK64

        offset = 0
        if self._buffer:
            fill = _BLOCK_SIZE - len(self._buffer)
            if len(view) < fill:
                self._buffer += view
                return
            self._buffer += view[:fill]
            self.process(bytes(self._buffer))
            self._buffer = bytearray()
            offset = fill

        while len(view) - offset >= _BLOCK_SIZE:
            self.process(view[offset:offset + _BLOCK_SIZE].tobytes())
            offset += _BLOCK_SIZE

        self._buffer += view[offset:]

    def _finish(self) -> bytes:
        bit_length = (self._total * 8) & _MASK64
        last = self._total & 0x3F
        padn = 56 - last if last < 56 else 120 - last
        self.update(_PADDING[:padn])
        self.update(struct.pack(">Q", bit_length))
        return struct.pack(">5I", *self._state)

    def digest(self) -> bytes:
        """Return the digest of the data fed so far; the context stays usable."""
        return self.copy()._finish()

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Sha1":
        """Return an independent copy; the copy always runs in software."""
        clone = Sha1.__new__(Sha1)
        clone._state = list(self._state)
        clone._total = self._total
        clone._buffer = bytearray(self._buffer)
        clone.mode = Mode.SOFTWARE if self.mode is Mode.HARDWARE else self.mode
        return clone

    def __del__(self) -> None:
        try:
            self._release_engine()
        except RuntimeError:
            pass


def sha1(data: bytes) -> bytes:
    """Return the SHA-1 digest of ``data``."""
    return Sha1(data).digest()


_unused: Optional[Sha1] = None