"""SHA-256 and SHA-224 message digests with a shared engine and software fallback.

The first SHA-256 context to process a block takes the single shared
SHA-256 engine; contexts that find it busy run in software. SHA-224
always runs in software. Every path gives the same digest, and a copied
context always runs in software.
"""

from __future__ import annotations

import struct
import threading

from .sha1 import Mode

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_BLOCK_SIZE = 64

_INITIAL_256 = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_INITIAL_224 = (
    0xC1059ED8, 0x367CD507, 0x3070DD17, 0xF70E5939,
    0xFFC00B31, 0x68581511, 0x64F98FA7, 0xBEFA4FA4,
)

_K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

_PADDING = b"\x80" + bytes(63)

_engine_lock = threading.Lock()


def _rotr(value: int, count: int) -> int:
    return ((value >> count) | (value << (32 - count))) & _MASK32


def _compress(state: list[int], block: bytes) -> None:
    w = list(struct.unpack(">16I", block))
    for t in range(16, 64):
        x = w[t - 15]
        y = w[t - 2]
        s0 = _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)
        s1 = _rotr(y, 17) ^ _rotr(y, 19) ^ (y >> 10)
        w.append((s1 + w[t - 7] + s0 + w[t - 16]) & _MASK32)

    a, b, c, d, e, f, g, h = state
    for k, word in zip(_K, w):
        s3 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = g ^ (e & (f ^ g))
        temp1 = (h + s3 + ch + k + word) & _MASK32
        s2 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) | (c & (a | b))
        temp2 = (s2 + maj) & _MASK32
        h, g, f, e = g, f, e, (d + temp1) & _MASK32
        d, c, b, a = c, b, a, (temp1 + temp2) & _MASK32

    for i, value in enumerate((a, b, c, d, e, f, g, h)):
        state[i] = (state[i] + value) & _MASK32


class Sha256:
    """Incremental SHA-256 hash, or SHA-224 when ``is224`` is true."""

    block_size = _BLOCK_SIZE

    def __init__(self, data: bytes = b"", is224: bool = False) -> None:
        self.mode = Mode.UNUSED
        self.is224 = bool(is224)
        self._state: list[int] = list(_INITIAL_256)
        self._total = 0
        self._buffer = bytearray()
        self.reset(is224)
        if data:
            self.update(data)

    @property
    def name(self) -> str:
        return "sha224" if self.is224 else "sha256"

    @property
    def digest_size(self) -> int:
        return 28 if self.is224 else 32

    def _release_engine(self) -> None:
        if getattr(self, "mode", None) is Mode.HARDWARE:
            _engine_lock.release()
            self.mode = Mode.SOFTWARE

    def reset(self, is224: bool = False) -> None:
        """Start a new SHA-256 (or SHA-224) digest, giving up the engine if held."""
        self._release_engine()
        self.is224 = bool(is224)
        self._state = list(_INITIAL_224 if self.is224 else _INITIAL_256)
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
            if not self.is224 and _engine_lock.acquire(blocking=False):
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
        words = self._state[:7] if self.is224 else self._state
        return struct.pack(f">{len(words)}I", *words)

    def digest(self) -> bytes:
        """Return the digest of the data fed so far; the context stays usable."""
        return self.copy()._finish()

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Sha256":
        """Return an independent copy; the copy always runs in software."""
        clone = Sha256.__new__(Sha256)
        clone.is224 = self.is224
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


def sha256(data: bytes) -> bytes:
    """Return the SHA-256 digest of ``data``."""
    return Sha256(data).digest()


def sha224(data: bytes) -> bytes:
    """Return the SHA-224 digest of ``data``."""
    return Sha256(data, is224=True).digest()