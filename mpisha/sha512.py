"""SHA-512 and SHA-384 message digests with a shared engine and software fallback.

The first context of a variant to process a block takes that variant's
shared SHA engine; contexts that find it busy run in software. Every path
gives the same digest, and a copied context always runs in software.
"""

from __future__ import annotations

import struct
import threading

from .sha1 import Mode

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_BLOCK_SIZE = 128

_INITIAL_512 = (
    0x6A09E667F3BCC908, 0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B, 0xA54FF53A5F1D36F1,
    0x510E527FADE682D1, 0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B, 0x5BE0CD19137E2179,
)
_INITIAL_384 = (
    0xCBBB9D5DC1059ED8, 0x629A292A367CD507,
    0x9159015A3070DD17, 0x152FECD8F70E5939,
    0x67332667FFC00B31, 0x8EB44A8768581511,
    0xDB0C2E0D64F98FA7, 0x47B5481DBEFA4FA4,
)

_K = (
    0x428A2F98D728AE22, 0x7137449123EF65CD,
    0xB5C0FBCFEC4D3B2F, 0xE9B5DBA58189DBBC,
    0x3956C25BF348B538, 0x59F111F1B605D019,
    0x923F82A4AF194F9B, 0xAB1C5ED5DA6D8118,
    0xD807AA98A3030242, 0x12835B0145706FBE,
    0x243185BE4EE4B28C, 0x550C7DC3D5FFB4E2,
    0x72BE5D74F27B896F, 0x80DEB1FE3B1696B1,
    0x9BDC06A725C71235, 0xC19BF174CF692694,
    0xE49B69C19EF14AD2, 0xEFBE4786384F25E3,
    0x0FC19DC68B8CD5B5, 0x240CA1CC77AC9C65,
    0x2DE92C6F592B0275, 0x4A7484AA6EA6E483,
    0x5CB0A9DCBD41FBD4, 0x76F988DA831153B5,
    0x983E5152EE66DFAB, 0xA831C66D2DB43210,
    0xB00327C898FB213F, 0xBF597FC7BEEF0EE4,
    0xC6E00BF33DA88FC2, 0xD5A79147930AA725,
    0x06CA6351E003826F, 0x142929670A0E6E70,
    0x27B70A8546D22FFC, 0x2E1B21385C26C926,
    0x4D2C6DFC5AC42AED, 0x53380D139D95B3DF,
    0x650A73548BAF63DE, 0x766A0ABB3C77B2A8,
    0x81C2C92E47EDAEE6, 0x92722C851482353B,
    0xA2BFE8A14CF10364, 0xA81A664BBC423001,
    0xC24B8B70D0F89791, 0xC76C51A30654BE30,
    0xD192E819D6EF5218, 0xD69906245565A910,
    0xF40E35855771202A, 0x106AA07032BBD1B8,
    0x19A4C116B8D2D0C8, 0x1E376C085141AB53,
    0x2748774CDF8EEB99, 0x34B0BCB5E19B48A8,
    0x391C0CB3C5C95A63, 0x4ED8AA4AE3418ACB,
    0x5B9CCA4F7763E373, 0x682E6FF3D6B2B8A3,
    0x748F82EE5DEFB2FC, 0x78A5636F43172F60,
    0x84C87814A1F0AB72, 0x8CC702081A6439EC,
    0x90BEFFFA23631E28, 0xA4506CEBDE82BDE9,
    0xBEF9A3F7B2C67915, 0xC67178F2E372532B,
    0xCA273ECEEA26619C, 0xD186B8C721C0C207,
    0xEADA7DD6CDE0EB1E, 0xF57D4F7FEE6ED178,
    0x06F067AA72176FBA, 0x0A637DC5A2C898A6,
    0x113F9804BEF90DAE, 0x1B710B35131C471B,
    0x28DB77F523047D84, 0x32CAAB7B40C72493,
    0x3C9EBE0A15C9BEBC, 0x431D67C49C100D4C,
    0x4CC5D4BECB3E42B6, 0x597F299CFC657E2A,
    0x5FCB6FAB3AD6FAEC, 0x6C44198C4A475817,
)

_PADDING = b"\x80" + bytes(127)

_engine_locks = {False: threading.Lock(), True: threading.Lock()}


def _rotr(value: int, count: int) -> int:
    return ((value >> count) | (value << (64 - count))) & _MASK64


def _compress(state: list[int], block: bytes) -> None:
    w = list(struct.unpack(">16Q", block))
    for t in range(16, 80):
        x = w[t - 15]
        y = w[t - 2]
        s0 = _rotr(x, 1) ^ _rotr(x, 8) ^ (x >> 7)
        s1 = _rotr(y, 19) ^ _rotr(y, 61) ^ (y >> 6)
        w.append((s1 + w[t - 7] + s0 + w[t - 16]) & _MASK64)

    a, b, c, d, e, f, g, h = state
    for k, word in zip(_K, w):
        s3 = _rotr(e, 14) ^ _rotr(e, 18) ^ _rotr(e, 41)
        ch = g ^ (e & (f ^ g))
        temp1 = (h + s3 + ch + k + word) & _MASK64
        s2 = _rotr(a, 28) ^ _rotr(a, 34) ^ _rotr(a, 39)
        maj = (a & b) | (c & (a | b))
        temp2 = (s2 + maj) & _MASK64
        h, g, f, e = g, f, e, (d + temp1) & _MASK64
        d, c, b, a = c, b, a, (temp1 + temp2) & _MASK64

    for i, value in enumerate((a, b, c, d, e, f, g, h)):
        state[i] = (state[i] + value) & _MASK64


class Sha512:
    """Incremental SHA-512 hash, or SHA-384 when ``is384`` is true."""

    block_size = _BLOCK_SIZE

    def __init__(self, data: bytes = b"", is384: bool = False) -> None:
        self.mode = Mode.UNUSED
        self.is384 = bool(is384)
        self._state: list[int] = list(_INITIAL_512)
        self._total = 0
        self._buffer = bytearray()
        self.reset(is384)
        if data:
            self.update(data)

    @property
    def name(self) -> str:
        return "sha384" if self.is384 else "sha512"

    @property
    def digest_size(self) -> int:
        return 48 if self.is384 else 64

    def _release_engine(self) -> None:
        if getattr(self, "mode", None) is Mode.HARDWARE:
            _engine_locks[self.is384].release()
            self.mode = Mode.SOFTWARE

    def reset(self, is384: bool = False) -> None:
        """Start a new SHA-512 (or SHA-384) digest, giving up the engine if held."""
        self._release_engine()
        self.is384 = bool(is384)
        self._state = list(_INITIAL_384 if self.is384 else _INITIAL_512)
        self._total = 0
        self._buffer = bytearray()
        self.mode = Mode.UNUSED

    def process(self, block: bytes) -> None:
        """Run the compression function on one 128-byte block.

        This does not count the block towards the message length.
        """
        block = bytes(block)
        if len(block) != _BLOCK_SIZE:
            raise ValueError(f"block must be {_BLOCK_SIZE} bytes, got {len(block)}")
        if self.mode is Mode.UNUSED:
            if _engine_locks[self.is384].acquire(blocking=False):
                self.mode = Mode.HARDWARE
            else:
                self.mode = Mode.SOFTWARE
        _compress(self._state, block)

    def update(self, data: bytes) -> None:
        """Feed more message bytes."""
        view = memoryview(data).cast("B")
        if not view:
            return
        self._total = (self._total + len(view)) & _MASK128

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
        bit_length = (self._total * 8) & _MASK128
        last = self._total & 0x7F
        padn = 112 - last if last < 112 else 240 - last
        self.update(_PADDING[:padn])
        self.update(bit_length.to_bytes(16, "big"))
        words = self._state[:6] if self.is384 else self._state
        return struct.pack(f">{len(words)}Q", *words)

    def digest(self) -> bytes:
        """Return the digest of the data fed so far; the context stays usable."""
        return self.copy()._finish()

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.digest().hex()

    def copy(self) -> "Sha512":
        """Return an independent copy; the copy always runs in software."""
        clone = Sha512.__new__(Sha512)
        clone.is384 = self.is384
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


def sha512(data: bytes) -> bytes:
    """Return the SHA-512 digest of ``data``."""
    return Sha512(data).digest()


def sha384(data: bytes) -> bytes:
    """Return the SHA-384 digest of ``data``."""
    return Sha512(data, is384=True).digest()