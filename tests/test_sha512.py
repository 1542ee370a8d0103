import hashlib

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mpisha.sha1 import Mode
from mpisha.sha512 import Sha512, sha384, sha512


def test_sha512_abc_vector():
    assert sha512(b"abc").hex() == (
        "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
        "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"
    )


def test_sha384_abc_vector():
    assert sha384(b"abc").hex() == (
        "cb00753f45a35e8bb5a03d699ac65007272c32ab0eded1631a8b605a43ff5bed"
        "8086072ba1e7cc2358baeca134c825a7"
    )


@pytest.mark.parametrize("length", [0, 1, 111, 112, 113, 127, 128, 129, 239, 240, 256, 1000])
def test_sha512_matches_hashlib_at_padding_boundaries(length):
    data = bytes(i % 251 for i in range(length))
    assert sha512(data) == hashlib.sha512(data).digest()


@pytest.mark.parametrize("length", [0, 1, 111, 112, 128, 240, 500])
def test_sha384_matches_hashlib(length):
    data = bytes((i * 7) % 256 for i in range(length))
    assert sha384(data) == hashlib.sha384(data).digest()


def test_digest_sizes_and_names():
    assert len(sha512(b"x")) == 64
    assert len(sha384(b"x")) == 48
    assert Sha512().name == "sha512"
    assert Sha512(is384=True).name == "sha384"
    assert Sha512(is384=True).digest_size == 48


@settings(max_examples=50)
@given(st.binary(max_size=600), st.integers(min_value=1, max_value=200))
def test_incremental_matches_one_shot(data, chunk):
    ctx = Sha512()
    for start in range(0, len(data), chunk):
        ctx.update(data[start:start + chunk])
    assert ctx.digest() == sha512(data)


def test_digest_does_not_consume_context():
    ctx = Sha512(b"hello ")
    first = ctx.digest()
    assert ctx.digest() == first
    ctx.update(b"world")
    assert ctx.digest() == hashlib.sha512(b"hello world").digest()


def test_hexdigest_is_hex_of_digest():
    ctx = Sha512(b"data", is384=True)
    assert ctx.hexdigest() == ctx.digest().hex()


def test_copy_is_independent_and_software():
    ctx = Sha512(bytes(200))
    clone = ctx.copy()
    assert clone.mode is Mode.SOFTWARE
    clone.update(b"more")
    assert ctx.digest() == hashlib.sha512(bytes(200)).digest()
    assert clone.digest() == hashlib.sha512(bytes(200) + b"more").digest()


def test_second_context_falls_back_to_software():
    first = Sha512()
    second = Sha512()
    first.update(bytes(128))
    second.update(bytes(128))
    assert {first.mode, second.mode} <= {Mode.HARDWARE, Mode.SOFTWARE}
    assert not (first.mode is Mode.HARDWARE and second.mode is Mode.HARDWARE)
    assert first.digest() == second.digest()
    first.reset()
    second.reset()
    assert first.mode is Mode.UNUSED
    assert second.mode is Mode.UNUSED


def test_mode_unused_until_block_processed():
    ctx = Sha512(b"short")
    assert ctx.mode is Mode.UNUSED


def test_reset_switches_variant():
    ctx = Sha512(b"abc")
    ctx.reset(True)
    ctx.update(b"abc")
    assert ctx.digest() == hashlib.sha384(b"abc").digest()
    ctx.reset(False)
    assert ctx.digest() == hashlib.sha512(b"").digest()


def test_process_rejects_wrong_block_size():
    ctx = Sha512()
    with pytest.raises(ValueError):
        ctx.process(bytes(64))


def test_process_does_not_count_length():
    ctx = Sha512()
    ctx.process(bytes(128))
    assert ctx.digest() != hashlib.sha512(bytes(128)).digest()
    assert ctx.digest() != hashlib.sha512(b"").digest()
    assert len(ctx.digest()) == 64


def test_update_accepts_bytearray_and_memoryview():
    data = b"payload" * 40
    ctx = Sha512()
    ctx.update(bytearray(data[:100]))
    ctx.update(memoryview(data[100:]))
    assert ctx.digest() == hashlib.sha512(data).digest()