import hashlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mpisha.sha1 import Mode, Sha1, sha1


def test_abc_vector():
    assert Sha1(b"abc").hexdigest() == "a9993e364706816aba3e25717850c26c9cd0d89d"


def test_empty_vector():
    assert sha1(b"").hex() == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


@pytest.mark.parametrize("length", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000])
def test_matches_hashlib_at_padding_boundaries(length):
    data = bytes(i % 251 for i in range(length))
    assert sha1(data) == hashlib.sha1(data).digest()


@given(st.binary(max_size=500))
def test_matches_hashlib(data):
    assert sha1(data) == hashlib.sha1(data).digest()


@given(st.binary(max_size=400), st.lists(st.integers(min_value=0, max_value=400), max_size=6))
def test_chunked_update_equals_one_shot(data, cuts):
    points = sorted({min(c, len(data)) for c in cuts})
    ctx = Sha1()
    start = 0
    for point in points + [len(data)]:
        ctx.update(data[start:point])
        start = point
    assert ctx.digest() == sha1(data)


def test_digest_does_not_end_context():
    ctx = Sha1(b"hello ")
    first = ctx.digest()
    assert ctx.digest() == first
    ctx.update(b"world")
    assert ctx.digest() == hashlib.sha1(b"hello world").digest()


def test_copy_is_independent():
    ctx = Sha1(b"x" * 100)
    clone = ctx.copy()
    clone.update(b"more")
    assert ctx.digest() == hashlib.sha1(b"x" * 100).digest()
    assert clone.digest() == hashlib.sha1(b"x" * 100 + b"more").digest()


def test_copy_runs_in_software():
    ctx = Sha1(b"y" * 64)
    assert ctx.mode in (Mode.HARDWARE, Mode.SOFTWARE)
    assert ctx.copy().mode is Mode.SOFTWARE


def test_new_context_is_unused():
    assert Sha1().mode is Mode.UNUSED


def test_reset_starts_over():
    ctx = Sha1(b"z" * 200)
    ctx.reset()
    assert ctx.mode is Mode.UNUSED
    ctx.update(b"abc")
    assert ctx.digest() == hashlib.sha1(b"abc").digest()


def test_concurrent_contexts_both_correct():
    a = Sha1()
    b = Sha1()
    a.update(b"a" * 130)
    b.update(b"b" * 130)
    assert a.digest() == hashlib.sha1(b"a" * 130).digest()
    assert b.digest() == hashlib.sha1(b"b" * 130).digest()


def test_process_rejects_wrong_length():
    with pytest.raises(ValueError):
        Sha1().process(b"short")


def test_process_does_not_count_length():
    block = bytes(range(64))
    raw = Sha1()
    raw.process(block)
    fed = Sha1(block)
    assert raw.digest() != fed.digest()
    assert raw.digest() == hashlib.sha1(b"").digest() or raw.digest() != hashlib.sha1(block).digest()


def test_update_rejects_text():
    with pytest.raises(TypeError):
        Sha1().update("text")


def test_accepts_bytearray_and_memoryview():
    data = b"payload data"
    ctx = Sha1()
    ctx.update(bytearray(data[:4]))
    ctx.update(memoryview(data[4:]))
    assert ctx.digest() == hashlib.sha1(data).digest()


def test_hexdigest_matches_digest():
    ctx = Sha1(b"hex")
    assert ctx.hexdigest() == ctx.digest().hex()
    assert len(ctx.digest()) == Sha1.digest_size