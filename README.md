# mpisha

This package provides multi-precision integer arithmetic that works the way a
Montgomery RSA accelerator does. It also has streaming SHA-1, SHA-224/256 and
SHA-384/512 digests, a debug-logging bridge and an entropy helper. All of it
is plain Python with no dependencies.

## Installation

```
pip install mpisha
```

To run the tests:

```
pip install "mpisha[test]"
pytest
```

## Big-number arithmetic

`mpisha.montgomery` works on Python integers.

- Operands are sized in 512-bit blocks of 32-bit words (`hardware_words_needed`, `bits_to_hardware_words`).
- Products are computed by word-serial Montgomery multiplication.
- `modular_inverse(m)` gives M' = -M⁻¹ mod 2³².
- `calculate_rinv(m, num_words)` gives R² mod M, where R = 2^(32·num_words).

```python
from mpisha.montgomery import mul_mpi_mod, exp_mod, calculate_rinv

m = 0xC4F1_3A9B_0D2E_7781
print(mul_mpi_mod(123456789, 987654321, m))   # (x * y) mod m
print(exp_mod(5, 117, m, None))               # 5 ** 117 mod m

# exp_mod works at a width of at least 16 words; pass a cached R^2 mod M
# for that width when exponentiating repeatedly with the same modulus.
rinv = calculate_rinv(m, 16)
print(exp_mod(7, 65537, m, rinv))
```

Behaviour to be aware of:

- `mul_mpi_mod` gives its result the sign of x·y.
- Operands are otherwise taken by magnitude. Any operand longer than the operation width is truncated to that width.
- `exp_mod` raises `NotAcceptableError`, a subclass of `ValueError`, when the operands need more than 4096 bits.
- `calculate_rinv` raises `ZeroDivisionError` for a zero modulus and `ValueError` for a negative one.
- `acquire_hardware()` and `release_hardware()` take and give up a process-wide, non-recursive lock. The arithmetic functions hold this lock while they work.

`mpisha.multiply.mul_mpi(x, y)` multiplies signed integers of any size. It picks a method by size:

- When either factor is 0 or ±1, it returns at once.
- When both factors are up to 2048 bits, it multiplies directly.
- When the product fits in 4096 bits, it uses Montgomery multiplication modulo R − 1.
- Otherwise it splits the longer factor in half on 32-bit limbs and recurses.

## Digests

```python
from mpisha.sha1 import Sha1, sha1
from mpisha.sha256 import Sha256, sha256, sha224
from mpisha.sha512 import Sha512, sha384

print(sha1(b"abc").hex())          # the helpers return bytes
print(sha224(b"abc").hex())

h = Sha512()
h.update(b"hello ")
h.update(b"world")
snapshot = h.copy()                # copies hash independently
print(h.hexdigest())

h224 = Sha256(b"abc", is224=True)
```

Methods of the context classes `Sha1`, `Sha256` and `Sha512`:

- `update(data)` feeds more message bytes.
- `process(block)` runs the compression function on one raw block. The block is 64 bytes, or 128 for `Sha512`. It is not counted in the message length, and a block of any other size raises `ValueError`.
- `digest()` and `hexdigest()` return the digest of the data fed so far. The context stays usable afterwards.
- `copy()` returns an independent copy.
- `reset()`, `Sha256.reset(is224)` and `Sha512.reset(is384)` start a new digest, the last two choosing between the full and the truncated variant.

Each context also has a `mode` attribute holding a `mpisha.sha1.Mode` value: `UNUSED`, `HARDWARE` or `SOFTWARE`.

- The first context of a kind to process a block takes that kind's shared engine lock and is marked `HARDWARE`.
- Contexts that find the lock busy are marked `SOFTWARE`.
- SHA-224 always runs as `SOFTWARE`, and so do copies.
- The computation is the same in every mode. A context gives up the lock when it is reset or deleted.

## Debug logging

`mpisha.debug` sends TLS-style debug messages to the `mbedtls` logger. Thresholds 1–4 map to warning, info, debug and `VERBOSE` (level 5). Any other threshold maps to `NONE`.

- `enable_debug_log(config, threshold)` stores the threshold on a `DebugConfig`, installs `debug_callback` as its callback, and sets the logger's level.
- `disable_debug_log(config)` removes the callback.
- `debug_callback(level, file, line, text)` logs `file:line text` with only the file name kept. An unknown level is logged as an error.

## Entropy

`mpisha.entropy.hardware_poll(length)` returns `length` random bytes from the operating system. A negative length raises `ValueError`.

## What this package does not do

It has no TLS stack and no AES, and it offers no command-line tool. `DebugConfig` is a plain settings holder for code that brings its own TLS layer.