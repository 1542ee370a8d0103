[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpisha"
version = "0.1.0"
description = "Montgomery multi-precision arithmetic and pure-Python SHA-1/SHA-2 digests with an accelerator-style interface"
requires-python = ">=3.10"
dependencies = []
keywords = ["bignum", "montgomery", "modular-exponentiation", "sha1", "sha256", "sha512", "hash"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["mpisha"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
