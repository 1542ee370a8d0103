"""Montgomery-style big-number arithmetic, SHA-1/SHA-2 digests, debug logging and entropy."""

__version__ = "0.1.0"

__all__ = ["montgomery", "multiply", "debug", "entropy", "sha1", "sha256", "sha512"]