"""Entropy source backed by the operating system's random generator."""

from __future__ import annotations

import os


def hardware_poll(length: int) -> bytes:
    """Return ``length`` random bytes."""
    if length < 0:
        raise ValueError("length must not be negative")
    return os.urandom(length)