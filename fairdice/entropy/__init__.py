# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
fairdice.entropy
================

Entropy sources for key generation and uniform sampling.

Every source implements the tiny `EntropySource` protocol:

    def random_bytes(self, n: int) -> bytes

and MUST either return exactly `n` bytes or raise `EntropyUnavailable`.
A failing source is fatal: callers never retry or fall back to a weaker
generator.

Sources included
----------------
- SystemEntropy : the operating system CSPRNG (via `secrets.token_bytes`).
- FileEntropy   : read bytes from a device or file (e.g. /dev/urandom or a
                  hardware RNG character device).

Typical usage
-------------
    from fairdice.entropy import default_source

    src = default_source()
    key = src.random_bytes(32)
"""

from __future__ import annotations

import logging
import secrets
import threading
from typing import BinaryIO, Optional, Protocol

from fairdice.errors import EntropyUnavailable

logger = logging.getLogger(__name__)


class EntropySource(Protocol):
    """Minimal secure entropy source protocol."""

    def random_bytes(self, n: int) -> bytes:  # pragma: no cover - protocol
        """Return exactly n bytes of entropy, or raise EntropyUnavailable."""
        ...


def _check_n(n: int) -> None:
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError("n must be an int")
    if n < 0:
        raise ValueError("n must be non-negative")


class SystemEntropy:
    """Operating-system CSPRNG."""

    def random_bytes(self, n: int) -> bytes:
        _check_n(n)
        try:
            out = secrets.token_bytes(n)
        except (OSError, NotImplementedError) as e:
            logger.critical("system entropy source failed: %s", e)
            raise EntropyUnavailable(f"system CSPRNG failed: {e}") from e
        if len(out) != n:  # pragma: no cover - token_bytes contract
            raise EntropyUnavailable(f"system CSPRNG returned {len(out)} of {n} bytes")
        return out

    def __repr__(self) -> str:
        return "SystemEntropy()"


def _read_exact(f: BinaryIO, n: int, *, chunk_size: int = 1 << 16) -> bytes:
    out = bytearray()
    remaining = n
    while remaining:
        chunk = f.read(min(remaining, chunk_size))
        if not chunk:
            raise EOFError(f"unexpected EOF: needed {remaining} more bytes")
        out.extend(chunk)
        remaining -= len(chunk)
    return bytes(out)


class FileEntropy:
    """
    Read entropy bytes from a file path (e.g., a character device).

    Args:
        path: File path to read from.
        reopen_each_call: If True (default), open/close the file per call so
            device hot-swaps are picked up; otherwise keep one handle open.
    """

    def __init__(self, path: str = "/dev/urandom", *, reopen_each_call: bool = True) -> None:
        self.path = path
        self.reopen_each_call = reopen_each_call
        self._fh: Optional[BinaryIO] = None
        self._lock = threading.Lock()

    def random_bytes(self, n: int) -> bytes:
        _check_n(n)
        if n == 0:
            return b""
        try:
            if self.reopen_each_call:
                with open(self.path, "rb", buffering=0) as f:
                    return _read_exact(f, n)
            with self._lock:
                if self._fh is None:
                    self._fh = open(self.path, "rb", buffering=0)
                return _read_exact(self._fh, n)
        except (OSError, EOFError) as e:
            logger.critical("entropy file %s unreadable: %s", self.path, e)
            raise EntropyUnavailable(f"cannot read {n} bytes from {self.path}: {e}") from e

    def close(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None

    def __repr__(self) -> str:
        return f"FileEntropy(path={self.path!r})"


_default: Optional[EntropySource] = None


def default_source() -> EntropySource:
    """Return the process-wide default source (system CSPRNG)."""
    global _default
    if _default is None:
        _default = SystemEntropy()
    return _default


__all__ = [
    "EntropySource",
    "SystemEntropy",
    "FileEntropy",
    "default_source",
]
