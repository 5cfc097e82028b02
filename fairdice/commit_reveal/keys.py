# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Per-round secret keys.

A `SecretKey` is 32 bytes drawn fresh from a secure `EntropySource` for
exactly one round. Keys are never derived from time, process ids or counters,
never persisted, and their `repr` never shows the key material.

`KeyGenerator` additionally remembers a bounded window of key fingerprints
(SHA3-256 of the key) and refuses to hand out a repeat: a source that starts
returning the same bytes is treated as broken (`EntropyUnavailable`), not as
a reason to reuse a key.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from hashlib import sha3_256
from typing import Deque, Optional, Set

from fairdice.constants import KEY_BYTES, KEY_FINGERPRINT_WINDOW
from fairdice.entropy import EntropySource, default_source
from fairdice.errors import EntropyUnavailable
from fairdice.utils.bytes import as_bytes, ensure_len, from_hex, to_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SecretKey:
    """256-bit round secret. Compare and hash by value; never printed."""

    material: bytes = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "material", ensure_len(as_bytes(self.material), KEY_BYTES, name="secret key")
        )

    def hex(self) -> str:
        """Lowercase hex of the key material (use only at reveal time)."""
        return to_hex(self.material)

    @classmethod
    def from_hex(cls, s: str) -> "SecretKey":
        return cls(from_hex(s))

    def fingerprint(self) -> bytes:
        return sha3_256(self.material).digest()

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"


class KeyGenerator:
    """
    Draws a fresh `SecretKey` per call.

    Args:
        source: Entropy source; defaults to the system CSPRNG.
        window: Number of recent key fingerprints kept for repeat detection.
    """

    def __init__(
        self,
        source: Optional[EntropySource] = None,
        *,
        window: int = KEY_FINGERPRINT_WINDOW,
    ) -> None:
        if window < 1:
            raise ValueError("window must be >= 1")
        self.source = source if source is not None else default_source()
        self._recent: Deque[bytes] = deque()
        self._seen: Set[bytes] = set()
        self._window = window

    def generate(self) -> SecretKey:
        key = SecretKey(self.source.random_bytes(KEY_BYTES))
        fp = key.fingerprint()
        if fp in self._seen:
            logger.critical("entropy source produced a repeated %d-byte key", KEY_BYTES)
            raise EntropyUnavailable("entropy source repeated a secret key")
        self._seen.add(fp)
        self._recent.append(fp)
        if len(self._recent) > self._window:
            self._seen.discard(self._recent.popleft())
        return key


__all__ = ["SecretKey", "KeyGenerator"]
