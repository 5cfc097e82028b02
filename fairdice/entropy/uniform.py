# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Bias-free uniform integers from a secure entropy source.

Method
------
For a range of size ``r = hi - lo + 1``:

    bits   = (r - 1).bit_length()
    nbytes = ceil(bits / 8)
    sample = int(random_bytes(nbytes)) & ((1 << bits) - 1)
    accept iff sample < r, else redraw

Masking to the bit length of ``r - 1`` keeps the acceptance probability
above 1/2, so the expected number of draws is below 2. Reducing a wider
sample with ``% r`` is never used: it over-weights the low residues whenever
``r`` does not divide the sample space.
"""

from __future__ import annotations

from typing import Optional, Sequence, TypeVar

from fairdice.entropy import EntropySource, default_source
from fairdice.metrics import METRICS, Metrics

T = TypeVar("T")


class SecureRandom:
    """
    Uniform integer sampler over an `EntropySource`.

    Args:
        source: Entropy source; defaults to the system CSPRNG.
        metrics: Metrics sink for redraw counts.
    """

    __slots__ = ("source", "_metrics")

    def __init__(
        self,
        source: Optional[EntropySource] = None,
        *,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.source = source if source is not None else default_source()
        self._metrics = metrics if metrics is not None else METRICS

    def uniform(self, lo: int, hi: int) -> int:
        """
        Return an integer uniformly distributed over ``[lo, hi]`` (inclusive).

        Raises:
            ValueError: if ``lo > hi``.
            EntropyUnavailable: if the source fails (never retried).
        """
        for name, v in (("lo", lo), ("hi", hi)):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if lo > hi:
            raise ValueError(f"empty range: lo={lo} > hi={hi}")

        size = hi - lo + 1
        if size == 1:
            return lo

        bits = (size - 1).bit_length()
        nbytes = (bits + 7) // 8
        mask = (1 << bits) - 1
        redraws = 0
        while True:
            sample = int.from_bytes(self.source.random_bytes(nbytes), "big") & mask
            if sample < size:
                self._metrics.record_redraw(redraws)
                return lo + sample
            redraws += 1

    def below(self, n: int) -> int:
        """Uniform integer in ``[0, n)``; ``n`` must be >= 1."""
        if n < 1:
            raise ValueError("n must be >= 1")
        return self.uniform(0, n - 1)

    def choice(self, seq: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[self.below(len(seq))]


__all__ = ["SecureRandom"]
