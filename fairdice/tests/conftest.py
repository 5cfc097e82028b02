from __future__ import annotations

import hashlib
from typing import Iterable, List

import pytest
from prometheus_client import CollectorRegistry

from fairdice.commit_reveal.keys import KeyGenerator
from fairdice.commit_reveal.round import FairValueGenerator
from fairdice.config import GameConfig
from fairdice.entropy.uniform import SecureRandom
from fairdice.errors import EntropyUnavailable
from fairdice.metrics import Metrics
from fairdice.protocol.exchange import FairExchange
from fairdice.protocol.ports import ScriptedPort


class CounterEntropy:
    """Deterministic stream: SHA3-256(seed || counter) blocks, never repeating."""

    def __init__(self, seed: bytes = b"fairdice-tests") -> None:
        self.seed = seed
        self.counter = 0
        self.calls = 0

    def random_bytes(self, n: int) -> bytes:
        self.calls += 1
        out = bytearray()
        while len(out) < n:
            block = hashlib.sha3_256(self.seed + self.counter.to_bytes(8, "big")).digest()
            self.counter += 1
            out.extend(block)
        return bytes(out[:n])


class QueuedEntropy:
    """Hands out pre-baked chunks in order; raises EntropyUnavailable when empty."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self.chunks: List[bytes] = list(chunks)
        self.requests: List[int] = []

    def random_bytes(self, n: int) -> bytes:
        self.requests.append(n)
        if not self.chunks:
            raise EntropyUnavailable("queue exhausted")
        chunk = self.chunks.pop(0)
        assert len(chunk) == n, f"test queued {len(chunk)} bytes for a {n}-byte request"
        return chunk


class BrokenEntropy:
    def random_bytes(self, n: int) -> bytes:
        raise EntropyUnavailable("device unplugged")


class FixedRandom(SecureRandom):
    """SecureRandom whose draws are scripted (values must lie in range)."""

    def __init__(self, values: Iterable[int], metrics: Metrics) -> None:
        super().__init__(CounterEntropy(), metrics=metrics)
        self._values = list(values)

    def uniform(self, lo: int, hi: int) -> int:
        v = self._values.pop(0)
        assert lo <= v <= hi
        return v


@pytest.fixture
def metrics() -> Metrics:
    return Metrics(registry=CollectorRegistry())


@pytest.fixture
def entropy() -> CounterEntropy:
    return CounterEntropy()


@pytest.fixture
def rng(entropy: CounterEntropy, metrics: Metrics) -> SecureRandom:
    return SecureRandom(entropy, metrics=metrics)


@pytest.fixture
def generator(rng: SecureRandom, metrics: Metrics) -> FairValueGenerator:
    return FairValueGenerator(rng, KeyGenerator(rng.source), metrics=metrics)


@pytest.fixture
def make_generator(metrics: Metrics):
    """Generator whose host values are fixed in advance."""

    def _make(*host_values: int) -> FairValueGenerator:
        fixed = FixedRandom(host_values, metrics)
        return FairValueGenerator(fixed, KeyGenerator(CounterEntropy(b"keys")), metrics=metrics)

    return _make


@pytest.fixture
def make_exchange(generator: FairValueGenerator):
    def _make(*inputs: str, gen: FairValueGenerator = None, **cfg) -> FairExchange:
        port = ScriptedPort(inputs)
        return FairExchange(gen or generator, port, GameConfig(**cfg))

    return _make


def sample_value(metrics: Metrics, name: str, **labels) -> float:
    """Read a counter sample from an isolated Metrics registry."""
    v = metrics.registry.get_sample_value(name, labels or None)
    return 0.0 if v is None else v
