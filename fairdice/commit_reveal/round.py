# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
One-shot fair rounds.

A `FairValueGenerator` opens rounds in which the host commits to a secret
value before the counterpart contributes theirs. The combined result
``(host_value + contribution) mod range_size`` is uniform over the range as
long as the counterpart could not see the host value when choosing, which
the state machine below guarantees.

State machine (per round)
-------------------------

    IDLE ──commit──▶ COMMITTED ──publish──▶ AWAITING_CONTRIBUTION
                                                 │            │
                                          contribute()     cancel()
                                                 ▼            ▼
                                             REVEALED     CANCELLED

- `contribute` is only legal in AWAITING_CONTRIBUTION, which is only reached
  once the commitment has been published: the counterpart can never be asked
  before the commitment exists.
- Out-of-range contributions raise `InvalidContribution` and leave the round
  waiting (recoverable).
- REVEALED and CANCELLED are terminal; any further use raises
  `RoundAlreadyFinalized`.
- A cancelled round drops its key and host value without revealing them.

Rounds are only constructible by a generator, which always draws a brand new
key for each of them.

Typical usage
-------------
    gen = FairValueGenerator()
    commitment, rnd = gen.generate_range(6, "computer-roll")
    publish(commitment)
    result = rnd.contribute(counterpart_value)
    assert result.verify()
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from fairdice.commit_reveal.commit import Commitment, build_commitment
from fairdice.commit_reveal.keys import KeyGenerator, SecretKey
from fairdice.commit_reveal.verify import verify
from fairdice.entropy.uniform import SecureRandom
from fairdice.errors import (
    InvalidContribution,
    RoundAlreadyFinalized,
    RoundInProgress,
)
from fairdice.metrics import METRICS, Metrics

logger = logging.getLogger(__name__)


class RoundState(Enum):
    IDLE = "idle"
    COMMITTED = "committed"
    AWAITING_CONTRIBUTION = "awaiting-contribution"
    REVEALED = "revealed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (RoundState.REVEALED, RoundState.CANCELLED)


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Everything needed to audit a finished round."""

    round_id: int
    purpose: str
    range_size: int
    host_value: int
    counterpart_value: int
    combined: int
    key: SecretKey
    commitment: Commitment

    def verify(self) -> bool:
        """Recheck the commitment and the combination arithmetic."""
        if not verify(self.key, self.host_value, self.commitment):
            return False
        return self.combined == (self.host_value + self.counterpart_value) % self.range_size


# Guards FairRound construction; only FairValueGenerator holds it.
_ROUND_TOKEN = object()


class FairRound:
    """
    Pending-round handle returned by `FairValueGenerator.generate_range`.

    Holds the key and host value privately until the contribution arrives.
    """

    __slots__ = (
        "round_id",
        "range_size",
        "purpose",
        "_state",
        "_key",
        "_host_value",
        "_commitment",
        "_owner",
        "_metrics",
    )

    def __init__(
        self,
        token: object,
        *,
        round_id: int,
        range_size: int,
        purpose: str,
        owner: "FairValueGenerator",
        metrics: Metrics,
    ) -> None:
        if token is not _ROUND_TOKEN:
            raise TypeError("FairRound instances are created by FairValueGenerator.generate_range")
        self.round_id = round_id
        self.range_size = range_size
        self.purpose = purpose
        self._state = RoundState.IDLE
        self._key: Optional[SecretKey] = None
        self._host_value: Optional[int] = None
        self._commitment: Optional[Commitment] = None
        self._owner = owner
        self._metrics = metrics

    # ---- Read-only views ----

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def commitment(self) -> Commitment:
        if self._commitment is None:
            raise RuntimeError(f"round {self.round_id} has not committed yet")
        return self._commitment

    # ---- Transitions ----

    def _commit(self, key: SecretKey, host_value: int) -> None:
        if self._state is not RoundState.IDLE:
            raise RoundAlreadyFinalized(self.round_id, self._state.value)
        self._key = key
        self._host_value = host_value
        self._commitment = build_commitment(key, host_value)
        self._state = RoundState.COMMITTED

    def _publish(self) -> Commitment:
        if self._state is not RoundState.COMMITTED:
            raise RoundAlreadyFinalized(self.round_id, self._state.value)
        self._state = RoundState.AWAITING_CONTRIBUTION
        logger.debug(
            "round %d (%s) committed: range=0..%d commitment=%s",
            self.round_id, self.purpose, self.range_size - 1, self._commitment,
        )
        return self.commitment

    def contribute(self, value: int) -> RoundResult:
        """
        Supply the counterpart's value and reveal the round.

        Raises:
            InvalidContribution: value is not an int in [0, range_size); the
                round keeps waiting.
            RoundAlreadyFinalized: the round was already revealed or cancelled.
        """
        if self._state.terminal:
            raise RoundAlreadyFinalized(self.round_id, self._state.value)
        if self._state is not RoundState.AWAITING_CONTRIBUTION:
            raise RuntimeError(f"round {self.round_id} is {self._state.value}, not awaiting a contribution")
        if (
            not isinstance(value, int)
            or isinstance(value, bool)
            or not 0 <= value < self.range_size
        ):
            self._metrics.record_contribution("invalid")
            raise InvalidContribution(value, self.range_size)

        assert self._key is not None and self._host_value is not None
        self._metrics.record_contribution("accepted")
        result = RoundResult(
            round_id=self.round_id,
            purpose=self.purpose,
            range_size=self.range_size,
            host_value=self._host_value,
            counterpart_value=value,
            combined=(self._host_value + value) % self.range_size,
            key=self._key,
            commitment=self.commitment,
        )
        self._finish(RoundState.REVEALED)
        logger.info(
            "round %d (%s) revealed: host=%d counterpart=%d result=%d",
            self.round_id, self.purpose, result.host_value, value, result.combined,
        )
        return result

    def cancel(self) -> None:
        """
        Abandon the round without revealing its key or host value.

        Cancelling twice is a no-op; cancelling a revealed round raises
        `RoundAlreadyFinalized`.
        """
        if self._state is RoundState.CANCELLED:
            return
        if self._state is RoundState.REVEALED:
            raise RoundAlreadyFinalized(self.round_id, self._state.value)
        self._finish(RoundState.CANCELLED)
        logger.info("round %d (%s) cancelled; secrets discarded", self.round_id, self.purpose)

    def _finish(self, state: RoundState) -> None:
        self._state = state
        self._key = None
        self._host_value = None
        self._metrics.record_round(state.value)
        self._owner._release(self)

    def __repr__(self) -> str:
        return (
            f"FairRound(id={self.round_id}, purpose={self.purpose!r}, "
            f"range={self.range_size}, state={self._state.value})"
        )


class FairValueGenerator:
    """
    Opens fair rounds for one logical session.

    At most one round is outstanding at a time; each session (player,
    connection) must own its own generator.

    Args:
        rng: Uniform sampler for host values.
        keygen: Secret key source.
        metrics: Metrics sink.
    """

    def __init__(
        self,
        rng: Optional[SecureRandom] = None,
        keygen: Optional[KeyGenerator] = None,
        *,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._metrics = metrics if metrics is not None else METRICS
        self.rng = rng if rng is not None else SecureRandom(metrics=self._metrics)
        self.keygen = keygen if keygen is not None else KeyGenerator(self.rng.source)
        self._ids = itertools.count(1)
        self._pending: Optional[FairRound] = None

    @property
    def pending(self) -> Optional[FairRound]:
        """The round currently awaiting a contribution, if any."""
        return self._pending

    def generate_range(self, range_size: int, purpose: str = "") -> Tuple[Commitment, FairRound]:
        """
        Open a round over ``[0, range_size)`` and return its published commitment.

        Raises:
            ValueError: range_size < 1.
            RoundInProgress: a previous round is still awaiting its contribution.
            EntropyUnavailable: the entropy source failed.
        """
        if not isinstance(range_size, int) or isinstance(range_size, bool):
            raise TypeError("range_size must be an int")
        if range_size < 1:
            raise ValueError("range_size must be >= 1")
        if self._pending is not None:
            raise RoundInProgress(self._pending.round_id)

        rnd = FairRound(
            _ROUND_TOKEN,
            round_id=next(self._ids),
            range_size=range_size,
            purpose=purpose,
            owner=self,
            metrics=self._metrics,
        )
        host_value = self.rng.uniform(0, range_size - 1)
        key = self.keygen.generate()
        rnd._commit(key, host_value)
        self._pending = rnd
        return rnd._publish(), rnd

    def _release(self, rnd: FairRound) -> None:
        if self._pending is rnd:
            self._pending = None


__all__ = [
    "RoundState",
    "RoundResult",
    "FairRound",
    "FairValueGenerator",
]
