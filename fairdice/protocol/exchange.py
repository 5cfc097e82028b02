# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Driving a fair round over an `IOPort`.

`FairExchange.run` performs one round end to end:

    1. open the round (host value and fresh key drawn, commitment computed)
    2. send the commitment line
    3. ask for the contribution, re-asking on bad input up to
       `max_attempts` times within a flat loop
    4. on success send the reveal line and return `RoundCompleted`

An exit request, end of input, an exhausted retry budget or an expired
deadline cancel the round (its secrets are dropped unrevealed) and are
returned as `ExitRequested` / `RoundAbandoned`. Nothing here terminates the
process; the caller decides what an outcome means.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from fairdice.commit_reveal.round import FairValueGenerator, RoundResult
from fairdice.config import GameConfig
from fairdice.errors import InvalidContribution
from fairdice.protocol.messages import (
    Continue,
    ExitRequested,
    HelpRequested,
    Retry,
    classify_input,
    format_commitment_line,
    format_reveal_line,
)
from fairdice.protocol.ports import IOPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundCompleted:
    result: RoundResult


@dataclass(frozen=True)
class RoundAbandoned:
    reason: str


@dataclass(frozen=True)
class Chosen:
    value: int


ExchangeOutcome = Union[RoundCompleted, ExitRequested, RoundAbandoned]
ChoiceOutcome = Union[Chosen, ExitRequested, RoundAbandoned]


@dataclass(frozen=True)
class _Accepted:
    value: Any


class FairExchange:
    """
    Runs fair rounds and menu choices against a port.

    Args:
        generator: Round source owned by this session.
        port: Channel to the counterpart.
        config: Retry budget and timeout.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        generator: FairValueGenerator,
        port: IOPort,
        config: Optional[GameConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.generator = generator
        self.port = port
        self.config = config if config is not None else GameConfig()
        self._clock = clock

    def run(
        self,
        range_size: int,
        purpose: str,
        *,
        prompt: Optional[str] = None,
        help_lines: Sequence[str] = (),
    ) -> ExchangeOutcome:
        commitment, rnd = self.generator.generate_range(range_size, purpose)
        ask = prompt if prompt is not None else f"Your number (0..{range_size - 1}): "
        try:
            self.port.send(format_commitment_line(commitment, range_size, purpose))
            deadline = None
            if self.config.contribution_timeout_s is not None:
                deadline = self._clock() + self.config.contribution_timeout_s
            got = self._solicit(ask, rnd.contribute, help_lines, deadline)
        except BaseException:
            # interrupted while waiting: never leave a pending round behind
            if not rnd.state.terminal:
                rnd.cancel()
            raise

        if not isinstance(got, _Accepted):
            rnd.cancel()
            logger.info("round %d (%s) not completed: %s", rnd.round_id, purpose, got)
            return got

        result: RoundResult = got.value
        self.port.send(format_reveal_line(result))
        return RoundCompleted(result)

    def choose(
        self,
        prompt: str,
        options: Sequence[int],
        *,
        help_lines: Sequence[str] = (),
    ) -> ChoiceOutcome:
        """Ask for one of `options` with the same retry/help/exit handling."""
        allowed = frozenset(options)
        if not allowed:
            raise ValueError("options must not be empty")

        def accept(v: int) -> int:
            if v not in allowed:
                raise ValueError(f"{v} is not one of {', '.join(str(o) for o in options)}")
            return v

        got = self._solicit(prompt, accept, help_lines, None)
        if isinstance(got, _Accepted):
            return Chosen(got.value)
        return got

    def _solicit(
        self,
        prompt: str,
        accept: Callable[[int], Any],
        help_lines: Sequence[str],
        deadline: Optional[float],
    ) -> Union[_Accepted, ExitRequested, RoundAbandoned]:
        attempts = 0
        while attempts < self.config.max_attempts:
            raw = self.port.receive(prompt)
            if raw is None:
                return RoundAbandoned("end of input")
            if deadline is not None and self._clock() > deadline:
                self.port.send("Time is up; this round is cancelled.")
                return RoundAbandoned("timeout")

            signal = classify_input(raw)
            if isinstance(signal, ExitRequested):
                return signal
            if isinstance(signal, HelpRequested):
                for line in help_lines:
                    self.port.send(line)
                continue
            if isinstance(signal, Retry):
                attempts += 1
                self.port.send(f"Invalid input: {signal.reason}.")
                continue

            assert isinstance(signal, Continue)
            try:
                return _Accepted(accept(signal.value))
            except InvalidContribution as e:
                attempts += 1
                self.port.send(f"Invalid input: {e.value} is outside 0..{e.range_size - 1}.")
            except ValueError as e:
                attempts += 1
                self.port.send(f"Invalid input: {e}.")

        return RoundAbandoned(f"no valid input after {self.config.max_attempts} attempts")


__all__ = [
    "RoundCompleted",
    "RoundAbandoned",
    "Chosen",
    "ExchangeOutcome",
    "ChoiceOutcome",
    "FairExchange",
]
