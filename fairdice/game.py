# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Non-transitive dice game over fair rounds.

One call to `DiceGame.play()` plays a single game between the host (this
program) and the counterpart (the user at the other end of the port):

    1. Coin toss: a fair round over {0, 1}; the counterpart moves first when
       the combined result is 0.
    2. The first mover picks a die; the other side picks a different one. The
       host picks uniformly at random among the remaining dice.
    3. Host roll, then counterpart roll: each a fair round over the six face
       positions of the roller's die.
    4. Higher face wins; equal faces tie.

Every random decision the counterpart depends on goes through a fair round,
so the transcript (commitment and reveal lines) lets them audit the game.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from fairdice.commit_reveal.round import RoundResult
from fairdice.constants import DEFAULT_PROBABILITY_PRECISION
from fairdice.dice.model import DiceSet
from fairdice.dice.probability import ProbabilityMatrix
from fairdice.dice.render import matrix_lines
from fairdice.entropy.uniform import SecureRandom
from fairdice.protocol.exchange import (
    Chosen,
    FairExchange,
    RoundAbandoned,
    RoundCompleted,
)
from fairdice.protocol.messages import ROUND_HELP, ExitRequested

logger = logging.getLogger(__name__)

HOST = "host"
COUNTERPART = "counterpart"
TIE = "tie"

INSTRUCTIONS = (
    *ROUND_HELP[:-1],
    "Each player rolls their own die; the higher face wins.",
    ROUND_HELP[-1],
)


@dataclass(frozen=True)
class GameOutcome:
    winner: str
    counterpart_first: bool
    counterpart_die: int
    host_die: int
    counterpart_face: int
    host_face: int
    rounds: Tuple[RoundResult, ...]


PlayOutcome = Union[GameOutcome, ExitRequested, RoundAbandoned]


class DiceGame:
    """
    Args:
        dice: Validated dice set.
        exchange: Fair exchange bound to the counterpart's port.
        rng: Sampler for the host's die pick.
        precision: Decimals shown in the help table.
    """

    def __init__(
        self,
        dice: DiceSet,
        exchange: FairExchange,
        *,
        rng: Optional[SecureRandom] = None,
        precision: int = DEFAULT_PROBABILITY_PRECISION,
    ) -> None:
        self.dice = dice
        self.exchange = exchange
        self.rng = rng if rng is not None else exchange.generator.rng
        self.precision = precision
        self._matrix: Optional[ProbabilityMatrix] = None

    @property
    def port(self):
        return self.exchange.port

    @property
    def matrix(self) -> ProbabilityMatrix:
        if self._matrix is None:
            self._matrix = ProbabilityMatrix.compute(self.dice)
        return self._matrix

    def help_lines(self) -> List[str]:
        return [
            *INSTRUCTIONS,
            "Probability that the row die beats the column die:",
            *matrix_lines(self.matrix, self.dice, precision=self.precision),
        ]

    # ---- Steps ----

    def _toss(self) -> Union[Tuple[bool, RoundResult], ExitRequested, RoundAbandoned]:
        self.port.send("Let's determine who makes the first move.")
        out = self.exchange.run(
            2,
            "first-move",
            prompt="Your number (0..1), ? for help, x to exit: ",
            help_lines=self.help_lines(),
        )
        if not isinstance(out, RoundCompleted):
            return out
        counterpart_first = out.result.combined == 0
        self.port.send("You make the first move." if counterpart_first else "I make the first move.")
        return counterpart_first, out.result

    def _counterpart_pick(self, exclude: Optional[int]) -> Union[int, ExitRequested, RoundAbandoned]:
        options = [i for i in self.dice.indices() if i != exclude]
        self.port.send("Choose your die:")
        for i in options:
            self.port.send(f"{i} - {self.dice[i]}")
        out = self.exchange.choose(
            "Your selection (? for help, x to exit): ",
            options,
            help_lines=self.help_lines(),
        )
        if isinstance(out, Chosen):
            return out.value
        return out

    def _host_pick(self, exclude: Optional[int]) -> int:
        options = [i for i in self.dice.indices() if i != exclude]
        pick = self.rng.choice(options)
        self.port.send(f"I choose die {pick}: [{self.dice[pick]}].")
        return pick

    def _roll(self, die_index: int, purpose: str) -> Union[Tuple[int, RoundResult], ExitRequested, RoundAbandoned]:
        die = self.dice[die_index]
        out = self.exchange.run(
            len(die),
            purpose,
            prompt=f"Add your number modulo {len(die)} (0..{len(die) - 1}), ? for help, x to exit: ",
            help_lines=self.help_lines(),
        )
        if not isinstance(out, RoundCompleted):
            return out
        return die[out.result.combined], out.result

    # ---- Game ----

    def play(self) -> PlayOutcome:
        toss = self._toss()
        if not isinstance(toss, tuple):
            return toss
        first, toss_round = toss

        if first:
            picked = self._counterpart_pick(None)
            if not isinstance(picked, int):
                return picked
            counterpart_die = picked
            host_die = self._host_pick(counterpart_die)
        else:
            host_die = self._host_pick(None)
            picked = self._counterpart_pick(host_die)
            if not isinstance(picked, int):
                return picked
            counterpart_die = picked

        self.port.send("It is time for my roll.")
        host_roll = self._roll(host_die, "host-roll")
        if not isinstance(host_roll, tuple):
            return host_roll
        host_face, host_round = host_roll
        self.port.send(f"My roll result is {host_face}.")

        self.port.send("It is time for your roll.")
        counterpart_roll = self._roll(counterpart_die, "counterpart-roll")
        if not isinstance(counterpart_roll, tuple):
            return counterpart_roll
        counterpart_face, counterpart_round = counterpart_roll
        self.port.send(f"Your roll result is {counterpart_face}.")

        if counterpart_face > host_face:
            winner = COUNTERPART
            self.port.send(f"You win ({counterpart_face} > {host_face})!")
        elif host_face > counterpart_face:
            winner = HOST
            self.port.send(f"I win ({host_face} > {counterpart_face})!")
        else:
            winner = TIE
            self.port.send(f"It's a tie ({host_face} = {counterpart_face}).")

        logger.info(
            "game finished: winner=%s host_die=%d counterpart_die=%d",
            winner, host_die, counterpart_die,
        )
        return GameOutcome(
            winner=winner,
            counterpart_first=first,
            counterpart_die=counterpart_die,
            host_die=host_die,
            counterpart_face=counterpart_face,
            host_face=host_face,
            rounds=(toss_round, host_round, counterpart_round),
        )
