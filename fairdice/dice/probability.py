# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Pairwise win probabilities over a dice set.

For every ordered pair of distinct dice (i, j) we count the face pairs
(a from die i, b from die j) with a > b out of all 6 × 6 combinations:

    P(i beats j) = wins(i, j) / 36

Ties count for neither side, so P(i beats j) + P(j beats i) <= 1. The
diagonal has no meaning (a die does not play itself) and is stored as None.

The table is advisory: it helps a player pick a die and never feeds the
fair-round protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple

from fairdice.constants import DEFAULT_PROBABILITY_PRECISION, DIAGONAL_SENTINEL
from fairdice.dice.model import DiceSet, Die


def count_wins(a: Die, b: Die) -> int:
    """Number of face pairs where `a` shows strictly more than `b`."""
    return sum(1 for x in a for y in b if x > y)


@dataclass(frozen=True, slots=True)
class ProbabilityMatrix:
    """
    n × n win-count grid; `counts[i][j]` is None on the diagonal.

    `outcomes` is the number of face pairs per matchup (36 for six-sided dice).
    """

    counts: Tuple[Tuple[Optional[int], ...], ...]
    outcomes: int

    @classmethod
    def compute(cls, dice: DiceSet) -> "ProbabilityMatrix":
        n = len(dice)
        grid = tuple(
            tuple(None if i == j else count_wins(dice[i], dice[j]) for j in range(n))
            for i in range(n)
        )
        return cls(counts=grid, outcomes=len(dice[0]) * len(dice[0]))

    @property
    def size(self) -> int:
        return len(self.counts)

    def wins(self, i: int, j: int) -> Optional[int]:
        return self.counts[i][j]

    def probability(self, i: int, j: int) -> Optional[Fraction]:
        """Exact P(die i beats die j), or None on the diagonal."""
        c = self.counts[i][j]
        return None if c is None else Fraction(c, self.outcomes)

    def rows(self) -> List[List[Optional[float]]]:
        """Float grid for display and serialization."""
        return [
            [None if c is None else c / self.outcomes for c in row]
            for row in self.counts
        ]

    def to_text(
        self,
        *,
        precision: int = DEFAULT_PROBABILITY_PRECISION,
        sentinel: str = DIAGONAL_SENTINEL,
        labels: Optional[List[str]] = None,
    ) -> str:
        """
        Render as a plain text grid.

        Rows are the die that wins, columns the die it plays against. Header
        row and column carry the die labels (indices by default).
        """
        if precision < 0:
            raise ValueError("precision must be >= 0")
        names = labels if labels is not None else [str(i) for i in range(self.size)]
        if len(names) != self.size:
            raise ValueError("one label per die is required")

        cells = [
            [sentinel if p is None else f"{p:.{precision}f}" for p in row]
            for row in self.rows()
        ]
        corner = "beats"
        width = max([len(corner)] + [len(x) for x in names] + [len(c) for row in cells for c in row])

        def line(first: str, rest: List[str]) -> str:
            return " | ".join([first.ljust(width)] + [c.rjust(width) for c in rest])

        header = line(corner, names)
        rule = "-+-".join(["-" * width] * (self.size + 1))
        body = [line(names[i], cells[i]) for i in range(self.size)]
        return "\n".join([header, rule, *body])


__all__ = ["ProbabilityMatrix", "count_wins"]
