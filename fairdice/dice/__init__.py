"""
fairdice.dice
-------------

Dice validation (`model`) and pairwise win probabilities (`probability`).
"""

from __future__ import annotations

from fairdice.dice.model import DiceSet, Die, parse_dice_set, parse_die
from fairdice.dice.probability import ProbabilityMatrix, count_wins
from fairdice.dice.render import matrix_lines, matrix_table

__all__ = [
    "Die",
    "DiceSet",
    "parse_die",
    "parse_dice_set",
    "ProbabilityMatrix",
    "count_wins",
    "matrix_table",
    "matrix_lines",
]
