# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Rich rendering of a probability matrix.

`matrix_table` builds the `rich.table.Table` printed by ``fairdice table``;
`matrix_lines` renders the same table into plain text lines for the in-game
help, which goes through a line-oriented port instead of a terminal.
"""

from __future__ import annotations

import io
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from fairdice.constants import DEFAULT_PROBABILITY_PRECISION, DIAGONAL_SENTINEL
from fairdice.dice.model import DiceSet
from fairdice.dice.probability import ProbabilityMatrix

_CORNER = "beats"


def matrix_table(
    matrix: ProbabilityMatrix,
    dice: DiceSet,
    *,
    precision: int = DEFAULT_PROBABILITY_PRECISION,
    title: Optional[str] = None,
) -> Table:
    if precision < 0:
        raise ValueError("precision must be >= 0")
    if len(dice) != matrix.size:
        raise ValueError("matrix and dice set sizes differ")

    table = Table(title=title)
    table.add_column(_CORNER, justify="left")
    for j in dice.indices():
        table.add_column(str(j), justify="right")
    for i, row in enumerate(matrix.rows()):
        cells = [DIAGONAL_SENTINEL if p is None else f"{p:.{precision}f}" for p in row]
        # Text() keeps die faces out of rich markup parsing
        table.add_row(Text(f"{i} [{dice[i]}]"), *cells)
    return table


def matrix_lines(
    matrix: ProbabilityMatrix,
    dice: DiceSet,
    *,
    precision: int = DEFAULT_PROBABILITY_PRECISION,
    width: int = 120,
) -> List[str]:
    """Render `matrix_table` without colour and split it into lines."""
    buf = io.StringIO()
    console = Console(file=buf, width=width, color_system=None, force_terminal=False)
    console.print(matrix_table(matrix, dice, precision=precision))
    return [line.rstrip() for line in buf.getvalue().splitlines() if line.strip()]


__all__ = ["matrix_table", "matrix_lines"]
