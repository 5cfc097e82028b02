"""
fairdice.cli
------------

Command line front end (requires `typer` and `rich`).

Commands:
  - play    : Play one provably fair game against the computer.
  - table   : Show the pairwise win-probability table for a dice set.
  - roll    : Run a single fair round over 0..RANGE-1.
  - verify  : Check a revealed key/value pair against a commitment.

Environment:
  FAIRDICE_* variables configure defaults (see fairdice.config.GameConfig);
  --config loads a JSON/YAML file instead.

Example:
  fairdice play 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7
  fairdice verify --commitment 3f… --key 9a… --value 4
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from fairdice.commit_reveal.round import FairValueGenerator
from fairdice.commit_reveal.verify import verify_reveal
from fairdice.config import GameConfig
from fairdice.constants import USAGE_EXAMPLE
from fairdice.dice.model import DiceSet, parse_dice_set
from fairdice.dice.probability import ProbabilityMatrix
from fairdice.dice.render import matrix_table
from fairdice.errors import BadReveal, DiceValidationError, EntropyUnavailable
from fairdice.game import COUNTERPART, HOST, INSTRUCTIONS, DiceGame, GameOutcome
from fairdice.protocol.exchange import FairExchange, RoundAbandoned, RoundCompleted
from fairdice.protocol.messages import ROUND_HELP, ExitRequested
from fairdice.protocol.ports import ConsolePort
from fairdice.utils.bytes import from_hex
from fairdice.version import __version__

__all__ = ["app", "main"]

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Dice such as "-1,2,3,4,5,6" must reach the command as arguments.
_DICE_CONTEXT = {"ignore_unknown_options": True}

app = typer.Typer(
    name="fairdice",
    help="Provably fair non-transitive dice (commit → contribute → reveal).",
    no_args_is_help=True,
    add_completion=False,
)


def _version_cb(value: bool) -> None:
    if value:
        typer.echo(f"fairdice {__version__}")
        raise typer.Exit(0)


@app.callback()
def cli_main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON/YAML config file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
    version: bool = typer.Option(False, "--version", callback=_version_cb, is_eager=True, help="Show version and exit."),
) -> None:
    """Load configuration and set up logging for the chosen command."""
    try:
        cfg = GameConfig.from_file(str(config)) if config is not None else GameConfig.from_env()
        if log_level is not None:
            cfg.log_level = log_level
            cfg.validate()
    except (OSError, ValueError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    logging.basicConfig(level=cfg.log_level_no, format=_LOG_FORMAT, stream=sys.stderr)
    logger.debug("config: %s", cfg.to_dict())
    ctx.obj = cfg


def _config(ctx: typer.Context) -> GameConfig:
    return ctx.obj if isinstance(ctx.obj, GameConfig) else GameConfig()


def _load_dice(specs: Optional[List[str]]) -> DiceSet:
    try:
        return parse_dice_set(specs or [])
    except DiceValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Example: {USAGE_EXAMPLE}", err=True)
        raise typer.Exit(code=1)


def _entropy_failure(e: EntropyUnavailable) -> typer.Exit:
    typer.echo(f"Fatal: {e}", err=True)
    return typer.Exit(code=1)


@app.command("play", context_settings=_DICE_CONTEXT)
def cmd_play(
    ctx: typer.Context,
    dice: Optional[List[str]] = typer.Argument(None, help="Dice as 6 comma-separated integers each (at least 3)."),
    max_attempts: Optional[int] = typer.Option(None, "--max-attempts", min=1, help="Invalid inputs allowed per prompt."),
) -> None:
    """Play one game: fair coin toss, die selection, then one fair roll each."""
    cfg = _config(ctx)
    if max_attempts is not None:
        cfg.max_attempts = max_attempts
    dice_set = _load_dice(dice)

    port = ConsolePort()
    exchange = FairExchange(FairValueGenerator(), port, cfg)
    game = DiceGame(dice_set, exchange, precision=cfg.probability_precision)
    for line in INSTRUCTIONS:
        port.send(line)

    try:
        outcome = game.play()
    except EntropyUnavailable as e:
        raise _entropy_failure(e)

    if isinstance(outcome, ExitRequested):
        typer.echo("Goodbye.")
        raise typer.Exit(0)
    if isinstance(outcome, RoundAbandoned):
        typer.echo(f"Game abandoned: {outcome.reason}.", err=True)
        raise typer.Exit(code=1)

    assert isinstance(outcome, GameOutcome)
    label = {COUNTERPART: "you", HOST: "computer"}.get(outcome.winner, "nobody (tie)")
    typer.echo(f"Winner: {label}.")


@app.command("table", context_settings=_DICE_CONTEXT)
def cmd_table(
    ctx: typer.Context,
    dice: Optional[List[str]] = typer.Argument(None, help="Dice as 6 comma-separated integers each (at least 3)."),
    precision: Optional[int] = typer.Option(None, "--precision", "-p", min=0, max=12, help="Decimals to show."),
    plain: bool = typer.Option(False, "--plain", help="Plain text grid instead of a rich table."),
) -> None:
    """Show P(row die beats column die) for every pair of dice."""
    cfg = _config(ctx)
    digits = precision if precision is not None else cfg.probability_precision
    dice_set = _load_dice(dice)
    matrix = ProbabilityMatrix.compute(dice_set)

    if plain:
        typer.echo(matrix.to_text(precision=digits))
        return

    Console().print(matrix_table(matrix, dice_set, precision=digits, title="P(row die beats column die)"))


@app.command("roll")
def cmd_roll(
    ctx: typer.Context,
    range_size: int = typer.Argument(..., min=1, help="Draw a value in 0..RANGE-1."),
    purpose: str = typer.Option("roll", "--purpose", help="Label published with the commitment."),
) -> None:
    """Run one fair round: commitment, your number, reveal."""
    cfg = _config(ctx)
    exchange = FairExchange(FairValueGenerator(), ConsolePort(), cfg)
    try:
        outcome = exchange.run(
            range_size,
            purpose,
            prompt=f"Your number (0..{range_size - 1}), ? for help, x to exit: ",
            help_lines=ROUND_HELP,
        )
    except EntropyUnavailable as e:
        raise _entropy_failure(e)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if isinstance(outcome, ExitRequested):
        raise typer.Exit(0)
    if isinstance(outcome, RoundAbandoned):
        typer.echo(f"Round abandoned: {outcome.reason}.", err=True)
        raise typer.Exit(code=1)
    assert isinstance(outcome, RoundCompleted)
    typer.echo(f"Result: {outcome.result.combined}")


@app.command("verify")
def cmd_verify(
    commitment: str = typer.Option(..., "--commitment", help="Published commitment (hex)."),
    key: str = typer.Option(..., "--key", help="Revealed key (hex)."),
    value: int = typer.Option(..., "--value", help="Revealed host value."),
) -> None:
    """Check that KEY and VALUE reproduce COMMITMENT."""
    try:
        verify_reveal(commitment, key=from_hex(key.strip()), value=value)
    except BadReveal as e:
        typer.echo(f"MISMATCH: {e}")
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    typer.echo("OK: commitment matches the revealed key and value.")


def main() -> None:  # pragma: no cover - thin wrapper
    """Console-script entry point."""
    try:
        app(prog_name="fairdice")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
