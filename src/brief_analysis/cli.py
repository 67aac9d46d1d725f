from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .commands import cmd_analyze, cmd_diff, cmd_ping, cmd_validate
from .config import load_config
from .logging_config import configure_logging

app = typer.Typer(add_completion=False)


@app.callback()
def _setup() -> None:
    configure_logging(load_config().log_level)


@app.command()
def ping() -> None:
    """
    Sanity check: config files, env wiring, and analysis thresholds.
    """
    cmd_ping()


@app.command()
def validate(brief: Path = typer.Option(..., "--brief", help="Path to a generated brief JSON")) -> None:
    """
    Validate a brief against the brief schema.
    """
    code = cmd_validate(brief)
    if code:
        raise typer.Exit(code=code)


@app.command()
def analyze(
    brief: Path = typer.Option(..., "--brief", help="Path to a generated brief JSON"),
    previous: Optional[Path] = typer.Option(None, "--previous", help="Previous version of the same brief"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output path (default: <brief>.analyzed.json)"),
) -> None:
    """
    Validate a brief and attach evidence strength, evidence network,
    coherence alerts, changes since the previous version and integrity score.
    """
    code = cmd_analyze(brief, previous, out)
    if code:
        raise typer.Exit(code=code)


@app.command()
def diff(
    previous: Path = typer.Option(..., "--previous"),
    current: Path = typer.Option(..., "--current"),
) -> None:
    """
    Show changes between two brief versions.
    """
    cmd_diff(previous, current)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
