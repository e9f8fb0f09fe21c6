from pathlib import Path
import sys

import typer

from .config import VERSION, resolve_config
from .core.driver import DriverState, sample_stream

app = typer.Typer(
    help="Obtain a random fixed-size sample from a potentially infinite stream of lines.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(VERSION)
        raise typer.Exit()


@app.command()
def sample_command(
    size: int | None = typer.Option(
        None, "--size", "-n", help="Number of samples to obtain [default: 16]"
    ),
    seed: int | None = typer.Option(
        None, "--seed", "-r", help="Random seed [default: derived from the clock]"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Optional YAML config (command-line options win)"
    ),
    input_path: Path | None = typer.Option(
        None, "--input", "-i", help="Read records from a file instead of stdin ('-' for stdin)"
    ),
    on_interrupt: str | None = typer.Option(
        None,
        "--on-interrupt",
        help="On Ctrl-C: 'peek' prints the sample and keeps reading, 'exit' prints and stops",
    ),
    strip: bool | None = typer.Option(
        None,
        "--strip/--no-strip",
        help="Trim surrounding whitespace from each record [default: strip]",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show program version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    try:
        sample_cfg = resolve_config(
            config_path=config,
            sample_size=size,
            seed=seed,
            on_interrupt=on_interrupt,
            strip=strip,
        )
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        if input_path is None or str(input_path) == "-":
            result = sample_stream(sys.stdin, None, sample_cfg)
        else:
            with input_path.open("r", encoding="utf-8") as f:
                result = sample_stream(f, None, sample_cfg)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Error reading input: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if result.state is DriverState.INTERRUPTED:
        raise typer.Exit(code=130)


def main() -> None:
    app()
