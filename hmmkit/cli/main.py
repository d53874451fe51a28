"""
Main CLI application for hmmkit.

Provides command-line access to forward scoring, Viterbi decoding and
single-step re-estimation of discrete HMMs.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import get_config, load_config_file, set_config
from ..logger import configure_logging, set_log_level
from .errors import ConfigurationError, EXIT_CODES, handle_cli_error

console = Console()

app = typer.Typer(
    name="hmmkit",
    help="Inference and re-estimation for discrete Hidden Markov Models",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

from .commands import optimize, recognize, statepath

app.command("recognize")(recognize)
app.command("statepath")(statepath)
app.command("optimize")(optimize)


@app.command("version")
def show_version():
    """Show hmmkit version information."""
    from .. import __version__

    console.print(Panel.fit(
        f"[bold]hmmkit {__version__}[/bold]\n"
        f"Discrete Hidden Markov Model inference\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all log output except errors"
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with detailed error traces"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a JSON configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-j",
        help="Number of worker processes per observation file (-1 for all cores)"
    )
):
    """
    hmmkit: discrete Hidden Markov Model toolkit

    \b
    Commands:
      hmmkit recognize model.hmm data.obs     probability of each sequence
      hmmkit statepath model.hmm data.obs     most likely state path
      hmmkit optimize model.hmm data.obs new.hmm   one Baum-Welch step
    """
    ctx.meta["verbose"] = verbose
    ctx.meta["quiet"] = quiet
    ctx.meta["debug"] = debug

    if config_file:
        try:
            load_config_file(str(config_file))
            configure_logging()
        except ValueError as e:
            handle_cli_error(
                ConfigurationError(str(e), suggestions=["The config file must be a JSON object of sections"]),
                "config loading",
                debug
            )

    if jobs is not None:
        if jobs == 0:
            handle_cli_error(ConfigurationError("--jobs must be a positive number or -1"),
                             "option parsing", debug)
        set_config('inference', 'n_jobs', jobs)

    if quiet:
        set_log_level('ERROR')
    elif verbose or debug:
        set_log_level('DEBUG')
    else:
        set_log_level(get_config('logging', 'level') or 'WARNING')


def cli_main():
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_CODES["general_error"])


if __name__ == "__main__":
    cli_main()
