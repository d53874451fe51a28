"""
Inference CLI commands.

recognize: forward probability of each observation sequence
statepath: Viterbi probability and state path of each sequence
optimize:  one re-estimation step, written out as a new model
"""

from pathlib import Path
from typing import List, Tuple

import typer
from rich.console import Console
from rich.table import Table

from ..config import get_config
from ..exceptions import EmptyObservationSet, HMMKitError
from ..hmm.model import HiddenMarkovModel
from ..infer import backward, decode, forward, reestimate
from ..io import load_model, load_observations, save_model
from ..logger import get_logger
from .errors import HMMKitCLIError, handle_cli_error, validate_file_exists

console = Console()
logger = get_logger(__name__)


def _fmt(probability: float) -> str:
    return format(probability, get_config('cli', 'probability_format') or '.6g')


def _debug(ctx: typer.Context) -> bool:
    return bool(ctx.meta.get("debug", False))


def _load_inputs(model_file: Path, obs_files: List[Path]) -> Tuple[HiddenMarkovModel, List[Tuple[Path, list]]]:
    """Load the model and every observation file before any output is produced."""
    model = load_model(validate_file_exists(model_file, "model file"))

    batches = []
    for obs_file in obs_files:
        sequences = load_observations(validate_file_exists(obs_file, "observation file"))
        batches.append((obs_file, sequences))

    return model, batches


def _print_table(title: str, columns: List[str], rows: List[List[str]]) -> None:
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    for column in columns:
        table.add_column(column)
    for index, row in enumerate(rows, start=1):
        table.add_row(str(index), *row)
    console.print(table)


def recognize(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="Model file (.hmm or .json)"),
    obs_files: List[Path] = typer.Argument(..., help="One or more observation files (.obs)"),
    with_backward: bool = typer.Option(
        False,
        "--backward",
        "-b",
        help="Also print the backward probability as a cross-check"
    ),
    table: bool = typer.Option(
        False,
        "--table/--plain",
        help="Render results as a table instead of plain lines"
    )
):
    """
    Print the probability of each observation sequence under the model.

    Examples:
    ```
    hmmkit recognize sentence.hmm example1.obs example2.obs
    hmmkit recognize sentence.hmm example1.obs --backward --table
    ```
    """
    try:
        model, batches = _load_inputs(model_file, obs_files)

        for obs_file, sequences in batches:
            probabilities = forward(model, sequences)
            columns = ["P(O) forward"]
            rows = [[_fmt(p)] for p in probabilities]

            if with_backward:
                columns.append("P(O) backward")
                for row, p in zip(rows, backward(model, sequences)):
                    row.append(_fmt(p))

            if table:
                _print_table(str(obs_file), columns, rows)
            else:
                typer.echo(f"{obs_file}:")
                for row in rows:
                    typer.echo(" ".join(row))

    except (HMMKitError, HMMKitCLIError) as e:
        handle_cli_error(e, "recognize", _debug(ctx))


def statepath(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="Model file (.hmm or .json)"),
    obs_files: List[Path] = typer.Argument(..., help="One or more observation files (.obs)"),
    table: bool = typer.Option(
        False,
        "--table/--plain",
        help="Render results as a table instead of plain lines"
    )
):
    """
    Print the most likely state path of each observation sequence.

    Each line holds the path probability followed by the states; a
    sequence no state path can produce prints probability 0 and no states.
    """
    try:
        model, batches = _load_inputs(model_file, obs_files)

        for obs_file, sequences in batches:
            results = decode(model, sequences)

            if table:
                rows = [[_fmt(result.probability), " ".join(result.path) or "-"] for result in results]
                _print_table(str(obs_file), ["P(path)", "state path"], rows)
            else:
                typer.echo(f"{obs_file}:")
                for result in results:
                    typer.echo(" ".join([_fmt(result.probability)] + list(result.path)))

    except (HMMKitError, HMMKitCLIError) as e:
        handle_cli_error(e, "statepath", _debug(ctx))


def optimize(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="Model file (.hmm or .json)"),
    obs_file: Path = typer.Argument(..., help="Observation file (.obs); its first sequence is used"),
    output_file: Path = typer.Argument(..., help="Where to write the re-estimated model"),
    textbook_emission: bool = typer.Option(
        False,
        "--textbook-emission",
        help="Count the final observation in emission statistics"
    )
):
    """
    Run one Baum-Welch step on the first sequence and save the new model.

    Prints the sequence probability under the original model and under
    the model written to OUTPUT_FILE.
    """
    try:
        model, [(_, sequences)] = _load_inputs(model_file, [obs_file])
        if not sequences:
            raise EmptyObservationSet(f"no observation sequences in {obs_file}")

        sequence = sequences[0]
        before = forward(model, [sequence])[0]

        optimized = reestimate(model, sequence,
                               include_final_emission=True if textbook_emission else None)
        save_model(optimized, output_file)
        logger.info(f"Wrote re-estimated model to {output_file}")

        after = forward(load_model(output_file), [sequence])[0]
        typer.echo(f"{_fmt(before)} {_fmt(after)}")

    except (HMMKitError, HMMKitCLIError) as e:
        handle_cli_error(e, "optimize", _debug(ctx))
    except OSError as e:
        handle_cli_error(e, "optimize", _debug(ctx))
