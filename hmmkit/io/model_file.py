"""
Reading and writing models in the .hmm text format.

The format is line oriented and whitespace delimited:

    N M T
    state_1 ... state_N
    symbol_1 ... symbol_M
    a:
    <N rows of N transition probabilities>
    b:
    <N rows of M emission probabilities>
    pi:
    <N initial probabilities>

T is the nominal observation length; it may be omitted. Paths ending in
``.json`` are handled as JSON model documents instead.
"""

from pathlib import Path
from typing import Optional, Union

from ..exceptions import ModelDefinitionError, ModelFormatError
from ..hmm.model import HiddenMarkovModel
from ..logger import get_logger
from .model_json import load_model_document, save_model_document
from .text import LineReader, format_float, read_text, write_text

logger = get_logger(__name__)


def parse_model(text: str, source: Optional[str] = None) -> HiddenMarkovModel:
    """
    Parse a model from .hmm text.

    Args:
        text: Contents of a .hmm file
        source: Name used in error messages

    Returns:
        HiddenMarkovModel

    Raises:
        ModelFormatError: If the text is not a well-formed model
    """
    reader = LineReader(text, source, ModelFormatError)

    number, sizes = reader.ints("header 'N M T'")
    if len(sizes) not in (2, 3):
        raise reader.fail(f"header must contain N M [T], got {len(sizes)} values", number)
    n_states, n_symbols = sizes[0], sizes[1]
    time_steps = sizes[2] if len(sizes) == 3 else None

    number, states = reader.next("state names")
    if len(states) != n_states:
        raise reader.fail(f"header declares {n_states} states but {len(states)} are listed", number)

    number, symbols = reader.next("output symbols")
    if len(symbols) != n_symbols:
        raise reader.fail(f"header declares {n_symbols} symbols but {len(symbols)} are listed", number)

    reader.marker("a:")
    transition = [reader.floats(f"transition row for state {state!r}", n_states) for state in states]

    reader.marker("b:")
    emission = [reader.floats(f"emission row for state {state!r}", n_symbols) for state in states]

    reader.marker("pi:")
    initial = reader.floats("initial state probabilities", n_states)

    if not reader.exhausted:
        number, _ = reader.remaining[0]
        logger.warning(f"{source or 'model'}: ignoring trailing content from line {number}")

    try:
        model = HiddenMarkovModel(states, symbols, transition, emission, initial,
                                  time_steps=time_steps)
    except ModelDefinitionError as e:
        raise ModelFormatError(str(e), source) from e

    logger.debug(f"Parsed model from {source or 'text'}: {model}")
    return model


def format_model(model: HiddenMarkovModel, float_format: Optional[str] = None) -> str:
    """Render a model as .hmm text."""
    def row(values):
        return " ".join(format_float(value, float_format) for value in values)

    header = f"{model.n_states} {model.n_symbols}"
    if model.time_steps is not None:
        header += f" {model.time_steps}"

    lines = [header, " ".join(model.states), " ".join(model.symbols), "a:"]
    lines.extend(row(values) for values in model.A)
    lines.append("b:")
    lines.extend(row(values) for values in model.B)
    lines.append("pi:")
    lines.append(row(model.pi))

    return "\n".join(lines) + "\n"


def load_model(path: Union[str, Path]) -> HiddenMarkovModel:
    """
    Load a model from a .hmm file or a .json model document.

    Raises:
        ModelFormatError: If the file cannot be read or parsed
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        return load_model_document(path)

    logger.debug(f"Loading model from: {path}")
    return parse_model(read_text(path, ModelFormatError), source=str(path))


def save_model(model: HiddenMarkovModel, path: Union[str, Path],
               float_format: Optional[str] = None) -> Path:
    """Write a model to ``path``, as JSON if the suffix is .json."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        return save_model_document(model, path)

    logger.debug(f"Saving model to: {path}")
    return write_text(path, format_model(model, float_format))
