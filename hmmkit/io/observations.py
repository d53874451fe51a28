"""
Reading and writing observation sequences in the .obs text format.

    K
    T_1
    o_1 o_2 ... o_T1
    ...

K is the number of sequences; each sequence is a length line followed by
its symbols. Symbols are not checked here, the model resolves them.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..exceptions import ObservationFormatError
from ..logger import get_logger
from .text import LineReader, read_text, write_text

logger = get_logger(__name__)


def parse_observations(text: str, source: Optional[str] = None) -> List[List[str]]:
    """
    Parse observation sequences from .obs text.

    A declared length that disagrees with the symbol line only produces a
    warning; the symbols as listed are used.

    Raises:
        ObservationFormatError: If the count line is malformed or sequences are missing
    """
    reader = LineReader(text, source, ObservationFormatError)

    number, header = reader.ints("sequence count")
    if len(header) != 1 or header[0] < 0:
        raise reader.fail("first line must be a single non-negative sequence count", number)
    count = header[0]

    sequences = []
    for index in range(count):
        number, declared = reader.ints(f"length of sequence {index + 1}")
        if len(declared) != 1 or declared[0] < 0:
            raise reader.fail(f"length line of sequence {index + 1} must be a single "
                              f"non-negative integer", number)

        if declared[0] == 0:
            sequences.append([])
            continue

        number, symbols = reader.next(f"symbols of sequence {index + 1}")
        if len(symbols) != declared[0]:
            logger.warning(f"{source or 'observations'}:{number}: sequence {index + 1} declares "
                           f"{declared[0]} symbols but lists {len(symbols)}")
        sequences.append(symbols)

    if not reader.exhausted:
        number, _ = reader.remaining[0]
        logger.warning(f"{source or 'observations'}: ignoring trailing content from line {number}")

    logger.debug(f"Parsed {len(sequences)} observation sequences from {source or 'text'}")
    return sequences


def format_observations(sequences: Iterable[Sequence[str]]) -> str:
    """Render observation sequences as .obs text."""
    sequences = [list(sequence) for sequence in sequences]

    lines = [str(len(sequences))]
    for sequence in sequences:
        lines.append(str(len(sequence)))
        if sequence:
            lines.append(" ".join(str(symbol) for symbol in sequence))

    return "\n".join(lines) + "\n"


def load_observations(path: Union[str, Path]) -> List[List[str]]:
    """
    Load observation sequences from a .obs file.

    Raises:
        ObservationFormatError: If the file cannot be read or parsed
    """
    path = Path(path)
    return parse_observations(read_text(path, ObservationFormatError), source=str(path))


def save_observations(sequences: Iterable[Sequence[str]], path: Union[str, Path]) -> Path:
    return write_text(path, format_observations(sequences))
