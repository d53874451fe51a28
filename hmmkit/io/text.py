"""
Whitespace-delimited text helpers shared by the .hmm and .obs readers.
"""

from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Type, Union

from ..config import get_config
from ..exceptions import FormatError

Line = Tuple[int, List[str]]


def content_lines(text: str) -> Iterator[Line]:
    """Yield (line number, tokens) for every non-blank line."""
    for number, raw in enumerate(text.splitlines(), start=1):
        tokens = raw.split()
        if tokens:
            yield number, tokens


class LineReader:
    """Sequential reader over the non-blank lines of a document."""

    def __init__(self, text: str, source: Optional[str], error: Type[FormatError]):
        self._lines = list(content_lines(text))
        self._position = 0
        self.source = source
        self.error = error

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._lines)

    @property
    def remaining(self) -> List[Line]:
        return self._lines[self._position:]

    def next(self, expected: str) -> Line:
        if self.exhausted:
            raise self.error(f"unexpected end of file, expected {expected}", self.source)
        line = self._lines[self._position]
        self._position += 1
        return line

    def fail(self, message: str, line: Optional[int] = None) -> FormatError:
        return self.error(message, self.source, line)

    def ints(self, expected: str) -> Tuple[int, List[int]]:
        number, tokens = self.next(expected)
        try:
            return number, [int(token) for token in tokens]
        except ValueError:
            raise self.fail(f"expected integers for {expected}, got {' '.join(tokens)!r}", number) from None

    def floats(self, expected: str, count: int) -> List[float]:
        number, tokens = self.next(expected)
        if len(tokens) != count:
            raise self.fail(f"{expected} has {len(tokens)} values, expected {count}", number)
        try:
            return [float(token) for token in tokens]
        except ValueError:
            raise self.fail(f"non-numeric value in {expected}: {' '.join(tokens)!r}", number) from None

    def marker(self, marker: str) -> None:
        number, tokens = self.next(f"section marker {marker!r}")
        if tokens != [marker]:
            raise self.fail(f"expected section marker {marker!r}, got {' '.join(tokens)!r}", number)


def read_text(path: Union[str, Path], error: Type[FormatError]) -> str:
    """Read a whole text file, reporting I/O failures as ``error``."""
    path = Path(path)
    encoding = get_config('io', 'encoding') or 'utf-8'
    try:
        return path.read_text(encoding=encoding)
    except OSError as e:
        raise error(f"cannot read file: {e.strerror or e}", str(path)) from e
    except UnicodeDecodeError as e:
        raise error(f"file is not valid {encoding} text", str(path)) from e


def write_text(path: Union[str, Path], text: str) -> Path:
    path = Path(path)
    encoding = get_config('io', 'encoding') or 'utf-8'
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=encoding)
    return path


def format_float(value: float, float_format: Optional[str] = None) -> str:
    if float_format is None:
        float_format = get_config('io', 'float_format') or '.10g'
    return format(float(value), float_format)
