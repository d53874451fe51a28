"""
Exception hierarchy for hmmkit.
"""

from typing import Optional


class HMMKitError(Exception):
    """Base exception for hmmkit."""
    pass


class ModelError(HMMKitError):
    """Model lookup and construction failures."""
    pass


class UnknownState(ModelError):
    """A state identifier or index outside the declared vocabulary was referenced."""

    def __init__(self, state):
        self.state = state
        super().__init__(f"No such state: {state!r}")


class UnknownSymbol(ModelError):
    """A symbol identifier or index outside the declared vocabulary was referenced."""

    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"No such output symbol: {symbol!r}")


class ModelDefinitionError(ModelError):
    """Structurally invalid model parameters (shapes, duplicates, negative values)."""
    pass


class ObservationError(HMMKitError):
    """Observation sequence issues."""
    pass


class EmptyObservationSet(ObservationError):
    """A batch operation was invoked with zero sequences."""

    def __init__(self, message: str = "observation set is empty"):
        super().__init__(message)


class InvalidSequence(ObservationError):
    """A sequence of length 0 was supplied to an algorithm requiring observations."""
    pass


class FormatError(HMMKitError):
    """Model or observation file parsing failures."""

    def __init__(self, message: str, source: Optional[str] = None, line: Optional[int] = None):
        self.source = source
        self.line = line
        location = ""
        if source is not None:
            location = f"{source}"
            if line is not None:
                location += f":{line}"
            location += ": "
        super().__init__(f"{location}{message}")


class ModelFormatError(FormatError):
    """Malformed .hmm file or JSON model document."""
    pass


class ObservationFormatError(FormatError):
    """Malformed .obs file."""
    pass
