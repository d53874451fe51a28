"""
hmmkit: inference and re-estimation for discrete Hidden Markov Models

Forward and backward scoring, Viterbi decoding and single-step
Baum-Welch re-estimation over models with named states and symbols.
"""

__version__ = "0.1.0"

from .config import get_config, set_config
from .logger import get_logger
from .exceptions import (
    HMMKitError,
    UnknownState,
    UnknownSymbol,
    EmptyObservationSet,
    InvalidSequence
)
from .hmm import HiddenMarkovModel, DecodeResult
from .infer import forward, backward, decode, reestimate

__all__ = [
    "get_config",
    "set_config",
    "get_logger",
    "HMMKitError",
    "UnknownState",
    "UnknownSymbol",
    "EmptyObservationSet",
    "InvalidSequence",
    "HiddenMarkovModel",
    "DecodeResult",
    "forward",
    "backward",
    "decode",
    "reestimate",
    "__version__"
]
