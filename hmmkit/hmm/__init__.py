"""
Hidden Markov Model module.

Discrete HMM representation with forward, backward, Viterbi and
single-step Baum-Welch re-estimation engines.
"""

from .model import HiddenMarkovModel, StateVocabulary, SymbolVocabulary, Vocabulary
from .forward import forward_table, forward_probability
from .backward import backward_table, backward_probability
from .viterbi import DecodeResult, viterbi, viterbi_tables
from .reestimate import ExpectedCounts, expected_counts, reestimate, reestimated_parameters

__all__ = [
    "HiddenMarkovModel",
    "StateVocabulary",
    "SymbolVocabulary",
    "Vocabulary",
    "forward_table",
    "forward_probability",
    "backward_table",
    "backward_probability",
    "DecodeResult",
    "viterbi",
    "viterbi_tables",
    "ExpectedCounts",
    "expected_counts",
    "reestimate",
    "reestimated_parameters"
]
