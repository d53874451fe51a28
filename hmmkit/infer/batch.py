"""
Batch entry points over sets of observation sequences.

Every sequence is resolved against the model before any algorithm runs,
so an unknown symbol anywhere in the batch fails the whole call without
partial results. Sequences are independent; with ``n_jobs`` other than 1
they are evaluated by joblib workers, and results keep input order.
"""

from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from ..config import get_config
from ..exceptions import EmptyObservationSet
from ..hmm.backward import backward_probability
from ..hmm.forward import forward_probability
from ..hmm.model import HiddenMarkovModel
from ..hmm.reestimate import reestimate as _reestimate
from ..hmm.viterbi import DecodeResult, viterbi
from ..logger import get_logger

logger = get_logger(__name__)


def _encode_all(model: HiddenMarkovModel, sequences: Iterable[Sequence]) -> List[np.ndarray]:
    """Materialize and encode a batch, rejecting an empty one up front."""
    if isinstance(sequences, str):
        raise TypeError("sequences must be a collection of observation sequences")

    sequences = list(sequences)
    if not sequences:
        raise EmptyObservationSet()

    return [model.encode(sequence) for sequence in sequences]


def _run(func: Callable, model: HiddenMarkovModel, sequences: Iterable[Sequence],
         n_jobs: Optional[int]) -> list:
    encoded = _encode_all(model, sequences)

    if n_jobs is None:
        n_jobs = get_config('inference', 'n_jobs') or 1

    logger.debug(f"Running {func.__name__} on {len(encoded)} sequences (n_jobs={n_jobs})")

    if n_jobs == 1 or len(encoded) == 1:
        return [func(model, obs) for obs in encoded]

    return Parallel(n_jobs=n_jobs)(delayed(func)(model, obs) for obs in encoded)


def forward(model: HiddenMarkovModel, sequences: Iterable[Sequence],
            n_jobs: Optional[int] = None) -> List[float]:
    """
    Forward probability P(O | model) of each observation sequence.

    Args:
        model: HMM to evaluate
        sequences: Observation sequences (lists of symbol identifiers)
        n_jobs: Number of joblib workers (default from config)

    Returns:
        One probability per sequence, in input order

    Raises:
        EmptyObservationSet: If no sequences are given
        InvalidSequence: If any sequence is empty
        UnknownSymbol: If any sequence contains an undeclared symbol
    """
    return _run(forward_probability, model, sequences, n_jobs)


def backward(model: HiddenMarkovModel, sequences: Iterable[Sequence],
             n_jobs: Optional[int] = None) -> List[float]:
    """Backward probability of each observation sequence (cross-check for forward)."""
    return _run(backward_probability, model, sequences, n_jobs)


def decode(model: HiddenMarkovModel, sequences: Iterable[Sequence],
           n_jobs: Optional[int] = None) -> List[DecodeResult]:
    """Viterbi (probability, state path) for each observation sequence."""
    return _run(viterbi, model, sequences, n_jobs)


def reestimate(model: HiddenMarkovModel, sequence: Sequence,
               include_final_emission: Optional[bool] = None) -> HiddenMarkovModel:
    """
    Re-estimate model parameters from a single observation sequence.

    Returns:
        New HiddenMarkovModel; ``model`` is unchanged
    """
    return _reestimate(model, sequence, include_final_emission=include_final_emission)
