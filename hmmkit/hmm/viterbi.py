"""
Viterbi decoding of the most probable state sequence.

Ties between predecessor states go to the state declared first. A best
predecessor score of exactly 0 counts as no predecessor at all, and a
sequence with no feasible path decodes to probability 0 and an empty path.
"""

import numpy as np
from typing import List, NamedTuple, Tuple

from .forward import Observations
from .model import HiddenMarkovModel
from ..logger import get_logger

logger = get_logger(__name__)

NO_PREDECESSOR = -1


class DecodeResult(NamedTuple):
    """Best path probability and the state identifiers along that path."""
    probability: float
    path: List[str]


def viterbi_tables(model: HiddenMarkovModel, observations: Observations) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fill the Viterbi tables.

    Args:
        model: HMM to decode with
        observations: Symbol identifiers or indices [T]

    Returns:
        Tuple of:
        - delta: Best path probabilities [T, n_states]
        - psi: Best predecessor state per cell [T, n_states], -1 when unset
    """
    obs = model.encode(observations)
    T, N = len(obs), model.n_states

    delta = np.zeros((T, N))
    psi = np.full((T, N), NO_PREDECESSOR, dtype=np.intp)

    delta[0] = model.pi * model.B[:, obs[0]]

    for t in range(1, T):
        # scores[j, i] = delta[t-1, j] * A[j, i]
        scores = delta[t - 1][:, np.newaxis] * model.A
        # argmax returns the first maximum, i.e. the earliest declared state
        best_prev = scores.argmax(axis=0)
        best_score = scores[best_prev, np.arange(N)]

        psi[t] = np.where(best_score > 0, best_prev, NO_PREDECESSOR)
        delta[t] = best_score * model.B[:, obs[t]]

    return delta, psi


def viterbi(model: HiddenMarkovModel, observations: Observations) -> DecodeResult:
    """
    Most probable state sequence for an observation sequence.

    Returns:
        DecodeResult(probability, path) where path has one state per
        observation, or (0.0, []) if every state sequence has probability 0.
    """
    delta, psi = viterbi_tables(model, observations)
    T = len(delta)

    last_state = int(delta[T - 1].argmax())
    probability = float(delta[T - 1, last_state])

    if not probability > 0:
        logger.debug(f"No feasible state path for sequence of length {T}")
        return DecodeResult(0.0, [])

    path = np.empty(T, dtype=np.intp)
    path[T - 1] = last_state
    for t in range(T - 1, 0, -1):
        path[t - 1] = psi[t, path[t]]

    return DecodeResult(probability, model.state_names(path))
