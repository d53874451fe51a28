"""
Forward algorithm.

alpha[t, i] = P(o_0..o_t, q_t = i | model), filled left to right in t.
Each row is derived once from the previous row, so a sequence of length
T costs O(T * N^2) time.
"""

import numpy as np
from typing import Iterable, Union

from .model import HiddenMarkovModel
from ..logger import get_logger

logger = get_logger(__name__)

Observations = Union[np.ndarray, Iterable]


def forward_table(model: HiddenMarkovModel, observations: Observations) -> np.ndarray:
    """
    Compute the table of forward variables.

    Args:
        model: HMM to evaluate
        observations: Symbol identifiers or indices [T]

    Returns:
        alpha: Forward probabilities [T, n_states]

    Raises:
        InvalidSequence: If the sequence is empty
        UnknownSymbol: If the sequence contains an undeclared symbol
    """
    obs = model.encode(observations)
    T = len(obs)

    alpha = np.zeros((T, model.n_states))
    alpha[0] = model.pi * model.B[:, obs[0]]

    for t in range(1, T):
        alpha[t] = (alpha[t - 1] @ model.A) * model.B[:, obs[t]]

    logger.debug(f"Forward table computed: T={T}, P={alpha[-1].sum():.6g}")
    return alpha


def forward_probability(model: HiddenMarkovModel, observations: Observations) -> float:
    """
    Probability of an observation sequence, P(O | model).

    Keeps only the previous row of the forward table.
    """
    obs = model.encode(observations)

    alpha = model.pi * model.B[:, obs[0]]
    for t in range(1, len(obs)):
        alpha = (alpha @ model.A) * model.B[:, obs[t]]

    return float(alpha.sum())
