"""
Backward algorithm.

beta[t, i] = P(o_t+1..o_T-1 | q_t = i, model), filled right to left in t.
"""

import numpy as np

from .forward import Observations
from .model import HiddenMarkovModel
from ..logger import get_logger

logger = get_logger(__name__)


def backward_table(model: HiddenMarkovModel, observations: Observations) -> np.ndarray:
    """
    Compute the table of backward variables.

    Args:
        model: HMM to evaluate
        observations: Symbol identifiers or indices [T]

    Returns:
        beta: Backward probabilities [T, n_states], beta[T-1] = 1

    Raises:
        InvalidSequence: If the sequence is empty
        UnknownSymbol: If the sequence contains an undeclared symbol
    """
    obs = model.encode(observations)
    T = len(obs)

    beta = np.zeros((T, model.n_states))
    beta[T - 1] = 1.0

    for t in range(T - 2, -1, -1):
        beta[t] = model.A @ (model.B[:, obs[t + 1]] * beta[t + 1])

    logger.debug(f"Backward table computed: T={T}")
    return beta


def backward_probability(model: HiddenMarkovModel, observations: Observations) -> float:
    """
    Probability of an observation sequence from the backward direction.

    Should agree with forward_probability up to floating point error.
    """
    obs = model.encode(observations)

    beta = np.ones(model.n_states)
    for t in range(len(obs) - 2, -1, -1):
        beta = model.A @ (model.B[:, obs[t + 1]] * beta)

    return float(np.sum(model.pi * model.B[:, obs[0]] * beta))
