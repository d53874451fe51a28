"""
Single-step Baum-Welch re-estimation.

One expectation step over one observation sequence, using the forward
and backward tables, followed by the maximization step that turns the
expected counts into a new model. The input model is never modified.

Emission counts are summed over t = 0..T-2 by default, leaving out the
final observation. Pass ``include_final_emission=True`` (or set
``reestimation.include_final_emission``) for the t = 0..T-1 range.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .backward import backward_table
from .forward import Observations, forward_table
from .model import HiddenMarkovModel
from ..config import get_config
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExpectedCounts:
    """
    Posterior quantities for one observation sequence.

    Attributes:
        observations: Encoded observation sequence [T]
        probability: P(O | model), the normalizer for xi and gamma
        xi: xi[t, i, j] = P(q_t = i, q_t+1 = j | O) [T-1, N, N]
        gamma: gamma[t, i] = P(q_t = i | O) [T, N]
    """
    observations: np.ndarray
    probability: float
    xi: np.ndarray
    gamma: np.ndarray


def expected_counts(model: HiddenMarkovModel, observations: Observations) -> ExpectedCounts:
    """
    Compute xi and gamma for one observation sequence.

    P(O) is taken once from the forward table and divides every term.
    If P(O) is 0 the sequence is impossible under the model and all
    posteriors are reported as 0.
    """
    obs = model.encode(observations)
    T, N = len(obs), model.n_states

    alpha = forward_table(model, obs)
    beta = backward_table(model, obs)
    probability = float(alpha[T - 1].sum())

    if probability == 0:
        logger.warning(f"Observation sequence of length {T} has zero probability under the model")
        return ExpectedCounts(obs, 0.0, np.zeros((T - 1, N, N)), np.zeros((T, N)))

    # emitted[t, j] = B[j, o_t+1] * beta[t+1, j]
    emitted = model.B[:, obs[1:]].T * beta[1:]
    xi = alpha[:-1, :, np.newaxis] * model.A[np.newaxis, :, :] * emitted[:, np.newaxis, :]
    xi /= probability

    gamma = alpha * beta / probability

    return ExpectedCounts(obs, probability, xi, gamma)


def _safe_divide(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """Elementwise division that yields 0 where the denominator is 0."""
    result = np.zeros(np.broadcast(numerator, denominator).shape)
    np.divide(numerator, denominator, out=result, where=denominator != 0)
    return result


def reestimated_parameters(model: HiddenMarkovModel,
                           counts: ExpectedCounts,
                           include_final_emission: bool = False):
    """
    Maximization step: derive new (pi, A, B) from expected counts.

    Returns:
        Tuple of (pi, A, B) as new arrays
    """
    obs = counts.observations
    T = len(obs)

    # Expected number of transitions out of each state, t = 0..T-2
    visits = counts.gamma[:T - 1].sum(axis=0)
    A_new = _safe_divide(counts.xi.sum(axis=0), visits[:, np.newaxis])

    emission_steps = T if include_final_emission else T - 1
    emission_gamma = counts.gamma[:emission_steps]
    symbol_hits = np.zeros((emission_steps, model.n_symbols))
    symbol_hits[np.arange(emission_steps), obs[:emission_steps]] = 1.0

    B_new = _safe_divide(emission_gamma.T @ symbol_hits,
                         emission_gamma.sum(axis=0)[:, np.newaxis])

    pi_new = counts.gamma[0].copy()

    return pi_new, A_new, B_new


def reestimate(model: HiddenMarkovModel,
               observations: Observations,
               include_final_emission: Optional[bool] = None) -> HiddenMarkovModel:
    """
    One Baum-Welch iteration on a single observation sequence.

    Args:
        model: Current model (left unchanged)
        observations: Symbol identifiers or indices [T]
        include_final_emission: Count the last observation in emission
            statistics (default from config: False)

    Returns:
        New HiddenMarkovModel with the same vocabularies

    Raises:
        InvalidSequence: If the sequence is empty
        UnknownSymbol: If the sequence contains an undeclared symbol
    """
    if include_final_emission is None:
        include_final_emission = bool(get_config('reestimation', 'include_final_emission'))

    counts = expected_counts(model, observations)
    pi_new, A_new, B_new = reestimated_parameters(model, counts, include_final_emission)

    logger.debug(f"Re-estimated model from sequence of length {len(counts.observations)}: "
                 f"P={counts.probability:.6g}")

    return model.with_parameters(A_new, B_new, pi_new)
