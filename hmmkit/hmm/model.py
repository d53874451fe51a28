"""
Discrete Hidden Markov Model representation.

This module implements the immutable model container shared by the
forward, backward, Viterbi and re-estimation engines. State and symbol
identifiers are resolved to integer indices once, through lookup tables
built at construction; the probability tables are dense numpy arrays
indexed by those integers.
"""

import numpy as np
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import get_config
from ..exceptions import (
    InvalidSequence,
    ModelDefinitionError,
    UnknownState,
    UnknownSymbol,
)
from ..logger import get_logger

logger = get_logger(__name__)

Identifier = Union[str, int]


class Vocabulary:
    """
    Ordered, immutable collection of distinct identifiers.

    The position of an identifier is its canonical index. Lookups accept
    either an identifier or an integer index; anything outside the
    vocabulary raises ``unknown_error``.
    """

    kind = "identifier"
    unknown_error = KeyError

    def __init__(self, names: Iterable[str]):
        names = tuple(names)

        if not names:
            raise ModelDefinitionError(f"{self.kind} vocabulary cannot be empty")

        for name in names:
            # Identifiers are written space-separated in .hmm and .obs files
            if not isinstance(name, str) or name.split() != [name]:
                raise ModelDefinitionError(
                    f"{self.kind} identifiers must be non-empty strings without whitespace, got {name!r}"
                )

        index = {name: i for i, name in enumerate(names)}
        if len(index) != len(names):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise ModelDefinitionError(f"duplicate {self.kind} identifiers: {duplicates}")

        self._names = names
        self._index = index

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def index(self, item: Identifier) -> int:
        """
        Resolve an identifier or index to the canonical integer index.

        Raises:
            UnknownState / UnknownSymbol: If ``item`` is not in the vocabulary
        """
        if isinstance(item, (bool, np.bool_)):
            raise self.unknown_error(item)

        if isinstance(item, (int, np.integer)):
            if 0 <= item < len(self._names):
                return int(item)
            raise self.unknown_error(item)

        try:
            return self._index[item]
        except (KeyError, TypeError):
            raise self.unknown_error(item) from None

    def name(self, index: int) -> str:
        """Return the identifier at ``index``."""
        return self._names[self.index(index)]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self):
        return iter(self._names)

    def __getitem__(self, index: int) -> str:
        return self._names[index]

    def __contains__(self, item: Any) -> bool:
        try:
            self.index(item)
        except self.unknown_error:
            return False
        return True

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return type(self) is type(other) and self._names == other._names

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._names))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._names)!r})"


class StateVocabulary(Vocabulary):
    kind = "state"
    unknown_error = UnknownState


class SymbolVocabulary(Vocabulary):
    kind = "symbol"
    unknown_error = UnknownSymbol


def _as_table(values: Any, shape: Tuple[int, ...], name: str) -> np.ndarray:
    """Convert ``values`` to a read-only float array of the expected shape."""
    try:
        table = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise ModelDefinitionError(f"{name} is not a numeric table: {e}") from e

    if table.shape != shape:
        raise ModelDefinitionError(f"{name} shape {table.shape} doesn't match expected {shape}")

    if not np.all(np.isfinite(table)):
        raise ModelDefinitionError(f"{name} contains non-finite values")

    if np.any(table < 0):
        raise ModelDefinitionError(f"{name} contains negative values")

    table.setflags(write=False)
    return table


class HiddenMarkovModel:
    """
    Discrete Hidden Markov Model with named states and output symbols.

    The model is read-only after construction. Parameters are stored as:
    - pi: initial state probabilities [n_states]
    - A: transition matrix [n_states, n_states], A[i, j] = P(q_t+1=j | q_t=i)
    - B: emission matrix [n_states, n_symbols], B[i, k] = P(o_t=k | q_t=i)

    Rows are expected to be probability distributions but this is not
    enforced; a model violating it is accepted with a warning.
    """

    def __init__(self,
                 states: Iterable[str],
                 symbols: Iterable[str],
                 transition: Any,
                 emission: Any,
                 initial: Any,
                 time_steps: Optional[int] = None):
        """
        Initialize HiddenMarkovModel from vocabularies and probability tables.

        Args:
            states: Ordered state identifiers (or a StateVocabulary)
            symbols: Ordered output symbol identifiers (or a SymbolVocabulary)
            transition: N x N transition probabilities
            emission: N x M emission probabilities
            initial: Length-N initial state probabilities
            time_steps: Optional nominal sequence length carried with the model

        Raises:
            ModelDefinitionError: If vocabularies or table shapes are invalid
        """
        self.states = states if isinstance(states, StateVocabulary) else StateVocabulary(states)
        self.symbols = symbols if isinstance(symbols, SymbolVocabulary) else SymbolVocabulary(symbols)

        n, m = len(self.states), len(self.symbols)
        self.A = _as_table(transition, (n, n), "transition matrix")
        self.B = _as_table(emission, (n, m), "emission matrix")
        self.pi = _as_table(initial, (n,), "initial vector")

        if time_steps is not None and (isinstance(time_steps, bool) or
                                       not isinstance(time_steps, (int, np.integer)) or
                                       time_steps < 0):
            raise ModelDefinitionError(f"time_steps must be a non-negative integer, got {time_steps!r}")
        self.time_steps = None if time_steps is None else int(time_steps)

        if get_config('model', 'warn_non_stochastic') and not self.is_stochastic():
            logger.warning(f"Model rows are not probability distributions "
                           f"(max deviation {self.row_sum_deviation():.3g})")

        logger.debug(f"Initialized HiddenMarkovModel with {n} states and {m} symbols")

    @property
    def n_states(self) -> int:
        return len(self.states)

    @property
    def n_symbols(self) -> int:
        return len(self.symbols)

    # Lookup surface

    def state_index(self, state: Identifier) -> int:
        return self.states.index(state)

    def symbol_index(self, symbol: Identifier) -> int:
        return self.symbols.index(symbol)

    def transition(self, from_state: Identifier, to_state: Identifier) -> float:
        """Return P(to_state at t+1 | from_state at t)."""
        return float(self.A[self.state_index(from_state), self.state_index(to_state)])

    def emission(self, state: Identifier, symbol: Identifier) -> float:
        """Return P(symbol | state)."""
        return float(self.B[self.state_index(state), self.symbol_index(symbol)])

    def initial(self, state: Identifier) -> float:
        """Return P(state at t=0)."""
        return float(self.pi[self.state_index(state)])

    def encode(self, observations: Iterable[Identifier]) -> np.ndarray:
        """
        Resolve an observation sequence to symbol indices.

        Args:
            observations: Symbol identifiers (or indices)

        Returns:
            Integer array of symbol indices [T]

        Raises:
            InvalidSequence: If the sequence is empty
            UnknownSymbol: If any symbol is not in the vocabulary
        """
        if isinstance(observations, np.ndarray) and np.issubdtype(observations.dtype, np.integer):
            if observations.ndim != 1:
                raise InvalidSequence("observation sequence must be 1-dimensional")
            if len(observations) == 0:
                raise InvalidSequence("observation sequence is empty")
            out_of_range = (observations < 0) | (observations >= self.n_symbols)
            if np.any(out_of_range):
                raise UnknownSymbol(int(observations[np.argmax(out_of_range)]))
            return observations.astype(np.intp, copy=False)

        if isinstance(observations, str):
            raise InvalidSequence("observation sequence must be a sequence of symbols, not a string")

        indices = [self.symbols.index(symbol) for symbol in observations]
        if not indices:
            raise InvalidSequence("observation sequence is empty")
        return np.array(indices, dtype=np.intp)

    def state_names(self, indices: Iterable[int]) -> List[str]:
        """Map state indices back to identifiers."""
        return [self.states.name(i) for i in indices]

    # Joint evaluation

    def init_eval(self, symbol: Identifier, state: Identifier) -> float:
        """Probability of starting in ``state`` and emitting ``symbol``."""
        return self.initial(state) * self.emission(state, symbol)

    def step_eval(self, symbol: Identifier, prev_state: Identifier, state: Identifier) -> float:
        """Probability of moving ``prev_state`` -> ``state`` and emitting ``symbol``."""
        return self.transition(prev_state, state) * self.emission(state, symbol)

    def evaluate(self, observations: Sequence[Identifier], states: Sequence[Identifier]) -> float:
        """
        Joint probability of an output sequence and a given state sequence.

        Sequences of different lengths describe an impossible joint event
        and evaluate to exactly 0.

        Raises:
            InvalidSequence: If both sequences are empty
        """
        if len(observations) != len(states):
            return 0.0

        if len(observations) == 0:
            raise InvalidSequence("cannot evaluate an empty sequence")

        probability = self.init_eval(observations[0], states[0])
        for t in range(1, len(observations)):
            probability *= self.step_eval(observations[t], states[t - 1], states[t])

        return probability

    # Parameters

    def get_parameters(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Get current model parameters.

        Returns:
            Tuple of writable copies (pi, A, B)
        """
        return self.pi.copy(), self.A.copy(), self.B.copy()

    def with_parameters(self, transition: Any, emission: Any, initial: Any) -> "HiddenMarkovModel":
        """Return a new model with the same vocabularies and new tables."""
        return HiddenMarkovModel(self.states, self.symbols, transition, emission, initial,
                                 time_steps=self.time_steps)

    def row_sum_deviation(self) -> float:
        """Largest absolute deviation of any row (or pi) from summing to 1."""
        deviations = np.concatenate([
            np.abs(self.A.sum(axis=1) - 1.0),
            np.abs(self.B.sum(axis=1) - 1.0),
            [abs(self.pi.sum() - 1.0)],
        ])
        return float(deviations.max())

    def is_stochastic(self, tolerance: Optional[float] = None) -> bool:
        """Check whether pi and every row of A and B sum to 1."""
        if tolerance is None:
            tolerance = get_config('model', 'stochastic_tolerance')
            if tolerance is None:
                tolerance = 1e-6
        return self.row_sum_deviation() <= tolerance

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "states": list(self.states),
            "symbols": list(self.symbols),
            "transition": self.A.tolist(),
            "emission": self.B.tolist(),
            "initial": self.pi.tolist(),
            "time_steps": self.time_steps,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HiddenMarkovModel":
        return cls(
            data["states"],
            data["symbols"],
            data["transition"],
            data["emission"],
            data["initial"],
            time_steps=data.get("time_steps"),
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, HiddenMarkovModel):
            return NotImplemented
        return (self.states == other.states and
                self.symbols == other.symbols and
                self.time_steps == other.time_steps and
                np.array_equal(self.A, other.A) and
                np.array_equal(self.B, other.B) and
                np.array_equal(self.pi, other.pi))

    __hash__ = None

    def __repr__(self) -> str:
        return f"HiddenMarkovModel(n_states={self.n_states}, n_symbols={self.n_symbols})"
