"""
Unit tests for the HiddenMarkovModel container.

Tests cover construction, vocabulary lookups, joint evaluation,
immutability and parameter validation.
"""

import pytest
import numpy as np

from hmmkit.config import set_config
from hmmkit.hmm.model import HiddenMarkovModel, StateVocabulary, SymbolVocabulary
from hmmkit.exceptions import (
    InvalidSequence,
    ModelDefinitionError,
    UnknownState,
    UnknownSymbol,
)


class TestModelConstruction:
    """Test model initialization and validation."""

    def test_dimensions(self, weather_model):
        assert weather_model.n_states == 2
        assert weather_model.n_symbols == 2
        assert weather_model.A.shape == (2, 2)
        assert weather_model.B.shape == (2, 2)
        assert weather_model.pi.shape == (2,)
        assert weather_model.time_steps == 2

    def test_vocabulary_order_defines_indices(self, sentence_model):
        assert list(sentence_model.states) == ["SUBJECT", "AUXILIARY", "PREDICATE"]
        assert sentence_model.state_index("PREDICATE") == 2
        assert sentence_model.symbol_index("do") == 2

    def test_tables_are_read_only(self, weather_model):
        with pytest.raises(ValueError):
            weather_model.A[0, 0] = 1.0
        with pytest.raises(ValueError):
            weather_model.pi[0] = 1.0

    def test_shape_mismatch(self):
        with pytest.raises(ModelDefinitionError, match="transition matrix shape"):
            HiddenMarkovModel(["a", "b"], ["x"], [[1.0]], [[1.0], [1.0]], [0.5, 0.5])

    def test_ragged_table(self):
        with pytest.raises(ModelDefinitionError):
            HiddenMarkovModel(["a", "b"], ["x"], [[1.0, 0.0], [1.0]], [[1.0], [1.0]], [0.5, 0.5])

    def test_negative_probability(self):
        with pytest.raises(ModelDefinitionError, match="negative"):
            HiddenMarkovModel(["a"], ["x"], [[1.0]], [[-1.0]], [1.0])

    def test_non_finite_probability(self):
        with pytest.raises(ModelDefinitionError, match="non-finite"):
            HiddenMarkovModel(["a"], ["x"], [[np.nan]], [[1.0]], [1.0])

    def test_duplicate_states(self):
        with pytest.raises(ModelDefinitionError, match="duplicate state"):
            HiddenMarkovModel(["a", "a"], ["x"], np.eye(2), [[1.0], [1.0]], [0.5, 0.5])

    def test_empty_vocabulary(self):
        with pytest.raises(ModelDefinitionError, match="cannot be empty"):
            HiddenMarkovModel(["a"], [], [[1.0]], np.zeros((1, 0)), [1.0])

    def test_non_string_identifier(self):
        with pytest.raises(ModelDefinitionError, match="non-empty strings"):
            HiddenMarkovModel([1, 2], ["x"], np.eye(2), [[1.0], [1.0]], [0.5, 0.5])

    def test_non_stochastic_model_is_accepted(self):
        model = HiddenMarkovModel(["a", "b"], ["x"], [[0.5, 0.2], [0.0, 1.0]],
                                  [[1.0], [1.0]], [0.5, 0.5])
        assert not model.is_stochastic()
        assert model.row_sum_deviation() == pytest.approx(0.3)

    def test_stochastic_model(self, sentence_model):
        assert sentence_model.is_stochastic()

    def test_identifier_with_whitespace(self):
        with pytest.raises(ModelDefinitionError, match="without whitespace"):
            HiddenMarkovModel(["Heavy Rain", "Sunny"], ["x"], np.eye(2), [[1.0], [1.0]], [0.5, 0.5])
        with pytest.raises(ModelDefinitionError, match="without whitespace"):
            HiddenMarkovModel(["a"], ["x\n"], [[1.0]], [[1.0]], [1.0])

    def test_zero_stochastic_tolerance_from_config(self):
        model = HiddenMarkovModel(["a", "b"], ["x"], [[0.5, 0.5 + 1e-9], [0.5, 0.5]],
                                  [[1.0], [1.0]], [0.5, 0.5])
        assert model.is_stochastic()

        set_config('model', 'stochastic_tolerance', 0.0)
        assert not model.is_stochastic()
        assert model.is_stochastic(tolerance=1e-6)


class TestLookups:
    """Test transition/emission/initial lookups by identifier and index."""

    def test_lookup_by_identifier(self, weather_model):
        assert weather_model.transition("Rainy", "Sunny") == pytest.approx(0.3)
        assert weather_model.emission("Sunny", "Walk") == pytest.approx(0.6)
        assert weather_model.initial("Rainy") == pytest.approx(0.6)

    def test_lookup_by_index(self, weather_model):
        assert weather_model.transition(1, 0) == pytest.approx(0.4)
        assert weather_model.emission(0, 1) == pytest.approx(0.9)
        assert weather_model.initial(1) == pytest.approx(0.4)

    def test_unknown_state(self, weather_model):
        with pytest.raises(UnknownState) as exc_info:
            weather_model.transition("Rainy", "Cloudy")
        assert exc_info.value.state == "Cloudy"

        with pytest.raises(UnknownState):
            weather_model.initial(2)
        with pytest.raises(UnknownState):
            weather_model.emission(-1, "Walk")

    def test_unknown_symbol(self, weather_model):
        with pytest.raises(UnknownSymbol) as exc_info:
            weather_model.emission("Rainy", "Swim")
        assert exc_info.value.symbol == "Swim"

        with pytest.raises(UnknownSymbol):
            weather_model.emission("Rainy", 5)

    def test_bool_is_not_an_index(self, weather_model):
        with pytest.raises(UnknownState):
            weather_model.initial(True)

    def test_vocabulary_membership(self):
        states = StateVocabulary(["a", "b"])
        assert "a" in states
        assert 1 in states
        assert "c" not in states
        assert states.name(1) == "b"
        assert states != SymbolVocabulary(["a", "b"])


class TestEncoding:
    """Test resolution of observation sequences to indices."""

    def test_encode_identifiers(self, sentence_model):
        encoded = sentence_model.encode(["kids", "do", "play"])
        np.testing.assert_array_equal(encoded, [0, 2, 3])

    def test_encode_index_array(self, sentence_model):
        encoded = sentence_model.encode(np.array([3, 0]))
        np.testing.assert_array_equal(encoded, [3, 0])

    def test_encode_out_of_range_index_array(self, sentence_model):
        with pytest.raises(UnknownSymbol):
            sentence_model.encode(np.array([0, 4]))

    def test_encode_empty(self, sentence_model):
        with pytest.raises(InvalidSequence):
            sentence_model.encode([])
        with pytest.raises(InvalidSequence):
            sentence_model.encode(np.array([], dtype=int))

    def test_encode_unknown_symbol(self, sentence_model):
        with pytest.raises(UnknownSymbol):
            sentence_model.encode(["kids", "sing"])

    def test_encode_rejects_plain_string(self, sentence_model):
        with pytest.raises(InvalidSequence):
            sentence_model.encode("kids")

    def test_state_names(self, sentence_model):
        assert sentence_model.state_names([2, 0]) == ["PREDICATE", "SUBJECT"]


class TestJointEvaluation:
    """Test probability of an output sequence along a given state path."""

    def test_product_formula(self, weather_model):
        probability = weather_model.evaluate(["Walk", "Shop"], ["Sunny", "Rainy"])
        assert probability == pytest.approx(0.4 * 0.6 * 0.4 * 0.9)

    def test_single_step(self, weather_model):
        assert weather_model.evaluate(["Shop"], ["Rainy"]) == pytest.approx(0.6 * 0.9)
        assert weather_model.init_eval("Shop", "Rainy") == pytest.approx(0.54)
        assert weather_model.step_eval("Walk", "Rainy", "Sunny") == pytest.approx(0.3 * 0.6)

    def test_length_mismatch_is_zero(self, weather_model):
        assert weather_model.evaluate(["Walk", "Shop"], ["Sunny"]) == 0.0
        assert weather_model.evaluate(["Walk"], []) == 0.0
        assert weather_model.evaluate([], ["Rainy"]) == 0.0

    def test_empty_sequences(self, weather_model):
        with pytest.raises(InvalidSequence):
            weather_model.evaluate([], [])

    def test_unknown_identifiers_propagate(self, weather_model):
        with pytest.raises(UnknownState):
            weather_model.evaluate(["Walk", "Shop"], ["Sunny", "Foggy"])
        with pytest.raises(UnknownSymbol):
            weather_model.evaluate(["Walk", "Run"], ["Sunny", "Rainy"])

    def test_forbidden_transition(self, sentence_model):
        # SUBJECT -> SUBJECT has probability 0
        assert sentence_model.evaluate(["kids", "robots"], ["SUBJECT", "SUBJECT"]) == 0.0


class TestParameters:
    """Test parameter access and derived models."""

    def test_get_parameters_returns_copies(self, weather_model):
        pi, A, B = weather_model.get_parameters()
        A[0, 0] = 0.0
        assert weather_model.A[0, 0] == pytest.approx(0.7)
        np.testing.assert_allclose(pi, [0.6, 0.4])
        np.testing.assert_allclose(B, [[0.1, 0.9], [0.6, 0.4]])

    def test_with_parameters_shares_vocabularies(self, weather_model):
        derived = weather_model.with_parameters(np.eye(2), [[0.5, 0.5], [0.5, 0.5]], [1.0, 0.0])

        assert derived is not weather_model
        assert derived.states is weather_model.states
        assert derived.symbols is weather_model.symbols
        assert derived.time_steps == weather_model.time_steps
        assert weather_model.transition("Rainy", "Rainy") == pytest.approx(0.7)

    def test_dict_round_trip(self, sentence_model):
        restored = HiddenMarkovModel.from_dict(sentence_model.to_dict())
        assert restored == sentence_model

    def test_repr(self, sentence_model):
        assert repr(sentence_model) == "HiddenMarkovModel(n_states=3, n_symbols=4)"
