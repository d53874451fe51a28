"""
Test configuration and fixtures for hmmkit.

This file contains pytest configuration and shared fixtures
for testing hmmkit.
"""

import pytest
import tempfile
import numpy as np
from pathlib import Path

from hmmkit.config import reset_config
from hmmkit.hmm.model import HiddenMarkovModel


WEATHER_HMM = """\
2 2 2
Rainy Sunny
Walk Shop
a:
0.7 0.3
0.4 0.6
b:
0.1 0.9
0.6 0.4
pi:
0.6 0.4
"""


@pytest.fixture(autouse=True)
def clean_config():
    """Restore default configuration around every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def weather_model():
    """Two-state Rainy/Sunny model with Walk/Shop observations."""
    return HiddenMarkovModel(
        states=["Rainy", "Sunny"],
        symbols=["Walk", "Shop"],
        transition=[[0.7, 0.3], [0.4, 0.6]],
        emission=[[0.1, 0.9], [0.6, 0.4]],
        initial=[0.6, 0.4],
        time_steps=2
    )


@pytest.fixture
def sentence_model():
    """Three-state model with four symbols and a forbidden transition."""
    return HiddenMarkovModel(
        states=["SUBJECT", "AUXILIARY", "PREDICATE"],
        symbols=["kids", "robots", "do", "play"],
        transition=[
            [0.0, 0.6, 0.4],
            [0.2, 0.0, 0.8],
            [0.5, 0.2, 0.3],
        ],
        emission=[
            [0.5, 0.4, 0.05, 0.05],
            [0.05, 0.05, 0.8, 0.1],
            [0.1, 0.1, 0.2, 0.6],
        ],
        initial=[0.7, 0.2, 0.1],
        time_steps=4
    )


@pytest.fixture
def random_model():
    """Randomly parameterized 4-state, 5-symbol model with stochastic rows."""
    rng = np.random.default_rng(7)
    A = rng.random((4, 4))
    B = rng.random((4, 5))
    pi = rng.random(4)
    return HiddenMarkovModel(
        states=[f"s{i}" for i in range(4)],
        symbols=[f"o{k}" for k in range(5)],
        transition=A / A.sum(axis=1, keepdims=True),
        emission=B / B.sum(axis=1, keepdims=True),
        initial=pi / pi.sum()
    )


@pytest.fixture
def random_sequence():
    """Observation sequence over the random_model symbols."""
    rng = np.random.default_rng(11)
    return [f"o{k}" for k in rng.integers(0, 5, size=12)]


@pytest.fixture
def weather_hmm_text():
    """The weather model in .hmm format."""
    return WEATHER_HMM


@pytest.fixture
def weather_hmm_file(temp_dir):
    path = temp_dir / "weather.hmm"
    path.write_text(WEATHER_HMM)
    return path


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
