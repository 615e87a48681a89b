# tests/conftest.py

import logging

import numpy as np
import pytest

from planet_generator.scalar_field import ScalarField


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def logger():
    return logging.getLogger("planet_generator.tests")


@pytest.fixture
def make_field():
    """Builds a ScalarField from nested lists of rows."""
    def _make(rows):
        return ScalarField.from_array(rows)
    return _make
