"""
Pytest configuration and shared fixtures for the autodiff test suite.
"""

import logging

import numpy as np
import pytest

import autodiff
from autodiff import ADConfig
from helpers import finite_difference


@pytest.fixture
def restore_default_type():
    """Restore the default scalar type after a test changes it."""
    saved = ADConfig.DEFAULT_SCALAR_TYPE
    yield
    ADConfig.DEFAULT_SCALAR_TYPE = saved


@pytest.fixture
def restore_root_logger():
    """Keep pytest's own handlers when a test re-initializes logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.fixture
def fd():
    return finite_difference


@pytest.fixture(params=["dense", "sparse"])
def vector_kind(request):
    """Constructor of either storage kind, taking a list of values."""
    if request.param == "dense":
        return autodiff.new_dense_vector

    def make(values, stype=None):
        idx = [i for i, v in enumerate(values) if v != 0]
        return autodiff.new_sparse_vector(idx, [values[i] for i in idx], len(values), stype)
    return make


@pytest.fixture
def rng():
    return np.random.default_rng(42)
