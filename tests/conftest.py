import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


@pytest.fixture
def toeplitz3():
    return np.array([[3.0, 2.0, 1.0],
                     [2.0, 3.0, 2.0],
                     [1.0, 2.0, 3.0]])


@pytest.fixture
def positive5():
    rng = np.random.default_rng(42)
    return rng.uniform(0.1, 2.0, size=(5, 5))


@pytest.fixture
def patterned4():
    # zeros, but with total support
    return np.array([[1.0, 0.0, 2.0, 0.0],
                     [0.0, 3.0, 1.0, 1.0],
                     [4.0, 1.0, 0.0, 2.0],
                     [1.0, 0.0, 1.0, 5.0]])
