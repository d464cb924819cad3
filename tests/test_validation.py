import math
import logging

import numpy as np
import pytest
import scipy.sparse as sp

from pySinkhorn import (
    balance,
    BalanceError,
    InvalidInputError,
    InvalidParameterError,
    SinkhornKnoppBalancer,
    BalanceProblem,
)
from pySinkhorn.opt.util import check_degenerate, stochastic_error, validate_max_iter


@pytest.mark.parametrize(
    "matrix",
    [
        np.ones((2, 3)),
        np.ones(4),
        np.ones((2, 2, 2)),
        np.zeros((0, 0)),
        np.array([[1.0, -1.0], [1.0, 1.0]]),
        np.array([[1.0, np.nan], [1.0, 1.0]]),
        np.array([[1 + 1j, 1], [1, 1]]),
        [["a", "b"], ["c", "d"]],
        [["3", "2"], ["2", "3"]],
        np.array([[None, 1.0], [1.0, 1.0]], dtype=object),
        [[1.0, 2.0], [3.0]],
        sp.csr_matrix(np.ones((2, 3))),
        sp.csr_matrix(np.array([[1.0, -2.0], [0.0, 1.0]])),
        sp.csr_matrix(np.array([[1 + 1j, 0], [0, 1]])),
    ],
)
def test_invalid_matrix_raises(matrix):
    with pytest.raises(InvalidInputError):
        balance(matrix)


@pytest.mark.parametrize("tol", [0, -1e-3, float("nan"), "1e-6", True, [1e-6]])
def test_invalid_tolerance_raises(tol):
    with pytest.raises(InvalidParameterError):
        balance(np.eye(2), tolerance=tol)


@pytest.mark.parametrize("max_iter", [0, -5, 1.5, True, "10", float("nan"), -math.inf, None])
def test_invalid_max_iter_raises(max_iter):
    with pytest.raises(InvalidParameterError):
        balance(np.eye(2), max_iter=max_iter)


@pytest.mark.parametrize("max_iter, expected", [(5, 5), (5.0, 5), (np.int64(3), 3), (math.inf, math.inf), (np.inf, math.inf)])
def test_valid_max_iter(max_iter, expected):
    assert validate_max_iter(max_iter) == expected


def test_unknown_option_raises():
    with pytest.raises(InvalidParameterError, match="tol"):
        SinkhornKnoppBalancer(BalanceProblem(np.eye(2)), tol=1e-6)


def test_invalid_n_verb_raises():
    with pytest.raises(InvalidParameterError):
        SinkhornKnoppBalancer(BalanceProblem(np.eye(2)), n_verb=0)


def test_errors_are_value_errors():
    assert issubclass(InvalidInputError, ValueError)
    assert issubclass(InvalidParameterError, ValueError)
    assert issubclass(InvalidInputError, BalanceError)
    with pytest.raises(ValueError):
        balance(np.ones((2, 3)))


def test_params_are_recorded(toeplitz3):
    balancer = SinkhornKnoppBalancer(BalanceProblem(toeplitz3), tolerance=1e-9, max_iter=7.0)

    assert balancer.params["tolerance"] == 1e-9
    assert balancer.params["max_iter"] == 7
    assert balancer.params["track_history"] is True


def test_check_degenerate_reports_zero_rows_and_cols(caplog):
    a = np.array([[0.0, 0.0, 0.0],
                  [1.0, 0.0, 2.0],
                  [1.0, 0.0, 1.0]])
    with caplog.at_level(logging.WARNING):
        degenerate, rows, cols = check_degenerate(a)

    assert degenerate
    assert rows == [0]
    assert cols == [1]
    assert "all-zero" in caplog.text


def test_check_degenerate_clean_matrix(toeplitz3):
    assert check_degenerate(toeplitz3) == (False, [], [])


def test_stochastic_error():
    assert stochastic_error(np.eye(3)) == (0.0, 0.0)
    row_err, col_err = stochastic_error(np.array([[0.5, 0.5], [0.5, 0.0]]))
    assert row_err == pytest.approx(0.5)
    assert col_err == pytest.approx(0.5)
