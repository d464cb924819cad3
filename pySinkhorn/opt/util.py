import math
import numbers

import numpy as np
import scipy.sparse as sp

from pySinkhorn.errors import InvalidInputError, InvalidParameterError
from pySinkhorn.logger import get_logger


def as_float_matrix(A):
    """
    Return a float copy of A and check that it is a nonnegative square matrix.

    Dense input (ndarray or nested sequences) comes back as a float ndarray,
    scipy.sparse input as a float sparse matrix/array in its original format.
    The caller's object is never modified.
    """
    if sp.issparse(A):
        if np.issubdtype(A.dtype, np.complexfloating) or not (
            np.issubdtype(A.dtype, np.number) or A.dtype == bool
        ):
            raise InvalidInputError(f"matrix must be real-valued, got dtype {A.dtype}")
        M = A.astype(float, copy=True)
        values = M.tocoo().data
    else:
        try:
            raw = np.asarray(A)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"matrix must be a numeric array: {e}") from e
        if np.iscomplexobj(raw):
            raise InvalidInputError("matrix must be real-valued, got a complex array")
        if raw.dtype.kind not in "biuf":
            raise InvalidInputError(f"matrix must be a numeric array, got dtype {raw.dtype}")
        try:
            M = raw.astype(float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"matrix must be a numeric array: {e}") from e
        values = M

    if M.ndim != 2:
        raise InvalidInputError(f"matrix must be 2-D, got {M.ndim} dimension(s)")
    n_rows, n_cols = M.shape
    if n_rows != n_cols:
        raise InvalidInputError(f"matrix must be square, got shape {M.shape}")
    if n_rows == 0:
        raise InvalidInputError("matrix must not be empty")
    if np.isnan(values).any():
        raise InvalidInputError("matrix contains NaN entries")
    if (values < 0).any():
        raise InvalidInputError("matrix contains negative entries")
    return M


def default_tolerance(n):
    # machine epsilon at magnitude n
    return float(np.spacing(float(n)))


def validate_tolerance(tol, n):
    if tol is None:
        return default_tolerance(n)
    if isinstance(tol, bool) or not isinstance(tol, numbers.Real):
        raise InvalidParameterError(f"tolerance must be a real scalar, got {tol!r}")
    tol = float(tol)
    if not tol > 0:
        raise InvalidParameterError(f"tolerance must be positive, got {tol}")
    return tol


def validate_max_iter(max_iter):
    """Positive integer, or math.inf for an unbounded loop."""
    if isinstance(max_iter, bool) or not isinstance(max_iter, numbers.Real):
        raise InvalidParameterError(f"max_iter must be a positive integer or inf, got {max_iter!r}")
    if max_iter == math.inf:
        return math.inf
    if not math.isfinite(max_iter) or max_iter != int(max_iter) or max_iter < 1:
        raise InvalidParameterError(f"max_iter must be a positive integer or inf, got {max_iter!r}")
    return int(max_iter)


def row_sums(M):
    return np.asarray(M.sum(axis=1), dtype=float).ravel()


def col_sums(M):
    return np.asarray(M.sum(axis=0), dtype=float).ravel()


def check_degenerate(M, logger=None):
    """
    Check if any rows or columns of M are all zeros.
    Balancing divides by these sums, so they turn into inf/NaN scale factors.
    """
    logger = logger or get_logger(__name__)
    zero_rows = np.where(row_sums(M) == 0.0)[0]
    zero_cols = np.where(col_sums(M) == 0.0)[0]

    if zero_rows.size or zero_cols.size:
        logger.warning(
            f"Found {zero_rows.size} all-zero row(s) and {zero_cols.size} all-zero column(s); "
            "scaling factors will be inf/NaN."
        )
        return True, zero_rows.tolist(), zero_cols.tolist()
    return False, [], []


def scale_rows_then_cols(M, r, c):
    """
    diag(r) @ M @ diag(c), applied as a row scaling followed by a column scaling.

    For sparse M only the stored entries are touched, so no zero turns into a
    stored nonzero and the input format is kept.
    """
    if sp.issparse(M):
        fmt = M.format
        S = M.tocoo(copy=True)
        # row then column, same association as the dense branch
        S.data = S.data * r[S.row]
        S.data = S.data * c[S.col]
        return S.asformat(fmt)

    S = np.asarray(M, dtype=float) * r[:, np.newaxis]
    S = S * c[np.newaxis, :]
    return S


def stochastic_error(M):
    """Maximum absolute deviation of the row sums and column sums of M from one."""
    row_err = float(np.max(np.abs(row_sums(M) - 1.0)))
    col_err = float(np.max(np.abs(col_sums(M) - 1.0)))
    return row_err, col_err
