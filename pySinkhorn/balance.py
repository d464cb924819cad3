# pySinkhorn/balance.py
import math
import numbers

from joblib import Parallel, delayed

from pySinkhorn.errors import InvalidParameterError
from pySinkhorn.opt.BalanceProblem import BalanceProblem
from pySinkhorn.opt.SinkhornKnoppBalancer import SinkhornKnoppBalancer


def balance(A, tolerance=None, max_iter=math.inf, verbose=False, **options):
    """
    Normalize a nonnegative square matrix to (column-emphasized) doubly stochastic form.

    Parameters:
    A : array-like or scipy.sparse matrix - nonnegative N x N matrix, not modified
    tolerance : float - maximum error in the row sums at convergence, default np.spacing(N)
    max_iter : int or math.inf - maximum number of iterations, default unbounded
    options : further SinkhornKnoppBalancer options (track_history, progress, n_verb)

    Returns (M, r, c) with M = diag(r) * A * diag(c). The column sums of M are one
    to rounding error; the row sums are within `tolerance` of one if the run
    converged. Running out of iterations is not an error: use
    SinkhornKnoppBalancer directly to see whether the run converged.
    """
    balancer = SinkhornKnoppBalancer(
        BalanceProblem(A), verbose=verbose, tolerance=tolerance, max_iter=max_iter, **options
    )
    balancer.solve()
    return balancer.diagnostics().as_tuple()


def balance_batch(matrices, n_jobs=1, **params):
    """Balance independent matrices, in worker processes when n_jobs != 1. Keeps input order."""
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, numbers.Integral) or n_jobs == 0:
        raise InvalidParameterError(f"n_jobs must be a nonzero integer, got {n_jobs!r}")
    # validate everything before spawning workers
    problems = [BalanceProblem(A) for A in matrices]
    if n_jobs == 1:
        return [balance(p.A, **params) for p in problems]
    return Parallel(n_jobs=n_jobs)(delayed(balance)(p.A, **params) for p in problems)
