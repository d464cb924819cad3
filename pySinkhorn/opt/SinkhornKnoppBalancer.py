# pySinkhorn/opt/SinkhornKnoppBalancer.py
import math
import numbers

import numpy as np
import scipy.sparse as sp
from tqdm import tqdm

from pySinkhorn.errors import InvalidParameterError
from pySinkhorn.opt.BaseBalancer import BaseBalancer
from pySinkhorn.opt.BalanceProblem import BalanceProblem
from pySinkhorn.opt.Diagnostics import Diagnostics
from pySinkhorn.opt.util import (
    check_degenerate,
    row_sums,
    scale_rows_then_cols,
    validate_max_iter,
    validate_tolerance,
)


def _vecmat(r, A):
    # r' * A without forming A'
    return np.asarray(r @ A, dtype=float).ravel()


def _matvec(A, c):
    return np.asarray(A @ c, dtype=float).ravel()


class SinkhornKnoppBalancer(BaseBalancer):
    """
    Sinkhorn-Knopp (RAS) balancing of a nonnegative square matrix.

    Finds r and c such that M = diag(r) * A * diag(c) has unit row and column
    sums. Columns are normalized last, so the column sums of M are one to
    rounding error whatever happens; the row sums are within `tolerance` of one
    when the run converges. The stopping test runs before each update, so a
    converged run returns the pair that passed the test.

    The algorithm converges for positive matrices but may not if A has too
    many zeros, depending on their distribution. Set `max_iter` and check
    `Diagnostics.converged` (or the sums of M) in that case. All-zero rows or
    columns give inf/NaN scale factors.

    Reference: P. A. Knight (2008), The Sinkhorn-Knopp Algorithm: Convergence
    and Applications. SIAM J. Matrix Anal. Appl. 30(1), 261-275.
    """

    DEFAULTS = {
        "tolerance": None,  # None -> np.spacing(N)
        "max_iter": math.inf,
        "track_history": True,
        "progress": False,
        "n_verb": 10,
    }

    def __init__(self, problem, verbose=False, **params):
        if not isinstance(problem, BalanceProblem):
            problem = BalanceProblem(problem)
        super().__init__(problem, verbose=verbose, **params)

    def validate_params(self, params):
        params["tolerance"] = validate_tolerance(params["tolerance"], self.problem.n)
        params["max_iter"] = validate_max_iter(params["max_iter"])
        n_verb = params["n_verb"]
        if isinstance(n_verb, bool) or not isinstance(n_verb, numbers.Integral) or n_verb < 1:
            raise InvalidParameterError(f"n_verb must be a positive integer, got {n_verb!r}")
        return params

    @BaseBalancer.timed
    def solve(self):
        A = self.problem.A
        if sp.issparse(A):
            A = A.tocsr()
        N = self.problem.n
        tol = self.tolerance
        max_iter = self.max_iter

        history = {"iteration": [], "max_resid": []}
        converged = False

        if self.verbose:
            self.logger.info(f"Starting Sinkhorn-Knopp balancing (N={N}, tol={tol:.3e}, max_iter={max_iter})")
        check_degenerate(A, logger=self.logger)

        pbar = tqdm(
            total=None if math.isinf(max_iter) else max_iter,
            initial=1,
            desc="Sinkhorn-Knopp iterations",
            disable=not self.progress,
        )

        # zero sums are the caller's problem; let inf/NaN through quietly
        with np.errstate(divide="ignore", invalid="ignore"):
            # --- First iteration, no test ---
            it = 1
            r = 1.0 / row_sums(A)
            c = 1.0 / _vecmat(r, A)

            # --- Main loop ---
            while it < max_iter:
                it += 1
                pbar.update(1)

                rinv = _matvec(A, c)
                # row sums of diag(r) * A * diag(c) minus one
                resid = r * rinv - 1.0
                max_resid = float(np.max(np.abs(resid)))

                if self.track_history:
                    history["iteration"].append(it)
                    history["max_resid"].append(max_resid)

                if self.verbose and it % self.n_verb == 0:
                    self.verbose_report(resid, it, max_resid, n_verb=self.n_verb)

                if max_resid <= tol:
                    converged = True
                    break

                r = 1.0 / rinv
                c = 1.0 / _vecmat(r, A)

            final_residuals = r * _matvec(A, c) - 1.0

        pbar.close()

        if self.verbose:
            if converged:
                self.logger.info(f"Converged at iteration {it} with max_resid={max_resid:.2e}")
            else:
                self.logger.warning(
                    f"Reached max iterations ({max_iter}) without convergence. "
                    f"Final max_resid={np.max(np.abs(final_residuals)):.2e}"
                )

        # This way maintains sparseness
        A_scaled = scale_rows_then_cols(self.problem.A, r, c)

        diagnostics = {
            "converged": converged,
            "params": self.params,
            "A_scaled": A_scaled,
            "r": r,
            "c": c,
            "tolerance": tol,
            "max_iter": max_iter,
            "iterations": it,
            "history": history,
            "final_residuals": final_residuals,
        }

        self.res = Diagnostics(**diagnostics, logger=self.logger)
        return self.res


if __name__ == "__main__":
    from scipy.linalg import toeplitz
    from pySinkhorn.opt.util import stochastic_error

    a = toeplitz(np.arange(1, 7))
    balancer = SinkhornKnoppBalancer(BalanceProblem(a), verbose=True)
    result = balancer.solve()

    print("a:\n", a)
    print("m:\n", result.A_scaled)
    print("Row and column sum errors:", stochastic_error(result.A_scaled))
    print(result.summary())
