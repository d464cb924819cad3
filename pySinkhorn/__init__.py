"""
Sinkhorn-Knopp balancing of nonnegative square matrices.

Reference: P. A. Knight (2008), The Sinkhorn-Knopp Algorithm: Convergence and
Applications. SIAM J. Matrix Anal. Appl. 30(1), 261-275. doi: 10.1137/060659624
"""

from pySinkhorn.balance import balance, balance_batch
from pySinkhorn.errors import BalanceError, InvalidInputError, InvalidParameterError
from pySinkhorn.opt import BalanceProblem, Diagnostics, SinkhornKnoppBalancer
from pySinkhorn.opt.util import stochastic_error

__all__ = [
    "balance",
    "balance_batch",
    "stochastic_error",
    "BalanceProblem",
    "Diagnostics",
    "SinkhornKnoppBalancer",
    "BalanceError",
    "InvalidInputError",
    "InvalidParameterError",
]
