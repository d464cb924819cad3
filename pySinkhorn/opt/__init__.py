from pySinkhorn.opt.BalanceProblem import BalanceProblem
from pySinkhorn.opt.Diagnostics import Diagnostics
from pySinkhorn.opt.SinkhornKnoppBalancer import SinkhornKnoppBalancer

__all__ = ["BalanceProblem", "Diagnostics", "SinkhornKnoppBalancer"]
