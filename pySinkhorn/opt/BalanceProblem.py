# pySinkhorn/opt/BalanceProblem.py
from pathlib import Path

import numpy as np
import scipy.sparse as sp

from pySinkhorn.errors import InvalidInputError
from pySinkhorn.logger import get_logger
from pySinkhorn.opt.util import as_float_matrix, check_degenerate


class BalanceProblem:
    """
    Validated input of a balancing run: a nonnegative N x N matrix.

    The matrix is copied to float on construction, so later changes to the
    caller's array do not leak into a run.
    """
    def __init__(self, A, name=None):
        self.A = as_float_matrix(A)
        self.name = name

    @property
    def n(self):
        return self.A.shape[0]

    @property
    def is_sparse(self):
        return sp.issparse(self.A)

    @classmethod
    def from_file(cls, path, name=None):
        """Load a problem from a .npz (scipy sparse) or .npy (dense) file."""
        path = Path(path)
        if path.suffix == ".npz":
            A = sp.load_npz(path)
        elif path.suffix == ".npy":
            A = np.load(path)
        else:
            raise InvalidInputError(f"Unsupported matrix file type: {path.suffix!r} (expected .npz or .npy)")
        return cls(A, name=name or path.stem)

    def nnz(self):
        if self.is_sparse:
            return int(self.A.count_nonzero())
        return int(np.count_nonzero(self.A))

    def summary(self, logger=None):
        logger = logger or get_logger(__name__)
        density = self.nnz() / float(self.n * self.n)
        logger.info(f"A shape: {self.A.shape}, "
                    f"sparse: {self.is_sparse}, density: {density:.3f}")
        degenerate, zero_rows, zero_cols = check_degenerate(self.A, logger=logger)
        return {
            "shape": self.A.shape,
            "sparse": self.is_sparse,
            "density": density,
            "degenerate": degenerate,
            "zero_rows": zero_rows,
            "zero_cols": zero_cols,
        }
