# pySinkhorn/opt/BaseBalancer.py
from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
import logging
import sys
import time
import functools

from pySinkhorn.errors import InvalidParameterError
from pySinkhorn.logger import FORMAT


class BaseBalancer(ABC):
    """Abstract base class for all matrix balancing algorithms."""

    DEFAULTS = {}

    def __init__(self, problem, verbose=False, **params):
        self.problem = problem
        self.res = None
        self.verbose = verbose
        # Create a class-specific logger
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(logging.INFO)

        if verbose and not self.logger.handlers:
            # Only add handler if none exist to avoid duplicates
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(FORMAT))
            self.logger.addHandler(handler)
            self.logger.propagate = False  # prevent double logging in root

        unknown = sorted(set(params) - set(self.DEFAULTS))
        if unknown:
            raise InvalidParameterError(
                f"Unknown option(s) for {self.__class__.__name__}: {', '.join(unknown)}. "
                f"Valid options: {', '.join(sorted(self.DEFAULTS))}"
            )
        merged = {**self.DEFAULTS, **params}
        merged = self.validate_params(merged)

        # Dynamically set as attributes
        for k, v in merged.items():
            setattr(self, k, v)

        # Keep full parameter record
        self.params = merged

    def validate_params(self, params):
        return params

    @abstractmethod
    def solve(self):
        pass

    def diagnostics(self):
        return self.res

    # --- Compact human-readable runtime formatter ---
    @staticmethod
    def _format_runtime(sec: float) -> str:
        if sec >= 3600:
            return f"{sec / 3600:.2f} h"
        if sec >= 100:
            return f"{sec / 60:.2f} min"
        return f"{sec:.2f} s"

    @staticmethod
    def timed(method):
        """Decorator that measures runtime and stores it in the solver diagnostics."""
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            t0 = time.perf_counter()
            result = method(self, *args, **kwargs)
            runtime = time.perf_counter() - t0
            runtime_str = self._format_runtime(runtime)

            if getattr(self, "res", None) is not None:
                self.res.update(runtime_sec=runtime, runtime_str=runtime_str)

            if self.verbose:
                self.logger.info(f"Runtime: {runtime_str}")

            return result
        return wrapper

    def verbose_report(self, resid, it, max_resid, n_verb=10):
        '''
        Log the n_verb rows with the largest residuals at iteration it.
        '''
        idx_sorted = np.argsort(-np.abs(resid))  # descending order
        topn_idx = idx_sorted[:n_verb]

        report_df = pd.DataFrame({
            "Row Index": topn_idx,
            "Residual": resid[topn_idx],
        })

        self.logger.info(f"Iteration {it}: max_resid={max_resid:.4e}")
        self.logger.info("Top rows by residual:\n" + report_df.to_string(index=False))
