import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import scipy.sparse as sp
import json
from pathlib import Path

from pySinkhorn.opt.util import stochastic_error


class Diagnostics:
    """Container and utility methods for balancing diagnostics."""

    DEFAULTS = {
        "converged": False,
        "params": {},
        "A_scaled": None,
        "r": np.array([]),
        "c": np.array([]),
        "tolerance": None,
        "max_iter": None,
        "iterations": 0,
        "history": {},
        "final_residuals": np.array([]),
        "runtime_sec": None,
        "runtime_str": None,
        "logger": None,
        "output_path": Path('data', 'proc', 'balance'),
        "fig_path": Path('figs', 'balance'),
        }

    def __init__(self, **kwargs):
        """Initialize diagnostics with default or provided values."""
        for k, v in self.DEFAULTS.items():
            setattr(self, k, kwargs.get(k, v))
        if self.logger:
            self.logger.debug("Diagnostics initialized.")

    def update(self, **kwargs):
        """Update diagnostic attributes dynamically."""
        for k, v in kwargs.items():
            setattr(self, k, v)
        if self.logger:
            self.logger.debug(f"Updated diagnostics with: {list(kwargs.keys())}")

    def as_tuple(self):
        return self.A_scaled, self.r, self.c

    @property
    def final_max_resid(self):
        if self.final_residuals.size == 0:
            return float("nan")
        return float(np.max(np.abs(self.final_residuals)))

    # --- Standard analysis functions ---

    def summary(self):
        """Return a concise summary of the run."""
        if self.A_scaled is None:
            row_err, col_err = float("nan"), float("nan")
        else:
            row_err, col_err = stochastic_error(self.A_scaled)
        return {
            "Converged": self.converged,
            "Iterations": self.iterations,
            "Tolerance": self.tolerance,
            "Final max resid": self.final_max_resid,
            "Max row sum error": row_err,
            "Max col sum error": col_err,
            "Runtime": self.runtime_str,
        }

    def to_dataframe(self):
        """Convert iteration history to a pandas DataFrame."""
        return pd.DataFrame(self.history)

    def plot_convergence(self, name='convergence.png', logy=True):
        """Plot evolution of the max residual over iterations."""
        if "max_resid" not in self.history:
            raise ValueError("History does not contain 'max_resid'.")
        y = np.array(self.history["max_resid"])
        x = np.array(self.history["iteration"])

        fig = plt.figure(figsize=(6, 4))
        plt.plot(x, y, marker='o', markersize=3, linewidth=1, alpha=0.5, color='black')
        if self.tolerance is not None:
            plt.axhline(self.tolerance, color='red', linestyle='--', linewidth=1, label='tolerance')
            plt.legend()
        plt.xlabel("Iteration")
        plt.ylabel("Max row sum residual")
        if logy:
            plt.yscale("log")
        plt.title("Sinkhorn-Knopp Convergence")
        plt.grid(True, which="both", linestyle="--", linewidth=0.5, alpha=0.5)
        plt.tight_layout()

        fig_path = Path(self.fig_path)
        fig_path.mkdir(parents=True, exist_ok=True)
        plt.savefig(fig_path / name, dpi=300)
        plt.close(fig)
        return fig_path / name

    def dump(self, fold_name='res'):
        """Save diagnostics (arrays + metadata)."""
        path = Path(self.output_path) / fold_name
        path.mkdir(parents=True, exist_ok=True)

        data_manifest = {}

        if sp.issparse(self.A_scaled):
            sp.save_npz(path / "A_scaled.npz", self.A_scaled)
            data_manifest["A_scaled"] = "A_scaled.npz"
        else:
            np.save(path / "A_scaled.npy", self.A_scaled)
            data_manifest["A_scaled"] = "A_scaled.npy"

        for attr in ['r', 'c', 'final_residuals']:
            np.save(path / f"{attr}.npy", getattr(self, attr))
            data_manifest[attr] = f"{attr}.npy"

        # Save history arrays
        for key, arr in self.history.items():
            np.save(path / f"history_{key}.npy", np.array(arr))
            data_manifest[f"history.{key}"] = f"history_{key}.npy"

        # Write metadata (manifest + meta info)
        meta = {
            "manifest": data_manifest,
            "converged": self.converged,
            "params": self.params,
            "tolerance": self.tolerance,
            "max_iter": self.max_iter,
            "iterations": self.iterations,
            "runtime_sec": self.runtime_sec,
            "runtime_str": self.runtime_str,
        }

        with open(path / "meta.json", "w") as f:
            json.dump(meta, f, indent=4)

        if self.logger:
            self.logger.info(f"Diagnostics saved to {path}")
        return path

    @classmethod
    def load(cls, path):
        """Load diagnostics from a folder and reconstruct object."""
        path = Path(path)
        with open(path / "meta.json") as f:
            meta = json.load(f)

        obj = cls(output_path=path.parent, history={})
        manifest = meta.pop("manifest")

        # Restore arrays
        for key, filename in manifest.items():
            if filename.endswith(".npz"):
                arr = sp.load_npz(path / filename)
            else:
                arr = np.load(path / filename)
            if key.startswith("history."):
                obj.history[key.split(".", 1)[1]] = arr
            else:
                setattr(obj, key, arr)

        # Restore metadata
        for key, value in meta.items():
            setattr(obj, key, value)

        return obj
