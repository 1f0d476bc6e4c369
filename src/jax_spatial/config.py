"""Runtime configuration for jax_spatial.

Settings live on a single process-wide object, read as attributes and
changed through ``config.update``, the same way ``jax.config`` is used:

    from jax_spatial.config import config
    config.update("checks_enabled", False)

``checks_enabled`` is the one switch that gates index and size validation in
the linear-algebra kernel. With it off, an out-of-range index or a missized
operand is undefined behaviour: numpy may raise its own error, wrap a
negative index, or silently read stale storage. Frame checks and
configuration checks are never affected by it.

The environment variable ``JAX_SPATIAL_UNCHECKED=1`` starts the process with
checks disabled.
"""

import math
import os
from typing import Any

import numpy as np

_TRUTHY = ("1", "true", "yes", "on")


class Config:
    """Mutable bag of library-wide settings."""

    _defaults = {
        "checks_enabled": True,
        "eps": math.sqrt(float(np.finfo(np.float64).eps)),
        "singular_tol": 1e-2,
    }

    def __init__(self):
        for name, value in self._defaults.items():
            object.__setattr__(self, name, value)
        if os.environ.get("JAX_SPATIAL_UNCHECKED", "").strip().lower() in _TRUTHY:
            object.__setattr__(self, "checks_enabled", False)

    def update(self, name: str, value: Any) -> None:
        if name not in self._defaults:
            raise AttributeError(f"Unknown jax_spatial setting '{name}'")
        if name == "checks_enabled":
            value = bool(value)
        else:
            value = float(value)
            if value <= 0.0:
                raise ValueError(f"Setting '{name}' must be positive, got {value}")
        object.__setattr__(self, name, value)

    def reset(self) -> None:
        """Restore every setting to its default."""
        for name, value in self._defaults.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError("Use config.update(name, value) to change settings")

    def __repr__(self):
        items = ", ".join(f"{k}={getattr(self, k)!r}" for k in self._defaults)
        return f"Config({items})"


config = Config()
