"""
Rigid-body transforms for jax_spatial.

- so3: rotation matrices, axis-angle rotations, basis completion
- se3: homogeneous matrices and the spatial adjoint
- Transform3d: rigid transform tagged with source and target frames
"""

from . import so3
from . import se3
from .transform import Transform3d

__all__ = [
    "so3",
    "se3",
    "Transform3d",
]
