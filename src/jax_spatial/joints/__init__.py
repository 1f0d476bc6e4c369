"""
Joints for jax_spatial.

- Joint: base class holding coordinates, links and spatial axes
- SphericalJoint: three-axis ball joint
"""

from .joint import Joint
from .spherical import Axis, SphericalJoint

__all__ = [
    "Joint",
    "SphericalJoint",
    "Axis",
]
