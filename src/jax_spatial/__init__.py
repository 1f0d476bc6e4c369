"""
JAX Spatial: frame-checked spatial algebra for rigid-body kinematics.

The package pairs a small column-major linear-algebra kernel (vectors and
matrices whose sub-views alias their parent's storage) with frame-tagged
rigid transforms and spatial vectors built on JAX, and a spherical joint
that produces its spatial axes and their time derivatives.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import linalg
from . import transforms
from . import joints
from .config import config
from .errors import (
    ConfigurationError,
    DataMismatchError,
    FrameMismatchError,
    InvalidIndexError,
    MissizeError,
    SpatialError,
)
from .frames import Frame, FrameRegistry
from .joints import Axis, Joint, SphericalJoint
from .linalg import MatrixN, SharedMatrixN, SharedVectorN, VectorN
from .links import RigidLink
from .logging_config import setup_logging
from .spatial import (
    ForceVector,
    MotionVector,
    SAcceleration,
    SAxis,
    SForce,
    SMomentum,
    SVelocity,
)
from .transforms import Transform3d

__version__ = "0.1.0"
__all__ = [
    "linalg",
    "transforms",
    "joints",
    "config",
    "setup_logging",
    "SpatialError",
    "InvalidIndexError",
    "MissizeError",
    "DataMismatchError",
    "FrameMismatchError",
    "ConfigurationError",
    "Frame",
    "FrameRegistry",
    "RigidLink",
    "VectorN",
    "SharedVectorN",
    "MatrixN",
    "SharedMatrixN",
    "MotionVector",
    "ForceVector",
    "SVelocity",
    "SAcceleration",
    "SAxis",
    "SForce",
    "SMomentum",
    "Transform3d",
    "Joint",
    "SphericalJoint",
    "Axis",
]
