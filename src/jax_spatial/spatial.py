"""Frame-tagged spatial (6D) vectors.

Motions (velocities, accelerations, joint axes) and forces (forces, momenta)
are separate types. The only product between spatial vectors is the
reciprocal product of a motion with a force,

    dot(m, f) = m.angular . f.linear + m.linear . f.angular

so a motion-with-motion or force-with-force dot product does not exist: it is
not offered by either class, and passing the wrong kind to ``dot`` raises
``DataMismatchError``.

Both kinds store their components in screw order, (direction part, moment
part), under the slot names ``angular`` and ``linear``. For a motion that is
(angular velocity, linear velocity). For a force it is (force, moment): the
``force`` and ``torque`` properties name them explicitly. In this order the
reciprocal product above is the instantaneous power, and a change of frame
acts on both kinds through the same adjoint (see ``se3.adjoint``).

Every vector carries the ``Frame`` it is expressed in. Combining vectors with
different frames raises ``FrameMismatchError``. The frame is static pytree
metadata, so these vectors pass through ``jax.jit`` unchanged.
"""

from typing import Union

import jax
import jax.numpy as jnp
from flax import struct

from .errors import DataMismatchError, FrameMismatchError, MissizeError
from .frames import Frame

Array = jax.Array


@struct.dataclass
class _SpatialVector:
    angular: Array  # direction part: angular velocity, or force
    linear: Array   # moment part: linear velocity, or torque
    frame: Frame = struct.field(pytree_node=False)

    _kind = "spatial"

    @classmethod
    def zero(cls, frame: Frame):
        return cls(angular=jnp.zeros(3), linear=jnp.zeros(3), frame=frame)

    @classmethod
    def from_array(cls, values, frame: Frame):
        """Build from a 6-vector laid out as [angular, linear]."""
        values = jnp.asarray(values, dtype=jnp.float64)
        if values.shape != (6,):
            raise MissizeError(f"Spatial vectors need 6 components, got shape {values.shape}")
        return cls(angular=values[:3], linear=values[3:], frame=frame)

    def to_array(self) -> Array:
        return jnp.concatenate([jnp.asarray(self.angular), jnp.asarray(self.linear)])

    def norm(self) -> Array:
        return jnp.linalg.norm(self.to_array())

    def _check_compatible(self, other, operation: str) -> None:
        if not isinstance(other, _SpatialVector) or other._kind != self._kind:
            raise DataMismatchError(
                f"Cannot {operation} {type(self).__name__} and {type(other).__name__}")
        if other.frame != self.frame:
            raise FrameMismatchError(self.frame, other.frame, operation)

    def __add__(self, other):
        self._check_compatible(other, "add")
        return self.replace(angular=jnp.add(self.angular, other.angular),
                            linear=jnp.add(self.linear, other.linear))

    def __sub__(self, other):
        self._check_compatible(other, "subtract")
        return self.replace(angular=jnp.subtract(self.angular, other.angular),
                            linear=jnp.subtract(self.linear, other.linear))

    def __neg__(self):
        return self.replace(angular=jnp.negative(self.angular),
                            linear=jnp.negative(self.linear))

    def __mul__(self, scalar):
        if isinstance(scalar, _SpatialVector):
            return NotImplemented
        return self.replace(angular=jnp.multiply(self.angular, scalar),
                            linear=jnp.multiply(self.linear, scalar))

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        return self * (1.0 / scalar)


@struct.dataclass
class MotionVector(_SpatialVector):
    """Spatial motion: (angular velocity, linear velocity) and relatives."""

    _kind = "motion"

    def dot(self, force: "ForceVector") -> Array:
        """Reciprocal product with a force; see ``spatial.dot``."""
        return dot(self, force)

    def cross(self, other: Union["MotionVector", "ForceVector"]):
        """
        Spatial cross product self x other.

        With ``self = (w, v)`` and ``other = (a, b)`` in screw order the result
        is ``(w x a, w x b + v x a)`` for both motion and force operands, and
        has the operand's type. This is the rate of change of ``other`` when it
        is carried along by the motion ``self``.
        """
        if not isinstance(other, _SpatialVector):
            raise DataMismatchError(f"Cannot cross a motion with {type(other).__name__}")
        if other.frame != self.frame:
            raise FrameMismatchError(self.frame, other.frame, "cross")
        w, v = jnp.asarray(self.angular), jnp.asarray(self.linear)
        a, b = jnp.asarray(other.angular), jnp.asarray(other.linear)
        return other.replace(angular=jnp.cross(w, a),
                             linear=jnp.cross(w, b) + jnp.cross(v, a))


@struct.dataclass
class ForceVector(_SpatialVector):
    """
    Spatial force: (force, moment) in screw order.

    The slots are shared with ``MotionVector``, so for a force ``angular``
    holds the linear force and ``linear`` holds the moment (torque). Read
    them through the ``force`` and ``torque`` properties.
    """

    _kind = "force"

    @classmethod
    def from_force_torque(cls, force, torque, frame: Frame):
        return cls(angular=jnp.asarray(force, dtype=jnp.float64),
                   linear=jnp.asarray(torque, dtype=jnp.float64), frame=frame)

    @property
    def force(self) -> Array:
        return self.angular

    @property
    def torque(self) -> Array:
        return self.linear

    def dot(self, motion: MotionVector) -> Array:
        """Reciprocal product with a motion; see ``spatial.dot``."""
        return dot(motion, self)


@struct.dataclass
class SVelocity(MotionVector):
    """Spatial velocity (twist)."""


@struct.dataclass
class SAcceleration(MotionVector):
    """Spatial acceleration."""


@struct.dataclass
class SAxis(MotionVector):
    """Spatial axis: the motion produced by a unit rate of one joint coordinate."""


@struct.dataclass
class SForce(ForceVector):
    """Spatial force (wrench)."""


@struct.dataclass
class SMomentum(ForceVector):
    """Spatial momentum."""


def dot(motion: MotionVector, force: ForceVector) -> Array:
    """
    Reciprocal product of a motion and a force expressed in the same frame.

    Args:
        motion: any MotionVector (velocity, acceleration, axis)
        force: any ForceVector (force, momentum)

    Returns:
        scalar ``motion.angular . force.linear + motion.linear . force.angular``

    Raises:
        DataMismatchError: if the operands are not one motion and one force.
        FrameMismatchError: if the operands are expressed in different frames.
    """
    if not isinstance(motion, MotionVector) or not isinstance(force, ForceVector):
        raise DataMismatchError(
            "Spatial dot is defined only between a motion and a force, got "
            f"{type(motion).__name__} and {type(force).__name__}")
    if motion.frame != force.frame:
        raise FrameMismatchError(motion.frame, force.frame, "dot")
    return (jnp.dot(jnp.asarray(motion.angular), jnp.asarray(force.linear))
            + jnp.dot(jnp.asarray(motion.linear), jnp.asarray(force.angular)))
