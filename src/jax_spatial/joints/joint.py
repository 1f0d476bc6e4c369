"""Base class for joints.

A joint maps its generalized coordinates to the motion it allows between an
inboard and an outboard link. It exposes that motion as spatial axes (one
``SAxis`` per degree of freedom, i.e. the columns of the joint Jacobian),
their time derivatives, and the pose it induces.

The generalized coordinates ``q`` and velocities ``qd`` are read on every
call, never cached. Assigning a vector object to ``joint.q`` binds the joint
to it, so a joint can read straight out of a system-wide coordinate vector
through a ``segment`` view:

    q_all = VectorN.zero(12)
    joint.q = q_all.segment(3, 6)
"""

import logging
from typing import List, Optional

import jax
import jax.numpy as jnp

from ..errors import ConfigurationError, MissizeError
from ..frames import Frame, FrameRegistry
from ..linalg.vector import VectorN, _VectorBase
from ..spatial import SAxis, SVelocity
from ..transforms import Transform3d

logger = logging.getLogger(__name__)

Array = jax.Array


class Joint:
    """Joint with ``num_dof`` generalized coordinates.

    Attributes:
        frame: Frame the spatial axes are expressed in.
        induced_frame: Frame on the outboard side of the joint motion;
            ``get_induced_pose()`` maps it into ``frame``.
    """

    def __init__(self, registry: FrameRegistry, num_dof: int, name: str = "joint"):
        self.name = name
        self._num_dof = num_dof
        self.frame = registry.create(name)
        self.induced_frame = registry.create(f"{name}_induced")

        self._q = VectorN.zero(num_dof)
        self._qd = VectorN.zero(num_dof)
        self._q_tare = VectorN.zero(num_dof)

        self._inboard = None
        self._outboard = None

        self._s: List[SAxis] = [SAxis.zero(self.frame) for _ in range(num_dof)]
        self._s_dot: List[SAxis] = [SAxis.zero(self.frame) for _ in range(num_dof)]

    @property
    def num_dof(self) -> int:
        return self._num_dof

    # Generalized coordinates
    def _coerce(self, value, what: str) -> _VectorBase:
        if not isinstance(value, _VectorBase):
            value = VectorN.from_array(value)
        if len(value) != self._num_dof:
            raise MissizeError(f"{what} must have {self._num_dof} entries, got {len(value)}")
        return value

    @property
    def q(self) -> _VectorBase:
        return self._q

    @q.setter
    def q(self, value):
        self._q = self._coerce(value, "q")

    @property
    def qd(self) -> _VectorBase:
        return self._qd

    @qd.setter
    def qd(self, value):
        self._qd = self._coerce(value, "qd")

    @property
    def q_tare(self) -> _VectorBase:
        """Offset added to q before it is used."""
        return self._q_tare

    @q_tare.setter
    def q_tare(self, value):
        self._q_tare = self._coerce(value, "q_tare")

    def _effective_q(self) -> Array:
        """q + q_tare as a JAX array."""
        return jnp.asarray(self._q.as_array()) + jnp.asarray(self._q_tare.as_array())

    # Links
    def set_inboard_link(self, link) -> None:
        self._inboard = link

    def set_outboard_link(self, link) -> None:
        self._outboard = link

    @property
    def inboard_frame(self) -> Optional[Frame]:
        return None if self._inboard is None else self._inboard.frame

    @property
    def outboard_frame(self) -> Optional[Frame]:
        return None if self._outboard is None else self._outboard.frame

    def _check_links(self, caller: str) -> None:
        if self.inboard_frame is None:
            raise ConfigurationError(f"{type(self).__name__}.{caller}() called with no inboard link")
        if self.outboard_frame is None:
            raise ConfigurationError(f"{type(self).__name__}.{caller}() called with no outboard link")

    # Kinematics
    def get_spatial_axes(self) -> List[SAxis]:
        """Spatial axes in ``self.frame``, one per degree of freedom."""
        self._check_links("get_spatial_axes")
        return list(self._s)

    def get_spatial_axes_dot(self) -> List[SAxis]:
        """Time derivatives of the spatial axes."""
        self._check_links("get_spatial_axes_dot")
        return list(self._s_dot)

    def spatial_axes_matrix(self) -> Array:
        """(6, num_dof) matrix whose columns are the spatial axes."""
        return jnp.stack([s.to_array() for s in self.get_spatial_axes()], axis=1)

    def get_velocity(self) -> SVelocity:
        """Spatial velocity produced by the joint rates, S @ qd."""
        v = self.spatial_axes_matrix() @ jnp.asarray(self._qd.as_array())
        return SVelocity(angular=v[:3], linear=v[3:], frame=self.frame)

    def get_rotation(self) -> Array:
        raise NotImplementedError

    def get_induced_pose(self) -> Transform3d:
        """Pose of ``induced_frame`` relative to ``frame`` for the current q."""
        return Transform3d.from_rotation(self.get_rotation(), self.induced_frame, self.frame)

    def determine_q(self, inboard_pose: Transform3d, outboard_pose: Transform3d) -> VectorN:
        """Recover q from the poses of the two links."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, num_dof={self._num_dof})"
