"""Spherical (3-DOF ball) joint.

The joint is parametrized by three unit axes u1, u2, u3 and three
coordinates. u1 is fixed in the joint frame; u2 is carried around u1 by the
first coordinate; u3 is carried around u2 and then around u1. The moving axes
are recomputed from q on every query. The axes become linearly dependent
when u3 swings onto u1, i.e. when cos(q2 + tare2) = 0; ``is_singular``
reports how close the joint is to that.

Any subset of the axes may be given; the rest are completed into a
right-handed orthonormal triad:

* none given: the joint is not configured yet and queries raise
  ``ConfigurationError``;
* one given: the other two come from ``so3.orthonormal_basis`` applied in
  cyclic order (u1 -> (u2, u3), u2 -> (u3, u1), u3 -> (u1, u2));
* two given: the third is their cross product in cyclic order
  (u1 x u2 -> u3, u2 x u3 -> u1, u3 x u1 -> u2);
* three given: used as they are.
"""

import enum
import logging
from typing import List, Optional

import jax
import jax.numpy as jnp
import numpy as np

from ..config import config
from ..errors import ConfigurationError
from ..frames import FrameRegistry
from ..spatial import SAxis
from ..transforms import Transform3d, so3
from .joint import Joint

logger = logging.getLogger(__name__)

Array = jax.Array


class Axis(enum.IntEnum):
    AXIS1 = 0
    AXIS2 = 1
    AXIS3 = 2


class SphericalJoint(Joint):
    """Ball joint with three rotational degrees of freedom."""

    def __init__(self, registry: FrameRegistry, name: str = "spherical"):
        super().__init__(registry, num_dof=3, name=name)
        self._u: List[Array] = [jnp.zeros(3) for _ in Axis]
        self._specified = [False, False, False]

    # Axes
    def get_axis(self, which: Axis) -> Array:
        """Unit axis ``which`` in the joint frame at q = 0 (zero if unset)."""
        return self._u[Axis(which)]

    def set_axis(self, axis, which: Axis) -> None:
        """
        Set one of the three axes in the joint frame.

        The axis is normalized if it is not unit length. A zero vector clears
        it. Axes that were filled in automatically are derived again from the
        ones that have been set explicitly.

        Raises:
            ConfigurationError: if the explicitly set axes cannot form an
                orthonormal triad. The joint keeps its previous axes.
        """
        which = Axis(which)
        axis = jnp.asarray(np.asarray(axis, dtype=np.float64))
        norm = float(jnp.linalg.norm(axis))

        u = list(self._u)
        specified = list(self._specified)
        if norm < config.eps:
            u[which] = jnp.zeros(3)
            specified[which] = False
        else:
            u[which] = axis / norm
            specified[which] = True

        for i in Axis:
            if not specified[i]:
                u[i] = jnp.zeros(3)
        if self._complete_axes(u):
            self._check_triad(u)

        self._u = u
        self._specified = specified
        self.update_spatial_axes()

    @property
    def is_configured(self) -> bool:
        return all(float(jnp.linalg.norm(u)) >= config.eps for u in self._u)

    def assign_axes(self) -> bool:
        """
        Complete the axis triad from whatever has been set.

        Returns:
            False if no axis has been set yet, True once all three are known.
        """
        return self._complete_axes(self._u)

    def _complete_axes(self, u: List[Array]) -> bool:
        """Fill the unset entries of ``u`` in place."""
        eps = config.eps
        known = [i for i in Axis if float(jnp.linalg.norm(u[i])) >= eps]

        if not known:
            logger.debug("%s: no axes set yet, joint not configured", self.name)
            return False

        if len(known) == 1:
            i = known[0]
            b, c = so3.orthonormal_basis(u[i])
            u[(i + 1) % 3] = b
            u[(i + 2) % 3] = c
            logger.debug("%s: completed axes from axis %d", self.name, i + 1)
        elif len(known) == 2:
            (missing,) = set(Axis) - set(known)
            a, b = u[(missing + 1) % 3], u[(missing + 2) % 3]
            u[missing] = so3.normalize(so3.cross(a, b))
            logger.debug("%s: derived axis %d by cross product", self.name, missing + 1)

        return True

    def _check_triad(self, u: List[Array]) -> None:
        tol = config.eps
        for i in Axis:
            if abs(float(jnp.linalg.norm(u[i])) - 1.0) >= tol:
                raise ConfigurationError(f"{self.name}: axis {i + 1} is not unit length")
        for i, j in ((0, 1), (0, 2), (1, 2)):
            if abs(float(jnp.dot(u[i], u[j]))) >= tol:
                raise ConfigurationError(
                    f"{self.name}: axes {i + 1} and {j + 1} are not orthogonal")

    def update_spatial_axes(self) -> None:
        """Recompute the derived axes and the constant first spatial axis."""
        if not self.assign_axes():
            return
        self._check_triad(self._u)

        self._s[Axis.AXIS1] = SAxis(angular=self._u[Axis.AXIS1], linear=jnp.zeros(3),
                                    frame=self.frame)
        self._s_dot[Axis.AXIS1] = SAxis.zero(self.frame)

    def _check_axes(self, caller: str) -> None:
        if not self.is_configured:
            raise ConfigurationError(
                f"SphericalJoint.{caller}() called before any joint axis was set")

    # Kinematics
    def _rotations(self):
        """Axis-angle rotations R1, R2, R3 for the current q + q_tare."""
        q = self._effective_q()
        u1, u2, u3 = self._u
        return so3.axis_angle(u1, q[0]), so3.axis_angle(u2, q[1]), so3.axis_angle(u3, q[2])

    def _moving_axes(self):
        """u1 and the current directions of the second and third axes."""
        R1, R2, _ = self._rotations()
        u1, u2, u3 = self._u
        return u1, R1 @ u2, R1 @ (R2 @ u3)

    def get_spatial_axes(self) -> List[SAxis]:
        """
        Spatial axes for the current q.

        Each is a pure rotation (zero linear part): u1, R1 u2 and R1 R2 u3,
        with R1 = rot(u1, q1 + tare1) and R2 = rot(u2, q2 + tare2).
        """
        self._check_links("get_spatial_axes")
        self._check_axes("get_spatial_axes")

        zeros = jnp.zeros(3)
        for i, direction in enumerate(self._moving_axes()):
            self._s[i] = SAxis(angular=direction, linear=zeros, frame=self.frame)

        return super().get_spatial_axes()

    def get_spatial_axes_dot(self) -> List[SAxis]:
        """
        Time derivatives of the spatial axes for the current q and qd.

        With w1 = u1 qd1 and w2 = u2 qd2:
            d/dt (R1 u2)    = w1 x (R1 u2)
            d/dt (R1 R2 u3) = w1 x (R1 R2 u3) + R1 (w2 x (R2 u3))
        The first axis is constant.
        """
        self._check_links("get_spatial_axes_dot")
        self._check_axes("get_spatial_axes_dot")

        qd = jnp.asarray(self.qd.as_array())
        R1, R2, _ = self._rotations()
        u1, u2, u3 = self._u

        omega1 = u1 * qd[0]
        omega2 = u2 * qd[1]
        u2_dot = jnp.cross(omega1, R1 @ u2)
        u3_dot = jnp.cross(omega1, R1 @ (R2 @ u3)) + R1 @ jnp.cross(omega2, R2 @ u3)

        zeros = jnp.zeros(3)
        self._s_dot[Axis.AXIS1] = SAxis.zero(self.frame)
        self._s_dot[Axis.AXIS2] = SAxis(angular=u2_dot, linear=zeros, frame=self.frame)
        self._s_dot[Axis.AXIS3] = SAxis(angular=u3_dot, linear=zeros, frame=self.frame)

        return super().get_spatial_axes_dot()

    def get_rotation(self) -> Array:
        """Rotation induced by the joint, R1 R2 R3."""
        self._check_axes("get_rotation")
        R1, R2, R3 = self._rotations()
        return R1 @ R2 @ R3

    def is_singular(self, tol: Optional[float] = None) -> bool:
        """True when the three current axes are close to linearly dependent."""
        self._check_axes("is_singular")
        tol = config.singular_tol if tol is None else tol
        u1, u2, u3 = self._moving_axes()
        return abs(float(jnp.dot(u1, jnp.cross(u2, u3)))) < tol

    def determine_q(self, inboard_pose: Transform3d, outboard_pose: Transform3d):
        """Not implemented for spherical joints."""
        logger.warning("%s: determine_q() is not implemented for spherical joints", self.name)
        raise NotImplementedError("SphericalJoint.determine_q() is not implemented")
