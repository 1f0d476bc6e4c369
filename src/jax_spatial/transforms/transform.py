"""Frame-tagged rigid transforms implemented with JAX."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

import jax
import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..errors import FrameMismatchError
from ..frames import Frame
from ..spatial import _SpatialVector
from . import se3, so3

Array = jax.Array
V = TypeVar("V", bound=_SpatialVector)


@register_pytree_node_class  # frames ride along as static aux data
@dataclass(frozen=True)
class Transform3d:
    """Rigid transform taking coordinates in ``source`` to coordinates in ``target``.

    x_target = rotation @ x_source + translation

    Composition is checked: ``T2 @ T1`` is only defined when ``T1.target`` is
    the same frame as ``T2.source``.
    """
    rotation: Array     # (3, 3)
    translation: Array  # (3,)
    source: Frame
    target: Frame

    # Constructors
    @classmethod
    def identity(cls, frame: Frame) -> "Transform3d":
        return cls(jnp.eye(3), jnp.zeros(3), frame, frame)

    @classmethod
    def from_rotation(cls, rotation, source: Frame, target: Frame) -> "Transform3d":
        return cls(jnp.asarray(rotation, dtype=jnp.float64), jnp.zeros(3), source, target)

    @classmethod
    def from_translation(cls, translation, source: Frame, target: Frame) -> "Transform3d":
        return cls(jnp.eye(3), jnp.asarray(translation, dtype=jnp.float64), source, target)

    @classmethod
    def from_rotation_translation(cls, rotation, translation, source: Frame,
                                  target: Frame) -> "Transform3d":
        return cls(jnp.asarray(rotation, dtype=jnp.float64),
                   jnp.asarray(translation, dtype=jnp.float64), source, target)

    @classmethod
    def from_matrix(cls, matrix, source: Frame, target: Frame) -> "Transform3d":
        matrix = jnp.asarray(matrix, dtype=jnp.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"matrix must have shape (4, 4), got {matrix.shape}")
        return cls(se3.get_rotation(matrix), se3.get_position(matrix), source, target)

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.rotation, self.translation), (self.source, self.target)

    @classmethod
    def tree_unflatten(cls, aux, children):
        rotation, translation = children
        source, target = aux
        return cls(rotation, translation, source, target)

    # Basic operations
    def compose(self, other: "Transform3d") -> "Transform3d":
        """Self ∘ other: apply *other* first, then self."""
        if other.target != self.source:
            raise FrameMismatchError(self.source, other.target, "transform composition")
        R = so3.multiply(self.rotation, other.rotation)
        t = jnp.matmul(self.rotation, other.translation) + self.translation
        return Transform3d(R, t, other.source, self.target)

    def __matmul__(self, other):
        if not isinstance(other, Transform3d):
            return NotImplemented
        return self.compose(other)

    def inverse(self) -> "Transform3d":
        R_inv = so3.inverse(self.rotation)
        return Transform3d(R_inv, -jnp.matmul(R_inv, self.translation), self.target, self.source)

    # Applying the transform
    def transform_point(self, point) -> Array:
        """Map a point (or (N, 3) points): rotate, then translate."""
        return so3.apply(self.rotation, point) + self.translation

    def transform_vector(self, vector) -> Array:
        """Map a free vector (or (N, 3) vectors): rotation only."""
        return so3.apply(self.rotation, vector)

    def transform_motion(self, motion: V) -> V:
        """Re-express a spatial motion given in ``source`` in ``target``."""
        return self._transform_spatial(motion)

    def transform_force(self, force: V) -> V:
        """Re-express a spatial force given in ``source`` in ``target``."""
        return self._transform_spatial(force)

    def _transform_spatial(self, v: V) -> V:
        if v.frame != self.source:
            raise FrameMismatchError(self.source, v.frame, "spatial transform")
        out = se3.adjoint(self.rotation, self.translation) @ v.to_array()
        return v.replace(angular=out[:3], linear=out[3:], frame=self.target)

    # Convenience helpers
    def as_matrix(self) -> Array:
        return se3.from_position_and_rotation(self.translation, self.rotation)

    @staticmethod
    def rel_equal(a: "Transform3d", b: "Transform3d", tol: float = 1e-8) -> bool:
        """Componentwise comparison of rotation and translation; frames are ignored.

        Meant for tests. It says nothing about whether a and b may be composed.
        """
        return bool(jnp.allclose(a.rotation, b.rotation, rtol=0.0, atol=tol)
                    and jnp.allclose(a.translation, b.translation, rtol=0.0, atol=tol))

    def __str__(self):
        rows = "; ".join(" ".join(repr(float(x)) for x in row) for row in self.rotation)
        trans = " ".join(repr(float(x)) for x in self.translation)
        return f"[{self.source} -> {self.target}] q: [{rows}] x: [{trans}]"
