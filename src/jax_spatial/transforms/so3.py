"""SO(3) rotation algebra in JAX.

Rotation matrices, axis-angle rotations and the small amount of 3-vector
geometry (cross products, basis completion) the joint code needs. All
functions are pure and operate on JAX arrays; anything array-like, including
``VectorN``, is accepted as input.
"""

from typing import Tuple

import jax
import jax.numpy as jnp

Array = jax.Array

_SMALL_ANGLE = 1e-8


def skew_symmetric(v: Array) -> Array:
    """
    Cross-product matrix of a 3-vector, so that skew_symmetric(a) @ b == a x b.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    v = jnp.asarray(v)
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)
    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1),
    ], axis=-2)


def exp(log_r: Array) -> Array:
    """
    Rotation matrix of an axis-angle vector (Rodrigues' formula).

    Args:
        log_r: (..., 3) rotation vector; direction is the axis, norm the angle

    Returns:
        (..., 3, 3) rotation matrices
    """
    log_r = jnp.asarray(log_r)
    angle = jnp.linalg.norm(log_r, axis=-1, keepdims=True)
    small = angle < _SMALL_ANGLE

    # sin(t)/t and (1 - cos(t))/t^2, with Taylor fallbacks near zero
    safe = jnp.where(small, 1.0, angle)
    a = jnp.where(small, 1.0 - angle**2 / 6.0, jnp.sin(safe) / safe)
    b = jnp.where(small, 0.5 - angle**2 / 24.0, (1.0 - jnp.cos(safe)) / safe**2)

    K = skew_symmetric(log_r)
    eye = jnp.broadcast_to(jnp.eye(3, dtype=log_r.dtype), K.shape)
    return eye + a[..., None] * K + b[..., None] * jnp.matmul(K, K)


def axis_angle(axis: Array, angle) -> Array:
    """
    Rotation by ``angle`` radians about a unit ``axis``.

    Args:
        axis: (3,) unit vector
        angle: scalar angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    axis = jnp.asarray(axis, dtype=jnp.float64)
    c = jnp.cos(angle)
    s = jnp.sin(angle)
    K = skew_symmetric(axis)
    return jnp.eye(3, dtype=axis.dtype) + s * K + (1.0 - c) * jnp.matmul(K, K)


def multiply(R1: Array, R2: Array) -> Array:
    """R1 @ R2"""
    return jnp.matmul(R1, R2)


def inverse(R: Array) -> Array:
    """Inverse of a rotation matrix, i.e. its transpose."""
    return jnp.swapaxes(jnp.asarray(R), -1, -2)


def apply(R: Array, v: Array) -> Array:
    """
    Rotate vector(s).

    Args:
        R: (3, 3) rotation matrix
        v: (3,) or (N, 3) vectors

    Returns:
        rotated vectors, same shape as v
    """
    R = jnp.asarray(R)
    v = jnp.asarray(v)
    if v.ndim == 1:
        return R @ v
    return jnp.einsum('ij,nj->ni', R, v)


def cross(a: Array, b: Array) -> Array:
    return jnp.cross(jnp.asarray(a), jnp.asarray(b))


def normalize(v: Array) -> Array:
    v = jnp.asarray(v, dtype=jnp.float64)
    return v / jnp.linalg.norm(v)


def orthonormal_basis(a: Array) -> Tuple[Array, Array]:
    """
    Complete a unit vector to a right-handed orthonormal basis (a, b, c).

    The choice is deterministic: b is built in the coordinate plane that
    avoids the smaller of |a_x| and |a_y|, which keeps the normalization
    away from zero, and c = a x b.

    Args:
        a: (3,) unit vector

    Returns:
        (b, c), each a (3,) unit vector
    """
    a = jnp.asarray(a, dtype=jnp.float64)
    x, y, z = a[0], a[1], a[2]
    if abs(float(x)) > abs(float(y)):
        b = jnp.stack([-z, jnp.zeros_like(x), x]) / jnp.sqrt(x * x + z * z)
    else:
        b = jnp.stack([jnp.zeros_like(y), z, -y]) / jnp.sqrt(y * y + z * z)
    return b, jnp.cross(a, b)


def is_rotation(R: Array, tol: float = 1e-8) -> bool:
    """True if R is orthonormal with determinant +1, within tol."""
    R = jnp.asarray(R)
    if R.shape != (3, 3):
        return False
    orthonormal = jnp.allclose(R @ R.T, jnp.eye(3), atol=tol)
    return bool(orthonormal and abs(float(jnp.linalg.det(R)) - 1.0) < tol)
