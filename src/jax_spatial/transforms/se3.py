"""SE(3) helpers on homogeneous matrices and spatial 6-vectors in JAX.

Spatial 6-vectors are kept in screw (Plucker) order: direction part first,
moment part second. For a motion that is ``[wx, wy, wz, vx, vy, vz]``; for a
force it is ``[fx, fy, fz, nx, ny, nz]``. In this order a rigid transform
(R, p) maps motions and forces alike through the same adjoint matrix, and the
reciprocal product between them is preserved.
"""

import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Pack a rotation and a translation into a homogeneous matrix.

    Args:
        p: (3,) position vector
        R: (3, 3) rotation matrix

    Returns:
        (4, 4) homogeneous transformation matrix
    """
    p = jnp.asarray(p, dtype=jnp.float64)
    R = jnp.asarray(R, dtype=jnp.float64)
    T = jnp.eye(4, dtype=p.dtype)
    T = T.at[:3, :3].set(R)
    T = T.at[:3, 3].set(p)
    return T


def get_position(T: Array) -> Array:
    return jnp.asarray(T)[..., :3, 3]


def get_rotation(T: Array) -> Array:
    return jnp.asarray(T)[..., :3, :3]


def adjoint(R: Array, p: Array) -> Array:
    """
    6x6 matrix mapping spatial vectors from the source to the target frame.

    For screw ordering (direction, moment):
        Ad = [[R,      0],
              [[p]R,   R]]
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    pR = so3.skew_symmetric(jnp.asarray(p, dtype=jnp.float64)) @ R
    zeros = jnp.zeros_like(R)
    top = jnp.concatenate([R, zeros], axis=-1)
    bottom = jnp.concatenate([pR, R], axis=-1)
    return jnp.concatenate([top, bottom], axis=-2)

