"""Pytest fixtures shared by the jax_spatial test suites."""

import hypothesis
import numpy as np
import pytest

from jax_spatial import FrameRegistry, RigidLink, SphericalJoint
from jax_spatial.config import config

# Use hypothesis profile for CI
hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from, and leaves behind, the default settings."""
    config.reset()
    yield
    config.reset()


@pytest.fixture
def registry() -> FrameRegistry:
    return FrameRegistry()


@pytest.fixture
def frames(registry):
    """Three fresh frames a, b, c from one registry."""
    return registry.create("a"), registry.create("b"), registry.create("c")


@pytest.fixture
def attached_joint(registry) -> SphericalJoint:
    """Spherical joint with both links attached and no axes set."""
    joint = SphericalJoint(registry, "shoulder")
    joint.set_inboard_link(RigidLink.create(registry, "torso"))
    joint.set_outboard_link(RigidLink.create(registry, "upper_arm"))
    return joint


@pytest.fixture
def z_joint(attached_joint) -> SphericalJoint:
    """Attached spherical joint configured from axis1 = z only."""
    attached_joint.set_axis(np.array([0.0, 0.0, 1.0]), 0)
    return attached_joint


@pytest.fixture
def random_config() -> np.ndarray:
    """Generic joint configuration away from singularities."""
    np.random.seed(42)
    return np.random.uniform(-1.0, 1.0, 3)


@pytest.fixture
def random_velocity() -> np.ndarray:
    np.random.seed(43)
    return np.random.uniform(-1.0, 1.0, 3)
