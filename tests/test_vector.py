"""Tests for buffers, vectors, vector views and the text interface."""

import math
import os

import numpy as np
import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from jax_spatial.config import Config, config
from jax_spatial.errors import DataMismatchError, InvalidIndexError, MissizeError
from jax_spatial.linalg import Buffer, SharedVectorN, VectorN, blas


# Buffer
def test_buffer_shrink_keeps_capacity():
    """Shrinking only changes the length."""
    buf = Buffer(8)
    storage = buf.storage
    buf.resize(3)
    assert len(buf) == 3
    assert buf.capacity == 8
    assert buf.storage is storage


def test_buffer_grow_within_capacity_does_not_reallocate():
    buf = Buffer(8)
    buf.storage[:8] = np.arange(8.0)
    buf.resize(2)
    buf.resize(6)
    assert buf.capacity == 8
    np.testing.assert_array_equal(buf.storage[:6], np.arange(6.0))


def test_buffer_grow_past_capacity_preserves_when_asked():
    buf = Buffer(3)
    buf.storage[:] = [1.0, 2.0, 3.0]
    buf.resize(10, preserve=True)
    assert buf.capacity == 10
    np.testing.assert_array_equal(buf.storage[:3], [1.0, 2.0, 3.0])


def test_buffer_compress():
    buf = Buffer(10)
    buf.storage[:4] = [4.0, 3.0, 2.0, 1.0]
    buf.resize(4)
    buf.compress()
    assert buf.capacity == 4
    np.testing.assert_array_equal(buf.storage, [4.0, 3.0, 2.0, 1.0])


def test_buffer_rejects_bad_arguments():
    with pytest.raises(ValueError):
        Buffer(-1)
    with pytest.raises(TypeError):
        Buffer(3, dtype=np.int64)


# Backend primitives
def test_blas_strided_operands():
    """(pointer, stride) pairs address every inc-th element."""
    x = np.arange(6.0)
    # x[0], x[2], x[4] against x[1], x[3], x[5]
    assert blas.dot(3, x, 2, x[1:], 2) == 0.0 * 1.0 + 2.0 * 3.0 + 4.0 * 5.0

    y = np.zeros(6)
    blas.axpy(3, 2.0, x, 2, y[1:], 2)
    np.testing.assert_array_equal(y, [0.0, 0.0, 0.0, 4.0, 0.0, 8.0])

    blas.scal(2, -1.0, y[3:], 2)
    np.testing.assert_array_equal(y, [0.0, 0.0, 0.0, -4.0, 0.0, -8.0])

    assert blas.nrm2(2, np.array([3.0, 0.0, 4.0]), 2) == 5.0
    assert blas.asum(3, np.array([1.0, -2.0, 3.0]), 1) == 6.0
    assert blas.amax(3, np.array([1.0, -7.0, 3.0]), 1) == 7.0


def test_blas_empty_operands():
    x = np.empty(0)
    assert blas.dot(0, x, 1, x, 1) == 0.0
    assert blas.nrm2(0, x, 1) == 0.0
    assert blas.is_finite(0, x, 1)
    blas.copy(0, x, 1, x, 1)


def test_blas_is_finite():
    assert blas.is_finite(3, np.array([1.0, 2.0, 3.0]), 1)
    assert not blas.is_finite(3, np.array([1.0, np.nan, 3.0]), 1)
    # only the strided elements are inspected
    assert blas.is_finite(2, np.array([1.0, np.inf, 3.0]), 2)


# Construction and element access
def test_vector_constructors():
    assert VectorN.zero(3).to_list() == [0.0, 0.0, 0.0]
    assert VectorN.one(2).to_list() == [1.0, 1.0]
    assert VectorN.from_array([1, 2, 3]).to_list() == [1.0, 2.0, 3.0]
    assert len(VectorN()) == 0
    with pytest.raises(MissizeError):
        VectorN.from_array([[1.0, 2.0]])


def test_vector_index_checks():
    v = VectorN.zero(3)
    with pytest.raises(InvalidIndexError):
        v[3]
    with pytest.raises(InvalidIndexError):
        v[-1]
    with pytest.raises(IndexError):
        v[5] = 1.0


def test_vector_iteration_and_array_interop():
    v = VectorN.from_array([1.0, 2.0, 3.0])
    assert list(v) == [1.0, 2.0, 3.0]
    assert np.shares_memory(v.as_array(), np.asarray(v))
    np.testing.assert_array_equal(np.asarray(v) * 2, [2.0, 4.0, 6.0])


def test_array_protocol_copy_flag():
    v = VectorN.from_array([1.0, 2.0, 3.0])
    assert np.shares_memory(v.__array__(copy=False), v.as_array())
    assert not np.shares_memory(v.__array__(copy=True), v.as_array())
    assert v.__array__(np.float32).dtype == np.float32
    with pytest.raises(ValueError):
        v.__array__(np.float32, copy=False)


# Views
def test_segment_aliasing_law():
    """Writes through a segment are visible in the source and vice versa."""
    v = VectorN.from_array(np.arange(10.0))
    s = v.segment(2, 5)
    assert isinstance(s, SharedVectorN)
    assert len(s) == 3

    s[0] = 42.0
    assert v[2] == 42.0

    v[3] = 7.0
    assert s[1] == 7.0


def test_nested_segment_aliasing():
    v = VectorN.from_array(np.arange(10.0))
    inner = v.segment(2, 8).segment(1, 3)
    inner[1] = -1.0
    assert v[4] == -1.0
    inner.set_zero()
    assert v.to_list()[3:5] == [0.0, 0.0]


@given(st.integers(min_value=1, max_value=20), st.data())
@settings(deadline=None, max_examples=25)
def test_segment_aliasing_property(n, data):
    """Any element written through a view is the element read from its source."""
    start = data.draw(st.integers(min_value=0, max_value=n))
    end = data.draw(st.integers(min_value=start, max_value=n))
    assume(end > start)
    value = data.draw(st.floats(allow_nan=False, allow_infinity=False))

    v = VectorN.zero(n)
    s = v.segment(start, end)
    k = data.draw(st.integers(min_value=0, max_value=end - start - 1))
    s[k] = value
    assert v[start + k] == value


def test_slice_access_is_a_view():
    v = VectorN.from_array([0.0, 1.0, 2.0, 3.0])
    s = v[1:3]
    assert isinstance(s, SharedVectorN)
    s[0] = 10.0
    assert v[1] == 10.0

    v[2:4] = [5.0, 6.0]
    assert v.to_list() == [0.0, 10.0, 5.0, 6.0]

    with pytest.raises(InvalidIndexError):
        v[::2]
    with pytest.raises(MissizeError):
        v[0:2] = [1.0]


def test_segment_bounds():
    v = VectorN.zero(5)
    with pytest.raises(InvalidIndexError):
        v.segment(3, 2)
    with pytest.raises(InvalidIndexError):
        v.segment(0, 6)
    with pytest.raises(InvalidIndexError):
        v.segment(-1, 2)
    assert len(v.segment(5, 5)) == 0


def test_in_place_ops_on_view_mutate_source():
    v = VectorN.one(6)
    s = v.segment(2, 4)
    s *= 3.0
    s += VectorN.from_array([1.0, 2.0])
    s.negate()
    assert v.to_list() == [1.0, 1.0, -4.0, -5.0, 1.0, 1.0]


# Resizing
def test_resize_preserve_keeps_prefix():
    v = VectorN.from_array([1.0, 2.0, 3.0])
    v.resize(10, preserve=True)
    assert len(v) == 10
    assert v.to_list()[:3] == [1.0, 2.0, 3.0]


def test_shrink_then_grow_within_capacity_keeps_contents():
    v = VectorN.from_array([1.0, 2.0, 3.0, 4.0])
    v.resize(2)
    assert v.capacity == 4
    v.resize(4)
    assert v.to_list() == [1.0, 2.0, 3.0, 4.0]
    v.resize(2).compress()
    assert v.capacity == 2


def test_view_pins_storage_across_reallocation():
    """A view keeps the storage it was cut from after its source reallocates."""
    v = VectorN.from_array([1.0, 2.0])
    s = v.segment(0, 2)
    v.resize(100, preserve=True)
    v[0] = 9.0
    assert s[0] == 1.0
    assert v[0] == 9.0


def test_shared_vector_bounds_checked():
    storage = np.zeros(5)
    with pytest.raises(InvalidIndexError):
        SharedVectorN(storage, 2, 3, 2)
    with pytest.raises(InvalidIndexError):
        SharedVectorN(storage, 0, 2, 0)
    view = SharedVectorN(storage, 0, 3, 2)
    view.set_one()
    np.testing.assert_array_equal(storage, [1.0, 0.0, 1.0, 0.0, 1.0])


# Copying and sub-vectors
def test_copy_from():
    owner = VectorN.zero(1)
    owner.copy_from(VectorN.from_array([1.0, 2.0, 3.0]))
    assert owner.to_list() == [1.0, 2.0, 3.0]

    view = VectorN.zero(4).segment(0, 2)
    with pytest.raises(MissizeError):
        view.copy_from(VectorN.one(3))


def test_copy_is_independent():
    v = VectorN.from_array([1.0, 2.0])
    c = v.copy()
    c[0] = 5.0
    assert v[0] == 1.0


def test_sub_vectors_and_select():
    v = VectorN.from_array([0.0, 1.0, 2.0, 3.0, 4.0])
    sub = v.get_sub_vec(1, 3)
    sub[0] = 100.0
    assert v[1] == 1.0

    v.set_sub_vec(3, [7.0, 8.0])
    assert v.to_list() == [0.0, 1.0, 2.0, 7.0, 8.0]
    with pytest.raises(InvalidIndexError):
        v.set_sub_vec(4, [1.0, 2.0])

    assert v.select([4, 0]).to_list() == [8.0, 0.0]
    assert v.select([True, False, True]).to_list() == [0.0, 2.0]
    assert len(v.select([])) == 0
    with pytest.raises(InvalidIndexError):
        v.select([5])


def test_concat():
    v = VectorN.concat(VectorN.one(2), VectorN.from_array([3.0]))
    assert v.to_list() == [1.0, 1.0, 3.0]


# Arithmetic and reductions
def test_dot_and_norms():
    v = VectorN.from_array([3.0, -4.0])
    assert v.dot(VectorN.from_array([1.0, 1.0])) == -1.0
    assert v.norm() == 5.0
    assert v.norm_sq() == 25.0
    assert v.norm1() == 7.0
    assert v.norm_inf() == 4.0


def test_out_of_place_arithmetic():
    a = VectorN.from_array([1.0, 2.0])
    b = VectorN.from_array([3.0, 5.0])
    assert (a + b).to_list() == [4.0, 7.0]
    assert (b - a).to_list() == [2.0, 3.0]
    assert (2.0 * a).to_list() == [2.0, 4.0]
    assert (a * 3.0).to_list() == [3.0, 6.0]
    assert (b / 2.0).to_list() == [1.5, 2.5]
    assert (-a).to_list() == [-1.0, -2.0]
    assert a.to_list() == [1.0, 2.0]


def test_axpy():
    y = VectorN.one(3)
    y.axpy(2.0, VectorN.from_array([1.0, 2.0, 3.0]))
    assert y.to_list() == [3.0, 5.0, 7.0]


def test_size_mismatch():
    with pytest.raises(MissizeError):
        VectorN.one(2).dot(VectorN.one(3))
    with pytest.raises(MissizeError):
        VectorN.one(2) + VectorN.one(3)


def test_representation_mismatch():
    with pytest.raises(DataMismatchError):
        VectorN.one(3).dot(VectorN.one(3, dtype=np.float32))
    with pytest.raises(DataMismatchError):
        VectorN.one(3).dot([1.0, 1.0, 1.0])


def test_is_finite():
    v = VectorN.one(4)
    assert v.is_finite()
    v[2] = math.nan
    assert not v.is_finite()
    assert v.segment(0, 2).is_finite()


def test_rel_equal():
    a = VectorN.from_array([1.0, 1e6])
    b = VectorN.from_array([1.0 + 1e-12, 1e6 * (1.0 + 1e-12)])
    assert a.rel_equal(b)
    assert not a.rel_equal(VectorN.from_array([1.1, 1e6]))
    assert not a.rel_equal(VectorN.one(3))
    assert a.rel_equal(VectorN.from_array([1.05, 1e6]), tol=0.1)


def test_rel_equal_with_infinities():
    v = VectorN.from_array([1.0, math.inf, -math.inf])
    assert v.rel_equal(v)
    assert v.rel_equal(v.copy())
    assert not v.rel_equal(VectorN.from_array([1.0, -math.inf, -math.inf]))
    assert not v.rel_equal(VectorN.from_array([1.0, 1e308, -math.inf]), tol=1.0)
    assert not VectorN.from_array([math.nan]).rel_equal(VectorN.from_array([math.nan]))


# Text interface
def test_parse_delimiters():
    assert VectorN.parse("1, 2 3").to_list() == [1.0, 2.0, 3.0]
    assert VectorN.parse("  4.5,\t-6e2\n").to_list() == [4.5, -600.0]


def test_parse_infinities_case_insensitive():
    assert VectorN.parse("inf -inf INF -Inf").to_list() == [math.inf, -math.inf, math.inf, -math.inf]


def test_parse_is_lenient():
    """Malformed tokens read their leading numeric prefix, or zero."""
    assert VectorN.parse("1.5abc x 2e3").to_list() == [1.5, 0.0, 2000.0]


def test_parse_empty():
    assert len(VectorN.parse("")) == 0
    assert len(VectorN.parse("   ")) == 0


def test_format_round_trip_with_infinities():
    v = VectorN.from_array([1.0, -0.1, 1e300, math.inf, -math.inf, 1.0 / 3.0])
    text = str(v)
    assert "inf" in text and "-inf" in text
    assert VectorN.parse(text).to_list() == v.to_list()
    assert VectorN.parse(text).rel_equal(v, tol=0.0)


@given(st.lists(st.floats(allow_nan=False), max_size=20))
@settings(deadline=None, max_examples=50)
def test_format_round_trip_property(values):
    v = VectorN.from_array(values)
    assert VectorN.parse(str(v)).to_list() == v.to_list()
    assert VectorN.parse(str(v)).rel_equal(v, tol=0.0)


def test_repr():
    assert repr(VectorN.from_array([1.0, 2.5])) == "VectorN([1.0, 2.5])"


# Unchecked mode
def test_unchecked_mode_skips_size_checks():
    config.update("checks_enabled", False)
    # the operation runs over the receiver's length
    assert VectorN.one(2).dot(VectorN.one(3)) == 2.0


def test_unchecked_mode_from_environment(monkeypatch):
    monkeypatch.setitem(os.environ, "JAX_SPATIAL_UNCHECKED", "1")
    assert not Config().checks_enabled
    monkeypatch.setitem(os.environ, "JAX_SPATIAL_UNCHECKED", "0")
    assert Config().checks_enabled
