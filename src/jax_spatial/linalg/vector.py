"""Dense vectors over shared storage.

``VectorN`` owns a growable ``Buffer``; ``SharedVectorN`` is a strided,
non-owning view into storage cut from a vector or a matrix. Both run every
numeric operation through the strided primitives in ``blas``, passing
(pointer, stride) pairs, so a view costs nothing to create and mutating it
mutates the storage it was cut from.

Index and size validation is controlled by ``config.checks_enabled``.
"""

import math
import operator
import re
from typing import Iterable, Iterator, Optional, Sequence, Union

import numpy as np

from ..config import config
from ..errors import DataMismatchError, InvalidIndexError, MissizeError
from . import blas
from .buffer import Buffer

# strtod-style leading numeric prefix; anything else reads as zero
_NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?))",
    re.IGNORECASE,
)
_DELIMITERS = re.compile(r"[\s,]+")


def _parse_token(token: str) -> float:
    lowered = token.lower()
    if lowered == "inf":
        return math.inf
    if lowered == "-inf":
        return -math.inf
    match = _NUMBER_PREFIX.match(token)
    if match is None:
        return 0.0
    return float(match.group(1))


def _format_value(value: float) -> str:
    return repr(float(value))


class _VectorBase:
    """Operations shared by owning vectors and views.

    Subclasses provide ``_storage`` (1-D numpy array), ``_start``, ``_len`` and
    ``_inc``.
    """

    # -- storage access -------------------------------------------------

    def _ptr(self) -> np.ndarray:
        return self._storage[self._start:]

    @property
    def inc(self) -> int:
        return self._inc

    @property
    def dtype(self) -> np.dtype:
        return self._storage.dtype

    def size(self) -> int:
        return self._len

    def __len__(self):
        return self._len

    def as_array(self) -> np.ndarray:
        """Zero-copy numpy view of the elements."""
        return blas.view(self._len, self._ptr(), self._inc)

    def __array__(self, dtype=None, copy=None):
        arr = self.as_array()
        if dtype is not None and np.dtype(dtype) != arr.dtype:
            if copy is False:
                raise ValueError(f"Cannot view {arr.dtype} data as {np.dtype(dtype)} without a copy")
            return arr.astype(dtype)
        if copy:
            return arr.copy()
        return arr

    def to_list(self):
        return [float(x) for x in self.as_array()]

    def copy(self) -> "VectorN":
        """Owning copy of these elements."""
        result = VectorN(self._len, dtype=self.dtype)
        blas.copy(self._len, self._ptr(), self._inc, result._ptr(), 1)
        return result

    # -- validation ---------------------------------------------------

    def _check_index(self, i: int) -> None:
        if i < 0 or i >= self._len:
            raise InvalidIndexError(f"Index {i} out of range for vector of size {self._len}")

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or start > end or end > self._len:
            raise InvalidIndexError(
                f"Invalid range [{start}, {end}) for vector of size {self._len}")

    def _check_operand(self, other, check_size: bool = True) -> None:
        if not isinstance(other, _VectorBase):
            raise DataMismatchError(f"Expected a vector operand, got {type(other).__name__}")
        if other.dtype != self.dtype:
            raise DataMismatchError(f"Vector dtypes differ: {self.dtype} vs {other.dtype}")
        if check_size and config.checks_enabled and other._len != self._len:
            raise MissizeError(f"Vector sizes differ: {self._len} vs {other._len}")

    # -- element access -------------------------------------------------

    def __getitem__(self, i):
        if isinstance(i, slice):
            start, stop, step = i.indices(self._len)
            if step != 1:
                raise InvalidIndexError("Vector slices must be contiguous; use select()")
            return self.segment(start, max(start, stop))
        i = operator.index(i)
        if config.checks_enabled:
            self._check_index(i)
        return float(self._storage[self._start + i * self._inc])

    def __setitem__(self, i, value):
        if isinstance(i, slice):
            start, stop, step = i.indices(self._len)
            if step != 1:
                raise InvalidIndexError("Vector slices must be contiguous")
            if not isinstance(value, _VectorBase):
                value = VectorN.from_array(value, dtype=self.dtype)
            if config.checks_enabled and len(value) != max(0, stop - start):
                raise MissizeError(f"Cannot assign {len(value)} values to a slice of {max(0, stop - start)}")
            self.set_sub_vec(start, value)
            return
        i = operator.index(i)
        if config.checks_enabled:
            self._check_index(i)
        self._storage[self._start + i * self._inc] = value

    def __iter__(self) -> Iterator[float]:
        for x in self.as_array():
            yield float(x)

    def segment(self, start: int, end: int) -> "SharedVectorN":
        """View of elements [start, end) sharing this vector's storage."""
        if config.checks_enabled:
            self._check_range(start, end)
        return SharedVectorN(self._storage, self._start + start * self._inc,
                             end - start, self._inc)

    def get_sub_vec(self, start: int, end: int) -> "VectorN":
        """Owning copy of elements [start, end)."""
        return self.segment(start, end).copy()

    def set_sub_vec(self, start: int, v) -> "_VectorBase":
        """Overwrite elements starting at ``start`` with the contents of v."""
        if not isinstance(v, _VectorBase):
            v = VectorN.from_array(v, dtype=self.dtype)
        self._check_operand(v, check_size=False)
        if config.checks_enabled:
            self._check_range(start, start + v._len)
        dest = self._storage[self._start + start * self._inc:]
        blas.copy(v._len, v._ptr(), v._inc, dest, self._inc)
        return self

    def select(self, indices: Union[Sequence[int], Sequence[bool]]) -> "VectorN":
        """Copy out a (not necessarily contiguous) subset of elements.

        ``indices`` is either a list of positions or a boolean mask.
        """
        idx = np.asarray(indices)
        if idx.size == 0:
            return VectorN(0, dtype=self.dtype)
        if idx.dtype == bool:
            if config.checks_enabled and idx.shape[0] > self._len:
                raise MissizeError(f"Mask of length {idx.shape[0]} exceeds vector size {self._len}")
            idx = np.flatnonzero(idx)
        if config.checks_enabled:
            for i in idx:
                self._check_index(int(i))
        return VectorN.from_array(self.as_array()[idx], dtype=self.dtype)

    # -- filling ------------------------------------------------------

    def set_zero(self) -> "_VectorBase":
        blas.fill(self._len, 0.0, self._ptr(), self._inc)
        return self

    def set_one(self) -> "_VectorBase":
        blas.fill(self._len, 1.0, self._ptr(), self._inc)
        return self

    def negate(self) -> "_VectorBase":
        blas.scal(self._len, -1.0, self._ptr(), self._inc)
        return self

    def copy_from(self, source) -> "_VectorBase":
        """Assign the contents of source to this vector."""
        self._check_operand(source)
        blas.copy(self._len, source._ptr(), source._inc, self._ptr(), self._inc)
        return self

    # -- reductions -----------------------------------------------------

    def dot(self, other) -> float:
        self._check_operand(other)
        return blas.dot(self._len, self._ptr(), self._inc, other._ptr(), other._inc)

    def norm(self) -> float:
        return blas.nrm2(self._len, self._ptr(), self._inc)

    def norm_sq(self) -> float:
        return self.dot(self)

    def norm1(self) -> float:
        return blas.asum(self._len, self._ptr(), self._inc)

    def norm_inf(self) -> float:
        return blas.amax(self._len, self._ptr(), self._inc)

    def is_finite(self) -> bool:
        """True unless some element is NaN or infinite."""
        return blas.is_finite(self._len, self._ptr(), self._inc)

    def rel_equal(self, other, tol: Optional[float] = None) -> bool:
        """Componentwise relative equality, scaled by max(|x|, |y|, 1)."""
        self._check_operand(other, check_size=False)
        if other._len != self._len:
            return False
        tol = config.eps if tol is None else tol
        a, b = self.as_array(), other.as_array()
        scale = np.maximum(np.maximum(np.abs(a), np.abs(b)), 1.0)
        # non-finite entries must match exactly
        finite = np.isfinite(a) & np.isfinite(b)
        with np.errstate(invalid="ignore", over="ignore"):
            close = finite & (np.abs(a - b) <= tol * scale)
        return bool(np.all((a == b) | close))

    # -- arithmetic -----------------------------------------------------

    def axpy(self, alpha: float, x) -> "_VectorBase":
        """self <- alpha * x + self"""
        self._check_operand(x)
        blas.axpy(self._len, alpha, x._ptr(), x._inc, self._ptr(), self._inc)
        return self

    def __iadd__(self, other):
        return self.axpy(1.0, other)

    def __isub__(self, other):
        return self.axpy(-1.0, other)

    def __imul__(self, scalar):
        blas.scal(self._len, float(scalar), self._ptr(), self._inc)
        return self

    def __itruediv__(self, scalar):
        return self.__imul__(1.0 / float(scalar))

    def __add__(self, other):
        if not isinstance(other, _VectorBase):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __sub__(self, other):
        if not isinstance(other, _VectorBase):
            return NotImplemented
        result = self.copy()
        result -= other
        return result

    def __mul__(self, scalar):
        if isinstance(scalar, _VectorBase):
            return NotImplemented
        result = self.copy()
        result *= scalar
        return result

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        result = self.copy()
        result /= scalar
        return result

    def __neg__(self):
        return self.copy().negate()

    # -- text -----------------------------------------------------------

    def __str__(self):
        return " ".join(_format_value(x) for x in self.as_array())

    def __repr__(self):
        return f"{type(self).__name__}([{', '.join(_format_value(x) for x in self.as_array())}])"


class VectorN(_VectorBase):
    """Owning, resizable vector."""

    __slots__ = ("_buffer",)

    _start = 0
    _inc = 1

    def __init__(self, n: int = 0, dtype=np.float64):
        self._buffer = Buffer(n, dtype)

    @property
    def _storage(self) -> np.ndarray:
        return self._buffer.storage

    @property
    def _len(self) -> int:
        return self._buffer.length

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    # -- construction ---------------------------------------------------

    @classmethod
    def zero(cls, n: int, dtype=np.float64) -> "VectorN":
        return cls(n, dtype).set_zero()

    @classmethod
    def one(cls, n: int, dtype=np.float64) -> "VectorN":
        return cls(n, dtype).set_one()

    @classmethod
    def from_array(cls, values: Iterable[float], dtype=np.float64) -> "VectorN":
        """Build a vector from any 1-D array-like of numbers."""
        arr = np.asarray(values, dtype=dtype)
        if arr.ndim != 1:
            raise MissizeError(f"Expected a 1-D array, got shape {arr.shape}")
        v = cls(arr.shape[0], dtype)
        blas.copy(arr.shape[0], arr, 1, v._ptr(), 1)
        return v

    @classmethod
    def parse(cls, text: str) -> "VectorN":
        """Read a vector from whitespace- and/or comma-delimited tokens.

        Tokens ``inf`` and ``-inf`` are recognized case-insensitively. A
        malformed token is read leniently, like the C library's ``atof``: its
        longest leading numeric prefix is used, or 0.0 if there is none.
        """
        tokens = [t for t in _DELIMITERS.split(text) if t]
        v = cls(len(tokens))
        for i, token in enumerate(tokens):
            v[i] = _parse_token(token)
        return v

    @staticmethod
    def concat(v1: _VectorBase, v2: _VectorBase) -> "VectorN":
        v1._check_operand(v2, check_size=False)
        result = VectorN(len(v1) + len(v2), dtype=v1.dtype)
        result.set_sub_vec(0, v1)
        result.set_sub_vec(len(v1), v2)
        return result

    # -- storage management ---------------------------------------------

    def resize(self, n: int, preserve: bool = False) -> "VectorN":
        """Resize; shrinking never reallocates, growing past capacity does."""
        self._buffer.resize(n, preserve)
        return self

    def compress(self) -> "VectorN":
        """Release unused capacity."""
        self._buffer.compress()
        return self

    def copy_from(self, source) -> "VectorN":
        """Assign, resizing this vector to the size of source."""
        self._check_operand(source, check_size=False)
        if source._len != self._len:
            self.resize(source._len)
        blas.copy(self._len, source._ptr(), source._inc, self._ptr(), 1)
        return self


class SharedVectorN(_VectorBase):
    """Strided view over storage owned elsewhere.

    The view keeps the storage array alive. It does not follow later
    reallocations of the vector it was cut from.
    """

    __slots__ = ("_storage", "_start", "_len", "_inc")

    def __init__(self, storage: np.ndarray, start: int, length: int, inc: int = 1):
        if config.checks_enabled:
            if inc < 1:
                raise InvalidIndexError(f"View stride must be positive, got {inc}")
            if start < 0 or length < 0 or (length > 0 and start + (length - 1) * inc >= storage.shape[0]):
                raise InvalidIndexError(
                    f"View (start={start}, length={length}, inc={inc}) exceeds "
                    f"storage of capacity {storage.shape[0]}")
        self._storage = storage
        self._start = start
        self._len = length
        self._inc = inc

    @property
    def start(self) -> int:
        return self._start
