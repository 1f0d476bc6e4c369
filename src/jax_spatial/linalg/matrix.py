"""Dense column-major matrices over shared storage.

Element (i, j) lives at ``start + j * ld + i`` where ``ld`` is the leading
dimension. ``MatrixN`` owns its ``Buffer`` (``ld == rows``); ``SharedMatrixN``
is a block view into someone else's storage and keeps the parent's leading
dimension. Rows and columns can be taken as ``SharedVectorN`` views.
"""

import operator
from typing import Tuple

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ..config import config
from ..errors import DataMismatchError, InvalidIndexError, MissizeError
from . import blas
from .buffer import Buffer
from .vector import SharedVectorN, VectorN, _VectorBase, _format_value


class _MatrixBase:
    """Operations shared by owning matrices and block views.

    Subclasses provide ``_storage``, ``_start``, ``_rows``, ``_cols`` and ``_ld``.
    """

    @property
    def dtype(self) -> np.dtype:
        return self._storage.dtype

    def rows(self) -> int:
        return self._rows

    def columns(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def leading_dim(self) -> int:
        return self._ld

    def as_array(self) -> np.ndarray:
        """Zero-copy (rows, columns) numpy view."""
        itemsize = self._storage.itemsize
        return as_strided(self._storage[self._start:], shape=(self._rows, self._cols),
                          strides=(itemsize, self._ld * itemsize))

    def __array__(self, dtype=None, copy=None):
        arr = self.as_array()
        if dtype is not None and np.dtype(dtype) != arr.dtype:
            if copy is False:
                raise ValueError(f"Cannot view {arr.dtype} data as {np.dtype(dtype)} without a copy")
            return arr.astype(dtype)
        if copy:
            return arr.copy()
        return arr

    def copy(self) -> "MatrixN":
        result = MatrixN(self._rows, self._cols, dtype=self.dtype)
        result.as_array()[...] = self.as_array()
        return result

    # -- validation -----------------------------------------------------

    def _check_element(self, i: int, j: int) -> None:
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise InvalidIndexError(
                f"Index ({i}, {j}) out of range for {self._rows}x{self._cols} matrix")

    def _check_same_kind(self, other) -> None:
        if not isinstance(other, _MatrixBase):
            raise DataMismatchError(f"Expected a matrix operand, got {type(other).__name__}")
        if other.dtype != self.dtype:
            raise DataMismatchError(f"Matrix dtypes differ: {self.dtype} vs {other.dtype}")

    # -- element access -------------------------------------------------

    def _offset(self, i: int, j: int) -> int:
        return self._start + j * self._ld + i

    def __getitem__(self, key):
        i, j = (operator.index(k) for k in key)
        if config.checks_enabled:
            self._check_element(i, j)
        return float(self._storage[self._offset(i, j)])

    def __setitem__(self, key, value):
        i, j = (operator.index(k) for k in key)
        if config.checks_enabled:
            self._check_element(i, j)
        self._storage[self._offset(i, j)] = value

    def column(self, j: int) -> SharedVectorN:
        """View of column j."""
        if config.checks_enabled and not 0 <= j < self._cols:
            raise InvalidIndexError(f"Column {j} out of range for {self._cols} columns")
        return SharedVectorN(self._storage, self._offset(0, j), self._rows, 1)

    def row(self, i: int) -> SharedVectorN:
        """View of row i (strided by the leading dimension)."""
        if config.checks_enabled and not 0 <= i < self._rows:
            raise InvalidIndexError(f"Row {i} out of range for {self._rows} rows")
        return SharedVectorN(self._storage, self._offset(i, 0), self._cols, self._ld)

    def block(self, row_start: int, row_end: int, col_start: int, col_end: int) -> "SharedMatrixN":
        """View of rows [row_start, row_end) and columns [col_start, col_end)."""
        if config.checks_enabled:
            if row_start < 0 or row_start > row_end or row_end > self._rows:
                raise InvalidIndexError(f"Invalid row range [{row_start}, {row_end})")
            if col_start < 0 or col_start > col_end or col_end > self._cols:
                raise InvalidIndexError(f"Invalid column range [{col_start}, {col_end})")
        return SharedMatrixN(self._storage, self._offset(row_start, col_start),
                             row_end - row_start, col_end - col_start, self._ld)

    # -- filling --------------------------------------------------------

    def set_zero(self):
        for j in range(self._cols):
            blas.fill(self._rows, 0.0, self._storage[self._offset(0, j):], 1)
        return self

    def set_identity(self):
        if config.checks_enabled and self._rows != self._cols:
            raise MissizeError(f"Identity requires a square matrix, got {self._rows}x{self._cols}")
        self.set_zero()
        for i in range(min(self._rows, self._cols)):
            self._storage[self._offset(i, i)] = 1.0
        return self

    def copy_from(self, source):
        """Assign source into this matrix (shapes must agree)."""
        self._check_same_kind(source)
        if config.checks_enabled and source.shape != self.shape:
            raise MissizeError(f"Matrix shapes differ: {self.shape} vs {source.shape}")
        for j in range(self._cols):
            blas.copy(self._rows, source._storage[source._offset(0, j):], 1,
                      self._storage[self._offset(0, j):], 1)
        return self

    # -- products -------------------------------------------------------

    def mult(self, other):
        """Matrix-vector or matrix-matrix product, returned as a new object."""
        if isinstance(other, _VectorBase):
            if other.dtype != self.dtype:
                raise DataMismatchError(f"Operand dtypes differ: {self.dtype} vs {other.dtype}")
            if config.checks_enabled and len(other) != self._cols:
                raise MissizeError(f"Cannot multiply {self._rows}x{self._cols} matrix by vector of size {len(other)}")
            return VectorN.from_array(self.as_array() @ other.as_array(), dtype=self.dtype)
        self._check_same_kind(other)
        if config.checks_enabled and other._rows != self._cols:
            raise MissizeError(f"Cannot multiply {self.shape} by {other.shape}")
        return MatrixN.from_array(self.as_array() @ other.as_array(), dtype=self.dtype)

    def __matmul__(self, other):
        if not isinstance(other, (_VectorBase, _MatrixBase)):
            return NotImplemented
        return self.mult(other)

    def transpose(self) -> "MatrixN":
        return MatrixN.from_array(self.as_array().T, dtype=self.dtype)

    # -- reductions -----------------------------------------------------

    def norm_inf(self) -> float:
        """Largest absolute element."""
        result = 0.0
        for j in range(self._cols):
            result = max(result, blas.amax(self._rows, self._storage[self._offset(0, j):], 1))
        return result

    def is_finite(self) -> bool:
        return all(blas.is_finite(self._rows, self._storage[self._offset(0, j):], 1)
                   for j in range(self._cols))

    # -- text -----------------------------------------------------------

    def __str__(self):
        arr = self.as_array()
        return "\n".join("[" + " ".join(_format_value(x) for x in row) + "]" for row in arr)

    def __repr__(self):
        return f"{type(self).__name__}({self._rows}x{self._cols})"


class MatrixN(_MatrixBase):
    """Owning, resizable column-major matrix."""

    _start = 0

    def __init__(self, rows: int = 0, columns: int = 0, dtype=np.float64):
        if rows < 0 or columns < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{columns}")
        self._buffer = Buffer(rows * columns, dtype)
        self._rows = rows
        self._cols = columns

    @property
    def _storage(self) -> np.ndarray:
        return self._buffer.storage

    @property
    def _ld(self) -> int:
        return self._rows

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    @classmethod
    def zero(cls, rows: int, columns: int, dtype=np.float64) -> "MatrixN":
        return cls(rows, columns, dtype).set_zero()

    @classmethod
    def identity(cls, n: int, dtype=np.float64) -> "MatrixN":
        return cls(n, n, dtype).set_identity()

    @classmethod
    def from_array(cls, values, dtype=np.float64) -> "MatrixN":
        arr = np.asarray(values, dtype=dtype)
        if arr.ndim != 2:
            raise MissizeError(f"Expected a 2-D array, got shape {arr.shape}")
        m = cls(arr.shape[0], arr.shape[1], dtype)
        m.as_array()[...] = arr
        return m

    def resize(self, rows: int, columns: int, preserve: bool = False) -> "MatrixN":
        """Resize; with ``preserve`` the common top-left block is kept."""
        if (rows, columns) == self.shape:
            return self
        old = self.as_array().copy() if preserve else None
        self._buffer.resize(rows * columns)
        self._rows = rows
        self._cols = columns
        if preserve:
            r, c = min(rows, old.shape[0]), min(columns, old.shape[1])
            self.as_array()[:r, :c] = old[:r, :c]
        return self

    def compress(self) -> "MatrixN":
        self._buffer.compress()
        return self

    def copy_from(self, source) -> "MatrixN":
        """Assign, resizing this matrix to the shape of source."""
        self._check_same_kind(source)
        if source.shape != self.shape:
            self.resize(*source.shape)
        return super().copy_from(source)


class SharedMatrixN(_MatrixBase):
    """Block view over storage owned elsewhere."""

    def __init__(self, storage: np.ndarray, start: int, rows: int, columns: int, ld: int):
        if config.checks_enabled:
            if ld < rows:
                raise InvalidIndexError(f"Leading dimension {ld} smaller than row count {rows}")
            if rows > 0 and columns > 0 and start + (columns - 1) * ld + rows > storage.shape[0]:
                raise InvalidIndexError("Matrix view exceeds its storage")
        self._storage = storage
        self._start = start
        self._rows = rows
        self._cols = columns
        self._ld = ld
