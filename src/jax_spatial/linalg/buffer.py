"""Growable contiguous storage shared by vectors, matrices and their views."""

import logging

import numpy as np

from . import blas

logger = logging.getLogger(__name__)


class Buffer:
    """Contiguous floating-point storage with a length and a capacity.

    ``capacity`` is the size of the underlying numpy array and is never smaller
    than ``length``. Shrinking only changes the length, so a buffer that shrinks
    and grows again within its capacity never reallocates.

    Views do not hold the Buffer itself; they hold the numpy array returned by
    ``storage`` at the time they were cut. That array stays alive for as long
    as any view references it, and a later reallocation of the buffer leaves
    existing views pointing at the old array.
    """

    __slots__ = ("_storage", "_len")

    def __init__(self, length: int = 0, dtype=np.float64):
        if length < 0:
            raise ValueError(f"Buffer length must be non-negative, got {length}")
        dtype = np.dtype(dtype)
        if dtype.kind != "f":
            raise TypeError(f"Buffer dtype must be floating point, got {dtype}")
        self._storage = np.empty(length, dtype=dtype)
        self._len = length

    @property
    def storage(self) -> np.ndarray:
        """The full underlying array, including unused capacity."""
        return self._storage

    @property
    def length(self) -> int:
        return self._len

    @property
    def capacity(self) -> int:
        return self._storage.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._storage.dtype

    def resize(self, length: int, preserve: bool = False) -> "Buffer":
        """Change the length, reallocating only when capacity is exceeded.

        Args:
            length: New number of live elements.
            preserve: When reallocation happens, copy the first
                min(old length, new length) elements over. Without it the new
                contents are unspecified.
        """
        if length < 0:
            raise ValueError(f"Buffer length must be non-negative, got {length}")
        if length == self._len:
            return self

        if length <= self.capacity:
            self._len = length
            return self

        logger.debug("Reallocating buffer: capacity %d -> %d (preserve=%s)",
                     self.capacity, length, preserve)
        new_storage = np.empty(length, dtype=self._storage.dtype)
        if preserve:
            blas.copy(self._len, self._storage, 1, new_storage, 1)
        self._storage = new_storage
        self._len = length
        return self

    def compress(self) -> "Buffer":
        """Shrink capacity down to length, keeping the contents."""
        if self._len == self.capacity:
            return self
        new_storage = np.empty(self._len, dtype=self._storage.dtype)
        blas.copy(self._len, self._storage, 1, new_storage, 1)
        self._storage = new_storage
        return self

    def __len__(self):
        return self._len

    def __repr__(self):
        return f"Buffer(length={self._len}, capacity={self.capacity}, dtype={self.dtype})"
