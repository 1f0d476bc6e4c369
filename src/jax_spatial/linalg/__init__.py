"""Dense vectors and matrices with zero-copy views.

Storage is numpy-backed so that views can alias it; the geometric code in
``transforms`` and ``joints`` accepts these objects anywhere it accepts an
array, through ``__array__``.
"""

from . import blas
from .buffer import Buffer
from .vector import SharedVectorN, VectorN
from .matrix import MatrixN, SharedMatrixN

__all__ = [
    "blas",
    "Buffer",
    "VectorN",
    "SharedVectorN",
    "MatrixN",
    "SharedMatrixN",
]
