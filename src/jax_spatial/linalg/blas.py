"""Strided level-1 linear-algebra primitives.

The calling convention follows CBLAS: every operand is passed as a
(pointer, stride) pair. A "pointer" here is a 1-D numpy array whose element 0
is the first element of the operand, typically ``storage[start:]``, which is
itself a zero-copy view. Owning vectors and views therefore share one
implementation.

Strides must be positive. No size validation happens here; callers check
sizes before reaching the backend.
"""

import numpy as np


def _strided(x: np.ndarray, n: int, inc: int) -> np.ndarray:
    """Zero-copy view of the n elements x[0], x[inc], ..., x[(n-1)*inc]."""
    return x[: (n - 1) * inc + 1 : inc] if n > 0 else x[:0]


def dot(n: int, x: np.ndarray, incx: int, y: np.ndarray, incy: int) -> float:
    """Inner product of two strided operands."""
    if n == 0:
        return 0.0
    return float(np.dot(_strided(x, n, incx), _strided(y, n, incy)))


def copy(n: int, x: np.ndarray, incx: int, y: np.ndarray, incy: int) -> None:
    """y <- x"""
    if n == 0:
        return
    _strided(y, n, incy)[...] = _strided(x, n, incx)


def axpy(n: int, alpha: float, x: np.ndarray, incx: int, y: np.ndarray, incy: int) -> None:
    """y <- alpha * x + y"""
    if n == 0:
        return
    ys = _strided(y, n, incy)
    ys += alpha * _strided(x, n, incx)


def scal(n: int, alpha: float, x: np.ndarray, incx: int) -> None:
    """x <- alpha * x"""
    if n == 0:
        return
    xs = _strided(x, n, incx)
    xs *= alpha


def fill(n: int, value: float, x: np.ndarray, incx: int) -> None:
    if n == 0:
        return
    _strided(x, n, incx)[...] = value


def nrm2(n: int, x: np.ndarray, incx: int) -> float:
    """Euclidean norm."""
    if n == 0:
        return 0.0
    return float(np.linalg.norm(_strided(x, n, incx)))


def asum(n: int, x: np.ndarray, incx: int) -> float:
    """Sum of absolute values (l1 norm)."""
    if n == 0:
        return 0.0
    return float(np.sum(np.abs(_strided(x, n, incx))))


def amax(n: int, x: np.ndarray, incx: int) -> float:
    """Largest absolute value (infinity norm)."""
    if n == 0:
        return 0.0
    return float(np.max(np.abs(_strided(x, n, incx))))


def is_finite(n: int, x: np.ndarray, incx: int) -> bool:
    """False as soon as a NaN or infinite element is found."""
    return bool(np.isfinite(_strided(x, n, incx)).all())


def view(n: int, x: np.ndarray, incx: int) -> np.ndarray:
    """Expose the strided operand as a numpy array sharing memory with x."""
    return _strided(x, n, incx)
