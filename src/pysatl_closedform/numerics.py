"""
Numerical Helpers
=================

Small, vectorized building blocks shared by the builtin families:

- log-domain constants (:data:`LOGTWO`, :data:`LOGHALF`);
- :func:`log1mexp` and :func:`log2mexp` for evaluating ``log(1 - e^x)`` and
  ``log(2 - e^x)`` without cancellation;
- :func:`log_gammainc`, :func:`log_gammaincc` and their inverses, the
  regularized incomplete gamma functions kept in log space down to the far
  tails;
- :func:`weighted_median` used by median-based estimators;
- :func:`unbox` turning 0-d arrays back into NumPy scalars.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.special import gammainc, gammaincc, gammainccinv, gammaincinv, gammaln

if TYPE_CHECKING:
    import numpy.typing as npt

LOGTWO: float = math.log(2.0)
"""Natural logarithm of 2."""

LOGHALF: float = -LOGTWO
"""Natural logarithm of 1/2."""


def unbox(value: Any) -> Any:
    """Return the scalar held by a 0-d array, or ``value`` unchanged."""
    if isinstance(value, np.ndarray) and value.ndim == 0:
        return value[()]
    return value


def as_float_array(x: npt.ArrayLike) -> Any:
    """Convert ``x`` to an array, promoting integer and boolean input to ``float64``."""
    arr = np.asarray(x)
    if not np.issubdtype(arr.dtype, np.inexact):
        arr = arr.astype(np.float64)
    return arr


def log1mexp(x: npt.ArrayLike) -> Any:
    """
    Evaluate ``log(1 - exp(x))`` for ``x <= 0``.

    Uses ``log(-expm1(x))`` near zero and ``log1p(-exp(x))`` in the tail
    (Mächler's switch point ``-log 2``).

    Parameters
    ----------
    x : array_like
        Non-positive arguments. ``x = 0`` gives ``-inf``; ``x > 0`` gives NaN.

    Returns
    -------
    NumPy scalar or ndarray
        ``log(1 - exp(x))`` element-wise.
    """
    arr = as_float_array(x)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(arr > LOGHALF, np.log(-np.expm1(arr)), np.log1p(-np.exp(arr)))
    return unbox(result)


def log2mexp(x: npt.ArrayLike) -> Any:
    """
    Evaluate ``log(2 - exp(x))`` for ``x <= log 2``.

    Written as ``log1p(-expm1(x))`` so that ``x`` close to zero keeps full
    relative precision.
    """
    arr = as_float_array(x)
    with np.errstate(divide="ignore", invalid="ignore"):
        return unbox(np.log1p(-np.expm1(arr)))


_TINY: float = float(np.finfo(np.float64).tiny)
_LOGTINY: float = math.log(_TINY)
_SERIES_TERMS = 200
_FRACTION_TERMS = 200
_NEWTON_STEPS = 40


def _paired(a: npt.ArrayLike, z: npt.ArrayLike) -> tuple[tuple[int, ...], Any, Any]:
    """Broadcast ``a`` and ``z`` into 1-d ``float64`` arrays, keeping the common shape."""
    a_arr, z_arr = np.broadcast_arrays(as_float_array(a), as_float_array(z))
    shape = z_arr.shape
    return (
        shape,
        np.atleast_1d(a_arr).astype(np.float64),
        np.atleast_1d(z_arr).astype(np.float64),
    )


def _log_lower_series(a: Any, z: Any) -> Any:
    """``log P(a, z)`` summed from the power series; meant for ``z`` small against ``a``."""
    term = np.ones_like(z)
    total = np.ones_like(z)
    for n in range(1, _SERIES_TERMS):
        term = term * z / (a + n)
        total = total + term
    return a * np.log(z) - z - gammaln(a + 1.0) + np.log(total)


def _log_upper_fraction(a: Any, z: Any) -> Any:
    """``log Q(a, z)`` from Legendre's continued fraction (modified Lentz), ``z > a``."""
    b = z + 1.0 - a
    c = np.full_like(z, 1.0 / _TINY)
    d = 1.0 / b
    h = d
    for i in range(1, _FRACTION_TERMS):
        an = -i * (i - a)
        b = b + 2.0
        d = an * d + b
        d = np.where(np.abs(d) < _TINY, _TINY, d)
        c = b + an / c
        c = np.where(np.abs(c) < _TINY, _TINY, c)
        d = 1.0 / d
        h = h * d * c
    return a * np.log(z) - z - gammaln(a) + np.log(h)


def log_gammainc(a: npt.ArrayLike, z: npt.ArrayLike) -> Any:
    """
    Logarithm of the regularized lower incomplete gamma function ``P(a, z)``.

    ``log P`` is taken directly below one half and as ``log1p(-Q)`` above it.
    Where ``P`` drops below the smallest normal double the power series is
    summed in log space instead, so the far left tail does not underflow.
    """
    shape, a_arr, z_arr = _paired(a, z)
    p, q = gammainc(a_arr, z_arr), gammaincc(a_arr, z_arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(p < 0.5, np.log(p), np.log1p(-q))
        tiny = (p < _TINY) & (z_arr > 0)
        if np.any(tiny):
            result[tiny] = _log_lower_series(a_arr[tiny], z_arr[tiny])
    return unbox(result.reshape(shape))


def log_gammaincc(a: npt.ArrayLike, z: npt.ArrayLike) -> Any:
    """
    Logarithm of the regularized upper incomplete gamma function ``Q(a, z)``.

    Mirror of :func:`log_gammainc`; the far right tail comes from the
    continued fraction of ``Q``.
    """
    shape, a_arr, z_arr = _paired(a, z)
    p, q = gammainc(a_arr, z_arr), gammaincc(a_arr, z_arr)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = np.where(q < 0.5, np.log(q), np.log1p(-p))
        tiny = (q < _TINY) & np.isfinite(z_arr) & (z_arr > a_arr)
        if np.any(tiny):
            result[tiny] = _log_upper_fraction(a_arr[tiny], z_arr[tiny])
    return unbox(result.reshape(shape))


def _check_log_probability(lp: Any) -> None:
    if np.any(lp > 0):
        raise ValueError("Log-probability must be in [-inf, 0]")


def inv_log_gammainc(a: npt.ArrayLike, lp: npt.ArrayLike) -> Any:
    """
    Solve ``log P(a, z) = lp`` for ``z``.

    Above ``log 1/2`` the complement ``-expm1(lp)`` goes to ``gammainccinv``;
    between that and the smallest normal double ``gammaincinv`` is used;
    below, Newton iterations on ``log z`` against :func:`log_gammainc`.

    Raises
    ------
    ValueError
        If a log-probability is positive.
    """
    shape, a_arr, lp_arr = _paired(a, lp)
    _check_log_probability(lp_arr)

    z = np.full_like(lp_arr, np.nan)
    upper = lp_arr > LOGHALF
    middle = (lp_arr <= LOGHALF) & (lp_arr >= _LOGTINY)
    far = lp_arr < _LOGTINY
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        z[upper] = gammainccinv(a_arr[upper], -np.expm1(lp_arr[upper]))
        z[middle] = gammaincinv(a_arr[middle], np.exp(lp_arr[middle]))
        z[far & np.isneginf(lp_arr)] = 0.0

        solve = far & np.isfinite(lp_arr)
        if np.any(solve):
            a_s, lp_s = a_arr[solve], lp_arr[solve]
            u = np.minimum((lp_s + gammaln(a_s + 1.0)) / a_s, 0.0)
            for _ in range(_NEWTON_STEPS):
                x = np.exp(u)
                log_p = log_gammainc(a_s, x)
                slope = np.exp(a_s * u - x - gammaln(a_s) - log_p)
                u = np.minimum(u - (log_p - lp_s) / slope, 0.0)
            z[solve] = np.exp(u)
    return unbox(z.reshape(shape))


def inv_log_gammaincc(a: npt.ArrayLike, lp: npt.ArrayLike) -> Any:
    """
    Solve ``log Q(a, z) = lp`` for ``z``.

    Mirror of :func:`inv_log_gammainc`; the far tail is solved by Newton
    iterations on ``z`` against :func:`log_gammaincc`.
    """
    shape, a_arr, lp_arr = _paired(a, lp)
    _check_log_probability(lp_arr)

    z = np.full_like(lp_arr, np.nan)
    upper = lp_arr > LOGHALF
    middle = (lp_arr <= LOGHALF) & (lp_arr >= _LOGTINY)
    far = lp_arr < _LOGTINY
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        z[upper] = gammaincinv(a_arr[upper], -np.expm1(lp_arr[upper]))
        z[middle] = gammainccinv(a_arr[middle], np.exp(lp_arr[middle]))
        z[far & np.isneginf(lp_arr)] = np.inf

        solve = far & np.isfinite(lp_arr)
        if np.any(solve):
            a_s, lp_s = a_arr[solve], lp_arr[solve]
            x = np.maximum(-lp_s + (a_s - 1.0) * np.log(-lp_s) - gammaln(a_s), a_s + 1.0)
            for _ in range(_NEWTON_STEPS):
                log_q = log_gammaincc(a_s, x)
                slope = -np.exp((a_s - 1.0) * np.log(x) - x - gammaln(a_s) - log_q)
                x = np.maximum(x - (log_q - lp_s) / slope, 0.5 * x)
            z[solve] = x
    return unbox(z.reshape(shape))


def weighted_median(
    x: npt.ArrayLike,
    weights: npt.ArrayLike | None = None,
) -> float:
    """
    Median of ``x`` under non-negative ``weights``.

    With unit weights the result coincides with :func:`numpy.median`: when
    the cumulative weight hits exactly half of the total, the two
    neighbouring order statistics are averaged.

    Parameters
    ----------
    x : array_like
        One-dimensional observations.
    weights : array_like, optional
        Non-negative weights of the same length as ``x``.

    Returns
    -------
    float
        The weighted median.

    Raises
    ------
    ValueError
        If ``x`` is empty, lengths differ, a weight is negative or all
        weights are zero.
    """
    values = np.asarray(x, dtype=np.float64).ravel()
    if values.size == 0:
        raise ValueError("Cannot compute the median of an empty sample.")
    if weights is None:
        return float(np.median(values))

    w = np.asarray(weights, dtype=np.float64).ravel()
    if w.shape != values.shape:
        raise ValueError(
            f"Inconsistent argument dimensions: {values.size} observations, {w.size} weights."
        )
    if np.any(w < 0):
        raise ValueError("Weights must be non-negative.")
    total = float(w.sum())
    if total <= 0:
        raise ValueError("Total weight must be positive.")

    order = np.argsort(values, kind="stable")
    values, w = values[order], w[order]
    cumulative = np.cumsum(w)
    half = 0.5 * total

    idx = int(np.searchsorted(cumulative, half, side="left"))
    idx = min(idx, values.size - 1)
    if np.isclose(cumulative[idx], half, rtol=1e-12, atol=0.0):
        upper = idx + 1
        while upper < values.size and w[upper] == 0:
            upper += 1
        if upper < values.size:
            return float(0.5 * (values[idx] + values[upper]))
    return float(values[idx])


__all__ = [
    "LOGTWO",
    "LOGHALF",
    "unbox",
    "as_float_array",
    "log1mexp",
    "log2mexp",
    "log_gammainc",
    "log_gammaincc",
    "inv_log_gammainc",
    "inv_log_gammaincc",
    "weighted_median",
]
