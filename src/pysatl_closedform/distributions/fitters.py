"""
Characteristic Conversions
==========================

Fitters turning one characteristic of a distribution into another. They are
wired as edges of the characteristic graph
(:mod:`~pysatl_closedform.distributions.registry`).

Two groups are provided:

- *exact* conversions that follow from an identity (``sf = 1 - cdf``,
  ``invlogcdf(lp) = ppf(exp(lp))``, ...). They are vectorized;
- *numerical* conversions for univariate continuous distributions
  (``pdf <-> cdf`` and ``cdf <-> ppf``). They are scalar.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Callable
from math import isfinite
from typing import TYPE_CHECKING, Any, cast

import numpy as np
from mypy_extensions import KwArg
from scipy import (
    integrate as _sp_integrate,
    optimize as _sp_optimize,
)

from pysatl_closedform.distributions.computation import FittedComputationMethod
from pysatl_closedform.numerics import unbox
from pysatl_closedform.types import CharacteristicName

if TYPE_CHECKING:
    from pysatl_closedform.distributions.distribution import Distribution
    from pysatl_closedform.types import GenericCharacteristicName, ScalarFunc

type Fitter = Callable[..., FittedComputationMethod[Any, Any]]


def _resolve(distribution: Distribution, name: GenericCharacteristicName) -> Callable[..., Any]:
    """
    Resolve a characteristic from the distribution's computation strategy.

    Raises
    ------
    RuntimeError
        If the distribution does not provide a computation strategy.
    """
    try:
        return distribution.query_method(name)
    except AttributeError as e:
        raise RuntimeError(
            "Distribution must provide computation_strategy.query_method(name, distribution)."
        ) from e


def _resolve_scalar(distribution: Distribution, name: GenericCharacteristicName) -> ScalarFunc:
    fn = _resolve(distribution, name)

    def _wrap(x: float, **kwargs: Any) -> float:
        return float(fn(x, **kwargs))

    return _wrap


# --- Exact conversions --------------------------------------------------------


def exact_conversion(
    source: GenericCharacteristicName,
    target: GenericCharacteristicName,
    *,
    inner: Callable[[Any], Any] | None = None,
    outer: Callable[[Any], Any] | None = None,
) -> Fitter:
    """
    Build a fitter for ``target(x) = outer(source(inner(x)))``.

    Parameters
    ----------
    source, target : str
        Characteristic names linked by the identity.
    inner : Callable, optional
        Transform applied to the argument before calling ``source``.
    outer : Callable, optional
        Transform applied to the value returned by ``source``.

    Returns
    -------
    Callable
        Fitter producing a vectorized :class:`FittedComputationMethod`.
    """

    def _fit(distribution: Distribution, /, **_: Any) -> FittedComputationMethod[Any, Any]:
        source_func = _resolve(distribution, source)

        def _target(x: Any, **options: Any) -> Any:
            arg = x if inner is None else inner(np.asarray(x, dtype=float))
            with np.errstate(divide="ignore", invalid="ignore"):
                value = source_func(arg, **options)
                if outer is not None:
                    value = outer(np.asarray(value))
            return unbox(value)

        return FittedComputationMethod[Any, Any](target=target, sources=[source], func=_target)

    return _fit


fit_pdf_to_logpdf = exact_conversion(
    CharacteristicName.PDF, CharacteristicName.LOGPDF, outer=np.log
)
fit_pmf_to_logpmf = exact_conversion(
    CharacteristicName.PMF, CharacteristicName.LOGPMF, outer=np.log
)
fit_cdf_to_sf = exact_conversion(
    CharacteristicName.CDF, CharacteristicName.SF, outer=lambda v: 1.0 - v
)
fit_cdf_to_logcdf = exact_conversion(
    CharacteristicName.CDF, CharacteristicName.LOGCDF, outer=np.log
)
fit_sf_to_logsf = exact_conversion(CharacteristicName.SF, CharacteristicName.LOGSF, outer=np.log)
fit_ppf_to_isf = exact_conversion(
    CharacteristicName.PPF, CharacteristicName.ISF, inner=lambda p: 1.0 - p
)
fit_ppf_to_invlogcdf = exact_conversion(
    CharacteristicName.PPF, CharacteristicName.INVLOGCDF, inner=np.exp
)
fit_isf_to_invlogsf = exact_conversion(
    CharacteristicName.ISF, CharacteristicName.INVLOGSF, inner=np.exp
)
fit_ppf_to_median = exact_conversion(
    CharacteristicName.PPF, CharacteristicName.MEDIAN, inner=lambda _: 0.5
)
fit_var_to_std = exact_conversion(CharacteristicName.VAR, CharacteristicName.STD, outer=np.sqrt)


# --- Numerical conversions (univariate continuous) ---------------------------


def _ppf_bisection_from_cdf(
    cdf: ScalarFunc,
    *,
    x0: float = 0.0,
    init_step: float = 1.0,
    expand_factor: float = 2.0,
    max_expand: int = 60,
    x_tol: float = 1e-12,
    max_iter: int = 200,
) -> ScalarFunc:
    """
    Build a scalar ``ppf`` from a scalar ``cdf`` by bracket expansion and
    bisection.

    Parameters
    ----------
    cdf : Callable[[float], float]
        Monotone CDF.
    x0 : float, default 0.0
        Initial bracket center.
    init_step : float, default 1.0
        Initial half-width for the bracket.
    expand_factor : float, default 2.0
        Multiplicative factor for bracket growth.
    max_expand : int, default 60
        Maximum expansions while searching for a valid bracket.
    x_tol : float, default 1e-12
        Relative width at which the bisection stops.
    max_iter : int, default 200
        Maximum bisection iterations.

    Returns
    -------
    Callable[[float], float]
        Scalar ``ppf`` such that ``cdf(ppf(q)) ≈ q``; ``q <= 0`` maps to
        ``-inf`` and ``q >= 1`` to ``+inf``.
    """

    def _ppf(q: float, **_: Any) -> float:
        if q <= 0.0:
            return float("-inf")
        if q >= 1.0:
            return float("inf")

        step = init_step
        left, right = x0 - step, x0 + step
        for _i in range(max_expand):
            f_left, f_right = cdf(left), cdf(right)
            if f_left < q <= f_right:
                break
            step *= expand_factor
            if f_left >= q:
                left -= step
            if f_right < q:
                right += step

        for _i in range(max_iter):
            if right - left <= x_tol * (1.0 + max(abs(left), abs(right))):
                break
            mid = 0.5 * (left + right)
            if q <= cdf(mid):
                right = mid
            else:
                left = mid
        return right

    return _ppf


def _num_derivative(f: ScalarFunc, x: float, h: float = 1e-5) -> float:
    """5-point central numerical derivative used for ``cdf -> pdf``."""
    if not isfinite(x):
        return float("nan")
    f1 = float(f(x + h))
    f_1 = float(f(x - h))
    f2 = float(f(x + 2 * h))
    f_2 = float(f(x - 2 * h))
    return float((-f2 + 8 * f1 - 8 * f_1 + f_2) / (12.0 * h))


def fit_pdf_to_cdf_1C(
    distribution: Distribution, /, **kwargs: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``cdf`` from a resolvable ``pdf`` via numerical integration."""
    pdf_func = _resolve_scalar(distribution, CharacteristicName.PDF)

    def _cdf(x: float, **options: Any) -> float:
        val, _ = _sp_integrate.quad(
            lambda t: float(pdf_func(t, **options)), float("-inf"), x, limit=200
        )
        return float(np.clip(val, 0.0, 1.0))

    cdf_func = cast(Callable[[float, KwArg(Any)], float], _cdf)
    return FittedComputationMethod[float, float](
        target=CharacteristicName.CDF, sources=[CharacteristicName.PDF], func=cdf_func
    )


def fit_cdf_to_pdf_1C(
    distribution: Distribution, /, **kwargs: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``pdf`` as a clipped numerical derivative of ``cdf``."""
    cdf_func = _resolve_scalar(distribution, CharacteristicName.CDF)

    def _pdf(x: float, **options: Any) -> float:
        d = _num_derivative(lambda t: cdf_func(t, **options), x, h=1e-5)
        return float(max(d, 0.0))

    pdf_func = cast(Callable[[float, KwArg(Any)], float], _pdf)
    return FittedComputationMethod[float, float](
        target=CharacteristicName.PDF, sources=[CharacteristicName.CDF], func=pdf_func
    )


def fit_cdf_to_ppf_1C(
    distribution: Distribution, /, **options: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``ppf`` from a resolvable ``cdf`` using bracketing bisection."""
    cdf_func = _resolve_scalar(distribution, CharacteristicName.CDF)
    ppf_func = _ppf_bisection_from_cdf(cdf_func, **options)

    ppf_cast = cast(Callable[[float, KwArg(Any)], float], ppf_func)
    return FittedComputationMethod[float, float](
        target=CharacteristicName.PPF, sources=[CharacteristicName.CDF], func=ppf_cast
    )


def fit_ppf_to_cdf_1C(
    distribution: Distribution, /, **_: Any
) -> FittedComputationMethod[float, float]:
    """Fit ``cdf`` by numerically inverting a resolvable ``ppf`` with Brent's method."""
    ppf_func = _resolve_scalar(distribution, CharacteristicName.PPF)

    def _cdf(x: float, **options: Any) -> float:
        if not isfinite(x):
            return 0.0 if x == float("-inf") else 1.0

        def f(q: float) -> float:
            return float(ppf_func(q, **options) - x)

        lo, hi = 1e-12, 1.0 - 1e-12
        if f(lo) > 0.0:
            return 0.0
        if f(hi) < 0.0:
            return 1.0
        q = float(_sp_optimize.brentq(f, lo, hi, maxiter=256))
        return float(np.clip(q, 0.0, 1.0))

    cdf_func = cast(Callable[[float, KwArg(Any)], float], _cdf)
    return FittedComputationMethod[float, float](
        target=CharacteristicName.CDF, sources=[CharacteristicName.PPF], func=cdf_func
    )
