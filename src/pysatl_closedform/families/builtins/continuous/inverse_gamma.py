"""
Inverse gamma distribution family implementation.

Contains the InverseGamma family with shape/scale parameterization. Tail,
quantile and sampling queries are forwarded to a Gamma distribution through
the reciprocal transform: if ``X ~ Gamma(α, rate=β)`` then ``1/X ~ InvGamma(α, scale=β)``.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import digamma, gammaln, kv, kve

from pysatl_closedform.distributions.strategies import DirectSamplingUnivariateStrategy
from pysatl_closedform.distributions.support import ContinuousSupport
from pysatl_closedform.families.builtins.continuous.gamma import configure_gamma_family
from pysatl_closedform.families.parametric_family import ParametricFamily
from pysatl_closedform.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_closedform.families.registry import ParametricFamilyRegister
from pysatl_closedform.numerics import LOGTWO, as_float_array, unbox
from pysatl_closedform.types import (
    CharacteristicName,
    ComplexArray,
    FamilyName,
    NumericArray,
    UnivariateContinuous,
)

if TYPE_CHECKING:
    from typing import Any

    from pysatl_closedform.families.distribution import ParametricFamilyDistribution


def configure_inverse_gamma_family() -> None:
    """
    Configure and register the InverseGamma distribution family.

    The Gamma family is configured first since every inverse gamma
    distribution delegates to one of its members.
    """

    if ParametricFamilyRegister.contains(FamilyName.INVERSE_GAMMA):
        return
    configure_gamma_family()

    INVERSE_GAMMA_DOC = """
    Inverse gamma distribution.

    Distribution of the reciprocal of a gamma random variable, with shape α
    and scale θ.

    Probability density function:
        f(x) = θ^α / Γ(α) * x^(-(α+1)) * exp(-θ/x) for x > 0
    """

    @lru_cache(maxsize=128)
    def _gamma(alpha: float, theta: float, dtype: np.dtype[Any]) -> ParametricFamilyDistribution:
        """
        Gamma(α, rate=θ) delegate.

        ``dtype`` is part of the key: equal float32 and float64 values hash alike.
        """
        gamma = ParametricFamilyRegister.get(FamilyName.GAMMA)
        return gamma.distribution(alpha=alpha, beta=theta)

    def _delegate(parameters: Parametrization, name: CharacteristicName) -> Any:
        parameters = cast(_ShapeScale, parameters)
        delegate = _gamma(parameters.alpha, parameters.theta, parameters.dtype)
        return delegate.query_method(name)

    def _reciprocal(x: NumericArray) -> NumericArray:
        """``1/x`` on the support, ``+inf`` for ``x <= 0`` (mapped to zero mass)."""
        x = as_float_array(x)
        with np.errstate(divide="ignore"):
            return np.where(x > 0, 1.0 / x, np.inf)

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Logarithm of the probability density function.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - alpha: float (shape)
            - theta: float (scale)
        x : NumericArray
            Points at which to evaluate the log-density

        Returns
        -------
        NumericArray
            ``α log θ - log Γ(α) - (α + 1) log x - θ/x``; ``-inf`` for ``x <= 0``
        """
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        x = as_float_array(x)

        with np.errstate(divide="ignore", invalid="ignore"):
            inside = alpha * np.log(theta) - gammaln(alpha) - (alpha + 1) * np.log(x) - theta / x
            return unbox(np.where(x > 0, inside, -np.inf))

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(np.exp(logpdf(parameters, x)))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(_delegate(parameters, CharacteristicName.SF)(_reciprocal(x)))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(_delegate(parameters, CharacteristicName.CDF)(_reciprocal(x)))

    def logcdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(_delegate(parameters, CharacteristicName.LOGSF)(_reciprocal(x)))

    def logsf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(_delegate(parameters, CharacteristicName.LOGCDF)(_reciprocal(x)))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Percent point function, ``1 / isf_gamma(p)``.

        Raises
        ------
        ValueError
            If probability is outside [0, 1]
        """
        with np.errstate(divide="ignore"):
            return unbox(1.0 / _delegate(parameters, CharacteristicName.ISF)(p))

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """Inverse survival function, ``1 / ppf_gamma(p)``."""
        with np.errstate(divide="ignore"):
            return unbox(1.0 / _delegate(parameters, CharacteristicName.PPF)(p))

    def invlogcdf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        with np.errstate(divide="ignore"):
            return unbox(1.0 / _delegate(parameters, CharacteristicName.INVLOGSF)(lp))

    def invlogsf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        with np.errstate(divide="ignore"):
            return unbox(1.0 / _delegate(parameters, CharacteristicName.INVLOGCDF)(lp))

    def mgf(parameters: Parametrization, t: NumericArray) -> NumericArray:
        """
        Moment generating function.

        ``2 (-θt)^(α/2) / Γ(α) * K_α(sqrt(-4θt))`` for ``t < 0``; exactly 1 at
        ``t = 0`` and ``+inf`` for ``t > 0`` where the expectation diverges.
        The Bessel factor is evaluated as ``kve(α, s) * exp(-s)`` in log-space.
        """
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        t = as_float_array(t)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            u = -theta * t
            s = np.sqrt(4.0 * u)
            log_bessel = np.log(kve(alpha, s)) - s
            log_value = LOGTWO + 0.5 * alpha * np.log(u) - gammaln(alpha) + log_bessel
            value = np.where(t < 0, np.exp(log_value), np.inf)
            return unbox(np.where(t == 0, 1.0, value))

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        """
        Characteristic function.

        ``2 (-iθt)^(α/2) / Γ(α) * K_α(sqrt(-4iθt))``, exactly ``1 + 0j`` at ``t = 0``.
        """
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        t = as_float_array(t)

        safe_t = np.where(t == 0, 1.0, t)
        z = -1j * theta * safe_t
        value = 2.0 * np.exp(0.5 * alpha * np.log(z) - gammaln(alpha)) * kv(alpha, np.sqrt(4.0 * z))
        return cast(ComplexArray, unbox(np.where(t == 0, 1.0 + 0j, value)))

    def mean_func(parameters: Parametrization, _: Any) -> float:
        """``θ/(α - 1)`` for ``α > 1``, otherwise ``+inf``."""
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        return theta / (alpha - 1) if alpha > 1 else np.inf

    def var_func(parameters: Parametrization, _: Any) -> float:
        """``θ²/((α - 1)²(α - 2))`` for ``α > 2``, otherwise ``+inf``."""
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        return theta**2 / ((alpha - 1) ** 2 * (alpha - 2)) if alpha > 2 else np.inf

    def skew_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeScale, parameters)
        alpha = parameters.alpha
        return 4 * np.sqrt(alpha - 2) / (alpha - 3) if alpha > 3 else np.nan

    def kurt_func(parameters: Parametrization, _: Any, excess: bool = True) -> float:
        """
        Excess (default) or raw kurtosis.

        Defined for ``α > 4``; NaN otherwise.
        """
        parameters = cast(_ShapeScale, parameters)
        alpha = parameters.alpha
        if alpha <= 4:
            return np.nan
        value = (30 * alpha - 66) / ((alpha - 3) * (alpha - 4))
        return value if excess else value + 3.0

    def mode_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeScale, parameters)
        return parameters.theta / (parameters.alpha + 1)

    def median_func(parameters: Parametrization, _: Any) -> float:
        return cast(float, ppf(parameters, 0.5))

    def entropy_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        return alpha + gammaln(alpha) - (1 + alpha) * digamma(alpha) + np.log(theta)

    def gradlogpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``-(α + 1)/x + θ/x²`` on the support, 0 elsewhere."""
        parameters = cast(_ShapeScale, parameters)
        alpha, theta = parameters.alpha, parameters.theta
        x = as_float_array(x)

        with np.errstate(divide="ignore", invalid="ignore"):
            return unbox(np.where(x > 0, -(alpha + 1) / x + theta / x**2, 0.0))

    def rvs(
        parameters: Parametrization, n: int, rng: np.random.Generator, **_: Any
    ) -> NumericArray:
        return 1.0 / _delegate(parameters, CharacteristicName.RVS)(n, rng=rng)

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of inverse gamma distribution"""
        return ContinuousSupport(left=0.0, left_closed=False)

    InverseGamma = ParametricFamily(
        name=FamilyName.INVERSE_GAMMA,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["shapeScale"],
        distr_characteristics={
            CharacteristicName.PDF: pdf,
            CharacteristicName.LOGPDF: logpdf,
            CharacteristicName.CDF: cdf,
            CharacteristicName.SF: sf,
            CharacteristicName.LOGCDF: logcdf,
            CharacteristicName.LOGSF: logsf,
            CharacteristicName.PPF: ppf,
            CharacteristicName.ISF: isf,
            CharacteristicName.INVLOGCDF: invlogcdf,
            CharacteristicName.INVLOGSF: invlogsf,
            CharacteristicName.MGF: mgf,
            CharacteristicName.CF: char_func,
            CharacteristicName.MEAN: mean_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
            CharacteristicName.MODE: mode_func,
            CharacteristicName.MEDIAN: median_func,
            CharacteristicName.ENTROPY: entropy_func,
            CharacteristicName.GRADLOGPDF: gradlogpdf,
            CharacteristicName.RVS: rvs,
        },
        sampling_strategy=DirectSamplingUnivariateStrategy(),
        support_by_parametrization=_support,
        parameter_aliases={"shape": "alpha", "scale": "theta"},
    )
    InverseGamma.__doc__ = INVERSE_GAMMA_DOC

    @parametrization(family=InverseGamma, name="shapeScale")
    class _ShapeScale(Parametrization):
        """
        Shape/scale parametrization of inverse gamma distribution.

        Parameters
        ----------
        alpha : float
            Shape parameter (α)
        theta : float
            Scale parameter (θ)
        """

        alpha: float = 1.0
        theta: float = 1.0

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            return self.alpha > 0

        @constraint(description="theta > 0")
        def check_theta_positive(self) -> bool:
            return self.theta > 0

    ParametricFamilyRegister.register(InverseGamma)
