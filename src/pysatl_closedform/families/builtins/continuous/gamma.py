"""
Gamma distribution family implementation.

Contains the Gamma family with shape/rate and shape/scale parameterizations.
The family also serves as the computational delegate of the inverse gamma
family.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, cast

import numpy as np
from scipy.special import (
    digamma,
    gammainc,
    gammaincc,
    gammainccinv,
    gammaincinv,
    gammaln,
    xlogy,
)

from pysatl_closedform.distributions.strategies import DirectSamplingUnivariateStrategy
from pysatl_closedform.distributions.support import ContinuousSupport
from pysatl_closedform.families.parametric_family import ParametricFamily
from pysatl_closedform.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_closedform.families.registry import ParametricFamilyRegister
from pysatl_closedform.numerics import (
    as_float_array,
    inv_log_gammainc,
    inv_log_gammaincc,
    log_gammainc,
    log_gammaincc,
    unbox,
)
from pysatl_closedform.types import (
    CharacteristicName,
    ComplexArray,
    FamilyName,
    NumericArray,
    UnivariateContinuous,
)

if TYPE_CHECKING:
    from typing import Any


def configure_gamma_family() -> None:
    """
    Configure and register the Gamma distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.GAMMA):
        return

    GAMMA_DOC = """
    Gamma distribution.

    Continuous distribution on the positive half-line with shape α and
    rate β (or scale θ = 1/β).

    Probability density function (shape/rate parametrization):
        f(x) = β^α x^(α-1) exp(-βx) / Γ(α) for x > 0
    """

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Logarithm of the probability density function.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - alpha: float (shape)
            - beta: float (rate)
        x : NumericArray
            Points at which to evaluate the log-density

        Returns
        -------
        NumericArray
            Log-density values; ``-inf`` for ``x < 0``
        """
        parameters = cast(_ShapeRate, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        x = as_float_array(x)

        with np.errstate(divide="ignore", invalid="ignore"):
            inside = xlogy(alpha - 1, x) + alpha * np.log(beta) - beta * x - gammaln(alpha)
            return unbox(np.where(x >= 0, inside, -np.inf))

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(np.exp(logpdf(parameters, x)))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Regularized lower incomplete gamma function ``P(α, βx)``."""
        parameters = cast(_ShapeRate, parameters)
        x = as_float_array(x)
        return unbox(gammainc(parameters.alpha, parameters.beta * np.maximum(x, 0.0)))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """Regularized upper incomplete gamma function ``Q(α, βx)``."""
        parameters = cast(_ShapeRate, parameters)
        x = as_float_array(x)
        return unbox(gammaincc(parameters.alpha, parameters.beta * np.maximum(x, 0.0)))

    def logcdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``log P(α, βx)``, accurate near 1 and in the far left tail."""
        parameters = cast(_ShapeRate, parameters)
        z = parameters.beta * np.maximum(as_float_array(x), 0.0)
        return cast(NumericArray, log_gammainc(parameters.alpha, z))

    def logsf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """``log Q(α, βx)``, accurate near 1 and in the far right tail."""
        parameters = cast(_ShapeRate, parameters)
        z = parameters.beta * np.maximum(as_float_array(x), 0.0)
        return cast(NumericArray, log_gammaincc(parameters.alpha, z))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Percent point function (inverse CDF).

        Raises
        ------
        ValueError
            If probability is outside [0, 1]
        """
        p = as_float_array(p)
        if np.any((p < 0) | (p > 1)):
            raise ValueError("Probability must be in [0, 1]")

        parameters = cast(_ShapeRate, parameters)
        return unbox(gammaincinv(parameters.alpha, p) / parameters.beta)

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Inverse survival function.

        Raises
        ------
        ValueError
            If probability is outside [0, 1]
        """
        p = as_float_array(p)
        if np.any((p < 0) | (p > 1)):
            raise ValueError("Probability must be in [0, 1]")

        parameters = cast(_ShapeRate, parameters)
        return unbox(gammainccinv(parameters.alpha, p) / parameters.beta)

    def invlogcdf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        """
        Quantile of a log-probability, solved without leaving log space.

        Raises
        ------
        ValueError
            If a log-probability is positive
        """
        parameters = cast(_ShapeRate, parameters)
        return unbox(inv_log_gammainc(parameters.alpha, lp) / parameters.beta)

    def invlogsf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        parameters = cast(_ShapeRate, parameters)
        return unbox(inv_log_gammaincc(parameters.alpha, lp) / parameters.beta)

    def mgf(parameters: Parametrization, t: NumericArray) -> NumericArray:
        """``(1 - t/β)^(-α)`` for ``t < β``, diverges to ``+inf`` otherwise."""
        parameters = cast(_ShapeRate, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        t = as_float_array(t)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return unbox(np.where(t < beta, (1.0 - t / beta) ** (-alpha), np.inf))

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        parameters = cast(_ShapeRate, parameters)
        t = as_float_array(t)
        return cast(
            ComplexArray, unbox((1.0 - 1j * t / parameters.beta) ** (-parameters.alpha))
        )

    def mean_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeRate, parameters)
        return parameters.alpha / parameters.beta

    def var_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeRate, parameters)
        return parameters.alpha / parameters.beta**2

    def skew_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeRate, parameters)
        return 2.0 / np.sqrt(parameters.alpha)

    def kurt_func(parameters: Parametrization, _: Any, excess: bool = True) -> float:
        """Excess (default) or raw kurtosis ``6/α (+3)``."""
        parameters = cast(_ShapeRate, parameters)
        value = 6.0 / parameters.alpha
        return value if excess else value + 3.0

    def mode_func(parameters: Parametrization, _: Any) -> float:
        """``(α - 1)/β`` for ``α >= 1``, otherwise 0."""
        parameters = cast(_ShapeRate, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        return (alpha - 1) / beta if alpha >= 1 else 0.0 * beta

    def entropy_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_ShapeRate, parameters)
        alpha, beta = parameters.alpha, parameters.beta
        return alpha - np.log(beta) + gammaln(alpha) + (1 - alpha) * digamma(alpha)

    def rvs(
        parameters: Parametrization, n: int, rng: np.random.Generator, **_: Any
    ) -> NumericArray:
        parameters = cast(_ShapeRate, parameters)
        return rng.gamma(parameters.alpha, 1.0 / parameters.beta, size=n)

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of gamma distribution"""
        return ContinuousSupport(left=0.0)

    Gamma = ParametricFamily(
        name=FamilyName.GAMMA,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["shapeRate", "shapeScale"],
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
            CharacteristicName.ENTROPY: entropy_func,
            CharacteristicName.RVS: rvs,
        },
        sampling_strategy=DirectSamplingUnivariateStrategy(),
        support_by_parametrization=_support,
        parameter_aliases={"shape": "alpha", "k": "alpha", "rate": "beta", "scale": "theta"},
    )
    Gamma.__doc__ = GAMMA_DOC

    @parametrization(family=Gamma, name="shapeRate")
    class _ShapeRate(Parametrization):
        """
        Shape/rate parametrization of gamma distribution.

        Parameters
        ----------
        alpha : float
            Shape parameter (α)
        beta : float
            Rate parameter (β)
        """

        alpha: float = 1.0
        beta: float = 1.0

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            return self.alpha > 0

        @constraint(description="beta > 0")
        def check_beta_positive(self) -> bool:
            return self.beta > 0

    @parametrization(family=Gamma, name="shapeScale")
    class _ShapeScale(Parametrization):
        """
        Shape/scale parametrization of gamma distribution.

        Parameters
        ----------
        alpha : float
            Shape parameter (α)
        theta : float
            Scale parameter, θ = 1/β
        """

        alpha: float = 1.0
        theta: float = 1.0

        @constraint(description="alpha > 0")
        def check_alpha_positive(self) -> bool:
            return self.alpha > 0

        @constraint(description="theta > 0")
        def check_theta_positive(self) -> bool:
            return self.theta > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            """Transform to shape/rate parametrization."""
            return _ShapeRate(alpha=self.alpha, beta=1.0 / self.theta)

    ParametricFamilyRegister.register(Gamma)
