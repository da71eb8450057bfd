"""
Laplace distribution family implementation.

Contains the Laplace (double exponential) family with location/scale,
location/standard deviation and location/variance parameterizations.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math
from typing import TYPE_CHECKING, cast

import numpy as np

from pysatl_closedform.distributions.strategies import DirectSamplingUnivariateStrategy
from pysatl_closedform.distributions.support import ContinuousSupport
from pysatl_closedform.families.estimation import MaximumLikelihoodEstimator
from pysatl_closedform.families.parametric_family import ParametricFamily
from pysatl_closedform.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_closedform.families.registry import ParametricFamilyRegister
from pysatl_closedform.numerics import (
    LOGHALF,
    LOGTWO,
    as_float_array,
    log1mexp,
    log2mexp,
    unbox,
    weighted_median,
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

    import numpy.typing as npt


def configure_laplace_family() -> None:
    """
    Configure and register the Laplace distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.LAPLACE):
        return

    LAPLACE_DOC = """
    Laplace distribution.

    Location-scale family with location μ and scale θ, also known as the
    double exponential distribution: the difference of two i.i.d.
    exponential variables.

    Probability density function:
        f(x) = 1/(2θ) * exp(-|x - μ|/θ)

    Every exponential below is taken of ``-|z|``, ``z = (x - μ)/θ``, so that
    no branch overflows.
    """

    def _z(parameters: _LocationScale, x: NumericArray) -> NumericArray:
        return (as_float_array(x) - parameters.mu) / parameters.theta

    def _x(parameters: _LocationScale, z: NumericArray) -> NumericArray:
        return unbox(parameters.mu + z * parameters.theta)

    def _check_probability(p: NumericArray) -> NumericArray:
        p = as_float_array(p)
        if np.any((p < 0) | (p > 1)):
            raise ValueError("Probability must be in [0, 1]")
        return p

    def _check_log_probability(lp: NumericArray) -> NumericArray:
        lp = as_float_array(lp)
        if np.any(lp > 0):
            raise ValueError("Log-probability must be in [-inf, 0]")
        return lp

    def logpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Logarithm of the probability density function.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - mu: float (location)
            - theta: float (scale)
        x : NumericArray
            Points at which to evaluate the log-density

        Returns
        -------
        NumericArray
            ``-(|z| + log(2θ))``
        """
        parameters = cast(_LocationScale, parameters)
        return unbox(-(np.abs(_z(parameters, x)) + np.log(2 * parameters.theta)))

    def pdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        return unbox(np.exp(logpdf(parameters, x)))

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Cumulative distribution function.

        ``exp(z)/2`` for ``z < 0`` and ``1 - exp(-z)/2`` otherwise.
        """
        z = _z(cast(_LocationScale, parameters), x)
        e = np.exp(-np.abs(z))
        return unbox(np.where(z < 0, 0.5 * e, 1.0 - 0.5 * e))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        z = _z(cast(_LocationScale, parameters), x)
        e = np.exp(-np.abs(z))
        return unbox(np.where(z > 0, 0.5 * e, 1.0 - 0.5 * e))

    def logcdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        z = _z(cast(_LocationScale, parameters), x)
        nz = -np.abs(z)
        return unbox(np.where(z < 0, LOGHALF + nz, LOGHALF + log2mexp(nz)))

    def logsf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        z = _z(cast(_LocationScale, parameters), x)
        nz = -np.abs(z)
        return unbox(np.where(z > 0, LOGHALF + nz, LOGHALF + log2mexp(nz)))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Percent point function (inverse CDF).

        Returns
        -------
        NumericArray
            ``μ + θ log(2p)`` for ``p < 1/2``, ``μ - θ log(2(1 - p))`` otherwise;
            ``-inf`` at 0 and ``+inf`` at 1

        Raises
        ------
        ValueError
            If probability is outside [0, 1]
        """
        parameters = cast(_LocationScale, parameters)
        p = _check_probability(p)
        with np.errstate(divide="ignore", invalid="ignore"):
            z = np.where(p < 0.5, np.log(2 * p), -np.log(2 * (1 - p)))
        return _x(parameters, z)

    def isf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Inverse survival function.

        Raises
        ------
        ValueError
            If probability is outside [0, 1]
        """
        parameters = cast(_LocationScale, parameters)
        p = _check_probability(p)
        with np.errstate(divide="ignore", invalid="ignore"):
            z = np.where(p > 0.5, np.log(2 * (1 - p)), -np.log(2 * p))
        return _x(parameters, z)

    def invlogcdf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        """
        Inverse of the log-CDF.

        Raises
        ------
        ValueError
            If log-probability is positive
        """
        parameters = cast(_LocationScale, parameters)
        lp = _check_log_probability(lp)
        z = np.where(lp < LOGHALF, LOGTWO + lp, -(LOGTWO + log1mexp(lp)))
        return _x(parameters, z)

    def invlogsf(parameters: Parametrization, lp: NumericArray) -> NumericArray:
        """
        Inverse of the log-survival function.

        Raises
        ------
        ValueError
            If log-probability is positive
        """
        parameters = cast(_LocationScale, parameters)
        lp = _check_log_probability(lp)
        z = np.where(lp > LOGHALF, LOGTWO + log1mexp(lp), -(LOGTWO + lp))
        return _x(parameters, z)

    def mgf(parameters: Parametrization, t: NumericArray) -> NumericArray:
        """``exp(tμ)/((1 - θt)(1 + θt))`` for ``|t| < 1/θ``, ``+inf`` otherwise."""
        parameters = cast(_LocationScale, parameters)
        t = as_float_array(t)
        st = parameters.theta * t

        with np.errstate(divide="ignore", over="ignore"):
            value = np.exp(t * parameters.mu) / ((1 - st) * (1 + st))
        return unbox(np.where(np.abs(st) < 1, value, np.inf))

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        parameters = cast(_LocationScale, parameters)
        t = as_float_array(t)
        st = parameters.theta * t
        return cast(ComplexArray, unbox(np.exp(1j * t * parameters.mu) / (1 + st * st)))

    def gradlogpdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Derivative of the log-density, ``-sign(x - μ)/θ``.

        Raises
        ------
        ValueError
            If any point equals the location, where the density has a kink.
        """
        parameters = cast(_LocationScale, parameters)
        x = as_float_array(x)
        if np.any(x == parameters.mu):
            raise ValueError("Gradient is undefined at the location point")
        return unbox(-np.sign(x - parameters.mu) / parameters.theta)

    def location_func(parameters: Parametrization, _: Any) -> float:
        """Mean, median and mode of the distribution."""
        return cast(_LocationScale, parameters).mu

    def var_func(parameters: Parametrization, _: Any) -> float:
        return 2 * cast(_LocationScale, parameters).theta ** 2

    def std_func(parameters: Parametrization, _: Any) -> float:
        return math.sqrt(2.0) * cast(_LocationScale, parameters).theta

    def skew_func(parameters: Parametrization, _: Any) -> float:
        return 0.0 * cast(_LocationScale, parameters).theta

    def kurt_func(_1: Parametrization, _2: Any, excess: bool = True) -> float:
        """Excess (3, default) or raw (6) kurtosis."""
        return 3.0 if excess else 6.0

    def entropy_func(parameters: Parametrization, _: Any) -> float:
        return np.log(2 * cast(_LocationScale, parameters).theta) + 1

    def rvs(
        parameters: Parametrization, n: int, rng: np.random.Generator, **_: Any
    ) -> NumericArray:
        """Signed exponential variates ``μ + θ E s``, ``E ~ Exp(1)``, ``s = ±1``."""
        parameters = cast(_LocationScale, parameters)
        sign = rng.choice([-1.0, 1.0], size=n)
        return parameters.mu + parameters.theta * rng.standard_exponential(n) * sign

    def fit_sample(x: npt.NDArray[np.float64], weights: npt.NDArray[np.float64] | None) -> Any:
        """
        Sample median as location, median absolute deviation around it as scale.

        Both medians are weighted when ``weights`` are given.
        """
        location = weighted_median(x, weights)
        scale = weighted_median(np.abs(x - location), weights)
        return _LocationScale(mu=location, theta=scale)

    def _support(_: Parametrization) -> ContinuousSupport:
        """Support of Laplace distribution"""
        return ContinuousSupport()

    Laplace = ParametricFamily(
        name=FamilyName.LAPLACE,
        distr_type=UnivariateContinuous,
        distr_parametrizations=["locationScale", "locationStd", "locationVar"],
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
            CharacteristicName.MEAN: location_func,
            CharacteristicName.MEDIAN: location_func,
            CharacteristicName.MODE: location_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.STD: std_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
            CharacteristicName.ENTROPY: entropy_func,
            CharacteristicName.GRADLOGPDF: gradlogpdf,
            CharacteristicName.RVS: rvs,
        },
        sampling_strategy=DirectSamplingUnivariateStrategy(),
        support_by_parametrization=_support,
        parameter_aliases={"location": "mu", "mean": "mu", "scale": "theta"},
        estimator=MaximumLikelihoodEstimator(fit_sample=fit_sample),
    )
    Laplace.__doc__ = LAPLACE_DOC

    @parametrization(family=Laplace, name="locationScale")
    class _LocationScale(Parametrization):
        """
        Location/scale parametrization of Laplace distribution.

        Parameters
        ----------
        mu : float
            Location parameter (μ)
        theta : float
            Scale parameter (θ)
        """

        mu: float = 0.0
        theta: float = 1.0

        @constraint(description="theta > 0")
        def check_theta_positive(self) -> bool:
            return self.theta > 0

    @parametrization(family=Laplace, name="locationStd")
    class _LocationStd(Parametrization):
        """
        Location/standard deviation parametrization, ``θ = std/√2``.
        """

        mu: float = 0.0
        std: float = math.sqrt(2.0)

        @constraint(description="std > 0")
        def check_std_positive(self) -> bool:
            return self.std > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            return _LocationScale(mu=self.mu, theta=self.std / math.sqrt(2.0))

    @parametrization(family=Laplace, name="locationVar")
    class _LocationVar(Parametrization):
        """
        Location/variance parametrization, ``θ = sqrt(var/2)``.
        """

        mu: float = 0.0
        var: float = 2.0

        @constraint(description="var > 0")
        def check_var_positive(self) -> bool:
            return self.var > 0

        def transform_to_base_parametrization(self) -> Parametrization:
            return _LocationScale(mu=self.mu, theta=np.sqrt(self.var / 2))

    ParametricFamilyRegister.register(Laplace)
    ParametricFamilyRegister.register_alias(FamilyName.BIEXPONENTIAL, FamilyName.LAPLACE)
