"""
Bernoulli distribution family implementation.

Contains the Bernoulli family parameterized by the success probability, its
sufficient statistics and maximum-likelihood fitting.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

import numpy as np

from pysatl_closedform.distributions.strategies import DirectSamplingUnivariateStrategy
from pysatl_closedform.distributions.support import ExplicitTableDiscreteSupport
from pysatl_closedform.families.estimation import MaximumLikelihoodEstimator, SufficientStats
from pysatl_closedform.families.parametric_family import ParametricFamily
from pysatl_closedform.families.parametrizations import (
    Parametrization,
    constraint,
    parametrization,
)
from pysatl_closedform.families.registry import ParametricFamilyRegister
from pysatl_closedform.numerics import as_float_array, unbox
from pysatl_closedform.types import (
    CharacteristicName,
    ComplexArray,
    FamilyName,
    NumericArray,
    UnivariateDiscrete,
)

if TYPE_CHECKING:
    from typing import Any

    import numpy.typing as npt


@dataclass(frozen=True, slots=True)
class BernoulliStats(SufficientStats):
    """
    Sufficient statistics of a Bernoulli sample.

    Parameters
    ----------
    count0 : float
        Total weight of zero observations.
    count1 : float
        Total weight of one observations.
    """

    count0: float
    count1: float


def bernoulli_suffstats(
    x: npt.NDArray[np.float64], weights: npt.NDArray[np.float64] | None = None
) -> BernoulliStats:
    """
    Accumulate (weighted) counts of zeros and ones.

    Raises
    ------
    ValueError
        If an observation is neither 0 nor 1.
    """
    is0, is1 = x == 0, x == 1
    outside = ~(is0 | is1)
    if np.any(outside):
        raise ValueError(f"Observation {x[outside][0]!r} is outside the support {{0, 1}}.")

    if weights is None:
        return BernoulliStats(count0=float(is0.sum()), count1=float(is1.sum()))
    return BernoulliStats(count0=float(weights[is0].sum()), count1=float(weights[is1].sum()))


def configure_bernoulli_family() -> None:
    """
    Configure and register the Bernoulli distribution family.
    """

    if ParametricFamilyRegister.contains(FamilyName.BERNOULLI):
        return

    BERNOULLI_DOC = """
    Bernoulli distribution.

    Two-point distribution on {0, 1} with success probability p:
        P(X = 1) = p1 = p,  P(X = 0) = p0 = 1 - p
    """

    def pmf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        """
        Probability mass function.

        Parameters
        ----------
        parameters : Parametrization
            Distribution parameters object with fields:
            - p: float (success probability)
        x : NumericArray
            Points at which to evaluate the mass

        Returns
        -------
        NumericArray
            ``p0`` at 0, ``p1`` at 1 and 0 elsewhere
        """
        parameters = cast(_Probability, parameters)
        x = as_float_array(x)
        return unbox(np.where(x == 0, parameters.p0, np.where(x == 1, parameters.p1, 0.0)))

    def probs(parameters: Parametrization, _: Any) -> NumericArray:
        """Vector of masses ``[p0, p1]``."""
        parameters = cast(_Probability, parameters)
        return np.array([parameters.p0, parameters.p1])

    def cdf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        parameters = cast(_Probability, parameters)
        x = as_float_array(x)
        value = np.where(x < 0, 0.0, np.where(x < 1, parameters.p0, 1.0))
        return unbox(np.where(np.isnan(x), np.nan, value))

    def sf(parameters: Parametrization, x: NumericArray) -> NumericArray:
        parameters = cast(_Probability, parameters)
        x = as_float_array(x)
        value = np.where(x < 0, 1.0, np.where(x < 1, parameters.p1, 0.0))
        return unbox(np.where(np.isnan(x), np.nan, value))

    def ppf(parameters: Parametrization, p: NumericArray) -> NumericArray:
        """
        Quantile function.

        Returns
        -------
        NumericArray
            0 for ``p <= p0``, 1 above and NaN outside [0, 1] or for NaN input
        """
        parameters = cast(_Probability, parameters)
        p = as_float_array(p)
        value = np.where(p <= parameters.p0, 0.0, 1.0)
        return unbox(np.where((p < 0) | (p > 1) | np.isnan(p), np.nan, value))

    def mean_func(parameters: Parametrization, _: Any) -> float:
        return cast(_Probability, parameters).p1

    def var_func(parameters: Parametrization, _: Any) -> float:
        parameters = cast(_Probability, parameters)
        return parameters.p0 * parameters.p1

    def skew_func(parameters: Parametrization, _: Any) -> float:
        """``(p0 - p1)/sqrt(p0 p1)``; infinite or NaN for a degenerate distribution."""
        parameters = cast(_Probability, parameters)
        p0, p1 = parameters.p0, parameters.p1
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.float64(p0 - p1) / np.sqrt(np.float64(p0 * p1))

    def kurt_func(parameters: Parametrization, _: Any, excess: bool = True) -> float:
        """Excess (default) or raw kurtosis, ``1/(p0 p1) - 6 (+3)``."""
        parameters = cast(_Probability, parameters)
        with np.errstate(divide="ignore"):
            value = 1.0 / np.float64(parameters.p0 * parameters.p1) - 6.0
        return value if excess else value + 3.0

    def mode_func(parameters: Parametrization, _: Any) -> int:
        """1 when ``p1 > 1/2``, otherwise 0 (ties go to 0)."""
        return 1 if cast(_Probability, parameters).p1 > 0.5 else 0

    def modes_func(parameters: Parametrization, _: Any) -> list[int]:
        """All modes: both atoms on an exact tie."""
        p1 = cast(_Probability, parameters).p1
        if p1 < 0.5:
            return [0]
        if p1 > 0.5:
            return [1]
        return [0, 1]

    def median_func(parameters: Parametrization, _: Any) -> float:
        return 1.0 if cast(_Probability, parameters).p1 > 0.5 else 0.0

    def entropy_func(parameters: Parametrization, _: Any) -> float:
        """Binary entropy; exactly 0 for a degenerate distribution."""
        parameters = cast(_Probability, parameters)
        p0, p1 = parameters.p0, parameters.p1
        if p0 == 0 or p1 == 0:
            return 0.0 * p1
        return -(p0 * np.log(p0) + p1 * np.log(p1))

    def mgf(parameters: Parametrization, t: NumericArray) -> NumericArray:
        parameters = cast(_Probability, parameters)
        t = as_float_array(t)
        return unbox(parameters.p0 + parameters.p1 * np.exp(t))

    def char_func(parameters: Parametrization, t: NumericArray) -> ComplexArray:
        parameters = cast(_Probability, parameters)
        t = as_float_array(t)
        return cast(ComplexArray, unbox(parameters.p0 + parameters.p1 * np.exp(1j * t)))

    def rvs(
        parameters: Parametrization, n: int, rng: np.random.Generator, **_: Any
    ) -> NumericArray:
        """0 when a uniform draw exceeds ``p1``, 1 otherwise."""
        p1 = cast(_Probability, parameters).p1
        return np.where(rng.random(n) > p1, 0, 1)

    def fit_stats(stats: SufficientStats) -> Parametrization:
        """``p = count1 / (count0 + count1)``."""
        stats = cast(BernoulliStats, stats)
        total = stats.count0 + stats.count1
        if total <= 0:
            raise ValueError("Sufficient statistics hold no observations.")
        return _Probability(p=stats.count1 / total)

    def _support(_: Parametrization) -> ExplicitTableDiscreteSupport:
        """Support of Bernoulli distribution"""
        return ExplicitTableDiscreteSupport([0, 1], assume_sorted=True)

    Bernoulli = ParametricFamily(
        name=FamilyName.BERNOULLI,
        distr_type=UnivariateDiscrete,
        distr_parametrizations=["probability"],
        distr_characteristics={
            CharacteristicName.PMF: pmf,
            CharacteristicName.PROBS: probs,
            CharacteristicName.CDF: cdf,
            CharacteristicName.SF: sf,
            CharacteristicName.PPF: ppf,
            CharacteristicName.MEAN: mean_func,
            CharacteristicName.VAR: var_func,
            CharacteristicName.SKEW: skew_func,
            CharacteristicName.KURT: kurt_func,
            CharacteristicName.MODE: mode_func,
            CharacteristicName.MODES: modes_func,
            CharacteristicName.MEDIAN: median_func,
            CharacteristicName.ENTROPY: entropy_func,
            CharacteristicName.MGF: mgf,
            CharacteristicName.CF: char_func,
            CharacteristicName.RVS: rvs,
        },
        sampling_strategy=DirectSamplingUnivariateStrategy(),
        support_by_parametrization=_support,
        parameter_aliases={"prob": "p"},
        estimator=MaximumLikelihoodEstimator(
            suffstats=bernoulli_suffstats,
            fit_stats=fit_stats,
            stats_type=BernoulliStats,
        ),
    )
    Bernoulli.__doc__ = BERNOULLI_DOC

    @parametrization(family=Bernoulli, name="probability")
    class _Probability(Parametrization):
        """
        Success-probability parametrization of Bernoulli distribution.

        Parameters
        ----------
        p : float
            Success probability, stored together with the derived
            ``p0 = 1 - p`` and ``p1 = p``
        """

        p: float = 0.5
        p0: float = field(init=False, repr=False)
        p1: float = field(init=False, repr=False)

        def __post_init__(self) -> None:
            object.__setattr__(self, "p0", 1 - self.p)
            object.__setattr__(self, "p1", self.p)

        @constraint(description="0 <= p <= 1")
        def check_p_in_unit_interval(self) -> bool:
            return 0 <= self.p <= 1

    ParametricFamilyRegister.register(Bernoulli)
