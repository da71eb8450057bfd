from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from pysatl_closedform.families import (
    MaximumLikelihoodEstimator,
    ParametricFamilyRegister,
    SufficientStats,
)
from pysatl_closedform.families.estimation import as_observations
from tests.unit.families.test_basic import TestBaseFamily


@dataclass(frozen=True)
class SumStats(SufficientStats):
    total: float
    weight: float


def sum_stats(x: Any, weights: Any) -> SumStats:
    if weights is None:
        return SumStats(total=float(x.sum()), weight=float(x.size))
    return SumStats(total=float((weights * x).sum()), weight=float(weights.sum()))


class TestAsObservations:
    def test_flattens_and_promotes(self) -> None:
        x, w = as_observations([[1, 2], [3, 4]])
        assert x.dtype == np.float64
        assert x.shape == (4,)
        assert w is None

    def test_weights_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="Inconsistent argument dimensions"):
            as_observations([1.0, 2.0, 3.0], [1.0, 2.0])


class TestMaximumLikelihoodEstimator(TestBaseFamily):
    def setup_method(self) -> None:
        self.family = self.make_default_family()

        def fit_stats(stats: SufficientStats) -> Any:
            assert isinstance(stats, SumStats)
            return self.family.base(value=stats.total / stats.weight)  # type: ignore[call-arg]

        self.fit_stats = fit_stats

    def test_estimator_requires_a_method(self) -> None:
        with pytest.raises(ValueError, match="fit_sample"):
            MaximumLikelihoodEstimator()
        with pytest.raises(ValueError, match="fit_sample"):
            MaximumLikelihoodEstimator(suffstats=sum_stats)

    def test_fit_through_sufficient_statistics(self) -> None:
        estimator = MaximumLikelihoodEstimator(
            suffstats=sum_stats, fit_stats=self.fit_stats, stats_type=SumStats
        )
        family = self.make_default_family(estimator=estimator)
        ParametricFamilyRegister.register(family)

        stats = family.suffstats([1.0, 2.0, 6.0])
        assert stats == SumStats(total=9.0, weight=3.0)

        assert family.fit_mle([1.0, 2.0, 6.0]).parameters["value"] == pytest.approx(3.0)
        assert family.fit_mle(stats).parameters["value"] == pytest.approx(3.0)
        weighted = family.fit_mle([1.0, 4.0], weights=[3.0, 1.0])
        assert weighted.parameters["value"] == pytest.approx(1.75)
        assert weighted.parametrization_name == "base"

    def test_weights_with_statistics_are_rejected(self) -> None:
        estimator = MaximumLikelihoodEstimator(
            suffstats=sum_stats, fit_stats=self.fit_stats, stats_type=SumStats
        )
        with pytest.raises(ValueError, match="Weights cannot be combined"):
            estimator.fit(SumStats(total=1.0, weight=1.0), weights=[1.0])

    def test_empty_sample(self) -> None:
        estimator = MaximumLikelihoodEstimator(fit_sample=lambda x, w: self.family.base())
        with pytest.raises(ValueError, match="empty sample"):
            estimator.fit([])

    def test_sample_only_estimator(self) -> None:
        calls: list[tuple[Any, Any]] = []

        def fit_sample(x: Any, weights: Any) -> Any:
            calls.append((x, weights))
            return self.family.base(value=float(x.max()))  # type: ignore[call-arg]

        estimator = MaximumLikelihoodEstimator(fit_sample=fit_sample)
        family = self.make_default_family(estimator=estimator)
        ParametricFamilyRegister.register(family)

        distr = family.fit_mle(np.array([0.5, 7, 2]))
        assert distr.parameters == {"value": 7.0}
        assert calls[0][1] is None
        assert calls[0][0].dtype == np.float64

        with pytest.raises(NotImplementedError):
            family.suffstats([1.0])

    def test_fitted_parameters_are_validated(self) -> None:
        estimator = MaximumLikelihoodEstimator(
            fit_sample=lambda x, w: self.family.base(value=float(x.min()))  # type: ignore[call-arg]
        )
        family = self.make_default_family(estimator=estimator)
        with pytest.raises(ValueError, match='Constraint "value > 0"'):
            family.fit_mle([-1.0, 1.0])
