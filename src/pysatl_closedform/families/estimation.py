"""
Maximum-likelihood estimation for parametric families.

A family opts into fitting by passing a :class:`MaximumLikelihoodEstimator`
to :class:`~pysatl_closedform.families.parametric_family.ParametricFamily`.
The estimator works either directly on (optionally weighted) observations or
through a sufficient-statistics value that aggregates them.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

    import numpy.typing as npt

    from pysatl_closedform.families.parametrizations import Parametrization

    type Observations = npt.NDArray[np.float64]
    type Weights = npt.NDArray[np.float64] | None


@runtime_checkable
class SufficientStats(Protocol):
    """Marker protocol for aggregated sufficient statistics of a sample."""


def as_observations(
    x: npt.ArrayLike, weights: npt.ArrayLike | None = None
) -> tuple[Observations, Weights]:
    """
    Normalize observations and optional weights to flat float arrays.

    Raises
    ------
    ValueError
        If ``weights`` is given and its length differs from ``x``.
    """
    values = np.asarray(x, dtype=np.float64).ravel()
    if weights is None:
        return values, None
    w = np.asarray(weights, dtype=np.float64).ravel()
    if w.size != values.size:
        raise ValueError(
            f"Inconsistent argument dimensions: {values.size} observations, {w.size} weights."
        )
    return values, w


@dataclass(frozen=True, slots=True)
class MaximumLikelihoodEstimator:
    """
    Maximum-likelihood estimator of a family's base parameters.

    Parameters
    ----------
    fit_sample : Callable, optional
        ``(x, weights) -> Parametrization`` estimating from raw observations.
        Used when the family has no sufficient statistics.
    suffstats : Callable, optional
        ``(x, weights) -> SufficientStats`` aggregating observations.
    fit_stats : Callable, optional
        ``SufficientStats -> Parametrization``.
    stats_type : type, optional
        Concrete sufficient-statistics class accepted by :meth:`fit`.
    """

    fit_sample: Callable[[Observations, Weights], Parametrization] | None = None
    suffstats: Callable[[Observations, Weights], SufficientStats] | None = None
    fit_stats: Callable[[SufficientStats], Parametrization] | None = None
    stats_type: type | None = None

    def __post_init__(self) -> None:
        has_stats = self.suffstats is not None and self.fit_stats is not None
        if self.fit_sample is None and not has_stats:
            raise ValueError(
                "Estimator needs either fit_sample or both suffstats and fit_stats."
            )

    def aggregate(
        self, x: npt.ArrayLike, weights: npt.ArrayLike | None = None
    ) -> SufficientStats:
        """Aggregate a sample into sufficient statistics."""
        if self.suffstats is None:
            raise NotImplementedError("This family does not define sufficient statistics.")
        return self.suffstats(*as_observations(x, weights))

    def fit(
        self,
        data: npt.ArrayLike | SufficientStats,
        weights: npt.ArrayLike | None = None,
    ) -> Parametrization:
        """
        Estimate parameters from observations or from sufficient statistics.

        Parameters
        ----------
        data : array_like or SufficientStats
            Raw observations, or a pre-aggregated statistics value.
        weights : array_like, optional
            Observation weights; not allowed together with statistics.
        """
        if self.stats_type is not None and isinstance(data, self.stats_type):
            if weights is not None:
                raise ValueError("Weights cannot be combined with sufficient statistics.")
            if self.fit_stats is None:
                raise NotImplementedError(
                    "This family cannot be fitted from sufficient statistics."
                )
            return self.fit_stats(data)

        x, w = as_observations(data, weights)  # type: ignore[arg-type]
        if x.size == 0:
            raise ValueError("Cannot fit a distribution to an empty sample.")
        if self.suffstats is not None and self.fit_stats is not None:
            return self.fit_stats(self.suffstats(x, w))
        if self.fit_sample is None:
            raise NotImplementedError("This family cannot be fitted from raw observations.")
        return self.fit_sample(x, w)
