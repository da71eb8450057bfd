"""
Concrete distribution instances with specific parameter values.

This module provides the implementation for individual distribution instances
created from parametric families.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pysatl_closedform.distributions.distribution import Distribution
from pysatl_closedform.families.registry import ParametricFamilyRegister

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    import numpy as np

    from pysatl_closedform.distributions.computation import AnalyticalComputation
    from pysatl_closedform.distributions.sampling import Sample
    from pysatl_closedform.distributions.strategies import ComputationStrategy, SamplingStrategy
    from pysatl_closedform.distributions.support import Support
    from pysatl_closedform.families.parametric_family import ParametricFamily
    from pysatl_closedform.families.parametrizations import Parametrization
    from pysatl_closedform.types import (
        DistributionType,
        GenericCharacteristicName,
    )


@dataclass(slots=True)
class ParametricFamilyDistribution(Distribution):
    """
    A specific distribution instance from a parametric family.

    Represents a concrete distribution with specific parameter values,
    providing methods for computation and sampling.

    Parameters
    ----------
    family_name : str
        Name of the distribution family.
    _distribution_type : DistributionType
        Type of this distribution.
    parametrization : Parametrization
        Validated (frozen) parameter values of this distribution.
    _support : Support or None
        Support of this distribution.
    """

    family_name: str
    _distribution_type: DistributionType
    parametrization: Parametrization
    _support: Support | None
    _analytical_cache: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] | None = (
        field(default=None, init=False, repr=False, compare=False)
    )

    @property
    def distribution_type(self) -> DistributionType:
        """Get the distribution type."""
        return self._distribution_type

    @property
    def parameters(self) -> dict[str, Any]:
        """Parameter values by name, in the instance's parametrization."""
        return self.parametrization.parameters

    @property
    def parametrization_name(self) -> str:
        return self.parametrization.name

    @property
    def dtype(self) -> np.dtype[Any]:
        """Floating dtype shared by all parameter values."""
        return self.parametrization.dtype

    @property
    def family(self) -> ParametricFamily:
        """
        Get the parametric family this distribution belongs to.

        Returns
        -------
        ParametricFamily
            The parametric family of this distribution.
        """
        return ParametricFamilyRegister.get(self.family_name)

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """
        Get analytical computations for this distribution.

        Lazily computed and cached per instance; parameters are immutable so
        the cache never goes stale.
        """
        if self._analytical_cache is None:
            self._analytical_cache = self.family._build_analytical_computations(
                self.parametrization
            )
        return self._analytical_cache

    @property
    def sampling_strategy(self) -> SamplingStrategy:
        """Get the sampling strategy for this distribution."""
        return self.family.sampling_strategy

    @property
    def computation_strategy(self) -> ComputationStrategy[Any, Any]:
        """Get the computation strategy for this distribution."""
        return self.family.computation_strategy

    @property
    def support(self) -> Support | None:
        """Get the support of this distribution."""
        return self._support

    def sample(self, n: int, **options: Any) -> Sample:
        """
        Generate samples from this distribution.

        Parameters
        ----------
        n : int
            Number of samples to generate.
        **options : Any
            Additional options for sampling (``rng`` seed or generator).

        Returns
        -------
        Sample
            Generated samples.
        """
        return self.sampling_strategy.sample(n, distr=self, **options)
