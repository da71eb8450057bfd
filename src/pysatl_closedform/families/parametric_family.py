"""
Parametric family definitions and management infrastructure.

This module contains the main class for defining parametric families of
distributions, including support for multiple parameterizations, parameter
aliases, distribution characteristics, sampling strategies, computation
methods and maximum-likelihood fitting.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov, Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from functools import partial
from typing import TYPE_CHECKING, dataclass_transform

from pysatl_closedform.distributions.computation import AnalyticalComputation
from pysatl_closedform.distributions.strategies import (
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
)
from pysatl_closedform.families.distribution import ParametricFamilyDistribution
from pysatl_closedform.types import DistributionType

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Any

    import numpy.typing as npt

    from pysatl_closedform.distributions.strategies import ComputationStrategy, SamplingStrategy
    from pysatl_closedform.distributions.support import Support
    from pysatl_closedform.families.estimation import (
        MaximumLikelihoodEstimator,
        SufficientStats,
    )
    from pysatl_closedform.families.parametrizations import (
        Parametrization,
    )
    from pysatl_closedform.types import (
        GenericCharacteristicName,
        ParametrizationName,
    )

    type ParametrizedFunction = Callable[..., Any]
    type SupportArg = Callable[[Parametrization], Support | None] | None
    type SupportResolver = Callable[[Parametrization], Support | None]


class ParametricFamily:
    """
    A family of distributions with multiple parametrizations.

    Represents a parametric family of distributions (e.g., Laplace, inverse
    gamma) that can be parameterized in different ways. Manages
    parametrizations, distribution characteristics, and provides factory
    methods for creating and fitting distribution instances.

    Parameters
    ----------
    name : str
        Name of the distribution family.
    distr_type : DistributionType or Callable[[Parametrization], DistributionType]
        Distribution type or function that infers type from base parametrization.
    distr_parametrizations : list[ParametrizationName]
        List of parametrization names (first is base parametrization).
    distr_characteristics : dict[str, dict[str, Callable] or Callable]
        Mapping from characteristic names to computation functions.
        Single functions are treated as defined for the base parametrization.
    sampling_strategy : SamplingStrategy, optional
        Strategy for sampling from distributions.
    computation_strategy : ComputationStrategy, optional
        Strategy for computing distribution characteristics.
    support_by_parametrization : Callable or None, optional
        Function that returns support for given parameters.
    parameter_aliases : Mapping[str, str], optional
        Alternative spellings of parameter names, e.g. ``{"scale": "theta"}``.
    estimator : MaximumLikelihoodEstimator, optional
        Estimator used by :meth:`fit_mle` and :meth:`suffstats`.
    """

    def __init__(
        self,
        name: str,
        distr_type: DistributionType | Callable[[Parametrization], DistributionType],
        distr_parametrizations: list[ParametrizationName],
        distr_characteristics: dict[
            GenericCharacteristicName,
            dict[ParametrizationName, ParametrizedFunction] | ParametrizedFunction,
        ],
        sampling_strategy: SamplingStrategy | None = None,
        computation_strategy: ComputationStrategy[Any, Any] | None = None,
        support_by_parametrization: SupportArg = None,
        parameter_aliases: Mapping[str, str] | None = None,
        estimator: MaximumLikelihoodEstimator | None = None,
    ):
        self._name = name
        self._distr_type: Callable[[Parametrization], DistributionType] = (
            (lambda params: distr_type) if isinstance(distr_type, DistributionType) else distr_type
        )

        self.computation_strategy = (
            DefaultComputationStrategy() if computation_strategy is None else computation_strategy
        )

        if support_by_parametrization is None:
            self._support_resolver: SupportResolver
            self._support_resolver = lambda _params: None
        else:
            self._support_resolver = support_by_parametrization

        # Ordered names; the first one is the base parametrization name
        self.parametrization_names: list[ParametrizationName] = distr_parametrizations
        self.base_parametrization_name: ParametrizationName = self.parametrization_names[0]

        # Runtime registry of parametrization classes
        self._parametrizations: dict[ParametrizationName, type[Parametrization]] = {}

        self.parameter_aliases: dict[str, str] = dict(parameter_aliases or {})
        self.estimator = estimator

        self.sampling_strategy = (
            DefaultSamplingUnivariateStrategy() if sampling_strategy is None else sampling_strategy
        )

        def _process_char_val(
            value: dict[ParametrizationName, ParametrizedFunction] | ParametrizedFunction,
        ) -> dict[ParametrizationName, ParametrizedFunction]:
            return value if isinstance(value, dict) else {self.parametrization_names[0]: value}

        self.distr_characteristics: dict[
            GenericCharacteristicName, dict[ParametrizationName, ParametrizedFunction]
        ] = {key: _process_char_val(val) for key, val in distr_characteristics.items()}

        # Precompute analytical plan
        self._analytical_plan: dict[
            ParametrizationName, dict[GenericCharacteristicName, ParametrizationName]
        ] = {}
        base_name = self.base_parametrization_name
        for pname in self.parametrization_names:
            plan_for_p: dict[GenericCharacteristicName, ParametrizationName] = {}
            for characteristic, forms in self.distr_characteristics.items():
                if pname in forms:
                    plan_for_p[characteristic] = pname
                elif base_name in forms:
                    plan_for_p[characteristic] = base_name
            self._analytical_plan[pname] = plan_for_p

    @property
    def name(self) -> str:
        """Get the family name."""
        return self._name

    @property
    def parametrizations(self) -> dict[ParametrizationName, type[Parametrization]]:
        """Get mapping from parametrization names to classes."""
        return self._parametrizations

    @property
    def base(self) -> type[Parametrization]:
        """
        Get the base parametrization class.

        Raises
        ------
        ValueError
            If base parametrization is not registered.
        """
        try:
            return self._parametrizations[self.base_parametrization_name]
        except KeyError as exc:
            raise ValueError(
                f"Base parametrization '{self.base_parametrization_name}' is not registered."
            ) from exc

    @property
    def support_resolver(self) -> SupportResolver:
        """Get the support resolver function."""
        return self._support_resolver

    def register_parametrization(
        self,
        name: ParametrizationName,
        parametrization_class: type[Parametrization],
    ) -> None:
        """
        Register a parametrization class.

        Raises
        ------
        ValueError
            If name is already registered.
        """
        if name in self._parametrizations:
            raise ValueError(f"Parametrization '{name}' is already registered.")
        self._parametrizations[name] = parametrization_class

    def get_parametrization(self, name: ParametrizationName) -> type[Parametrization]:
        """
        Fetch a parametrization class by name.

        Raises
        ------
        KeyError
            If name is not registered.
        """
        return self._parametrizations[name]

    def to_base(self, parameters: Parametrization) -> Parametrization:
        """
        Convert parameters to the base parametrization.

        Parameters
        ----------
        parameters : Parametrization
            Parameters in any parametrization.

        Returns
        -------
        Parametrization
            Equivalent parameters in base parametrization.
        """
        if parameters.name == self.base_parametrization_name:
            return parameters
        return parameters.transform_to_base_parametrization()

    def _build_analytical_computations(
        self, parameters: Parametrization
    ) -> dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        """
        Build analytical computations for given parameters.

        Uses precomputed provider plan for efficient computation.
        """
        plan = self._analytical_plan.get(parameters.name, {})
        result: dict[GenericCharacteristicName, AnalyticalComputation[Any, Any]] = {}
        base_params: Parametrization | None = None

        for characteristic, provider_name in plan.items():
            if provider_name == parameters.name:
                params_obj = parameters
            else:
                if base_params is None:
                    base_params = self.to_base(parameters)
                params_obj = base_params

            func_factory = self.distr_characteristics[characteristic][provider_name]
            result[characteristic] = AnalyticalComputation(
                target=characteristic,
                func=partial(func_factory, params_obj),
            )

        return result

    def _resolve_names(self, args: tuple[Any, ...], values: dict[str, Any]) -> dict[str, Any]:
        """
        Map positional values and aliased names to canonical parameter names.

        Raises
        ------
        TypeError
            If too many positional values are given or a parameter is given twice.
        """
        base_fields = self.base.field_names()
        if len(args) > len(base_fields):
            raise TypeError(
                f"{self.name} takes at most {len(base_fields)} positional parameters "
                f"({len(args)} given)."
            )

        resolved: dict[str, Any] = dict(zip(base_fields, args, strict=False))
        for key, value in values.items():
            canonical = self.parameter_aliases.get(key, key)
            if canonical in resolved:
                raise TypeError(f"Parameter '{canonical}' of {self.name} is given more than once.")
            resolved[canonical] = value
        return resolved

    def _select_parametrization(self, names: set[str]) -> type[Parametrization]:
        """
        Pick the first parametrization (base first) declaring every name.

        Raises
        ------
        TypeError
            If no parametrization accepts the given names.
        """
        for pname in self.parametrization_names:
            cls = self._parametrizations.get(pname)
            if cls is not None and names <= set(cls.field_names()):
                return cls
        raise TypeError(f"Unknown parameters {sorted(names)} for family {self.name}.")

    def from_parametrization(self, parameters: Parametrization) -> ParametricFamilyDistribution:
        """
        Create a distribution instance from a parametrization object.

        Parameter values are promoted to a common floating dtype and
        constraints are validated before the instance is built.

        Raises
        ------
        ValueError
            If parameters don't satisfy constraints.
        """
        parameters = parameters.promoted()
        parameters.validate()
        base_parameters = self.to_base(parameters)
        distribution_type = self._distr_type(base_parameters)
        return ParametricFamilyDistribution(
            self.name, distribution_type, parameters, self.support_resolver(base_parameters)
        )

    def distribution(
        self,
        *args: Any,
        parametrization_name: str | None = None,
        **parameters_values: Any,
    ) -> ParametricFamilyDistribution:
        """
        Create a distribution instance with given parameters.

        Parameters
        ----------
        *args
            Values of the base parametrization's fields, in declaration order.
        parametrization_name : str, optional
            Name of parametrization to use. When omitted, the first
            parametrization (base first) declaring every given name is used.
        **parameters_values
            Parameter values, by canonical name or by alias. Omitted
            parameters take their declared defaults.

        Returns
        -------
        ParametricFamilyDistribution
            Distribution instance with specified parameters.

        Raises
        ------
        KeyError
            If parametrization name is not registered.
        TypeError
            If parameter names are unknown or given more than once.
        ValueError
            If parameters don't satisfy constraints.
        """
        values = self._resolve_names(args, parameters_values)
        if parametrization_name is None:
            parametrization_class = self._select_parametrization(set(values))
        else:
            if args and parametrization_name != self.base_parametrization_name:
                raise TypeError(
                    "Positional parameters are only accepted for the base parametrization."
                )
            parametrization_class = self._parametrizations[parametrization_name]

        return self.from_parametrization(parametrization_class(**values))

    def suffstats(
        self, x: npt.ArrayLike, weights: npt.ArrayLike | None = None
    ) -> SufficientStats:
        """
        Aggregate a sample into the family's sufficient statistics.

        Raises
        ------
        NotImplementedError
            If the family defines no sufficient statistics.
        """
        if self.estimator is None:
            raise NotImplementedError(f"Family {self.name} does not support fitting.")
        return self.estimator.aggregate(x, weights)

    def fit_mle(
        self,
        data: npt.ArrayLike | SufficientStats,
        weights: npt.ArrayLike | None = None,
    ) -> ParametricFamilyDistribution:
        """
        Fit a distribution by maximum likelihood.

        Parameters
        ----------
        data : array_like or SufficientStats
            Observations, or statistics returned by :meth:`suffstats`.
        weights : array_like, optional
            Observation weights of the same length as ``data``.

        Returns
        -------
        ParametricFamilyDistribution
            Fitted distribution in the base parametrization.

        Raises
        ------
        NotImplementedError
            If the family has no estimator.
        """
        if self.estimator is None:
            raise NotImplementedError(f"Family {self.name} does not support fitting.")
        return self.from_parametrization(self.estimator.fit(data, weights))

    @dataclass_transform()
    def parametrization(
        self, *, name: str
    ) -> Callable[[type[Parametrization]], type[Parametrization]]:
        """
        Create a class decorator that registers a parametrization.

        If you want to use this syntax and so that Mypy doesn't swear,
        you should mark your class as a dataclass.
        At the moment, Mypy cannot identify dataclass_transform if the decorator is a class method.

        Parameters
        ----------
        name : str
            Name of the parametrization.

        Returns
        -------
        Callable[[type[Parametrization]], type[Parametrization]]
            Class decorator for registering parametrizations.
        """
        from pysatl_closedform.families.parametrizations import parametrization as _param_deco

        return _param_deco(family=self, name=name)

    __call__ = distribution
