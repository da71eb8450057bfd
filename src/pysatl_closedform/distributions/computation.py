"""
Computation Primitives
======================

Building blocks used to evaluate distribution characteristics:

- :class:`AnalyticalComputation` — a closed-form callable supplied by a
  family for one characteristic.
- :class:`FittedComputationMethod` — a conversion (e.g. ``cdf -> logcdf``)
  already bound to a distribution and ready to be called.
- :class:`ComputationMethod` — a factory that *fits* a conversion for a given
  distribution and returns :class:`FittedComputationMethod`.

Notes
-----
- Closed-form callables are vectorized over NumPy arrays; numerically fitted
  conversions (see :mod:`~pysatl_closedform.distributions.fitters`) are scalar.
- ``**options`` are free-form: numeric tolerances, the ``excess`` flag of
  kurtosis, the ``rng`` of a sampler, etc.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mypy_extensions import KwArg

from pysatl_closedform.types import GenericCharacteristicName

if TYPE_CHECKING:
    from pysatl_closedform.distributions.distribution import Distribution


@dataclass(frozen=True, slots=True)
class AnalyticalComputation[In, Out]:
    """Analytical computation provided directly by the distribution.

    Parameters
    ----------
    target : str
        Characteristic name (e.g., ``"logpdf"``).
    func : Callable[[In, KwArg(Any)], Out]
        Closed-form callable with the parameters already bound.
    """

    target: GenericCharacteristicName
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the analytical function."""
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class FittedComputationMethod[In, Out]:
    """Fitted conversion method (ready-to-use).

    Parameters
    ----------
    target : str
        Destination characteristic name.
    sources : Sequence[str]
        Source characteristic names (unary conversions use length 1).
    func : Callable[[In, KwArg(Any)], Out]
        Callable implementing the fitted conversion.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the fitted conversion."""
        return self.func(data, **options)


@dataclass(frozen=True, slots=True)
class ComputationMethod[In, Out]:
    """Conversion method factory (to be fitted).

    Parameters
    ----------
    target : str
        Destination characteristic name.
    sources : Sequence[str]
        Source characteristic names (unary for graph edges).
    fitter : Callable[[Distribution, KwArg(Any)], FittedComputationMethod]
        Fitter that prepares a callable conversion for the given distribution.
    """

    target: GenericCharacteristicName
    sources: Sequence[GenericCharacteristicName]
    fitter: Callable[["Distribution", KwArg(Any)], FittedComputationMethod[In, Out]]

    def fit(self, distribution: "Distribution", **options: Any) -> FittedComputationMethod[In, Out]:
        """Fit and return a :class:`FittedComputationMethod`."""
        return self.fitter(distribution, **options)
