"""
Characteristics API
===================

Callable descriptors for a distribution's characteristics, resolved by the
distribution's computation strategy:

>>> from pysatl_closedform.distributions.characteristics import cdf, mean
>>> cdf(dist, 1.5)  # doctest: +SKIP
>>> mean(dist)      # doctest: +SKIP

Notes
-----
- The characteristic name controls *what* to compute (e.g. ``"cdf"``).
- ``**options`` are passed to the evaluation (e.g. ``excess=False`` for
  kurtosis).
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from pysatl_closedform.distributions.strategies import Method
from pysatl_closedform.types import CharacteristicName, GenericCharacteristicName

if TYPE_CHECKING:
    from pysatl_closedform.distributions.distribution import Distribution


@dataclass(slots=True, frozen=True)
class GenericCharacteristic[In, Out]:
    """
    Callable characteristic descriptor.

    Parameters
    ----------
    name : str
        Characteristic identifier (e.g., ``"pdf"``, ``"cdf"`` or ``"ppf"``).

    Notes
    -----
    This object does not implement the characteristic itself. It resolves and
    calls either an analytical function or a fitted method via the
    active :class:`~pysatl_closedform.distributions.strategies.ComputationStrategy`.
    """

    name: GenericCharacteristicName

    def __call__(
        self, distribution: "Distribution", data: In | None = None, **options: Any
    ) -> Out:
        """
        Evaluate the characteristic on the given data.

        Parameters
        ----------
        distribution : Distribution
            Distribution instance providing computation and sampling strategies.
        data : Any, optional
            Input value (point, probability, transform argument). Moments
            ignore it.
        **options
            Evaluation options.

        Returns
        -------
        Any
            Characteristic value at ``data``.
        """
        method = cast(
            Method[In, Out],
            distribution.computation_strategy.query_method(self.name, distribution),
        )
        return method(cast(In, data), **options)


pdf = GenericCharacteristic[Any, Any](CharacteristicName.PDF)
logpdf = GenericCharacteristic[Any, Any](CharacteristicName.LOGPDF)
pmf = GenericCharacteristic[Any, Any](CharacteristicName.PMF)
logpmf = GenericCharacteristic[Any, Any](CharacteristicName.LOGPMF)
cdf = GenericCharacteristic[Any, Any](CharacteristicName.CDF)
sf = GenericCharacteristic[Any, Any](CharacteristicName.SF)
logcdf = GenericCharacteristic[Any, Any](CharacteristicName.LOGCDF)
logsf = GenericCharacteristic[Any, Any](CharacteristicName.LOGSF)
ppf = GenericCharacteristic[Any, Any](CharacteristicName.PPF)
isf = GenericCharacteristic[Any, Any](CharacteristicName.ISF)
invlogcdf = GenericCharacteristic[Any, Any](CharacteristicName.INVLOGCDF)
invlogsf = GenericCharacteristic[Any, Any](CharacteristicName.INVLOGSF)
mean = GenericCharacteristic[Any, Any](CharacteristicName.MEAN)
var = GenericCharacteristic[Any, Any](CharacteristicName.VAR)
std = GenericCharacteristic[Any, Any](CharacteristicName.STD)
mode = GenericCharacteristic[Any, Any](CharacteristicName.MODE)
modes = GenericCharacteristic[Any, Any](CharacteristicName.MODES)
median = GenericCharacteristic[Any, Any](CharacteristicName.MEDIAN)
skewness = GenericCharacteristic[Any, Any](CharacteristicName.SKEW)
kurtosis = GenericCharacteristic[Any, Any](CharacteristicName.KURT)
entropy = GenericCharacteristic[Any, Any](CharacteristicName.ENTROPY)
mgf = GenericCharacteristic[Any, Any](CharacteristicName.MGF)
cf = GenericCharacteristic[Any, Any](CharacteristicName.CF)
gradlogpdf = GenericCharacteristic[Any, Any](CharacteristicName.GRADLOGPDF)
probs = GenericCharacteristic[Any, Any](CharacteristicName.PROBS)

__all__ = [
    "GenericCharacteristic",
    "pdf",
    "logpdf",
    "pmf",
    "logpmf",
    "cdf",
    "sf",
    "logcdf",
    "logsf",
    "ppf",
    "isf",
    "invlogcdf",
    "invlogsf",
    "mean",
    "var",
    "std",
    "mode",
    "modes",
    "median",
    "skewness",
    "kurtosis",
    "entropy",
    "mgf",
    "cf",
    "gradlogpdf",
    "probs",
]
