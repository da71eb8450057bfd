"""
Computation and Sampling Strategies
===================================

This module defines the pluggable strategy interfaces and default implementations:

- :class:`ComputationStrategy` — resolves characteristic methods.
- :class:`DefaultComputationStrategy` — returns analytical characteristics and
  walks the characteristic graph for the rest.
- :class:`SamplingStrategy` — draws samples from a distribution.
- :class:`DefaultSamplingUnivariateStrategy` — inverse transform sampling on ``ppf``.
- :class:`DirectSamplingUnivariateStrategy` — calls a family's own ``rvs``.

Notes
-----
- Strategies are stateless apart from the cycle guard used during resolution,
  which is kept per thread.
- Samplers accept ``rng`` (a :class:`numpy.random.Generator`, a seed or ``None``);
  the same seed reproduces the same sample.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import threading
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from pysatl_closedform.distributions.computation import (
    AnalyticalComputation,
    FittedComputationMethod,
)
from pysatl_closedform.types import CharacteristicName, GenericCharacteristicName

from .registry import distribution_type_register
from .sampling import ArraySample, Sample

if TYPE_CHECKING:
    from .distribution import Distribution

type Method[In, Out] = AnalyticalComputation[In, Out] | FittedComputationMethod[In, Out]
type RandomState = np.random.Generator | int | None


class ComputationStrategy[In, Out](Protocol):
    """Protocol for characteristic resolution strategies."""

    def query_method(
        self, state: GenericCharacteristicName, distr: "Distribution", **options: Any
    ) -> Method[In, Out]: ...


class DefaultComputationStrategy[In, Out]:
    """
    Default characteristic resolver.

    Resolution order
    ----------------
    1. If the distribution provides an analytical implementation, return it.
    2. Else:
       a) get the graph for the distribution type,
       b) among all analytical characteristics pick the source with the
          shortest conversion path to the target,
       c) fit the edges along the path (a fitter may recursively resolve
          its own source via the strategy).

    Raises
    ------
    RuntimeError
        If the distribution has no analytical base, no conversion path exists,
        or a cycle is detected during resolution.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    @property
    def _resolving(self) -> dict[int, set[GenericCharacteristicName]]:
        """Characteristics being resolved by the calling thread, per distribution."""
        resolving: dict[int, set[GenericCharacteristicName]] | None = getattr(
            self._local, "resolving", None
        )
        if resolving is None:
            resolving = self._local.resolving = {}
        return resolving

    def _push_guard(self, distr: "Distribution", state: GenericCharacteristicName) -> None:
        seen = self._resolving.setdefault(id(distr), set())
        if state in seen:
            raise RuntimeError(
                f"Cycle detected while resolving '{state}'. "
                "Provide at least one analytical base characteristic in the distribution."
            )
        seen.add(state)

    def _pop_guard(self, distr: "Distribution", state: GenericCharacteristicName) -> None:
        key = id(distr)
        seen = self._resolving.get(key)
        if seen is not None:
            seen.discard(state)
            if not seen:
                self._resolving.pop(key, None)

    def query_method(
        self, state: GenericCharacteristicName, distr: "Distribution", **options: Any
    ) -> Method[In, Out]:
        """
        Resolve an analytical or fitted method for ``state``.

        Parameters
        ----------
        state : str
            Target characteristic name to resolve.
        distr : Distribution
            The distribution providing the analytical base and type.
        **options
            Passed to the fitter(s) when conversions are required.

        Returns
        -------
        Method
            Analytical or fitted callable implementing ``state``.
        """
        analytical = distr.analytical_computations
        if state in analytical:
            return analytical[state]

        if not analytical:
            raise RuntimeError(
                "Distribution provides no analytical computations to ground conversions."
            )

        graph = distribution_type_register().get(distr.distribution_type)

        self._push_guard(distr, state)
        try:
            best = None
            for src in analytical:
                path = graph.find_path(src, state)
                if path and (best is None or len(path) < len(best)):
                    best = path
            if best is None:
                raise RuntimeError(
                    f"No conversion path from any analytical characteristic to '{state}'."
                )

            last_fitted: FittedComputationMethod[In, Out] | None = None
            for edge in best:
                last_fitted = edge.fit(distr, **options)
            if last_fitted is None:
                raise RuntimeError(f"Empty path when resolving '{state}'.")
            return last_fitted
        finally:
            self._pop_guard(distr, state)


class SamplingStrategy(Protocol):
    """Protocol for sampling strategies (return a :class:`Sample`)."""

    def sample(self, n: int, distr: "Distribution", **options: Any) -> Sample: ...


class DefaultSamplingUnivariateStrategy(SamplingStrategy):
    """
    Default univariate sampler using inverse transform sampling.

    The strategy resolves the distribution's ``ppf`` and applies it to i.i.d.
    uniforms ``U ~ U(0, 1)``.

    Returns
    -------
    ArraySample
        A 2D sample of shape ``(n, 1)``.
    """

    def sample(
        self, n: int, distr: "Distribution", rng: RandomState = None, **options: Any
    ) -> ArraySample:
        ppf = distr.query_method(CharacteristicName.PPF, **options)
        U = np.random.default_rng(rng).random(n)
        vals = np.array([ppf(Ui) for Ui in U], dtype=np.float64)
        return ArraySample.from_values(vals)


class DirectSamplingUnivariateStrategy(SamplingStrategy):
    """
    Univariate sampler delegating to the distribution's ``rvs`` characteristic.

    ``rvs(n, rng=generator)`` must return ``n`` i.i.d. draws as a flat array.
    """

    def sample(
        self, n: int, distr: "Distribution", rng: RandomState = None, **options: Any
    ) -> ArraySample:
        rvs = distr.query_method(CharacteristicName.RVS)
        generator = np.random.default_rng(rng)
        return ArraySample.from_values(rvs(n, rng=generator, **options))
