"""
Characteristic Graph Registry
=============================

A directed graph over characteristic names for a fixed
:class:`~pysatl_closedform.types.DistributionType`.

- Nodes: ``GenericCharacteristicName``.
- Edges: unary :class:`~pysatl_closedform.distributions.computation.ComputationMethod`
  (``1 source -> 1 target``), optionally with several labelled variants.

The default configuration links, for every univariate type, the exact
identities (``cdf -> sf``, ``ppf -> invlogcdf``, ...) and, for the continuous
case, the numerical ``pdf <-> cdf <-> ppf`` conversions.

Notes
-----
- Only **unary** edges are supported.
- Registering a second method under an existing label keeps the first one and
  emits a :class:`UserWarning`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import warnings
from collections import deque
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pysatl_closedform.distributions.computation import ComputationMethod
from pysatl_closedform.distributions.fitters import (
    fit_cdf_to_logcdf,
    fit_cdf_to_pdf_1C,
    fit_cdf_to_ppf_1C,
    fit_cdf_to_sf,
    fit_isf_to_invlogsf,
    fit_pdf_to_cdf_1C,
    fit_pdf_to_logpdf,
    fit_pmf_to_logpmf,
    fit_ppf_to_cdf_1C,
    fit_ppf_to_invlogcdf,
    fit_ppf_to_isf,
    fit_ppf_to_median,
    fit_sf_to_logsf,
    fit_var_to_std,
)
from pysatl_closedform.types import (
    CharacteristicName,
    UnivariateContinuous,
    UnivariateDiscrete,
)

if TYPE_CHECKING:
    from pysatl_closedform.distributions.fitters import Fitter
    from pysatl_closedform.types import DistributionType, GenericCharacteristicName

DEFAULT_COMPUTATION_KEY: str = "PySATL_default_computation"


class GraphInvariantError(RuntimeError):
    """Raised when the characteristic graph invariants are violated."""


@dataclass(slots=True)
class CharacteristicGraph:
    """
    Directed characteristic graph for a fixed :class:`DistributionType`.

    Attributes
    ----------
    distribution_type : DistributionType
        Distribution type the graph is built for.

    Notes
    -----
    Edges are stored as nested mappings:
    ``adjacency[src][dst] = dict[label, ComputationMethod]``.
    """

    distribution_type: DistributionType
    _adj: dict[
        GenericCharacteristicName,
        dict[GenericCharacteristicName, dict[str, ComputationMethod[Any, Any]]],
    ] = field(default_factory=dict, repr=False)

    def add_conversion(
        self,
        method: ComputationMethod[Any, Any],
        *,
        label: str = DEFAULT_COMPUTATION_KEY,
    ) -> None:
        """
        Add a labelled unary conversion (``source -> target``).

        Raises
        ------
        GraphInvariantError
            If the method does not have exactly one source.
        """
        if len(method.sources) != 1:
            raise GraphInvariantError(
                "Only unary methods are supported for edges (1 source -> 1 target)."
            )
        src, dst = method.sources[0], method.target
        self._adj.setdefault(dst, {})
        variants = self._adj.setdefault(src, {}).setdefault(dst, {})
        if label in variants:
            warnings.warn(
                f"Conversion {src} -> {dst} is already registered under label '{label}'. "
                "The new method will not be taken into account",
                UserWarning,
                stacklevel=2,
            )
            return
        variants[label] = method

    def nodes(self) -> frozenset[GenericCharacteristicName]:
        """Return the set of all graph nodes."""
        verts = set(self._adj)
        for nbrs in self._adj.values():
            verts.update(nbrs)
        return frozenset(verts)

    def _pick_method(
        self, methods: dict[str, ComputationMethod[Any, Any]]
    ) -> ComputationMethod[Any, Any]:
        """Pick a deterministic method for an edge (prefer default key)."""
        if DEFAULT_COMPUTATION_KEY in methods:
            return methods[DEFAULT_COMPUTATION_KEY]
        return methods[min(methods)]

    def find_path(
        self,
        src: GenericCharacteristicName,
        dst: GenericCharacteristicName,
    ) -> list[ComputationMethod[Any, Any]] | None:
        """
        Find the shortest conversion chain ``src -> ... -> dst`` (BFS).

        Returns
        -------
        list[ComputationMethod] or None
            The conversions along the path, ``[]`` when ``src == dst`` and
            ``None`` when ``dst`` is unreachable.
        """
        if src == dst:
            return []

        parent: dict[
            GenericCharacteristicName, tuple[GenericCharacteristicName, ComputationMethod[Any, Any]]
        ] = {}
        visited: set[GenericCharacteristicName] = {src}
        q: deque[GenericCharacteristicName] = deque([src])

        while q:
            v = q.popleft()
            for w, methods in self._adj.get(v, {}).items():
                if w in visited or not methods:
                    continue
                visited.add(w)
                parent[w] = (v, self._pick_method(methods))
                if w == dst:
                    path: list[ComputationMethod[Any, Any]] = []
                    cur = dst
                    while cur != src:
                        pv, m = parent[cur]
                        path.append(m)
                        cur = pv
                    path.reverse()
                    return path
                q.append(w)
        return None


class DistributionTypeRegister:
    """Singleton registry that maps :class:`DistributionType` to its graph."""

    _instance: ClassVar[Self | None] = None
    _graphs: dict[DistributionType, CharacteristicGraph]

    def __new__(cls) -> Self:
        if cls._instance is None:
            self = super().__new__(cls)
            self._graphs = {}
            cls._instance = self
        return cls._instance

    def get(self, distribution_type: DistributionType) -> CharacteristicGraph:
        """Get (or create) the graph for a distribution type."""
        graph = self._graphs.get(distribution_type)
        if graph is None:
            graph = CharacteristicGraph(distribution_type=distribution_type)
            self._graphs[distribution_type] = graph
        return graph

    __call__ = get

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (test helper)."""
        cls._instance = None


def _edge(source: str, target: str, fitter: Fitter) -> ComputationMethod[Any, Any]:
    return ComputationMethod[Any, Any](target=target, sources=[source], fitter=fitter)


def _configure(reg: DistributionTypeRegister) -> None:
    """Default configuration for the univariate continuous and discrete cases."""
    C = CharacteristicName

    common = [
        _edge(C.CDF, C.SF, fit_cdf_to_sf),
        _edge(C.CDF, C.LOGCDF, fit_cdf_to_logcdf),
        _edge(C.SF, C.LOGSF, fit_sf_to_logsf),
        _edge(C.PPF, C.ISF, fit_ppf_to_isf),
        _edge(C.PPF, C.INVLOGCDF, fit_ppf_to_invlogcdf),
        _edge(C.ISF, C.INVLOGSF, fit_isf_to_invlogsf),
        _edge(C.PPF, C.MEDIAN, fit_ppf_to_median),
        _edge(C.VAR, C.STD, fit_var_to_std),
    ]

    continuous = reg.get(UnivariateContinuous)
    for method in common:
        continuous.add_conversion(method)
    continuous.add_conversion(_edge(C.PDF, C.LOGPDF, fit_pdf_to_logpdf))
    continuous.add_conversion(_edge(C.PDF, C.CDF, fit_pdf_to_cdf_1C))
    continuous.add_conversion(_edge(C.CDF, C.PDF, fit_cdf_to_pdf_1C))
    continuous.add_conversion(_edge(C.CDF, C.PPF, fit_cdf_to_ppf_1C))
    continuous.add_conversion(_edge(C.PPF, C.CDF, fit_ppf_to_cdf_1C))

    discrete = reg.get(UnivariateDiscrete)
    for method in common:
        discrete.add_conversion(method)
    discrete.add_conversion(_edge(C.PMF, C.LOGPMF, fit_pmf_to_logpmf))


@lru_cache(maxsize=1)
def distribution_type_register() -> DistributionTypeRegister:
    """Return a cached :class:`DistributionTypeRegister` configured with defaults."""
    reg = DistributionTypeRegister()
    _configure(reg)
    return reg


def reset_distribution_type_register() -> None:
    """Reset the cached distribution type register (test helper)."""
    distribution_type_register.cache_clear()
    DistributionTypeRegister._reset()
