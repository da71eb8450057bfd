"""
Supports
========

Domains on which a distribution's density or mass is non-zero:

- :class:`ContinuousSupport` — an interval of the real line with configurable
  closure (see :class:`~pysatl_closedform.types.Interval1D`).
- :class:`ExplicitTableDiscreteSupport` — a finite, ordered set of atoms.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, cast, overload, runtime_checkable

import numpy as np

from pysatl_closedform.types import BoolArray, Interval1D, Number, NumericArray

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@runtime_checkable
class Support(Protocol):
    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...


class ContinuousSupport(Interval1D, Support): ...


@runtime_checkable
class DiscreteSupport(Support, Protocol):
    def iter_points(self) -> Iterator[Number]: ...

    def iter_leq(self, x: Number) -> Iterator[Number]: ...

    def prev(self, x: Number) -> Number | None: ...


class ExplicitTableDiscreteSupport(DiscreteSupport):
    """
    Finite discrete support stored as a sorted array of unique atoms.

    Parameters
    ----------
    points : Iterable[Number]
        Support atoms; duplicates are dropped.
    assume_sorted : bool, default False
        Skip sorting when the caller guarantees non-decreasing order.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Number], assume_sorted: bool = False) -> None:
        arr = np.array(points)

        if arr.size == 0:
            raise ValueError("Points must be non-empty")

        if not assume_sorted:
            self._points = np.unique(arr)
        else:
            self._points = arr[np.r_[True, arr[1:] != arr[:-1]]]

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        arr = np.asarray(x)
        idx = np.minimum(np.searchsorted(self._points, arr, side="left"), self._points.size - 1)
        result = self._points[idx] == arr

        if np.ndim(arr) == 0:
            return bool(result)
        return cast(BoolArray, result)

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(cast(Number, x)))

    def iter_points(self) -> Iterator[Number]:
        return iter(self._points)

    def iter_leq(self, x: Number) -> Iterator[Number]:
        return iter(self._points[: np.searchsorted(self._points, x, side="right")])

    def prev(self, x: Number) -> Number | None:
        idx = np.searchsorted(self._points, x, side="left")
        if idx == 0:
            return None
        return cast(Number, self._points[idx - 1])

    @property
    def points(self) -> NumericArray:
        return cast(NumericArray, self._points.copy())

    __iter__ = iter_points


__all__ = [
    "Support",
    "ContinuousSupport",
    "DiscreteSupport",
    "ExplicitTableDiscreteSupport",
]
