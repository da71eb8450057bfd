"""
Sampling Interfaces
===================

Sample containers returned by sampling strategies.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    import numpy.typing as npt


class Sample(Protocol):
    """
    Protocol for sample containers.

    Attributes
    ----------
    array : numpy.ndarray
        Array representation of the samples.
    shape : tuple[int, ...]
        Shape of the sample array.
    """

    def __len__(self) -> int: ...
    @property
    def array(self) -> npt.NDArray[Any]: ...
    @property
    def shape(self) -> tuple[int, ...]: ...


class ArraySample:
    """
    Array-backed sample container of shape ``(n_samples, n_dimensions)``.

    Parameters
    ----------
    data : numpy.ndarray
        2D array of shape (n, d). Discrete families store integer draws.

    Raises
    ------
    ValueError
        If data is not 2D.
    """

    dimension: int
    data: npt.NDArray[Any]

    def __init__(self, data: npt.NDArray[Any]) -> None:
        if data.ndim != 2:
            raise ValueError("ArraySample expects 2D array of shape (n, d).")
        self.data = data
        self.dimension = int(data.shape[1])

    @classmethod
    def from_values(cls, values: npt.ArrayLike) -> ArraySample:
        """Wrap a flat vector of univariate draws as an ``(n, 1)`` sample."""
        arr = np.asarray(values)
        return cls(arr.reshape(arr.size, 1))

    def __len__(self) -> int:
        """Return the number of samples (n)."""
        return int(self.data.shape[0])

    def __iter__(self) -> Iterator[npt.NDArray[Any]]:
        """Iterate over samples (rows of the array)."""
        yield from self.data

    @property
    def array(self) -> npt.NDArray[Any]:
        """Return the backing array."""
        return self.data

    @property
    def values(self) -> npt.NDArray[Any]:
        """Flat view of a univariate sample."""
        return self.data[:, 0]

    @property
    def shape(self) -> tuple[int, ...]:
        """Return the shape of the sample array (n, d)."""
        n, d = self.data.shape
        return int(n), int(d)
