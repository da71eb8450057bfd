from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf, nan

import numpy as np
import pytest

from pysatl_closedform.distributions.support import (
    ContinuousSupport,
    DiscreteSupport,
    ExplicitTableDiscreteSupport,
    Support,
)
from pysatl_closedform.types import ContinuousSupportShape1D

POSITIVE_HALF_LINE = ContinuousSupport(left=0.0, left_closed=False)
UNIT_STEP = ContinuousSupport(left=0.0, right=1.0, left_closed=True, right_closed=False)


class TestContinuousSupport:
    @pytest.mark.parametrize(
        "point, expected",
        [(0.0, False), (1e-300, True), (7.5, True), (-2.0, False), (inf, False), (nan, False)],
        ids=["open_zero", "tiny", "inside", "negative", "+inf", "nan"],
    )
    def test_open_half_line_scalar(self, point, expected):
        assert (point in POSITIVE_HALF_LINE) is expected
        assert POSITIVE_HALF_LINE.contains(point) is expected

    def test_half_open_interval_bounds(self):
        assert 0.0 in UNIT_STEP
        assert 1.0 not in UNIT_STEP
        assert UNIT_STEP.contains(np.array([-0.5, 0.0, 0.99, 1.0])).tolist() == [
            False,
            True,
            True,
            False,
        ]

    def test_real_line_excludes_limits(self):
        line = ContinuousSupport()
        assert line.left_closed is False
        assert line.right_closed is False
        result = line.contains(np.array([-inf, -1e308, 0.0, 1e308, inf]))
        assert result.tolist() == [False, True, True, True, False]

    def test_empty_array_input(self):
        result = POSITIVE_HALF_LINE.contains(np.array([]))
        assert isinstance(result, np.ndarray)
        assert result.size == 0

    @pytest.mark.parametrize(
        "support, expected_shape",
        [
            (ContinuousSupport(2, 1), ContinuousSupportShape1D.EMPTY),
            (ContinuousSupport(1, 1, right_closed=False), ContinuousSupportShape1D.EMPTY),
            (ContinuousSupport(3, 3), ContinuousSupportShape1D.SINGLE_POINT),
            (UNIT_STEP, ContinuousSupportShape1D.BOUNDED_INTERVAL),
            (POSITIVE_HALF_LINE, ContinuousSupportShape1D.RAY_RIGHT),
            (ContinuousSupport(right=0), ContinuousSupportShape1D.RAY_LEFT),
            (ContinuousSupport(), ContinuousSupportShape1D.REAL_LINE),
        ],
    )
    def test_shape(self, support, expected_shape):
        assert support.shape == expected_shape
        assert support.is_empty is (expected_shape == ContinuousSupportShape1D.EMPTY)

    def test_value_semantics(self):
        assert ContinuousSupport(left=0.0, left_closed=False) == POSITIVE_HALF_LINE
        assert ContinuousSupport(left=0.0) != POSITIVE_HALF_LINE
        assert isinstance(POSITIVE_HALF_LINE, Support)


class TestExplicitTableDiscreteSupport:
    binary = ExplicitTableDiscreteSupport([1, 0, 1, 0])

    def test_atoms_are_sorted_unique(self):
        np.testing.assert_array_equal(self.binary.points, np.array([0, 1]))
        assert list(self.binary) == [0, 1]
        assert isinstance(self.binary, DiscreteSupport)

    @pytest.mark.parametrize(
        "point, expected",
        [(0, True), (1, True), (1.0, True), (0.5, False), (2, False), (-1, False)],
    )
    def test_contains_scalar(self, point, expected):
        assert (point in self.binary) is expected
        assert self.binary.contains(point) is expected

    def test_contains_array(self):
        result = self.binary.contains([[0, 2], [1, 0.25]])
        assert result.tolist() == [[True, False], [True, False]]

    def test_empty_table_is_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            ExplicitTableDiscreteSupport([])

    def test_assume_sorted_drops_adjacent_duplicates(self):
        support = ExplicitTableDiscreteSupport([0, 0, 1, 1], assume_sorted=True)
        np.testing.assert_array_equal(support.points, np.array([0, 1]))

    @pytest.mark.parametrize(
        "x, expected_leq, expected_prev",
        [(-0.5, [], None), (0, [0], None), (0.5, [0], 0), (1, [0, 1], 0), (3, [0, 1], 1)],
    )
    def test_walks(self, x, expected_leq, expected_prev):
        assert list(self.binary.iter_leq(x)) == expected_leq
        assert self.binary.prev(x) == expected_prev

    def test_points_property_returns_copy(self):
        pts = self.binary.points
        pts[0] = 42
        np.testing.assert_array_equal(self.binary.points, np.array([0, 1]))
