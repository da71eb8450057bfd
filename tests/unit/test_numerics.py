from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math

import numpy as np
import pytest

from scipy.special import gammainc, gammaincc

from pysatl_closedform.numerics import (
    LOGHALF,
    LOGTWO,
    inv_log_gammainc,
    inv_log_gammaincc,
    log_gammainc,
    log_gammaincc,
    log1mexp,
    log2mexp,
    unbox,
    weighted_median,
)


class TestLogHelpers:
    def test_constants(self) -> None:
        assert LOGTWO == pytest.approx(math.log(2.0))
        assert LOGHALF == -LOGTWO

    @pytest.mark.parametrize("x", [-1e-20, -1e-8, -0.1, LOGHALF, -1.0, -10.0, -50.0])
    def test_log1mexp_matches_direct_formula(self, x: float) -> None:
        expected = math.log(-math.expm1(x))
        assert log1mexp(x) == pytest.approx(expected, rel=1e-12)

    def test_log1mexp_edges(self) -> None:
        assert log1mexp(0.0) == -np.inf
        assert log1mexp(-np.inf) == 0.0
        assert np.isnan(log1mexp(1.0))

    def test_log1mexp_is_vectorized(self) -> None:
        x = np.array([-0.1, -1.0, -10.0])
        np.testing.assert_allclose(log1mexp(x), np.log(-np.expm1(x)), rtol=1e-12)

    @pytest.mark.parametrize("x", [-30.0, -1.0, -1e-10, 0.0, 0.5, LOGTWO - 1e-6])
    def test_log2mexp_matches_direct_formula(self, x: float) -> None:
        expected = math.log(2.0 - math.exp(x))
        assert log2mexp(x) == pytest.approx(expected, rel=1e-9, abs=1e-15)

    def test_log2mexp_at_log_two(self) -> None:
        assert log2mexp(LOGTWO) == -np.inf or log2mexp(LOGTWO) < -30

    def test_unbox(self) -> None:
        value = unbox(np.asarray(2.5))
        assert isinstance(value, np.floating)
        assert value == 2.5

        arr = np.array([1.0, 2.0])
        assert unbox(arr) is arr
        assert unbox(3) == 3


class TestLogIncompleteGamma:
    @pytest.mark.parametrize("a, z", [(2.5, 0.3), (2.5, 4.0), (0.7, 1e-3), (12.0, 11.0)])
    def test_moderate_arguments_match_scipy(self, a: float, z: float) -> None:
        assert log_gammainc(a, z) == pytest.approx(math.log(gammainc(a, z)), rel=1e-12)
        assert log_gammaincc(a, z) == pytest.approx(math.log(gammaincc(a, z)), rel=1e-12)

    def test_values_close_to_one_keep_precision(self) -> None:
        # P(2.5, 1e-8) ~ 3e-21, so log Q is -P to double precision
        p = gammainc(2.5, 1e-8)
        assert log_gammaincc(2.5, 1e-8) == pytest.approx(-p, rel=1e-12)
        q = gammaincc(2.5, 60.0)
        assert log_gammainc(2.5, 60.0) == pytest.approx(-q, rel=1e-12)

    @pytest.mark.parametrize("z", [50.0, 800.0, 1e4])
    def test_exponential_right_tail(self, z: float) -> None:
        assert log_gammaincc(1.0, z) == pytest.approx(-z, rel=1e-12)

    def test_far_left_tail(self) -> None:
        # P(2, z) = z^2/2 (1 - 2z/3 + ...) underflows for z = 1e-200
        expected = 2 * math.log(1e-200) - LOGTWO
        assert log_gammainc(2.0, 1e-200) == pytest.approx(expected, rel=1e-12)

    def test_edges_and_shape(self) -> None:
        assert log_gammainc(3.0, 0.0) == -np.inf
        assert log_gammaincc(3.0, 0.0) == 0.0
        assert log_gammaincc(3.0, np.inf) == -np.inf
        assert np.isnan(log_gammainc(3.0, np.nan))

        result = log_gammaincc(1.0, np.array([[50.0, 800.0]]))
        assert result.shape == (1, 2)
        np.testing.assert_allclose(result, [[-50.0, -800.0]], rtol=1e-12)

    def test_inverse_far_tails(self) -> None:
        assert inv_log_gammaincc(1.0, -800.0) == pytest.approx(800.0, rel=1e-12)
        lp = 2 * math.log(1e-200) - LOGTWO
        assert inv_log_gammainc(2.0, lp) == pytest.approx(1e-200, rel=1e-9)

    @pytest.mark.parametrize("lp", [-1000.0, -720.0, -50.0, -1.0, -1e-3, -1e-20])
    def test_inverse_round_trips(self, lp: float) -> None:
        a = 3.5
        assert log_gammainc(a, inv_log_gammainc(a, lp)) == pytest.approx(lp, rel=1e-9)
        assert log_gammaincc(a, inv_log_gammaincc(a, lp)) == pytest.approx(lp, rel=1e-9)

    def test_inverse_edges(self) -> None:
        assert inv_log_gammainc(2.0, -np.inf) == 0.0
        assert inv_log_gammainc(2.0, 0.0) == np.inf
        assert inv_log_gammaincc(2.0, -np.inf) == np.inf
        assert inv_log_gammaincc(2.0, 0.0) == 0.0
        with pytest.raises(ValueError, match="Log-probability"):
            inv_log_gammainc(2.0, 0.5)
        with pytest.raises(ValueError, match="Log-probability"):
            inv_log_gammaincc(2.0, np.array([-1.0, 1e-3]))


class TestWeightedMedian:
    @pytest.mark.parametrize(
        "x",
        [[1, 2, 3, 4, 100], [4.0, 1.0, 3.0, 2.0], [5.0], [1, 1, 2, 2]],
    )
    def test_unit_weights_match_numpy_median(self, x: list[float]) -> None:
        assert weighted_median(x) == np.median(x)
        assert weighted_median(x, np.ones(len(x))) == pytest.approx(np.median(x))

    def test_heavy_weight_dominates(self) -> None:
        assert weighted_median([1.0, 2.0, 3.0], [1.0, 1.0, 10.0]) == 3.0

    def test_zero_weights_are_ignored(self) -> None:
        assert weighted_median([1.0, 2.0, 3.0, 50.0], [1.0, 1.0, 1.0, 0.0]) == 2.0

    def test_integer_weights_equal_repetition(self) -> None:
        assert weighted_median([1.0, 2.0, 7.0], [2, 1, 2]) == np.median([1.0, 1.0, 2.0, 7.0, 7.0])

    @pytest.mark.parametrize(
        "x, weights, match",
        [
            ([], None, "empty"),
            ([1.0, 2.0], [1.0], "Inconsistent argument dimensions"),
            ([1.0, 2.0], [1.0, -1.0], "non-negative"),
            ([1.0, 2.0], [0.0, 0.0], "positive"),
        ],
    )
    def test_invalid_input(self, x: list[float], weights: list[float] | None, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            weighted_median(x, weights)
