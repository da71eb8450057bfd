"""
Tests for Bernoulli Distribution Family

This module tests the Bernoulli family: parameterization with derived
probabilities, characteristics, degenerate cases, sufficient statistics,
fitting and sampling.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest
from scipy.stats import bernoulli

from pysatl_closedform.distributions.characteristics import entropy, mean, pmf
from pysatl_closedform.distributions.support import ExplicitTableDiscreteSupport
from pysatl_closedform.families import BernoulliStats
from pysatl_closedform.types import CharacteristicName, FamilyName, UnivariateDiscrete

from ..base import BaseDistributionTest

P = 0.3


class TestBernoulliFamily(BaseDistributionTest):
    """Test suite for Bernoulli distribution family."""

    def setup_method(self):
        """Setup before each test method."""
        self.bernoulli_family = self.family(FamilyName.BERNOULLI)
        self.bernoulli_dist_example = self.bernoulli_family(P)

    def test_family_properties(self):
        """Test basic properties of Bernoulli family."""
        assert self.bernoulli_family.name == FamilyName.BERNOULLI
        assert self.bernoulli_family.parametrization_names == ["probability"]
        assert self.bernoulli_family.estimator is not None

    def test_parametrization_creation(self):
        """Test creation and the derived probabilities."""
        dist = self.bernoulli_dist_example

        assert dist.family_name == FamilyName.BERNOULLI
        assert dist.distribution_type == UnivariateDiscrete
        assert dist.parameters == {"p": P}
        assert dist.parametrization.p0 == pytest.approx(1 - P)
        assert dist.parametrization.p1 == P
        assert self.bernoulli_family(prob=P).parametrization == dist.parametrization
        assert self.bernoulli_family(p=P).parametrization == dist.parametrization
        assert self.bernoulli_family().parameters == {"p": 0.5}

    def test_precision_follows_parameters(self):
        """Derived probabilities share the parameter dtype."""
        dist = self.bernoulli_family(np.float32(0.25))
        assert dist.dtype == np.float32
        assert isinstance(dist.parametrization.p0, np.float32)

        assert self.bernoulli_family(1).dtype == np.float64

    @pytest.mark.parametrize("p", [1.5, -0.1])
    def test_parametrization_constraints(self, p):
        """Probabilities outside [0, 1] produce no instance."""
        with pytest.raises(ValueError, match="0 <= p <= 1"):
            self.bernoulli_family(p)

    def test_pmf_and_probs(self):
        """Test pmf, its logarithm and the mass vector."""
        dist = self.bernoulli_dist_example
        x = np.array([0, 1, 2, -1, 0.5])

        pmf_values = self.characteristic(dist, CharacteristicName.PMF, x)
        self.assert_arrays_almost_equal(pmf_values, bernoulli.pmf(x, P))
        self.assert_arrays_almost_equal(pmf_values, [1 - P, P, 0.0, 0.0, 0.0])

        with np.errstate(divide="ignore"):
            logpmf = self.characteristic(dist, CharacteristicName.LOGPMF, x)
        assert logpmf[1] == pytest.approx(np.log(P))
        assert logpmf[2] == -np.inf

        self.assert_arrays_almost_equal(
            self.characteristic(dist, CharacteristicName.PROBS), [1 - P, P]
        )
        assert pmf(dist, 1) == P

    def test_cdf_and_sf(self):
        """Test step functions against scipy."""
        dist = self.bernoulli_dist_example
        x = np.array([-1.0, 0.0, 0.5, 1.0, 2.0])

        cdf = self.characteristic(dist, CharacteristicName.CDF, x)
        sf = self.characteristic(dist, CharacteristicName.SF, x)
        self.assert_arrays_almost_equal(cdf, bernoulli.cdf(x, P))
        self.assert_arrays_almost_equal(sf, bernoulli.sf(x, P))
        self.assert_arrays_almost_equal(cdf + sf, np.ones_like(x))

    def test_ppf(self):
        """Quantiles jump at p0; probabilities outside [0, 1] give NaN."""
        ppf = self.bernoulli_dist_example.query_method(CharacteristicName.PPF)

        q = np.array([0.0, 0.5, 1 - P, 0.71, 1.0])
        np.testing.assert_array_equal(ppf(q), [0.0, 0.0, 0.0, 1.0, 1.0])
        assert np.isnan(ppf(1.5))
        assert np.isnan(ppf(-0.1))
        assert np.isnan(ppf(np.nan))
        np.testing.assert_array_equal(ppf(np.array([np.nan, 0.9])), [np.nan, 1.0])

        cdf = self.bernoulli_dist_example.query_method(CharacteristicName.CDF)
        for level in (0.2, 0.7, 0.9):
            assert cdf(ppf(level)) >= level

    def test_nan_points_propagate(self):
        """Undefined points give undefined tail probabilities."""
        dist = self.bernoulli_dist_example
        assert np.isnan(self.characteristic(dist, CharacteristicName.CDF, np.nan))
        assert np.isnan(self.characteristic(dist, CharacteristicName.SF, np.nan))
        np.testing.assert_array_equal(
            self.characteristic(dist, CharacteristicName.CDF, np.array([np.nan, 0.0])),
            [np.nan, 1 - P],
        )

    def test_median(self):
        """The median is the lower atom on a tie."""
        assert self.characteristic(self.bernoulli_dist_example, CharacteristicName.MEDIAN) == 0
        assert self.characteristic(self.bernoulli_family(0.7), CharacteristicName.MEDIAN) == 1
        assert self.characteristic(self.bernoulli_family(0.5), CharacteristicName.MEDIAN) == 0

    def test_moments(self):
        """Test moment calculations against scipy."""
        expected_mean, var, skew, kurt = map(float, bernoulli.stats(P, moments="mvsk"))
        dist = self.bernoulli_dist_example

        assert mean(dist) == pytest.approx(expected_mean)
        assert self.characteristic(dist, CharacteristicName.VAR) == pytest.approx(var)
        assert self.characteristic(dist, CharacteristicName.STD) == pytest.approx(np.sqrt(var))
        assert self.characteristic(dist, CharacteristicName.SKEW) == pytest.approx(skew)
        assert self.characteristic(dist, CharacteristicName.KURT) == pytest.approx(kurt)
        assert self.characteristic(dist, CharacteristicName.KURT, excess=False) == pytest.approx(
            kurt + 3
        )
        assert entropy(dist) == pytest.approx(bernoulli.entropy(P))

    @pytest.mark.parametrize(
        "p, mode, modes",
        [(0.3, 0, [0]), (0.7, 1, [1]), (0.5, 0, [0, 1])],
    )
    def test_modes(self, p, mode, modes):
        """Test the mode and the full list of modes."""
        dist = self.bernoulli_family(p)
        assert self.characteristic(dist, CharacteristicName.MODE) == mode
        assert self.characteristic(dist, CharacteristicName.MODES) == modes

    @pytest.mark.parametrize("p, skew_sign", [(0.0, 1.0), (1.0, -1.0)])
    def test_degenerate_distribution(self, p, skew_sign):
        """A point mass has zero entropy and variance, infinite skewness."""
        dist = self.bernoulli_family(p)

        assert self.characteristic(dist, CharacteristicName.ENTROPY) == 0.0
        assert self.characteristic(dist, CharacteristicName.VAR) == 0.0
        assert self.characteristic(dist, CharacteristicName.SKEW) == skew_sign * np.inf
        assert self.characteristic(dist, CharacteristicName.KURT) == np.inf

    def test_generating_functions(self):
        """Test mgf and cf."""
        dist = self.bernoulli_dist_example
        t = np.array([-1.0, 0.0, 2.0])

        self.assert_arrays_almost_equal(
            self.characteristic(dist, CharacteristicName.MGF, t), 1 - P + P * np.exp(t)
        )
        cf = self.characteristic(dist, CharacteristicName.CF, t)
        expected = 1 - P + P * np.exp(1j * t)
        self.assert_arrays_almost_equal(cf.real, expected.real)
        self.assert_arrays_almost_equal(cf.imag, expected.imag)

    def test_sampling(self):
        """Samples are integer draws from {0, 1}."""
        sample = self.bernoulli_dist_example.sample(10_000, rng=1)

        assert sample.shape == (10_000, 1)
        assert np.issubdtype(sample.array.dtype, np.integer)
        assert set(np.unique(sample.array)) <= {0, 1}
        assert sample.array.mean() == pytest.approx(P, abs=0.03)

        again = self.bernoulli_dist_example.sample(10_000, rng=1)
        np.testing.assert_array_equal(sample.array, again.array)

        assert np.all(self.bernoulli_family(1.0).sample(100, rng=2).array == 1)
        assert np.all(self.bernoulli_family(0.0).sample(100, rng=2).array == 0)

    def test_bernoulli_support(self):
        """The support is the explicit table {0, 1}."""
        support = self.bernoulli_dist_example.support

        assert isinstance(support, ExplicitTableDiscreteSupport)
        assert list(support) == [0, 1]
        assert support.contains(0) is True
        assert support.contains(1) is True
        assert support.contains(0.5) is False
        assert 2 not in support


class TestBernoulliFitting(BaseDistributionTest):
    """Test sufficient statistics and maximum-likelihood fitting."""

    def setup_method(self):
        """Setup before each test method."""
        self.bernoulli_family = self.family(FamilyName.BERNOULLI)

    def test_suffstats(self):
        """Counts of zeros and ones, optionally weighted."""
        assert self.bernoulli_family.suffstats([0, 1, 1, 0, 1]) == BernoulliStats(2.0, 3.0)
        assert self.bernoulli_family.suffstats([True, False, True]) == BernoulliStats(1.0, 2.0)
        assert self.bernoulli_family.suffstats([0, 1], weights=[2.5, 0.5]) == BernoulliStats(
            2.5, 0.5
        )

    def test_unit_weights_match_unweighted(self):
        """All-one weights reproduce the unweighted statistics and estimate."""
        data = np.array([0, 1, 1, 0, 1, 1, 1])
        ones = np.ones(len(data))

        unweighted = self.bernoulli_family.suffstats(data)
        assert self.bernoulli_family.suffstats(data, weights=ones) == unweighted
        assert unweighted == BernoulliStats(2.0, 5.0)
        weighted = self.bernoulli_family.fit_mle(data, weights=ones)
        plain = self.bernoulli_family.fit_mle(data)
        assert weighted.parameters["p"] == pytest.approx(plain.parameters["p"])
        assert plain.parameters["p"] == pytest.approx(5 / 7)

    def test_suffstats_rejects_values_outside_support(self):
        """Only 0 and 1 are valid observations."""
        with pytest.raises(ValueError, match="outside the support"):
            self.bernoulli_family.suffstats([0, 1, 2])
        with pytest.raises(ValueError, match="Inconsistent argument dimensions"):
            self.bernoulli_family.suffstats([0, 1], weights=[1.0])

    def test_fit_mle(self):
        """The estimate is the (weighted) share of ones."""
        data = [0, 1, 1, 0, 1]
        fitted = self.bernoulli_family.fit_mle(data)
        assert fitted.parameters == {"p": 0.6}

        stats = self.bernoulli_family.suffstats(data)
        assert self.bernoulli_family.fit_mle(stats).parametrization == fitted.parametrization

        weighted = self.bernoulli_family.fit_mle([0, 1], weights=[1.0, 3.0])
        assert weighted.parameters["p"] == pytest.approx(0.75)

    def test_fit_mle_errors(self):
        """Empty statistics and weights combined with statistics are rejected."""
        with pytest.raises(ValueError, match="no observations"):
            self.bernoulli_family.fit_mle(BernoulliStats(0.0, 0.0))
        with pytest.raises(ValueError, match="Weights cannot be combined"):
            self.bernoulli_family.fit_mle(BernoulliStats(1.0, 1.0), weights=[1.0])
        with pytest.raises(ValueError, match="empty sample"):
            self.bernoulli_family.fit_mle([])

    def test_fit_recovers_parameter(self):
        """Fitting a large sample recovers the generating probability."""
        sample = self.bernoulli_family(0.8).sample(20_000, rng=9)
        fitted = self.bernoulli_family.fit_mle(sample.values)
        assert fitted.parameters["p"] == pytest.approx(0.8, abs=0.02)
