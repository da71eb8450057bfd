from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_closedform.families import ParametricFamilyDistribution, ParametricFamilyRegister
from pysatl_closedform.types import CharacteristicName
from tests.unit.families.test_basic import TestBaseFamily


class TestFamilyRegistrationAndSampling(TestBaseFamily):
    def test_family_registration_and_distribution_sampling(self) -> None:
        fam = self.make_default_family(
            distr_characteristics={
                self.PDF: {"base": lambda p, x: 1.0 if 0.0 <= x <= 1.0 else 0.0},
                self.CDF: {
                    "base": lambda p, x: x if 0.0 <= x <= 1.0 else (0.0 if x < 0.0 else 1.0)
                },
                self.PPF: {"base": lambda p, q: q},
            },
        )

        ParametricFamilyRegister.register(fam)

        distr = fam.distribution(value=1.0)

        n = 128
        sample = distr.sample(n)
        assert sample.shape == (n, 1)
        arr = sample.array
        assert (arr >= 0.0).all() and (arr <= 1.0).all()

        computations = distr.analytical_computations
        assert set(computations) == {self.PDF, self.CDF, self.PPF}
        assert computations[self.CDF](0.25) == pytest.approx(0.25)
        assert computations[self.PPF](0.75) == pytest.approx(0.75)

    def test_duplicate_family_registration(self) -> None:
        ParametricFamilyRegister.register(self.make_default_family())
        with pytest.raises(ValueError, match="already found"):
            ParametricFamilyRegister.register(self.make_default_family())

    def test_unknown_family_lookup(self) -> None:
        assert not ParametricFamilyRegister.contains("Missing")
        with pytest.raises(ValueError, match="No family Missing"):
            ParametricFamilyRegister.get("Missing")


class TestDistributionConstruction(TestBaseFamily):
    def setup_method(self) -> None:
        self.family = self.make_default_family(parameter_aliases={"v": "value", "d": "doubled"})
        ParametricFamilyRegister.register(self.family)

    def test_defaults_positional_and_named(self) -> None:
        assert self.family().parameters == {"value": 1.0}
        assert self.family(4.0).parameters == {"value": 4.0}
        assert self.family(value=4.0).parameters == {"value": 4.0}
        assert self.family(v=4.0).parametrization_name == "base"

    def test_call_is_distribution(self) -> None:
        assert self.family(2.0) == self.family.distribution(2.0)

    def test_parametrization_is_selected_by_names(self) -> None:
        distr = self.family(doubled=6.0)
        assert distr.parametrization_name == "alt"
        assert distr.parameters == {"doubled": 6.0}

        via_alias = self.family(d=6.0)
        assert via_alias.parametrization_name == "alt"

    def test_explicit_parametrization_name(self) -> None:
        distr = self.family(parametrization_name="alt")
        assert distr.parameters == {"doubled": 2.0}

        with pytest.raises(KeyError):
            self.family(parametrization_name="missing", value=1.0)

    def test_invalid_parameter_combinations(self) -> None:
        with pytest.raises(TypeError, match="Unknown parameters"):
            self.family(other=1.0)
        with pytest.raises(TypeError, match="Unknown parameters"):
            self.family(value=1.0, doubled=2.0)
        with pytest.raises(TypeError, match="more than once"):
            self.family(1.0, v=2.0)
        with pytest.raises(TypeError, match="more than once"):
            self.family(value=1.0, v=2.0)
        with pytest.raises(TypeError, match="at most 1 positional"):
            self.family(1.0, 2.0)
        with pytest.raises(TypeError, match="Positional parameters"):
            self.family(1.0, parametrization_name="alt")

    def test_constraint_violation(self) -> None:
        with pytest.raises(ValueError, match='Constraint "value > 0" does not hold'):
            self.family(value=0.0)

    def test_distribution_attributes(self) -> None:
        distr = self.family(np.float32(3.0))
        assert isinstance(distr, ParametricFamilyDistribution)
        assert distr.family is self.family
        assert distr.family_name == "Default"
        assert distr.dtype == np.float32
        assert distr.support is None

    def test_alt_uses_own_form_and_falls_back_to_base(self) -> None:
        distr = self.family(doubled=4.0)
        computations = distr.analytical_computations
        assert computations is distr.analytical_computations

        # cdf is defined for alt directly, pdf and ppf come from base(value=2)
        assert computations[self.CDF](1.5) == pytest.approx(6.0)
        assert computations[self.PDF](1.5) == pytest.approx(3.0)
        assert computations[self.PPF](1.0) == pytest.approx(0.5)

    def test_calculate_characteristic(self) -> None:
        distr = self.family(value=2.0)
        assert distr.calculate_characteristic(CharacteristicName.PDF, 3.0) == pytest.approx(6.0)

    def test_fitting_without_estimator(self) -> None:
        with pytest.raises(NotImplementedError):
            self.family.fit_mle([1.0, 2.0])
        with pytest.raises(NotImplementedError):
            self.family.suffstats([1.0, 2.0])
