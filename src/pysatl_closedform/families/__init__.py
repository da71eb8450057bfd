"""
Parametric Families module for working with statistical distribution families.

This package provides the framework for defining, managing, constructing and
fitting parametric families of statistical distributions, and the builtin
closed-form families.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov, Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from .builtins import BernoulliStats
from .configuration import configure_families_register, reset_families_register
from .distribution import ParametricFamilyDistribution
from .estimation import MaximumLikelihoodEstimator, SufficientStats
from .parametric_family import ParametricFamily
from .parametrizations import (
    Parametrization,
    ParametrizationConstraint,
    constraint,
    parametrization,
)
from .registry import ParametricFamilyRegister

__all__ = [
    "BernoulliStats",
    "MaximumLikelihoodEstimator",
    "ParametricFamilyRegister",
    "ParametrizationConstraint",
    "Parametrization",
    "ParametricFamily",
    "ParametricFamilyDistribution",
    "SufficientStats",
    "constraint",
    "parametrization",
    "configure_families_register",
    "reset_families_register",
]
