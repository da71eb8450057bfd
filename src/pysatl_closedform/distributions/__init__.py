"""
Distributions subpackage

Interfaces and default implementations for probability distributions used by
pysatl-closedform:

- distribution protocol (:mod:`.distribution`);
- characteristic conversions (:mod:`.fitters`) and their graph (:mod:`.registry`);
- sampling protocol and array-backed samples (:mod:`.sampling`);
- pluggable strategies (:mod:`.strategies`);
- supports (:mod:`.support`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"
from .characteristics import GenericCharacteristic
from .computation import (
    AnalyticalComputation,
    ComputationMethod,
    FittedComputationMethod,
)
from .distribution import Distribution
from .registry import (
    DEFAULT_COMPUTATION_KEY,
    CharacteristicGraph,
    DistributionTypeRegister,
    GraphInvariantError,
    distribution_type_register,
    reset_distribution_type_register,
)
from .sampling import ArraySample, Sample
from .strategies import (
    ComputationStrategy,
    DefaultComputationStrategy,
    DefaultSamplingUnivariateStrategy,
    DirectSamplingUnivariateStrategy,
    SamplingStrategy,
)
from .support import (
    ContinuousSupport,
    DiscreteSupport,
    ExplicitTableDiscreteSupport,
    Support,
)

__all__ = [
    # computation primitives
    "AnalyticalComputation",
    "ComputationMethod",
    "FittedComputationMethod",
    "GenericCharacteristic",
    # distribution
    "Distribution",
    # sampling
    "Sample",
    "ArraySample",
    # strategies
    "ComputationStrategy",
    "DefaultComputationStrategy",
    "SamplingStrategy",
    "DefaultSamplingUnivariateStrategy",
    "DirectSamplingUnivariateStrategy",
    # registry
    "DEFAULT_COMPUTATION_KEY",
    "CharacteristicGraph",
    "DistributionTypeRegister",
    "GraphInvariantError",
    "distribution_type_register",
    "reset_distribution_type_register",
    # supports
    "Support",
    "ContinuousSupport",
    "DiscreteSupport",
    "ExplicitTableDiscreteSupport",
]
