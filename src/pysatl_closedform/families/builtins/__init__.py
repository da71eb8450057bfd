"""
Built-in distribution families for pysatl-closedform.

This package contains the closed-form families available by default:
InverseGamma, Laplace and Bernoulli, together with the Gamma family that
InverseGamma delegates to.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_closedform.families.builtins.continuous import (
    configure_gamma_family,
    configure_inverse_gamma_family,
    configure_laplace_family,
)
from pysatl_closedform.families.builtins.discrete import (
    BernoulliStats,
    bernoulli_suffstats,
    configure_bernoulli_family,
)

__all__ = [
    "BernoulliStats",
    "bernoulli_suffstats",
    "configure_gamma_family",
    "configure_inverse_gamma_family",
    "configure_laplace_family",
    "configure_bernoulli_family",
]
