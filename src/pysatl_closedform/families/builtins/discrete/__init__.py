"""
Built-in discrete distribution families.

This module contains implementations of discrete parametric families.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_closedform.families.builtins.discrete.bernoulli import (
    BernoulliStats,
    bernoulli_suffstats,
    configure_bernoulli_family,
)

__all__ = [
    "BernoulliStats",
    "bernoulli_suffstats",
    "configure_bernoulli_family",
]
