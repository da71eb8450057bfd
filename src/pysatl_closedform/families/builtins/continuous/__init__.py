"""
Built-in continuous distribution families.

This module contains implementations of continuous parametric families.
"""

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from pysatl_closedform.families.builtins.continuous.gamma import configure_gamma_family
from pysatl_closedform.families.builtins.continuous.inverse_gamma import (
    configure_inverse_gamma_family,
)
from pysatl_closedform.families.builtins.continuous.laplace import configure_laplace_family

__all__ = [
    "configure_gamma_family",
    "configure_inverse_gamma_family",
    "configure_laplace_family",
]
