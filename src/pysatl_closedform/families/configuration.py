"""
Distribution Families Configuration
====================================

This module defines and configures parametric distribution families for
pysatl-closedform:

- :class:`Gamma Family` — shape/rate and shape/scale parameterizations.
- :class:`InverseGamma Family` — shape/scale, delegating to Gamma.
- :class:`Laplace Family` — location with scale, standard deviation or variance.
- :class:`Bernoulli Family` — success probability, with sufficient statistics.

Notes
-----
- All families are registered in the global ParametricFamilyRegister.
- Closed-form implementations are provided for the characteristics of each
  family; the rest are derived through the characteristic graph.
"""

from __future__ import annotations

__author__ = "Fedor Myznikov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache

from pysatl_closedform.families.builtins import (
    configure_bernoulli_family,
    configure_gamma_family,
    configure_inverse_gamma_family,
    configure_laplace_family,
)
from pysatl_closedform.families.registry import ParametricFamilyRegister


@lru_cache(maxsize=1)
def configure_families_register() -> ParametricFamilyRegister:
    """
    Configure and register all distribution families in the global registry.

    Returns
    -------
    ParametricFamilyRegister
        The global registry of parametric families.
    """
    configure_gamma_family()
    configure_inverse_gamma_family()
    configure_laplace_family()
    configure_bernoulli_family()
    return ParametricFamilyRegister()


def reset_families_register() -> None:
    """
    Reset the cached families registry.
    """
    configure_families_register.cache_clear()
    ParametricFamilyRegister._reset()
