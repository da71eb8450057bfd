"""
Unit tests for pysatl-closedform: framework primitives, parametric families
and the builtin closed-form families.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"
