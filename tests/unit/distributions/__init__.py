"""
Tests of the distribution framework: computation primitives, supports,
sampling strategies and the characteristic graph.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"
