# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Flat scalar entry points for adapter layers (spreadsheet add-ins, scripts).

Every function takes plain floats, builds a fresh engine for the reference
color, and returns one float. Angles are in radians. Failures surface as
the exceptions in :mod:`chromaray_errors`; the adapter decides how to show
them (e.g. as an error value in a cell).
"""

from __future__ import annotations

import math
from typing import Optional

from chromaray_engine import CIEDE2000, LabColor
from chromaray_solver import SolverSettings

__all__ = [
    "distance_between",
    "distance_polar",
    "radius_for_difference",
    "a_for_difference",
    "b_for_difference",
    "color_for_difference",
]


def distance_between(l1: float, a1: float, b1: float,
                     l2: float, a2: float, b2: float) -> float:
    """CIEDE2000 difference between (l1, a1, b1) and (l2, a2, b2)."""
    return CIEDE2000.from_lab(l1, a1, b1).distance(l2, a2, b2)


def distance_polar(l1: float, a1: float, b1: float,
                   radius: float, angle: float) -> float:
    """CIEDE2000 difference between (l1, a1, b1) and the color ``radius`` away along ``angle``."""
    return CIEDE2000.from_lab(l1, a1, b1).distance_polar(radius, angle)


def radius_for_difference(l1: float, a1: float, b1: float,
                          target: float, angle: float,
                          settings: Optional[SolverSettings] = None) -> float:
    """Distance in the a*-b* plane from (l1, a1, b1) with difference ``target`` along ``angle``."""
    return CIEDE2000.from_lab(l1, a1, b1).solve_radius(target, angle, settings)


def a_for_difference(l1: float, a1: float, b1: float,
                     target: float, angle: float,
                     settings: Optional[SolverSettings] = None) -> float:
    """a* of the color at difference ``target`` along ``angle``."""
    r = radius_for_difference(l1, a1, b1, target, angle, settings)
    return a1 + r * math.cos(angle)


def b_for_difference(l1: float, a1: float, b1: float,
                     target: float, angle: float,
                     settings: Optional[SolverSettings] = None) -> float:
    """b* of the color at difference ``target`` along ``angle``."""
    r = radius_for_difference(l1, a1, b1, target, angle, settings)
    return b1 + r * math.sin(angle)


def color_for_difference(l1: float, a1: float, b1: float,
                         target: float, angle: float,
                         settings: Optional[SolverSettings] = None) -> LabColor:
    """Both coordinates from a single solve; lightness is kept."""
    r = radius_for_difference(l1, a1, b1, target, angle, settings)
    return LabColor(float(l1), a1 + r * math.cos(angle), b1 + r * math.sin(angle))
