# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

CIEDE2000 Distance Engine
=========================
Scalar CIEDE2000 color difference bound to a single reference color.

The engine is an immutable value: it owns one reference L*a*b* triple and
the parametric weights, and every query is a pure function of that
reference and the second color. A polar convenience derives the second
color from a radius and hue direction in the a*-b* plane at the reference
lightness, which is what the inverse solver walks along.

The arithmetic follows:
    Sharma, G., Wu, W., & Dalal, E. N. (2005). "The CIEDE2000
    color-difference formula: Implementation notes, supplementary test
    data, and mathematical observations".

Hue angles are kept in radians throughout. The three branch points of the
formula (hue of a zero vector, hue difference and mean hue for an
achromatic pair) are gated on float64 machine epsilon.

NOTE: Kernels are compiled without ``fastmath``. Reassociation would move
values across the epsilon gates and break agreement with the published
test data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Optional, Tuple

import numpy as np
from numba import float64, njit

from chromaray_errors import InvalidInputError, require_finite

if TYPE_CHECKING:
    from chromaray_solver import SolveResult, SolverSettings

__all__ = [
    # --- Constants ---
    "TWO_PI",
    "EPS",

    # --- Function ---
    "wrap_angle",

    # --- Classes ---
    "LabColor",
    "PolarOffset",
    "CIEDE2000",
]

# --- Constants ---
TWO_PI: Final[float] = 2.0 * np.pi
# Machine epsilon for float64, the threshold for every achromatic branch.
EPS: Final[float] = float(np.finfo(np.float64).eps)


# =============================================================================
# 1. LOW-LEVEL MATH KERNELS (Numba Optimized)
# =============================================================================

@njit(float64(float64), cache=True)
def _wrap_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    wrapped = angle % TWO_PI
    # A tiny negative input rounds up to exactly 2*pi.
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


@njit(float64(float64, float64), cache=True)
def _hue_angle(b: float, a_p: float) -> float:
    """Hue in [0, 2*pi); exactly 0 for a vector at the origin."""
    if abs(a_p) <= EPS and abs(b) <= EPS:
        return 0.0
    return _wrap_angle(np.arctan2(b, a_p))


@njit(float64(float64), cache=True)
def _chroma_weight(C: float) -> float:
    """sqrt(C**7 / (C**7 + 25**7)), rearranged so large C cannot overflow."""
    if C > 25.0:
        return 1.0 / np.sqrt(1.0 + (25.0 / C)**7)
    t = (C / 25.0)**7
    return np.sqrt(t / (t + 1.0))


@njit(float64(float64), cache=True)
def _lightness_weight(L_bar_p: float) -> float:
    """SL, with the (L - 50) ratio rearranged for large lightness."""
    dL50 = abs(L_bar_p - 50.0)
    if dL50 > 1.0:
        return 1.0 + 0.015 * dL50 / np.sqrt(1.0 + 20.0 / (dL50 * dL50))
    L_term = dL50 * dL50
    return 1.0 + 0.015 * L_term / np.sqrt(20.0 + L_term)


@njit(float64(float64, float64, float64, float64, float64, float64, float64, float64, float64), cache=True)
def _delta_e_2000_single(L1: float, a1: float, b1: float, L2: float, a2: float, b2: float, k_L: float, k_C: float, k_H: float) -> float:
    """Single-pair CIEDE2000 with parametric factors, hue in radians."""
    C_bar = (np.hypot(a1, b1) + np.hypot(a2, b2)) / 2.0
    G = 0.5 * (1.0 - _chroma_weight(C_bar))
    a1_p = (1.0 + G) * a1
    a2_p = (1.0 + G) * a2
    C1_p = np.hypot(a1_p, b1)
    C2_p = np.hypot(a2_p, b2)

    h1_p = _hue_angle(b1, a1_p)
    h2_p = _hue_angle(b2, a2_p)

    dL_p = L2 - L1
    dC_p = C2_p - C1_p

    chromatic = abs(C1_p * C2_p) > EPS
    dh_p = 0.0
    if chromatic:
        diff = h2_p - h1_p
        if abs(diff) <= np.pi: dh_p = diff
        elif diff > np.pi: dh_p = diff - TWO_PI
        else: dh_p = diff + TWO_PI
    dH_p = 2.0 * np.sqrt(C1_p * C2_p) * np.sin(dh_p / 2.0)

    L_bar_p = (L1 + L2) / 2.0
    C_bar_p = (C1_p + C2_p) / 2.0

    # Achromatic pairs keep the plain sum; at most one hue is non-zero.
    h_sum = h1_p + h2_p
    h_bar_p = h_sum
    if chromatic:
        if abs(h1_p - h2_p) <= np.pi: h_bar_p = h_sum / 2.0
        elif h_sum < TWO_PI: h_bar_p = (h_sum + TWO_PI) / 2.0
        else: h_bar_p = (h_sum - TWO_PI) / 2.0

    T = 1.0 - 0.17 * np.cos(h_bar_p - np.pi / 6.0) + \
        0.24 * np.cos(2.0 * h_bar_p) + \
        0.32 * np.cos(3.0 * h_bar_p + np.pi / 30.0) - \
        0.20 * np.cos(4.0 * h_bar_p - 7.0 * np.pi / 20.0)
    d_theta = np.pi / 6.0 * np.exp(-((h_bar_p / TWO_PI * 360.0 - 275.0) / 25.0)**2)
    RC = 2.0 * _chroma_weight(C_bar_p)
    SL = _lightness_weight(L_bar_p)
    SC = 1.0 + 0.045 * C_bar_p
    SH = 1.0 + 0.015 * C_bar_p * T
    RT = -np.sin(2.0 * d_theta) * RC

    term_L = dL_p / (k_L * SL)
    term_C = dC_p / (k_C * SC)
    term_H = dH_p / (k_H * SH)
    return np.sqrt(term_L**2 + term_C**2 + term_H**2 + RT * term_C * term_H)


@njit(float64(float64, float64, float64, float64, float64, float64, float64, float64), cache=True)
def _delta_e_2000_polar(L1: float, a1: float, b1: float, radius: float, angle: float, k_L: float, k_C: float, k_H: float) -> float:
    """CIEDE2000 between the reference and the color ``radius`` away at ``angle``."""
    theta = _wrap_angle(angle)
    a2 = a1 + radius * np.cos(theta)
    b2 = b1 + radius * np.sin(theta)
    return _delta_e_2000_single(L1, a1, b1, L1, a2, b2, k_L, k_C, k_H)


def wrap_angle(angle: float) -> float:
    """
    Normalize an angle in radians into [0, 2*pi).

    Equivalent to repeatedly adding or subtracting 2*pi, but runs in
    constant time for inputs far outside the principal range.
    """
    return float(_wrap_angle(float(angle)))


# =============================================================================
# 2. VALUE TYPES
# =============================================================================

@dataclass(slots=True, frozen=True)
class LabColor:
    """An immutable CIE L*a*b* triple. L is not clamped to [0, 100]."""
    L: float
    a: float
    b: float

    @property
    def chroma(self) -> float:
        return math.sqrt(self.a * self.a + self.b * self.b)

    @property
    def hue(self) -> float:
        """Hue angle in radians, [0, 2*pi). Zero for an achromatic color."""
        return float(_hue_angle(float(self.b), float(self.a)))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.L, self.a, self.b)


@dataclass(slots=True, frozen=True)
class PolarOffset:
    """A step of ``radius`` in the a*-b* plane along hue direction ``angle``."""
    radius: float
    angle: float

    @property
    def normalized_angle(self) -> float:
        return wrap_angle(self.angle)

    def apply(self, color: LabColor) -> LabColor:
        """Returns the color reached from ``color`` at the same lightness."""
        theta = self.normalized_angle
        return LabColor(color.L,
                        color.a + self.radius * math.cos(theta),
                        color.b + self.radius * math.sin(theta))


# =============================================================================
# 3. DISTANCE ENGINE
# =============================================================================

@dataclass(slots=True, frozen=True)
class CIEDE2000:
    """
    CIEDE2000 color difference measured from a fixed reference color.

    The reference is "color 1" in every evaluation. The formula is
    symmetric in theory, and swapping the two colors reproduces the
    published test data, but the epsilon-gated branches are evaluated
    against the reference first. Treat the engine as directional.

    Attributes:
        reference: The color every query is compared against.
        k_L: Parametric lightness weight (default 1.0).
        k_C: Parametric chroma weight (default 1.0).
        k_H: Parametric hue weight (default 1.0).

    Examples:
        >>> engine = CIEDE2000.from_lab(50.0, 2.6772, -79.7751)
        >>> round(engine.distance(50.0, 0.0, -82.7485), 4)
        2.0425
    """
    reference: LabColor
    k_L: float = 1.0
    k_C: float = 1.0
    k_H: float = 1.0

    def __post_init__(self) -> None:
        require_finite("Reference color", *self.reference.as_tuple())
        require_finite("Parametric weights", self.k_L, self.k_C, self.k_H)
        for name in ("k_L", "k_C", "k_H"):
            value = getattr(self, name)
            if value <= 0.0:
                raise InvalidInputError(f"{name} must be > 0, got {value!r}")

    @classmethod
    def from_lab(cls, l1: float, a1: float, b1: float, *,
                 k_L: float = 1.0, k_C: float = 1.0, k_H: float = 1.0,
                 textiles: bool = False) -> CIEDE2000:
        """
        Builds an engine from a bare L*a*b* triple.

        Args:
            l1, a1, b1: Reference color.
            k_L, k_C, k_H: Parametric weights.
            textiles: If True, overrides k_L=2.0, k_C=1.0, k_H=1.0 as per
                      CIE recommendation for textile applications.
        """
        if textiles:
            k_L, k_C, k_H = 2.0, 1.0, 1.0
        return cls(LabColor(float(l1), float(a1), float(b1)),
                   float(k_L), float(k_C), float(k_H))

    @classmethod
    def from_color(cls, color: LabColor, *,
                   k_L: float = 1.0, k_C: float = 1.0, k_H: float = 1.0,
                   textiles: bool = False) -> CIEDE2000:
        return cls.from_lab(color.L, color.a, color.b,
                            k_L=k_L, k_C=k_C, k_H=k_H, textiles=textiles)

    @property
    def weights(self) -> Tuple[float, float, float]:
        return (self.k_L, self.k_C, self.k_H)

    def distance(self, l2: float, a2: float, b2: float,
                 check_finite: bool = True) -> float:
        """
        CIEDE2000 difference between the reference and (l2, a2, b2).

        Args:
            l2, a2, b2: Sample color.
            check_finite: If False, skip the finite-input check and let
                          NaN/inf flow through to the result.

        Returns:
            Non-negative difference. Zero for a color identical to the
            reference.

        Raises:
            InvalidInputError: A coordinate is NaN or infinite, or the
                               pair overflows float64.
        """
        if check_finite:
            require_finite("Sample color", l2, a2, b2)
        ref = self.reference
        de = float(_delta_e_2000_single(ref.L, ref.a, ref.b,
                                        float(l2), float(a2), float(b2),
                                        self.k_L, self.k_C, self.k_H))
        if check_finite:
            require_finite("CIEDE2000 difference", de)
        return de

    def distance_to(self, color: LabColor, check_finite: bool = True) -> float:
        return self.distance(color.L, color.a, color.b, check_finite)

    def distance_polar(self, radius: float, angle: float,
                       check_finite: bool = True) -> float:
        """
        CIEDE2000 difference to the color ``radius`` away along ``angle``.

        The second color keeps the reference lightness and sits at
        (a1 + r*cos(angle), b1 + r*sin(angle)). The angle is wrapped into
        [0, 2*pi) first.
        """
        if check_finite:
            require_finite("Polar offset", radius, angle)
        ref = self.reference
        de = float(_delta_e_2000_polar(ref.L, ref.a, ref.b,
                                       float(radius), float(angle),
                                       self.k_L, self.k_C, self.k_H))
        if check_finite:
            require_finite("CIEDE2000 difference", de)
        return de

    def offset_color(self, offset: PolarOffset) -> LabColor:
        return offset.apply(self.reference)

    def solve_radius(self, target: float, angle: float,
                     settings: Optional[SolverSettings] = None) -> float:
        """Radius along ``angle`` at which the difference equals ``target``."""
        from chromaray_solver import RadiusSolver, SolverSettings
        return RadiusSolver(self, settings or SolverSettings()).solve(target, angle)

    def solve(self, target: float, angle: float,
              settings: Optional[SolverSettings] = None) -> SolveResult:
        """Like :meth:`solve_radius`, returning the full :class:`SolveResult`."""
        from chromaray_solver import RadiusSolver, SolverSettings
        return RadiusSolver(self, settings or SolverSettings()).solve_detailed(target, angle)


# =============================================================================
# Validation Block
# =============================================================================
if __name__ == "__main__":
    print("--- Chromaray CIEDE2000 Engine Validation ---")

    # 1. Published reference pair
    print("1. Testing Sharma et al. pair #1...")
    engine = CIEDE2000.from_lab(50.0, 2.6772, -79.7751)
    de = engine.distance(50.0, 0.0, -82.7485)
    print(f"   DE00: {de:.4f} (Expected: 2.0425) "
          f"{'[PASS]' if abs(de - 2.0425) < 1e-4 else '[FAIL]'}")

    # 2. Identity
    print("2. Testing Identity...")
    same = engine.distance(50.0, 2.6772, -79.7751)
    print(f"   DE00 (same color): {same:.2e} {'[PASS]' if same == 0.0 else '[FAIL]'}")

    # 3. Forward/inverse round trip
    print("3. Testing Forward/Inverse Round-Trip...")
    gray = CIEDE2000.from_lab(50.0, 0.0, 0.0)
    worst = 0.0
    for target in np.linspace(1.0, 10.0, 10):
        r = gray.solve_radius(float(target), 0.0)
        worst = max(worst, abs(gray.distance_polar(r, 0.0) - target))
    print(f"   Max |DE00(r) - target|: {worst:.2e} {'[PASS]' if worst < 1e-3 else '[FAIL]'}")

    # 4. Angle periodicity
    print("4. Testing Angle Periodicity...")
    d0 = engine.distance_polar(3.0, 1.0)
    d1 = engine.distance_polar(3.0, 1.0 + TWO_PI)
    print(f"   |d(theta) - d(theta + 2pi)|: {abs(d0 - d1):.2e} "
          f"{'[PASS]' if abs(d0 - d1) < 1e-9 else '[FAIL]'}")
