# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Inverse Solver
==============
Finds the radius r >= 0 such that

    CIEDE2000(reference, reference + r * (cos(angle), sin(angle))) == target

at the reference lightness.

The residual f(r) = distance_polar(r, angle) - target is negative at r = 0
for any positive target, which gives a natural lower bracket. The upper
bracket starts at ``initial_upper`` and doubles until the residual turns
non-negative. CIEDE2000 is not guaranteed to be monotonic in r near hue
wrap boundaries, so the doubling is a pragmatic search rather than a proof.

Two iterations are available on the bracket:
    - ``"secant"``: the reference false-position update that always keeps
      the two most recent iterates. Fast, not strictly bracketing.
    - ``"brentq"``: ``scipy.optimize.brentq``, which stays inside the
      bracket and is slower per step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Final, Literal, Optional, Protocol, Tuple

from scipy.optimize import brentq

from chromaray_engine import LabColor, PolarOffset, wrap_angle
from chromaray_errors import (
    InvalidInputError,
    NonConvergenceError,
    UnreachableTargetError,
    require_finite,
)

__all__ = [
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_INITIAL_UPPER",
    "DEFAULT_MAX_DOUBLINGS",
    "SolverSettings",
    "SolveResult",
    "RadiusSolver",
    "solve_radius",
]

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_TOLERANCE: Final[float] = 1e-4
DEFAULT_MAX_ITERATIONS: Final[int] = 100
DEFAULT_INITIAL_UPPER: Final[float] = 2.0
DEFAULT_MAX_DOUBLINGS: Final[int] = 10

SolveMethod = Literal["secant", "brentq"]
_METHODS: Final[Tuple[str, ...]] = ("secant", "brentq")


class DistanceEngine(Protocol):
    """What the solver needs from an engine bound to a reference color."""
    reference: LabColor

    def distance_polar(self, radius: float, angle: float,
                       check_finite: bool = True) -> float: ...


# ---------------------------------------------------------------------------
# 1.  Settings and results
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class SolverSettings:
    """
    Tuning knobs for the inverse solve.

    Attributes:
        tolerance: Absolute stopping tolerance on successive radii.
        max_iterations: Hard cap on root iterations.
        initial_upper: First upper bracket radius.
        max_doublings: How many times the upper bracket may double.
        method: ``"secant"`` or ``"brentq"``.
    """
    tolerance:      float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    initial_upper:  float = DEFAULT_INITIAL_UPPER
    max_doublings:  int = DEFAULT_MAX_DOUBLINGS
    method:         SolveMethod = "secant"

    def __post_init__(self) -> None:
        if not (math.isfinite(self.tolerance) and self.tolerance > 0.0):
            raise ValueError(f"tolerance must be a positive finite float, got {self.tolerance!r}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations!r}")
        if not (math.isfinite(self.initial_upper) and self.initial_upper > 0.0):
            raise ValueError(f"initial_upper must be a positive finite float, got {self.initial_upper!r}")
        if self.max_doublings < 0:
            raise ValueError(f"max_doublings must be >= 0, got {self.max_doublings!r}")
        if self.method not in _METHODS:
            raise ValueError(f"Unknown solve method: {self.method!r}")

    @property
    def max_radius(self) -> float:
        """Largest upper bracket the doubling search will try."""
        return self.initial_upper * 2.0**self.max_doublings


@dataclass(slots=True, frozen=True)
class SolveResult:
    """Outcome of one inverse solve."""
    reference:  LabColor
    target:     float
    angle:      float
    radius:     float
    residual:   float
    iterations: int
    bracket:    Tuple[float, float]
    method:     str

    @property
    def offset(self) -> PolarOffset:
        return PolarOffset(self.radius, self.angle)

    @property
    def color(self) -> LabColor:
        """The color at the solved radius."""
        return self.offset.apply(self.reference)


# ---------------------------------------------------------------------------
# 2.  Solver
# ---------------------------------------------------------------------------
class RadiusSolver:
    """
    Inverts a CIEDE2000 engine along a ray from its reference color.

    The solver holds no state between calls; one instance can serve any
    number of (target, angle) queries against the same engine.
    """

    def __init__(self, engine: DistanceEngine,
                 settings: Optional[SolverSettings] = None):
        self.engine = engine
        self.settings = settings or SolverSettings()

    def solve(self, target: float, angle: float) -> float:
        """
        Radius at which the difference along ``angle`` equals ``target``.

        Raises:
            InvalidInputError: Non-finite input, or ``target <= 0``.
            UnreachableTargetError: No sign change up to ``max_radius``.
            NonConvergenceError: The iteration did not meet its tolerance.
        """
        return self.solve_detailed(target, angle).radius

    def solve_detailed(self, target: float, angle: float) -> SolveResult:
        require_finite("Target difference", target)
        require_finite("Angle", angle)
        if target <= 0.0:
            raise InvalidInputError(f"Target difference must be > 0, got {target!r}")

        target = float(target)
        theta = wrap_angle(angle)
        engine = self.engine

        def residual(r: float) -> float:
            return engine.distance_polar(r, theta, check_finite=False) - target

        lower, f_lower = 0.0, residual(0.0)
        upper, f_upper = self._expand_bracket(residual, target, theta)

        if f_upper == 0.0:
            radius, iterations = upper, 0
        elif self.settings.method == "brentq":
            radius, iterations = self._brentq(residual, lower, upper)
        else:
            radius, iterations = self._secant(residual, lower, f_lower, upper, f_upper)

        res = residual(radius)
        logger.debug("Solved target=%g angle=%.6f: r=%.8g residual=%.3g in %d iterations",
                     target, theta, radius, res, iterations)
        return SolveResult(
            reference=engine.reference,
            target=target,
            angle=theta,
            radius=radius,
            residual=res,
            iterations=iterations,
            bracket=(lower, upper),
            method=self.settings.method,
        )

    def _expand_bracket(self, residual: Callable[[float], float],
                        target: float, theta: float) -> Tuple[float, float]:
        """Doubles the upper radius until the residual is non-negative."""
        upper = self.settings.initial_upper
        f_upper = residual(upper)
        doublings = 0
        while f_upper < 0.0 and doublings < self.settings.max_doublings:
            upper *= 2.0
            f_upper = residual(upper)
            doublings += 1
        logger.debug("Bracket [0, %g] after %d doublings, f(upper)=%.6g",
                     upper, doublings, f_upper)
        # f(0) = -target < 0, so a sign change needs f(upper) >= 0.
        if not f_upper >= 0.0:
            logger.debug("No sign change for target=%g angle=%.6f up to r=%g",
                         target, theta, upper)
            raise UnreachableTargetError(target, theta, upper)
        return upper, f_upper

    def _secant(self, residual: Callable[[float], float],
                r1: float, f1: float, r2: float, f2: float) -> Tuple[float, int]:
        tol = self.settings.tolerance
        for iteration in range(1, self.settings.max_iterations + 1):
            denom = f2 - f1
            if denom == 0.0:
                raise NonConvergenceError("Flat residual between iterates",
                                          iteration - 1, r2)
            x0 = (r1 * f2 - r2 * f1) / denom
            if not math.isfinite(x0):
                raise NonConvergenceError("Non-finite iterate", iteration, r2)
            f0 = residual(x0)
            r1, f1 = r2, f2
            r2, f2 = x0, f0
            if f0 == 0.0 or abs(r2 - r1) < tol:
                if r2 < 0.0:
                    raise NonConvergenceError(
                        f"Converged to negative radius {r2!r}", iteration, r2)
                return r2, iteration
        logger.debug("Secant iteration hit the cap, last estimate r=%g", r2)
        raise NonConvergenceError("Tolerance not met", self.settings.max_iterations, r2)

    def _brentq(self, residual: Callable[[float], float],
                lower: float, upper: float) -> Tuple[float, int]:
        radius, info = brentq(residual, lower, upper,
                              xtol=self.settings.tolerance,
                              maxiter=self.settings.max_iterations,
                              full_output=True, disp=False)
        if not info.converged:
            logger.debug("brentq stopped: %s", info.flag)
            raise NonConvergenceError(f"brentq: {info.flag}", info.iterations, float(radius))
        return float(radius), int(info.iterations)


def solve_radius(engine: DistanceEngine, target: float, angle: float,
                 settings: Optional[SolverSettings] = None) -> float:
    """Shortcut for ``RadiusSolver(engine, settings).solve(target, angle)``."""
    return RadiusSolver(engine, settings).solve(target, angle)
