# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Error taxonomy shared by the distance engine and the inverse solver.

All failures are local and recoverable by the caller. The engine never
returns a silently wrong number: it either produces a finite distance or
radius, or raises one of the classes below.
"""

from __future__ import annotations

import math
from typing import Optional

__all__ = [
    "ChromarayError",
    "InvalidInputError",
    "UnreachableTargetError",
    "NonConvergenceError",
    "require_finite",
]


class ChromarayError(Exception):
    """Base class for every error raised by Chromaray."""


class InvalidInputError(ChromarayError, ValueError):
    """A non-finite coordinate, angle or weight, or a non-positive target."""


class UnreachableTargetError(ChromarayError, ValueError):
    """
    No sign change was found while growing the upper bracket.

    Attributes:
        target: Requested CIEDE2000 difference.
        angle: Normalized hue direction in radians.
        upper: Last upper bracket that was evaluated.
    """

    def __init__(self, target: float, angle: float, upper: float):
        self.target = target
        self.angle = angle
        self.upper = upper
        super().__init__(
            f"Target difference {target!r} not reachable along angle "
            f"{angle:.6f} rad within radius {upper!r}."
        )


class NonConvergenceError(ChromarayError, RuntimeError):
    """
    The root iteration stopped without meeting its tolerance.

    Attributes:
        iterations: Number of iterations performed.
        last_estimate: Last radius estimate, or None if none was produced.
    """

    def __init__(self, message: str, iterations: int,
                 last_estimate: Optional[float] = None):
        self.iterations = iterations
        self.last_estimate = last_estimate
        super().__init__(f"{message} (after {iterations} iterations)")


def require_finite(label: str, *values: float) -> None:
    """Raise InvalidInputError if any of ``values`` is NaN or infinite."""
    for v in values:
        if not math.isfinite(v):
            raise InvalidInputError(f"{label} must be finite, got {v!r}")
