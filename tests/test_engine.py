# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from chromaray_engine import (
    CIEDE2000,
    LabColor,
    PolarOffset,
    TWO_PI,
    wrap_angle,
)
from chromaray_errors import InvalidInputError

# Sharma, Wu & Dalal (2005), Table 1: (L1, a1, b1, L2, a2, b2, DE00)
SHARMA_PAIRS = [
    (50.0000, 2.6772, -79.7751, 50.0000, 0.0000, -82.7485, 2.0425),
    (50.0000, 3.1571, -77.2803, 50.0000, 0.0000, -82.7485, 2.8615),
    (50.0000, 2.8361, -74.0200, 50.0000, 0.0000, -82.7485, 3.4412),
    (50.0000, -1.3802, -84.2814, 50.0000, 0.0000, -82.7485, 1.0000),
    (50.0000, -1.1848, -84.8006, 50.0000, 0.0000, -82.7485, 1.0000),
    (50.0000, -0.9009, -85.5211, 50.0000, 0.0000, -82.7485, 1.0000),
    (50.0000, 0.0000, 0.0000, 50.0000, -1.0000, 2.0000, 2.3669),
    (50.0000, -1.0000, 2.0000, 50.0000, 0.0000, 0.0000, 2.3669),
    (50.0000, 2.4900, -0.0010, 50.0000, -2.4900, 0.0009, 7.1792),
    (50.0000, 2.4900, -0.0010, 50.0000, -2.4900, 0.0010, 7.1792),
    (50.0000, 2.4900, -0.0010, 50.0000, -2.4900, 0.0011, 7.2195),
    (50.0000, 2.4900, -0.0010, 50.0000, -2.4900, 0.0012, 7.2195),
    (50.0000, -0.0010, 2.4900, 50.0000, 0.0009, -2.4900, 4.8045),
    (50.0000, -0.0010, 2.4900, 50.0000, 0.0010, -2.4900, 4.8045),
    (50.0000, -0.0010, 2.4900, 50.0000, 0.0011, -2.4900, 4.7461),
    (50.0000, 2.5000, 0.0000, 50.0000, 0.0000, -2.5000, 4.3065),
    (50.0000, 2.5000, 0.0000, 73.0000, 25.0000, -18.0000, 27.1492),
    (50.0000, 2.5000, 0.0000, 61.0000, -5.0000, 29.0000, 22.8977),
    (50.0000, 2.5000, 0.0000, 56.0000, -27.0000, -3.0000, 31.9030),
    (50.0000, 2.5000, 0.0000, 58.0000, 24.0000, 15.0000, 19.4535),
    (50.0000, 2.5000, 0.0000, 50.0000, 3.1736, 0.5854, 1.0000),
    (50.0000, 2.5000, 0.0000, 50.0000, 3.2972, 0.0000, 1.0000),
    (50.0000, 2.5000, 0.0000, 50.0000, 1.8634, 0.5757, 1.0000),
    (50.0000, 2.5000, 0.0000, 50.0000, 3.2592, 0.3350, 1.0000),
    (60.2574, -34.0099, 36.2677, 60.4626, -34.1751, 39.4387, 1.2644),
    (63.0109, -31.0961, -5.8663, 62.8187, -29.7946, -4.0864, 1.2630),
    (61.2901, 3.7196, -5.3901, 61.4292, 2.2480, -4.9620, 1.8731),
    (35.0831, -44.1164, 3.7933, 35.0232, -40.0716, 1.5901, 1.8645),
    (22.7233, 20.0904, -46.6940, 23.0331, 14.9730, -42.5619, 2.0373),
    (36.4612, 47.8580, 18.3852, 36.2715, 50.5065, 21.2231, 1.4146),
    (90.8027, -2.0831, 1.4410, 91.1528, -1.6435, 0.0447, 1.4441),
    (90.9257, -0.5406, -0.9208, 88.6381, -0.8985, -0.7239, 1.5381),
    (6.7747, -0.2908, -2.4247, 5.8714, -0.0985, -2.2286, 0.6377),
    (2.0776, 0.0795, -1.1350, 0.9033, -0.0636, -0.5514, 0.9082),
]


@pytest.mark.parametrize("l1, a1, b1, l2, a2, b2, expected", SHARMA_PAIRS)
def test_matches_published_dataset(l1, a1, b1, l2, a2, b2, expected):
    de = CIEDE2000.from_lab(l1, a1, b1).distance(l2, a2, b2)
    assert de == pytest.approx(expected, abs=1e-4)


@pytest.mark.parametrize("l1, a1, b1, l2, a2, b2, expected", SHARMA_PAIRS)
def test_swapping_colors_spot_check(l1, a1, b1, l2, a2, b2, expected):
    forward = CIEDE2000.from_lab(l1, a1, b1).distance(l2, a2, b2)
    backward = CIEDE2000.from_lab(l2, a2, b2).distance(l1, a1, b1)
    assert forward == pytest.approx(backward, abs=1e-10)


@pytest.mark.parametrize("color", [
    (50.0, 0.0, 0.0),
    (0.0, 0.0, 0.0),
    (100.0, 127.0, -128.0),
    (35.0831, -44.1164, 3.7933),
    (-20.0, 1e-300, -1e-300),
    (150.0, 500.0, 500.0),
])
def test_identity_is_exactly_zero(color):
    assert CIEDE2000.from_lab(*color).distance(*color) == 0.0


def test_non_negative_over_grid():
    rng = np.random.default_rng(2005)
    refs = rng.uniform([0.0, -128.0, -128.0], [100.0, 128.0, 128.0], size=(20, 3))
    samples = rng.uniform([0.0, -128.0, -128.0], [100.0, 128.0, 128.0], size=(20, 3))
    for ref in refs:
        engine = CIEDE2000.from_lab(*ref)
        for sample in samples:
            de = engine.distance(*sample)
            assert math.isfinite(de)
            assert de >= 0.0


def test_polar_matches_explicit_color(blue_engine):
    r, theta = 4.5, 2.1
    explicit = blue_engine.distance(50.0, 2.6772 + r * math.cos(theta),
                                    -79.7751 + r * math.sin(theta))
    assert blue_engine.distance_polar(r, theta) == pytest.approx(explicit, abs=1e-12)


@pytest.mark.parametrize("theta", [0.0, 1.0, 3.5, -2.0, 10.0])
def test_polar_angle_is_periodic(blue_engine, theta):
    d0 = blue_engine.distance_polar(3.0, theta)
    for k in (-3, -1, 1, 5):
        assert blue_engine.distance_polar(3.0, theta + k * TWO_PI) == pytest.approx(d0, abs=1e-9)


def test_polar_zero_radius(gray_engine):
    assert gray_engine.distance_polar(0.0, 1.234) == 0.0


def test_achromatic_reference_uses_sample_hue(gray_engine):
    # Only the sample carries hue; the result must still match the dataset.
    assert gray_engine.distance(50.0, -1.0, 2.0) == pytest.approx(2.3669, abs=1e-4)


def test_textiles_matches_k_L_two():
    textiles = CIEDE2000.from_lab(50.0, 0.0, 0.0, textiles=True)
    k_l2 = CIEDE2000.from_lab(50.0, 0.0, 0.0, k_L=2.0)
    standard = CIEDE2000.from_lab(50.0, 0.0, 0.0)
    assert textiles.weights == (2.0, 1.0, 1.0)
    assert textiles.distance(55.0, 0.0, 0.0) == pytest.approx(k_l2.distance(55.0, 0.0, 0.0))
    assert textiles.distance(55.0, 0.0, 0.0) < standard.distance(55.0, 0.0, 0.0)


def test_from_color_keeps_reference():
    color = LabColor(61.2901, 3.7196, -5.3901)
    engine = CIEDE2000.from_color(color, k_L=2.0)
    assert engine.reference == color
    assert engine.k_L == 2.0
    assert engine.distance_to(LabColor(61.4292, 2.2480, -4.9620)) < 1.8731


def test_engine_is_frozen(gray_engine):
    with pytest.raises(AttributeError):
        gray_engine.reference = LabColor(0.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_sample_rejected(gray_engine, bad):
    with pytest.raises(InvalidInputError):
        gray_engine.distance(50.0, bad, 0.0)
    with pytest.raises(InvalidInputError):
        gray_engine.distance_polar(bad, 0.0)
    with pytest.raises(InvalidInputError):
        gray_engine.distance_polar(1.0, bad)


def test_non_finite_reference_rejected():
    with pytest.raises(InvalidInputError):
        CIEDE2000.from_lab(math.nan, 0.0, 0.0)


@pytest.mark.parametrize("weights", [
    {"k_L": 0.0},
    {"k_C": -1.0},
    {"k_H": math.nan},
])
def test_bad_weights_rejected(weights):
    with pytest.raises(InvalidInputError):
        CIEDE2000.from_lab(50.0, 0.0, 0.0, **weights)


def test_invalid_input_is_a_value_error(gray_engine):
    with pytest.raises(ValueError):
        gray_engine.distance(math.nan, 0.0, 0.0)


def test_unchecked_nan_propagates(gray_engine):
    assert math.isnan(gray_engine.distance(math.nan, 0.0, 0.0, check_finite=False))


# ---------------------------------------------------------------------------
# Angles and value types
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("angle, expected", [
    (0.0, 0.0),
    (math.pi, math.pi),
    (-math.pi / 2.0, 1.5 * math.pi),
    (3.5 * math.pi, 1.5 * math.pi),
    (TWO_PI, 0.0),
    (-TWO_PI, 0.0),
])
def test_wrap_angle(angle, expected):
    assert wrap_angle(angle) == pytest.approx(expected, abs=1e-12)


@pytest.mark.parametrize("angle", [-1e-20, 1e6, -1e6, 1e15, 4.0 * TWO_PI - 1e-17])
def test_wrap_angle_stays_in_range(angle):
    w = wrap_angle(angle)
    assert 0.0 <= w < TWO_PI


def test_lab_color_hue_and_chroma():
    assert LabColor(50.0, 0.0, 0.0).hue == 0.0
    assert LabColor(50.0, 0.0, 0.0).chroma == 0.0
    assert LabColor(50.0, 0.0, 1.0).hue == pytest.approx(math.pi / 2.0)
    assert LabColor(50.0, 0.0, -1.0).hue == pytest.approx(1.5 * math.pi)
    assert LabColor(50.0, 3.0, 4.0).chroma == pytest.approx(5.0)
    assert LabColor(1.0, 2.0, 3.0).as_tuple() == (1.0, 2.0, 3.0)


def test_polar_offset_apply():
    offset = PolarOffset(2.0, -math.pi / 2.0)
    assert offset.normalized_angle == pytest.approx(1.5 * math.pi)
    moved = offset.apply(LabColor(40.0, 1.0, 1.0))
    assert moved.L == 40.0
    assert moved.a == pytest.approx(1.0, abs=1e-12)
    assert moved.b == pytest.approx(-1.0)


def test_offset_color_distance_matches_polar(blue_engine):
    offset = PolarOffset(6.0, 0.7)
    assert blue_engine.distance_to(blue_engine.offset_color(offset)) == pytest.approx(
        blue_engine.distance_polar(6.0, 0.7), abs=1e-12)


# ---------------------------------------------------------------------------
# Extreme but finite inputs
# ---------------------------------------------------------------------------
def test_huge_chroma_stays_finite(gray_engine):
    # The chroma term saturates at 1 / (0.045 / 2) for an achromatic reference.
    de = gray_engine.distance(50.0, 1e50, 0.0)
    assert math.isfinite(de)
    assert de == pytest.approx(1.0 / 0.0225, rel=1e-6)


def test_huge_lightness_stays_finite(gray_engine):
    # SL grows like 0.015 * |L_bar - 50|, so the lightness term saturates.
    de = gray_engine.distance(1e200, 0.0, 0.0)
    assert math.isfinite(de)
    assert de == pytest.approx(1.0 / 0.0075, rel=1e-6)


def test_huge_polar_radius_stays_finite(gray_engine):
    de = gray_engine.distance_polar(1e60, 0.0)
    assert math.isfinite(de)
    assert de >= 0.0


def test_overflowing_pair_is_rejected():
    engine = CIEDE2000.from_lab(50.0, 1e308, 1e308)
    with pytest.raises(InvalidInputError):
        engine.distance(50.0, -1e308, -1e308)


def test_from_color_textiles():
    engine = CIEDE2000.from_color(LabColor(50.0, 0.0, 0.0), textiles=True)
    assert engine.weights == (2.0, 1.0, 1.0)
