# -*- coding: utf-8 -*-
"""
Chromaray: Walking the CIEDE2000 metric along a hue ray
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from chromaray_engine import CIEDE2000


@pytest.fixture
def gray_engine() -> CIEDE2000:
    return CIEDE2000.from_lab(50.0, 0.0, 0.0)


@pytest.fixture
def blue_engine() -> CIEDE2000:
    return CIEDE2000.from_lab(50.0, 2.6772, -79.7751)
