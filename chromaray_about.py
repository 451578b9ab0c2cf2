# -*- coding: utf-8 -*-
# Chromaray: Walking the CIEDE2000 metric along a hue ray
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for the opticsWolf Chromaray.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "Chromaray"
__description__: Final[str] = (
    "Numba-compiled scalar CIEDE2000 engine bound to a reference L*a*b* "
    "color, with an inverse solver that walks a hue ray in the a*-b* plane "
    "(bracket doubling, then secant or Brent) to hit a target difference."
)
__reference__: Final[str] = (
    "Sharma, Wu & Dalal (2005), The CIEDE2000 color-difference formula: "
    "Implementation notes, supplementary test data, and mathematical "
    "observations."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "description": __description__,
        "reference": __reference__,
        "copyright": __copyright__,
    }
