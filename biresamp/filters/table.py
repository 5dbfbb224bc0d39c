"""Windowed-sinc lookup tables for bandlimited interpolation.

The table ``h`` holds the right half of a symmetric sinc x Kaiser impulse
response sampled at ``resolution`` points per zero-crossing, with
``h[0]`` at the center of the filter. ``hb`` holds the forward
differences used to interpolate linearly between stored phases.

The resampler indexes these tables as ``l + i * resolution`` with
``l = floor(eta * resolution)``. That mapping is fixed; changing either
side alters every output sample.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from loguru import logger

from biresamp.filters.kaiser import kaiser_db, kaiser_table

# Filter design constants
ATTENUATION_DB = 80.0
ZERO_CROSSINGS = 5
TABLE_RESOLUTION = 512


@dataclass(frozen=True)
class FilterTable:
    """Immutable filter and difference tables shared by every output sample."""

    h: np.ndarray
    hb: np.ndarray
    alpha: float
    zero_crossings: int = ZERO_CROSSINGS
    resolution: int = TABLE_RESOLUTION

    @property
    def length(self) -> int:
        """Table length ``N_h = resolution * zero_crossings + 1``."""
        return len(self.h)


def build_table(
    alpha: float,
    resolution: int = TABLE_RESOLUTION,
    zero_crossings: int = ZERO_CROSSINGS,
) -> np.ndarray:
    """Build the half-window sinc x Kaiser impulse response.

    Args:
        alpha: Kaiser shape parameter.
        resolution: Table entries per zero-crossing (``L``).
        zero_crossings: Number of sinc zero-crossings covered (``N_z``).

    Returns:
        Array of ``resolution * zero_crossings + 1`` floats with ``h[0] == 1``.
    """
    length = resolution * zero_crossings + 1
    h = kaiser_table(alpha, length)

    for i in range(1, length):
        x = i / resolution * math.pi
        h[i] *= math.sin(x) / x

    # sinc(0) by convention
    h[0] = 1.0

    return np.asarray(h, dtype=np.float64)


def build_diffs(h: np.ndarray) -> np.ndarray:
    """Forward differences of ``h``; the final entry is 0."""
    hb = np.zeros(len(h), dtype=np.float64)
    hb[:-1] = h[1:] - h[:-1]
    return hb


@lru_cache(maxsize=8)
def design_filter(
    attenuation_db: float = ATTENUATION_DB,
    zero_crossings: int = ZERO_CROSSINGS,
    resolution: int = TABLE_RESOLUTION,
) -> FilterTable:
    """Design the interpolation filter and its difference table.

    Results are cached; the returned arrays are read-only.
    """
    if zero_crossings < 1 or resolution < 1:
        raise ValueError(
            f"zero_crossings and resolution must be positive, "
            f"got {zero_crossings} and {resolution}"
        )

    alpha = kaiser_db(attenuation_db)
    h = build_table(alpha, resolution, zero_crossings)
    hb = build_diffs(h)
    h.setflags(write=False)
    hb.setflags(write=False)

    logger.debug(
        f"Designed filter: {attenuation_db} dB, alpha={alpha:.5f}, "
        f"N_z={zero_crossings}, L={resolution}, N_h={len(h)}"
    )
    return FilterTable(
        h=h,
        hb=hb,
        alpha=alpha,
        zero_crossings=zero_crossings,
        resolution=resolution,
    )
