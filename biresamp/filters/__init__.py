"""Filter design for biresamp.

Usage:
    from biresamp.filters import design_filter

    table = design_filter()          # 80 dB, 5 zero-crossings, 512 phases
    table.h[0], table.length         # 1.0, 2561
"""

from biresamp.filters.kaiser import bessel_i0, kaiser, kaiser_db, kaiser_table, shape_from_attenuation
from biresamp.filters.table import (
    ATTENUATION_DB,
    TABLE_RESOLUTION,
    ZERO_CROSSINGS,
    FilterTable,
    build_diffs,
    build_table,
    design_filter,
)

__all__ = [
    "bessel_i0",
    "kaiser",
    "kaiser_db",
    "kaiser_table",
    "shape_from_attenuation",
    "ATTENUATION_DB",
    "TABLE_RESOLUTION",
    "ZERO_CROSSINGS",
    "FilterTable",
    "build_diffs",
    "build_table",
    "design_filter",
]
