"""Kaiser window design for the interpolation filter.

Pure-Python evaluation of the zeroth-order modified Bessel function and
the Kaiser window built on it. These run once per conversion, while the
filter table is built.
"""

from __future__ import annotations

import math

# Series summation stops once a term drops below this
_BESSEL_EPSILON = 1.0e-21


def bessel_i0(x: float) -> float:
    """Zeroth-order modified Bessel function of the first kind at ``x``.

    Sums ``(x/2)^(2i) / (i!)^2`` with a running factorial until the next
    term is negligible. The terms shrink monotonically for the shape
    parameters produced by :func:`kaiser_db`.
    """
    i0 = 1.0
    ifac = 1.0
    i = 1

    while True:
        term = math.pow(x / 2.0, i * 2) / math.pow(ifac, 2)
        if abs(term) < _BESSEL_EPSILON:
            break
        i0 += term
        i += 1
        ifac *= i

    return i0


def kaiser(alpha: float, M: float, n: float) -> float:
    """Kaiser window of shape ``alpha`` and length ``M + 1`` at point ``n``.

    Zero outside ``[0, M]``; rectangular when ``alpha`` is 0.
    """
    if n < 0 or n > M:
        return 0.0
    if M == 0:
        return 1.0

    arg = 1.0 - math.pow(2.0 * n / M - 1.0, 2)
    return bessel_i0(alpha * math.sqrt(arg)) / bessel_i0(alpha)


def kaiser_table(alpha: float, length: int) -> list[float]:
    """One half of a Kaiser sequence of size ``(length - 1) * 2``.

    Entry ``i`` holds the window at position ``length - i - 1``, so entry 0
    is the window's peak and the last entry its outer edge.
    """
    M = (length - 1) * 2
    return [kaiser(alpha, M, length - i - 1) for i in range(length)]


def kaiser_db(dB: float) -> float:
    """Kaiser shape parameter giving a sidelobe attenuation of ``dB``.

    Empirical three-branch rule (the one documented for MATLAB's
    ``kaiser``). Attenuations below 21 dB need no taper at all.
    """
    if dB > 50.0:
        return 0.1102 * (dB - 8.7)
    elif dB >= 21.0:
        return 0.5842 * math.pow(dB - 21.0, 0.4) + 0.07886 * (dB - 21.0)
    else:
        return 0.0


shape_from_attenuation = kaiser_db
