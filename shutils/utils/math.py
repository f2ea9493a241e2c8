"""
Numeric helpers for dose-response analysis and plotting.

This module provides the small numeric building blocks used around the
treatment design code: geometric dose ranges for prediction grids,
significant-digit formatting for legend labels, and filters for non-finite
values. Errors from invalid arithmetic (e.g. log of a non-positive bound)
propagate unmodified from the math module.
"""

import math
from typing import Iterable, Sequence

import numpy as np

from shutils.utils.errors import InvalidInputError


def skip_inf(x: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Return only the finite elements of x.

    Drops +inf, -inf, and NaN, preserving the order of the remaining values.
    """
    values = np.asarray(x, dtype=float)
    return values[np.isfinite(values)]


def geom_range(start: float, stop: float, length: int = 50) -> np.ndarray:
    """
    Create a geometric series between two positive bounds.

    **Conceptual**: Dose-response curves are usually evaluated on a log-spaced
    concentration grid, so that every order of magnitude gets the same number
    of points. This is the grid generator for such predictions.

    **Mathematical**: Points are evenly spaced in log10 space:
        x_i = 10 ** (log10(start) + i * (log10(stop) - log10(start)) / (length - 1))
    for i = 0 .. length - 1, so x_0 == start and x_{length-1} == stop (up to
    floating point error).

    **Edge cases**:
    - start or stop <= 0 raises ValueError ("math domain error") from
      math.log10; the error is not caught here.
    - start > stop yields a descending series.

    Args:
        start: First value of the series (must be > 0).
        stop: Last value of the series (must be > 0).
        length: Number of points (default 50).

    Returns:
        1-D numpy array of length points.
    """
    return np.logspace(math.log10(start), math.log10(stop), num=length)


def geom_range_from_values(values: Iterable[float], length: int = 50) -> np.ndarray:
    """
    Geometric series spanning the range of values (minimum to maximum).

    Typical use: build a prediction grid covering all observed non-zero
    concentrations. Non-positive values must be removed first, otherwise
    geom_range raises.
    """
    values = np.asarray(list(values), dtype=float)
    return geom_range(float(values.min()), float(values.max()), length=length)


def diff_vec(x: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    First differences of x with a leading NaN.

    Analogous to pandas' Series.diff(): the output has the same length as the
    input, and element i holds x[i] - x[i-1].
    """
    values = np.asarray(x, dtype=float)
    return np.concatenate([[np.nan], np.diff(values)])


def _check_sigdigits(sigdigits: int) -> None:
    if sigdigits < 1:
        raise InvalidInputError(f"sigdigits must be >= 1, got {sigdigits}.")


def round_sigdigits(x: float, sigdigits: int = 2) -> float:
    """
    Round x to sigdigits significant digits.

    Example:
        >>> round_sigdigits(1234.5, sigdigits=2)
        1200.0
        >>> round_sigdigits(0.012345, sigdigits=3)
        0.0123
    """
    _check_sigdigits(sigdigits)
    # "g" formatting rounds on significant digits, not decimal places
    return float(f"{float(x):.{sigdigits}g}")


def format_sigdigits(x: float, sigdigits: int = 2) -> str:
    """
    Round x to sigdigits significant digits and render it as a string.

    A trailing ".0" is dropped, so integral results print without a decimal
    point ("1200" rather than "1200.0").

    Example:
        >>> format_sigdigits(1234.5)
        '1200'
        >>> format_sigdigits(0.01234)
        '0.012'
    """
    rounded = str(round_sigdigits(x, sigdigits=sigdigits))
    if rounded.endswith(".0"):
        rounded = rounded[:-2]
    return rounded


def legend_labels(values: Iterable[float], sigdigits: int = 2) -> list[str]:
    """
    Create unique legend labels from numeric values.

    Values are formatted with format_sigdigits; labels that collapse to the
    same string after rounding appear once. Order follows first occurrence.

    Example:
        >>> legend_labels([0.0, 1.04, 1.0, 25.0])
        ['0', '1', '25']
    """
    labels = []
    seen = set()
    for value in values:
        label = format_sigdigits(value, sigdigits=sigdigits)
        if label not in seen:
            seen.add(label)
            labels.append(label)
    return labels
