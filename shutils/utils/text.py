"""
String helpers for experiment metadata and serialized vectors.
"""

import re
from typing import Sequence

import numpy as np

_VECTOR_TOKEN_SPLIT = re.compile(r"[\s,]+")


def parse_float_vector(text: str) -> np.ndarray:
    """
    Parse a serialized vector such as "[1.0 2.5 3]" into a float array.

    Surrounding brackets are optional; elements may be separated by
    whitespace, commas, or both. Only the last "[...]" group is used, so a
    prefix like "Float64[1.0 2.0]" also parses.

    Args:
        text: Serialized vector.

    Returns:
        1-D float64 numpy array (empty for "[]").

    Raises:
        ValueError: If an element cannot be parsed as a float.

    Example:
        >>> parse_float_vector("[0.1 0.2 0.3]")
        array([0.1, 0.2, 0.3])
    """
    body = text.split("[")[-1].split("]")[0]
    tokens = [token for token in _VECTOR_TOKEN_SPLIT.split(body.strip()) if token]
    return np.array([float(token) for token in tokens], dtype=float)


def which_in(
    text: str,
    possibilities: Sequence[str],
    none_found: str = "",
) -> str:
    """
    Return the first of possibilities that occurs as a substring of text.

    Possibilities are checked in list order, so when several occur the one
    listed first wins, regardless of where it appears in text.

    Example:
        >>> which_in("I like apples", ["apples", "bananas"])
        'apples'
    """
    for candidate in possibilities:
        if candidate in text:
            return candidate
    return none_found
