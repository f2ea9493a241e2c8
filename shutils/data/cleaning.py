"""
Missing-value handling for experiment tables.

Both functions return new DataFrames and leave their input untouched.
"""

import logging
from typing import Callable, Optional, Sequence

import pandas as pd

from shutils.utils.errors import InvalidInputError

logger = logging.getLogger(__name__)


def _check_columns(df: pd.DataFrame, columns: Sequence[str], action: str) -> None:
    missing_cols = [col for col in columns if col not in df.columns]
    if missing_cols:
        raise InvalidInputError(
            f"Cannot {action} in unknown columns: {missing_cols}. "
            f"Found columns: {list(df.columns)}."
        )


def drop_missing_rows(
    df: pd.DataFrame,
    verbose: bool = False,
    on_dropped: Optional[Callable[[int, int], None]] = None,
    subset: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Keep only rows with no missing value in any column (or in subset).

    **Diagnostics**: The number of dropped rows is always logged at DEBUG
    level, and at INFO when verbose=True. Callers that need the count
    programmatically pass on_dropped, which receives (n_dropped, n_total).

    Args:
        df: Table to clean.
        verbose: Log the dropped-row count at INFO instead of DEBUG.
        on_dropped: Optional callback invoked with (n_dropped, n_total).
        subset: Only these columns are checked for missing values; gaps in
                other columns are kept. Defaults to all columns.

    Returns:
        Copy of df containing only complete rows (original index preserved).

    Raises:
        InvalidInputError: If any of subset is not in df.
    """
    if subset is not None:
        _check_columns(df, subset, "check for missing values")

    n_total = len(df)
    df_clean = df.dropna(how='any', subset=subset).copy()
    n_dropped = n_total - len(df_clean)

    logger.log(
        logging.INFO if verbose else logging.DEBUG,
        "Dropped %d of %d rows containing missing values.",
        n_dropped,
        n_total,
    )
    if on_dropped is not None:
        on_dropped(n_dropped, n_total)

    return df_clean


def replace_missing(
    df: pd.DataFrame,
    columns: Sequence[str],
    replace_value=0.0,
) -> pd.DataFrame:
    """
    Replace missing values in the given columns with replace_value.

    Columns not listed are left as they are, missing values included.

    Args:
        df: Table to clean.
        columns: Columns in which missing values are replaced.
        replace_value: Fill value (default 0.0).

    Returns:
        Copy of df with missing values in columns replaced.

    Raises:
        InvalidInputError: If any of columns is not in df.
    """
    _check_columns(df, columns, "replace missing values")

    df_filled = df.copy()
    for col in columns:
        df_filled[col] = df_filled[col].fillna(replace_value)
    return df_filled
