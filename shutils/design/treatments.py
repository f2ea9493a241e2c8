"""
Treatment design inference from raw exposure matrices.

**Conceptual**: Multi-stressor experiments are often stored as one dose vector
per observation (one dose per stressor), without any explicit record of which
treatment an observation belongs to. This module reconstructs that metadata:

  - treatment type: "co" (control), a stressor name (single stressor active),
    or "mix" (anything else)
  - treatment level: ordinal position within a contiguous block of
    observations sharing the same type (1, 2, 3, ...)
  - treatment label: type + level, e.g. "A2" or "mix1"

**Ordering matters**: Levels count *consecutive* observations. Input row order
is assumed to follow the experiment protocol (control first, then increasing
doses per treatment block). A type that reappears after an interruption starts
again at level 1; levels are "position within a block", not "nth occurrence".

**Control row**: Observation 0 is always the control ("co", level 0), whatever
its doses are. The library does not check that the control is actually
dose-free.

**Zero-dose rows past index 0**: A later observation with no positive dose is
classified "mix", not "co". Only "exactly one positive dose" maps to a
stressor name; every other count falls through to "mix".
"""

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
import pandas as pd

from shutils.utils.errors import InvalidInputError


CONTROL_TYPE = "co"
MIXTURE_TYPE = "mix"

TREATMENT_COLUMNS = ["treatment_type", "treatment_level", "treatment"]


@dataclass(frozen=True)
class TreatmentDesign:
    """
    Inferred design labels, co-indexed with the exposure matrix rows.

    Attributes:
        types: Treatment type per observation ("co", stressor name, or "mix").
        levels: Ordinal level per observation (0 for the control).
        labels: type + str(level) per observation.
    """
    types: tuple[str, ...]
    levels: tuple[int, ...]
    labels: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.types)

    def __iter__(self) -> Iterator[tuple[str, int, str]]:
        return iter(zip(self.types, self.levels, self.labels))

    def to_frame(self) -> pd.DataFrame:
        """Return the design as a DataFrame with TREATMENT_COLUMNS."""
        return pd.DataFrame({
            'treatment_type': list(self.types),
            'treatment_level': list(self.levels),
            'treatment': list(self.labels),
        })


def _classify_doses(doses: np.ndarray, stressor_names: Sequence[str]) -> str:
    # Explicit count; zero active doses lands in "mix" as well.
    active = np.flatnonzero(doses > 0)
    if len(active) == 1:
        return stressor_names[active[0]]
    return MIXTURE_TYPE


def infer_treatment_design(
    exposure: Sequence[Sequence[float]] | np.ndarray,
    stressor_names: Sequence[str],
) -> TreatmentDesign:
    """
    Infer treatment types, levels, and labels from an exposure matrix.

    **Functionally**:
      - Observation 0 is forced to ("co", 0, "co0").
      - Every later observation with exactly one dose > 0 gets that stressor's
        name as type; all others get "mix".
      - The level increments while the type stays the same as the previous
        observation and resets to 1 whenever it changes.

    Single linear pass, O(n * k) for n observations and k stressors. The
    function is pure: repeated calls on the same input return equal results.

    Args:
        exposure: Sequence of dose vectors (or a 2-D array), one row per
                  observation, one column per stressor.
        stressor_names: Names matching the dose-vector positions.

    Returns:
        TreatmentDesign with one entry per observation.

    Raises:
        InvalidInputError: If exposure is empty, or if any dose vector's length
                           differs from len(stressor_names).

    Example:
        >>> design = infer_treatment_design(
        ...     [[0, 0], [5, 0], [5, 0], [0, 3], [5, 3]], ["A", "B"]
        ... )
        >>> design.labels
        ('co0', 'A1', 'A2', 'B1', 'mix1')
    """
    names = [str(name) for name in stressor_names]

    if len(exposure) == 0:
        raise InvalidInputError(
            "Exposure matrix is empty. "
            "At least the control observation (row 0) is required."
        )

    rows = []
    for i, observation in enumerate(exposure):
        doses = np.asarray(observation, dtype=float)
        if doses.ndim != 1 or len(doses) != len(names):
            raise InvalidInputError(
                f"Exposure row {i} has {doses.size} dose(s) but "
                f"{len(names)} stressor name(s) were given: {names}. "
                f"Every row needs exactly one dose per stressor."
            )
        rows.append(doses)

    types = [CONTROL_TYPE]
    levels = [0]
    labels = [CONTROL_TYPE + "0"]

    previous_type = CONTROL_TYPE
    run_counter = 0
    for doses in rows[1:]:
        current_type = _classify_doses(doses, names)
        if current_type == previous_type:
            run_counter += 1
        else:
            run_counter = 1

        types.append(current_type)
        levels.append(run_counter)
        labels.append(current_type + str(run_counter))
        previous_type = current_type

    return TreatmentDesign(
        types=tuple(types),
        levels=tuple(levels),
        labels=tuple(labels),
    )


def add_treatment_columns(
    df: pd.DataFrame,
    stressor_columns: Sequence[str],
) -> pd.DataFrame:
    """
    Label each row of an experiment table with its inferred treatment.

    The exposure matrix is taken from stressor_columns in row order, so the
    first row of df is the control. Column names double as stressor names.

    Args:
        df: Experiment table with one dose column per stressor.
        stressor_columns: Dose columns, in stressor order.

    Returns:
        Copy of df with treatment_type, treatment_level, and treatment columns
        appended (overwriting any existing columns of the same name).

    Raises:
        InvalidInputError: If a stressor column is missing or df is empty.
    """
    missing_cols = [col for col in stressor_columns if col not in df.columns]
    if missing_cols:
        raise InvalidInputError(
            f"Missing stressor columns: {missing_cols}. "
            f"Found columns: {list(df.columns)}."
        )

    design = infer_treatment_design(
        df[list(stressor_columns)].to_numpy(dtype=float),
        list(stressor_columns),
    )

    df_labelled = df.copy()
    df_labelled['treatment_type'] = list(design.types)
    df_labelled['treatment_level'] = list(design.levels)
    df_labelled['treatment'] = list(design.labels)
    return df_labelled
