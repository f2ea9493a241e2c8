"""
Tests for shutils/design/treatments.py

These tests verify treatment type/level/label inference on small, hand-crafted
exposure matrices where the expected design is easy to read off.
"""

import numpy as np
import pandas as pd
import pytest

from shutils.design.treatments import (
    CONTROL_TYPE,
    MIXTURE_TYPE,
    TREATMENT_COLUMNS,
    TreatmentDesign,
    add_treatment_columns,
    infer_treatment_design,
)
from shutils.utils.errors import InvalidInputError


# ============================================================================
# Helper functions for test data generation
# ============================================================================

def make_two_stressor_exposure() -> list[list[float]]:
    """Control, two A levels, one B level, one A+B mixture."""
    return [
        [0.0, 0.0],
        [5.0, 0.0],
        [5.0, 0.0],
        [0.0, 3.0],
        [5.0, 3.0],
    ]


def assert_level_invariants(design: TreatmentDesign) -> None:
    """Check the control row, run counting, and label composition."""
    assert design.types[0] == CONTROL_TYPE
    assert design.levels[0] == 0
    for i in range(1, len(design)):
        if design.types[i] == design.types[i - 1]:
            assert design.levels[i] == design.levels[i - 1] + 1
        else:
            assert design.levels[i] == 1
    for treatment_type, level, label in design:
        assert label == treatment_type + str(level)


# ============================================================================
# Tests for infer_treatment_design
# ============================================================================

def test_infer_treatment_design_reference_scenario():
    """Test the two-stressor reference exposure."""
    design = infer_treatment_design(make_two_stressor_exposure(), ["A", "B"])

    assert design.types == ("co", "A", "A", "B", "mix")
    assert design.levels == (0, 1, 2, 1, 1)
    assert design.labels == ("co0", "A1", "A2", "B1", "mix1")


def test_infer_treatment_design_control_only():
    """Test that a single-row matrix yields only the control."""
    design = infer_treatment_design([[0.0, 0.0, 0.0]], ["A", "B", "C"])

    assert design.types == ("co",)
    assert design.levels == (0,)
    assert design.labels == ("co0",)


def test_infer_treatment_design_control_row_ignores_doses():
    """Test that row 0 is the control even when it carries a dose."""
    design = infer_treatment_design([[7.0, 0.0], [7.0, 0.0]], ["A", "B"])

    assert design.labels == ("co0", "A1")


def test_infer_treatment_design_zero_dose_row_is_mix():
    """Test that a dose-free row past the control is classified as mix."""
    design = infer_treatment_design([[0, 0], [0, 0], [0, 0]], ["A", "B"])

    assert design.types == ("co", MIXTURE_TYPE, MIXTURE_TYPE)
    assert design.levels == (0, 1, 2)


def test_infer_treatment_design_non_consecutive_runs_restart():
    """Test that a type interrupted by another type restarts at level 1."""
    exposure = [[0, 0], [1, 0], [0, 1], [2, 0], [4, 0]]
    design = infer_treatment_design(exposure, ["A", "B"])

    assert design.labels == ("co0", "A1", "B1", "A1", "A2")


def test_infer_treatment_design_mixtures_count_as_one_type():
    """Test that different mixtures in a row share one mix run."""
    exposure = [[0, 0, 0], [1, 1, 0], [0, 1, 1], [1, 1, 1]]
    design = infer_treatment_design(exposure, ["A", "B", "C"])

    assert design.labels == ("co0", "mix1", "mix2", "mix3")


def test_infer_treatment_design_negative_doses_are_inactive():
    """Test that only strictly positive doses count as active."""
    design = infer_treatment_design([[0, 0], [-1.0, 2.0]], ["A", "B"])

    assert design.labels == ("co0", "B1")


def test_infer_treatment_design_numpy_input_and_non_string_names():
    """Test 2-D array input and stressor names given as non-strings."""
    exposure = np.array([[0.0, 0.0], [0.0, 0.5], [0.0, 1.0]])
    design = infer_treatment_design(exposure, [10, 20])

    assert design.types == ("co", "20", "20")
    assert design.labels == ("co0", "201", "202")


def test_infer_treatment_design_invariants_on_longer_series():
    """Test the level invariants on a longer, mixed protocol."""
    exposure = [
        [0, 0, 0],
        [1, 0, 0], [2, 0, 0], [4, 0, 0],
        [0, 1, 0], [0, 2, 0],
        [0, 0, 1],
        [1, 1, 0], [2, 2, 0],
        [0, 0, 0],
        [0, 0, 3],
    ]
    design = infer_treatment_design(exposure, ["A", "B", "C"])

    assert len(design) == len(exposure)
    assert_level_invariants(design)
    assert design.labels[-2:] == ("mix3", "C1")


def test_infer_treatment_design_is_deterministic():
    """Test that repeated calls return equal designs."""
    exposure = make_two_stressor_exposure()

    first = infer_treatment_design(exposure, ["A", "B"])
    second = infer_treatment_design(exposure, ["A", "B"])

    assert first == second


def test_infer_treatment_design_empty_exposure():
    """Test that an empty exposure matrix is rejected."""
    with pytest.raises(InvalidInputError) as exc_info:
        infer_treatment_design([], ["A", "B"])

    assert "empty" in str(exc_info.value)


def test_infer_treatment_design_dimension_mismatch():
    """Test that a row with the wrong number of doses is rejected."""
    exposure = [[0, 0], [1, 0, 0]]

    with pytest.raises(InvalidInputError) as exc_info:
        infer_treatment_design(exposure, ["A", "B"])

    assert "row 1" in str(exc_info.value)


def test_infer_treatment_design_mismatch_is_a_value_error():
    """Test that InvalidInputError can be caught as ValueError."""
    with pytest.raises(ValueError):
        infer_treatment_design([[0, 0]], ["A"])


# ============================================================================
# Tests for TreatmentDesign and add_treatment_columns
# ============================================================================

def test_treatment_design_to_frame():
    """Test conversion of a design to a DataFrame."""
    design = infer_treatment_design(make_two_stressor_exposure(), ["A", "B"])
    frame = design.to_frame()

    assert list(frame.columns) == TREATMENT_COLUMNS
    assert frame['treatment'].tolist() == ["co0", "A1", "A2", "B1", "mix1"]
    assert frame['treatment_level'].tolist() == [0, 1, 2, 1, 1]


def test_add_treatment_columns_labels_rows():
    """Test that treatment columns are added next to the existing data."""
    df = pd.DataFrame({
        'A': [0.0, 5.0, 5.0, 0.0, 5.0],
        'B': [0.0, 0.0, 0.0, 3.0, 3.0],
        'response': [1.0, 0.9, 0.8, 0.7, 0.2],
    })

    labelled = add_treatment_columns(df, ['A', 'B'])

    assert labelled['treatment'].tolist() == ["co0", "A1", "A2", "B1", "mix1"]
    assert labelled['response'].tolist() == df['response'].tolist()
    # Input is not modified
    assert 'treatment' not in df.columns


def test_add_treatment_columns_missing_column():
    """Test that an unknown stressor column is rejected."""
    df = pd.DataFrame({'A': [0.0, 1.0]})

    with pytest.raises(InvalidInputError) as exc_info:
        add_treatment_columns(df, ['A', 'B'])

    assert "['B']" in str(exc_info.value)
