#!/usr/bin/env python3
"""
Label exposure tables with inferred treatments and collect them in one CSV.

**Purpose**: Experiment exports store one dose column per stressor but no
treatment labels. This script infers treatment type, level, and label for
every row and writes all inputs into a single results CSV.

**What it does**:
  1. Loads settings (results directory, metadata prefix, log level)
  2. For each input file, in the order given (one loop step per file):
     - Reads the W3C-annotated CSV (leading "#" lines are metadata)
     - Drops rows with missing doses
     - Infers treatment labels from the stressor dose columns
     - Appends the labelled rows to the output (step 1 creates the file)
  3. Prints a per-file summary with the dose legend labels

**Usage**:
    From project root:
    ```bash
    python actions/label_treatment_design.py data/raw/exp1.csv data/raw/exp2.csv \
        --stressors copper temperature
    ```

**Failure behavior**: Any error aborts the whole run with a non-zero exit
code. Files written by completed steps are left in place; rerunning the script
starts again at step 1 and truncates the output.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from shutils.config.settings import Settings, get_settings
from shutils.data.cleaning import drop_missing_rows
from shutils.data.io import read_w3c_csv, write_incremental_csv
from shutils.design.treatments import add_treatment_columns
from shutils.utils.errors import ShutilsError
from shutils.utils.log_setup import configure_logging
from shutils.utils.math import legend_labels

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "treatments.csv"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: inputs (list[Path]), stressors (list[str]),
        output (Path or None), log_level (str or None).
    """
    parser = argparse.ArgumentParser(
        description="Infer treatment labels from exposure CSVs and collect them in one file",
        epilog="""
Examples:
  # Label a single experiment
  python actions/label_treatment_design.py data/raw/exp1.csv --stressors A B

  # Label several experiments into a custom output file
  python actions/label_treatment_design.py exp1.csv exp2.csv --stressors A B \\
      --output results/all_treatments.csv
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="One or more exposure CSV files; row 0 of each file is its control",
    )

    parser.add_argument(
        "--stressors",
        nargs="+",
        required=True,
        help="Dose column names, in stressor order (e.g., copper temperature)",
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help=f"Output CSV (default: <SHUTILS_RESULTS_DIR>/{DEFAULT_OUTPUT_NAME})",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: SHUTILS_LOG_LEVEL or WARNING)",
    )

    return parser.parse_args(argv)


def label_file(
    input_path: Path,
    stressors: list[str],
    settings: Settings,
) -> pd.DataFrame:
    """
    Read one exposure CSV and return it with treatment columns added.

    Metadata lines are logged, rows with a missing dose in any stressor
    column are dropped (gaps in other columns are kept), and a source_file
    column records where each row came from.

    Raises:
        FileNotFoundError: If input_path doesn't exist.
        InvalidInputError: If a stressor column is missing or no rows remain.
    """
    data, metadata = read_w3c_csv(input_path, comment_prefix=settings.comment_prefix)
    for key, value in metadata.items():
        logger.info("%s metadata %s = %s", input_path.name, key, value)

    data = drop_missing_rows(data, verbose=settings.verbose_cleaning, subset=stressors)
    labelled = add_treatment_columns(data.reset_index(drop=True), stressors)
    labelled['source_file'] = input_path.name
    return labelled


def run(
    inputs: list[Path],
    stressors: list[str],
    output: Path,
    settings: Settings,
) -> int:
    """
    Label every input and persist it to output, one step per file.

    Returns:
        Total number of rows written.
    """
    total_rows = 0
    for step, input_path in enumerate(inputs, start=1):
        labelled = label_file(input_path, stressors, settings)
        write_incremental_csv(output, labelled, step)
        total_rows += len(labelled)

        print(f"  ✓ [{step}/{len(inputs)}] {input_path.name}: {len(labelled)} rows, "
              f"treatments {sorted(set(labelled['treatment']))}")
        for stressor in stressors:
            doses = legend_labels(labelled[stressor], sigdigits=settings.sigdigits)
            print(f"      {stressor} doses: {', '.join(doses)}")

    return total_rows


def main(argv: list[str] | None = None):
    """
    Main entry point for the script.

    **Exit codes**:
      - 0: Success (all inputs labelled and written)
      - 1: Configuration or input error (bad settings, missing file/column,
           malformed CSV)
      - 2 (from argparse): Invalid command line arguments
      - 2: Unexpected fatal error
    """
    args = parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(args.log_level or settings.log_level)
    output = args.output or settings.results_dir / DEFAULT_OUTPUT_NAME

    print(f"Labelling {len(args.inputs)} file(s) -> {output}")
    try:
        total_rows = run(args.inputs, args.stressors, output, settings)
    except (ShutilsError, FileNotFoundError, pd.errors.ParserError) as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Aborting run; output may hold only the completed steps.", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)
    except Exception as e:
        logger.exception("Fatal error while labelling treatments")
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"Done! Wrote {total_rows} rows to {output}")
    sys.exit(0)


if __name__ == "__main__":
    main()
