"""
CSV readers and writers for experiment tables and result tables.

**Conceptual**: This module is the I/O boundary for CSV data in shutils.
Two contracts live here:

  - Incremental persistence: simulation or fitting loops write their results
    after every step, so a crash halfway through still leaves the completed
    steps on disk. Step 1 creates (or truncates) the file; later steps append
    rows without re-writing the header.
  - W3C-annotated input: experiment exports carry leading "#" comment lines
    with metadata (units, experimenter, date, ...). These lines are split off
    and returned as a dict next to the data table instead of being discarded.

**Rule**: Loops must call write_incremental_csv with strictly increasing steps
for a given path, from a single writer. An append against a missing file is a
caller bug (step 1 was skipped) and raises instead of silently creating a
file with no header.
"""

import io
import logging
import numbers
from pathlib import Path

import pandas as pd

from shutils.utils.errors import InvalidInputError, MissingPrerequisiteError

logger = logging.getLogger(__name__)

METADATA_SEPARATORS = (":", "=", ",")


def _validate_step(step) -> int:
    # bool is an Integral subclass; True must not pass as step 1
    if isinstance(step, bool) or not isinstance(step, numbers.Integral):
        raise InvalidInputError(
            f"Step must be a positive integer, got {step!r} "
            f"({type(step).__name__})."
        )
    if step < 1:
        raise InvalidInputError(
            f"Step must be >= 1, got {step}. "
            f"Steps are 1-based: use step=1 to create the file."
        )
    return int(step)


def write_incremental_csv(
    path: Path | str,
    df: pd.DataFrame,
    step: int,
) -> None:
    """
    Write a result table to CSV as part of a multi-step loop.

    **Functionally**:
      - step == 1: writes df with header to path, replacing any existing file.
        Parent directories are created if needed.
      - step > 1: appends df's rows (no header) to the existing file. The
        frame's columns must match the header already on disk.

    Writing tables t1..tk at steps 1..k produces the same file as writing
    pd.concat([t1, ..., tk]) once at step 1.

    Args:
        path: Destination CSV path.
        df: Table to persist. Index is not written.
        step: 1-based loop step.

    Raises:
        InvalidInputError: If step is not a positive integer, or (step > 1)
                           if df's columns differ from the existing header.
        MissingPrerequisiteError: If step > 1 and path does not exist.
        OSError: If the file cannot be written.

    Example:
        >>> for step, batch in enumerate(batches, start=1):
        ...     write_incremental_csv("results/fits.csv", batch, step)
    """
    path = Path(path)
    step = _validate_step(step)

    if step == 1:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, mode='w')
        logger.debug("Step 1: wrote %d rows to %s", len(df), path)
        return

    if not path.is_file():
        raise MissingPrerequisiteError(
            f"Attempt to append to non-existing file {path}: step={step} but "
            f"the file does not exist. Call with step=1 first to create it."
        )

    # Compare raw header text; pd.read_csv would rename duplicate or blank names
    with path.open('r', encoding='utf-8', newline='') as handle:
        existing_header = handle.readline().rstrip("\r\n")
    new_header = df.head(0).to_csv(index=False).rstrip("\r\n")
    if existing_header != new_header:
        raise InvalidInputError(
            f"{path}: columns of step {step} do not match the file header. "
            f"File header: {existing_header!r}. Table header: {new_header!r}."
        )

    df.to_csv(path, index=False, header=False, mode='a')
    logger.debug("Step %d: appended %d rows to %s", step, len(df), path)


def parse_metadata_line(line: str, comment_prefix: str = "#") -> tuple[str, str]:
    """
    Split a metadata comment line into (key, value).

    The separator is the first of ':', '=' or ',' found in the line. Lines
    without any separator map to (line, "").

    Example:
        >>> parse_metadata_line("# unit: mg/L")
        ('unit', 'mg/L')
    """
    body = line.strip()
    if body.startswith(comment_prefix):
        body = body[len(comment_prefix):]

    positions = [body.find(sep) for sep in METADATA_SEPARATORS if sep in body]
    if not positions:
        return body.strip(), ""

    split_at = min(positions)
    return body[:split_at].strip(), body[split_at + 1:].strip()


def read_w3c_csv(
    path: Path | str,
    comment_prefix: str = "#",
    **read_csv_kwargs,
) -> tuple[pd.DataFrame, dict[str, str]]:
    """
    Read a CSV file whose metadata is stored in comment lines.

    **Format**: Any line starting with comment_prefix is metadata
    ("# key: value"); every other line belongs to the delimited table, header
    first. Blank lines are ignored by pandas as usual. A file holding only
    metadata (no header line) yields an empty DataFrame.

    Args:
        path: Path to the annotated CSV file.
        comment_prefix: Prefix marking metadata lines (default "#").
        **read_csv_kwargs: Passed through to pd.read_csv (e.g. sep=";").

    Returns:
        (data, metadata): the table and a dict of metadata key -> value.
        Later duplicate keys overwrite earlier ones.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pd.errors.ParserError: If the table part is malformed.

    Example:
        >>> data, metadata = read_w3c_csv("data/raw/exposure.csv")
        >>> metadata["experimenter"]
        'JD'
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Annotated CSV not found: {path}. "
            f"Ensure the file exists and the path is correct."
        )

    metadata: dict[str, str] = {}
    data_lines = []
    with path.open('r', encoding='utf-8') as handle:
        for line in handle:
            if line.lstrip().startswith(comment_prefix):
                key, value = parse_metadata_line(line, comment_prefix=comment_prefix)
                metadata[key] = value
            else:
                data_lines.append(line)

    table_text = "".join(data_lines)
    if table_text.strip():
        data = pd.read_csv(io.StringIO(table_text), **read_csv_kwargs)
    else:
        data = pd.DataFrame()
    logger.debug(
        "Read %s: %d rows, %d metadata entries", path, len(data), len(metadata)
    )
    return data, metadata
