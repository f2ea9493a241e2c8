"""
Error classes shared across shutils.

**Conceptual**: Every failure the library detects on its own falls into one of
two buckets: the caller handed over something malformed (InvalidInputError),
or the caller skipped a required earlier step (MissingPrerequisiteError).
Errors raised by numpy, pandas, or the math module are never wrapped in these
classes; they propagate unmodified.

Both concrete errors also subclass the closest built-in exception, so callers
that only know about ValueError / FileNotFoundError still catch them.
"""


class ShutilsError(Exception):
    """Base for all errors raised by shutils itself."""
    pass


class InvalidInputError(ShutilsError, ValueError):
    """
    Raised when arguments are structurally malformed.

    Examples: exposure rows whose width does not match the number of stressor
    names, an empty exposure matrix, a non-positive step index, or a table whose
    columns do not match the file it is being appended to.
    """
    pass


class MissingPrerequisiteError(ShutilsError, FileNotFoundError):
    """
    Raised when an append is requested before the initial write exists.

    **Usage**: This indicates a caller bug (step 1 was skipped), not a
    recoverable condition. Orchestration loops should let it propagate and
    abort the run rather than retry.
    """
    pass
