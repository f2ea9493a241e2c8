"""
shutils – Main entry point.

Minimal bootstrap script that labels the reference design and prints it,
verifying the package imports and the inference runs.
"""

from shutils.design.treatments import infer_treatment_design


def main() -> None:
    """Print the inferred design for a two-stressor reference exposure."""
    design = infer_treatment_design(
        [[0, 0], [5, 0], [5, 0], [0, 3], [5, 3]],
        ["A", "B"],
    )
    print(f"shutils bootstrap complete: {', '.join(design.labels)}")


if __name__ == "__main__":
    main()
