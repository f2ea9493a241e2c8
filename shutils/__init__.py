"""
shutils – utilities for multi-stressor exposure experiment analysis.

Cleans tabular experiment data, infers treatment design labels from exposure
matrices, formats numbers for display, and persists result tables step by step.
"""
