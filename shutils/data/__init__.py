"""
Data I/O and table cleaning.

Handles reading W3C-annotated CSVs, incremental result persistence, and
missing-value handling for experiment tables.
"""
