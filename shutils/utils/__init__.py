"""
Generic utility functions shared across modules.

Includes numeric helpers, text parsing, logging setup, and error classes.
"""
