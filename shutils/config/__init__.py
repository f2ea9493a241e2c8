"""
Configuration management.

Loads settings from environment variables and .env files.
"""
