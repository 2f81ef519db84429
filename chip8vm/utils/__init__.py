"""Utilities: configuration loading and machine constants."""
