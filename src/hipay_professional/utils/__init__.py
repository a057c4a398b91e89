"""Utility helpers: exceptions and version information."""
