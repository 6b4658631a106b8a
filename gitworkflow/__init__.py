"""Opinionated Git workflow helpers."""

__version__ = "0.3.0"
