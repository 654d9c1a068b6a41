"""Athlete injury log service."""

__version__ = "0.1.0"
