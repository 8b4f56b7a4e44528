"""Fuzzy record search for the CRM back office."""

__version__ = "0.3.0"
