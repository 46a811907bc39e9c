"""Fetch a tabular or semi-structured dataset and re-emit it in another format."""

__version__ = "0.1.0"
