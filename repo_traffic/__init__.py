"""Snapshot GitHub traffic, clone and repository statistics into dated JSON files."""

__version__ = "0.1.0"
