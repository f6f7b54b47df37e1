"""Taskido - task extraction and timeline aggregation for markdown vaults."""

__version__ = "0.1.0"
