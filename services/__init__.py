"""
Service layer for the fire safety operations backend.

This package contains framework-agnostic business logic (storage
backends, dashboard aggregation, spreadsheet import) that can be used
by the CLI, the API, or any other interface.
"""

__version__ = "1.0.0"
