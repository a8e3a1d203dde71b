"""
FastAPI application for the fire safety operations backend.

This package contains the REST API for customers, jobs, dashboard
figures and spreadsheet imports.
"""

__version__ = "1.0.0"
