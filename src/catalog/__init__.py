"""Product catalog HTTP service.

This package exposes the Product resource over a FastAPI application, backed
by a relational store through SQLModel.
"""

__version__ = "0.1.0"
