"""Clean Architecture API: product catalog with token authentication."""

__version__ = "1.0.0"
