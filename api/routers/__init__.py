"""
API routers for the Trend Search System.

This package contains all FastAPI router modules for different API endpoints.
"""

__all__ = ["health", "trends", "update", "metrics"]
