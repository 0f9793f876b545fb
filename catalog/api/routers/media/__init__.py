"""
Media router package.

Exports the router for media catalog endpoints.
"""

from .media_router import router

__all__ = ["router"]
