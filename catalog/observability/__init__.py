"""
Observability module.

Provides logging configuration shared by the API and the data-access layer.
"""

from catalog.observability.logger import configure_logging

__all__ = ["configure_logging"]
