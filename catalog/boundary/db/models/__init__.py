"""
Database models package.

Exports:
  - MediaTitleModel: Media catalog title table

Dependencies: sqlalchemy, catalog.boundary.db.base
System role: Document table definitions
"""

from catalog.boundary.db.models.media_model import MediaTitleModel

__all__ = ["MediaTitleModel"]
