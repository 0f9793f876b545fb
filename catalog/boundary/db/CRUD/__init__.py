"""
Repository operations for document tables.

Exports the generic repository and model-specific implementations
with pre-instantiated singletons for direct use.

Usage:
    from catalog.boundary.db.CRUD import media_title_crud

    # Use singleton instances
    doc = await media_title_crud.get_by_id(db, media_id)

    # Or instantiate classes directly for custom behavior
    from catalog.boundary.db.CRUD import MediaTitleCRUD
    custom_crud = MediaTitleCRUD()
"""

from catalog.boundary.db.CRUD.base_crud import DEFAULT_LIMIT, BaseCRUD, QueryOptions
from catalog.boundary.db.CRUD.media_crud import MediaTitleCRUD, media_title_crud

__all__ = [
    "DEFAULT_LIMIT",
    "BaseCRUD",
    "QueryOptions",
    "MediaTitleCRUD",
    "media_title_crud",
]
