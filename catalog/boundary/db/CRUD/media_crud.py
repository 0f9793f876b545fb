"""
Media title CRUD operations.

Extends the generic repository with the catalog aggregation queries.
The country column holds a ", "-separated list, so both breakdowns first
explode it into one row per country with a recursive CTE and re-match
the requested country exactly. Each breakdown is a single SQL statement.

Dependencies: sqlalchemy, catalog.boundary.db.models, catalog.models.media
System role: Media catalog persistence and aggregation
"""

import logging
from typing import Any

from sqlalchemy import Text, cast, distinct, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.boundary.db.CRUD.base_crud import BaseCRUD
from catalog.boundary.db.functions import LIKE_ESCAPE, escape_like, strpos
from catalog.boundary.db.models.media_model import MediaTitleModel
from catalog.core.exceptions import RepositoryError
from catalog.models.media import MEDIA_TITLE_SCHEMA

logger = logging.getLogger(__name__)

COUNTRY_SEPARATOR = ", "


class MediaTitleCRUD(BaseCRUD[MediaTitleModel]):
    """
    Repository for MediaTitleModel.

    Adds per-country media type and rating breakdowns and the list of
    distinct countries.
    """

    def __init__(self) -> None:
        """Initialize MediaTitleCRUD with MediaTitleModel."""
        super().__init__(MediaTitleModel, MEDIA_TITLE_SCHEMA)

    def _exploded_countries(self, country: str):
        """
        Recursive CTE yielding one (type, rating, token) row per listed country.

        Only titles whose country column contains ``country`` (case-insensitive
        as far as the database's lower() folds) are exploded. The seed row carries an empty token.
        """
        model = self.model
        # Both sides go through the database's lower() so folding stays symmetric
        pattern = func.lower(literal(f"%{escape_like(country)}%"))
        seed = (
            select(
                model.type.label("type"),
                model.rating.label("rating"),
                cast(literal(""), Text).label("token"),
                cast(model.country + COUNTRY_SEPARATOR, Text).label("rest"),
            )
            .where(model.country.is_not(None))
            .where(func.lower(model.country).like(pattern, escape=LIKE_ESCAPE))
            .cte("exploded", recursive=True)
        )
        previous = seed.alias("previous")
        position = strpos(previous.c.rest, COUNTRY_SEPARATOR)
        step = select(
            previous.c.type,
            previous.c.rating,
            cast(func.substr(previous.c.rest, 1, position - 1), Text),
            cast(func.substr(previous.c.rest, position + len(COUNTRY_SEPARATOR)), Text),
        ).where(previous.c.rest != "")
        return seed.union_all(step)

    async def get_country_media_breakdown(
        self,
        session: AsyncSession,
        country: str,
    ) -> list[dict[str, Any]]:
        """
        Count titles per media type for one country.

        Args:
            session: Async database session
            country: Exact country name, e.g. "India"

        Returns:
            list[dict]: ``[{"country", "media_types": [{"type", "count"}]}]``,
                empty when the country is blank or has no titles
        """
        country = country.strip()
        if not country:
            return []
        try:
            exploded = self._exploded_countries(country)
            stmt = (
                select(
                    exploded.c.token.label("country"),
                    exploded.c.type.label("type"),
                    func.count().label("count"),
                )
                .where(exploded.c.token == country)
                .group_by(exploded.c.token, exploded.c.type)
                .order_by(exploded.c.token, exploded.c.type)
            )
            rows = (await session.execute(stmt)).mappings().all()
        except Exception as exc:
            raise RepositoryError(
                "Failed to aggregate media types by country.", cause=exc, data={"country": country}
            ) from exc

        breakdown: dict[str, list[dict[str, Any]]] = {}
        for row in rows:
            breakdown.setdefault(row["country"], []).append({"type": row["type"], "count": row["count"]})
        return [{"country": name, "media_types": media_types} for name, media_types in breakdown.items()]

    async def get_country_rating_breakdown(
        self,
        session: AsyncSession,
        country: str,
    ) -> list[dict[str, Any]]:
        """
        Count titles per (media type, rating) for one country.

        Args:
            session: Async database session
            country: Exact country name

        Returns:
            list[dict]: ``[{"type", "rating", "count"}]`` sorted by type, then
                rating with unrated titles first
        """
        country = country.strip()
        if not country:
            return []
        try:
            exploded = self._exploded_countries(country)
            stmt = (
                select(
                    exploded.c.type.label("type"),
                    exploded.c.rating.label("rating"),
                    func.count().label("count"),
                )
                .where(exploded.c.token == country)
                .group_by(exploded.c.type, exploded.c.rating)
                .order_by(exploded.c.type, exploded.c.rating.asc().nulls_first())
            )
            rows = (await session.execute(stmt)).mappings().all()
        except Exception as exc:
            raise RepositoryError(
                "Failed to aggregate ratings by country.", cause=exc, data={"country": country}
            ) from exc
        return [dict(row) for row in rows]

    async def get_countries(self, session: AsyncSession) -> list[str]:
        """
        List every country named by at least one title.

        Returns:
            list[str]: Trimmed, de-duplicated country names in ascending order
        """
        try:
            stmt = select(distinct(self.model.country)).where(self.model.country.is_not(None))
            values = (await session.execute(stmt)).scalars().all()
        except Exception as exc:
            raise RepositoryError("Failed to list countries.", cause=exc) from exc

        countries = {name.strip() for value in values for name in value.split(",")}
        countries.discard("")
        logger.debug("Countries listed", extra={"count": len(countries)})
        return sorted(countries)


media_title_crud = MediaTitleCRUD()
