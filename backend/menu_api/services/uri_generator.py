"""
Menu item URI generation.

The URI of an item linked to a page is the slug of that page prefixed by
the slugs of the pages its ancestors link to, e.g. "about/team". Walking
stops at the first ancestor without a page (the root item has none).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from sqlalchemy.orm import Session

from menu_api.models import MenuItem
from shared.config.logging import get_logger

logger = get_logger(__name__)

# (page_id, locale) -> slug, None when the page has no slug in that locale
PageSlugResolver = Callable[[int, str], "str | None"]


class UriGenerator(Protocol):
    def generate_uri(self, page_id: int, parent_id: int | None, locale: str) -> str:
        ...


def default_page_slug(page_id: int, locale: str) -> str:
    """Slug used when no page catalogue is wired in."""
    return f"page-{page_id}"


class MenuItemUriGenerator:
    """
    Builds item URIs from page slugs and the parent chain.

    Usage:
        generator = MenuItemUriGenerator(db, page_slugs=pages.slug_for)
        generator.generate_uri(page_id=42, parent_id=7, locale="es")
    """

    # Guards against a corrupted parent chain
    MAX_DEPTH = 50

    def __init__(self, db: Session, page_slugs: PageSlugResolver = default_page_slug):
        self._db = db
        self._page_slugs = page_slugs

    def generate_uri(self, page_id: int, parent_id: int | None, locale: str) -> str:
        segments = [self._slug(page_id, locale)]

        depth = 0
        parent = self._db.get(MenuItem, parent_id) if parent_id is not None else None
        while parent is not None and parent.page_id is not None and depth < self.MAX_DEPTH:
            segments.append(self._slug(parent.page_id, locale))
            parent = self._db.get(MenuItem, parent.parent_id) if parent.parent_id is not None else None
            depth += 1

        return "/".join(segment for segment in reversed(segments) if segment)

    def _slug(self, page_id: int, locale: str) -> str:
        slug = self._page_slugs(page_id, locale)
        if slug is None:
            logger.warning("Page has no slug for locale", page_id=page_id, locale=locale)
            return str(page_id)
        return slug.strip("/")
