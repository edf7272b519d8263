"""
Pytest configuration and fixtures for backend tests.
"""

import os

# The application engine must not point at a real server during tests
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from menu_api.main import app
from menu_api.models import Base, MenuItem, MenuItemTranslation
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.domain import MenuItemService, MenuService
from menu_api.services.uri_generator import MenuItemUriGenerator
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Page slugs per locale, as a page catalogue would return them
PAGE_SLUGS = {
    (10, "en"): "about",
    (10, "es"): "acerca",
    (11, "en"): "team",
    (11, "es"): "equipo",
    (42, "en"): "contact",
    (42, "es"): "contacto",
}


def page_slug(page_id: int, locale: str) -> str | None:
    return PAGE_SLUGS.get((page_id, locale))


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def locale():
    """English request with English and Spanish supported."""
    return LocaleContext(locale="en", supported=("en", "es"))


@pytest.fixture
def tenant():
    """Central context: no tenant scoping."""
    return TenantContext()


@pytest.fixture
def uri_generator(db_session):
    return MenuItemUriGenerator(db_session, page_slugs=page_slug)


@pytest.fixture
def menu_service(db_session, tenant, locale):
    return MenuService(db_session, tenant, locale)


@pytest.fixture
def item_service(db_session, tenant, locale, uri_generator):
    return MenuItemService(db_session, tenant, locale, uri_generator=uri_generator)


@pytest.fixture
def seed_menu(db_session, menu_service):
    """A published menu with its root item."""
    menu = menu_service.create(
        {
            "name": "main",
            "primary": True,
            "en": {"title": "Main menu", "status": True},
            "es": {"title": "Menú principal", "status": True},
        }
    )
    db_session.commit()
    return menu


@pytest.fixture
def seed_root(db_session, seed_menu):
    """Root item of seed_menu."""
    return db_session.scalar(
        select(MenuItem).where(MenuItem.menu_id == seed_menu.id, MenuItem.is_root.is_(True))
    )


@pytest.fixture
def make_item(db_session):
    """Factory inserting menu item rows directly, bypassing the service rules."""
    def _make(menu, parent, title, position, **attrs):
        attrs.setdefault("link_type", "url")
        item = MenuItem(
            menu_id=menu.id,
            parent_id=parent.id if parent is not None else None,
            position=position,
            **attrs,
        )
        item.translations.append(MenuItemTranslation(locale="en", title=title))
        db_session.add(item)
        db_session.flush()
        return item

    return _make


@pytest.fixture
def seed_items(db_session, seed_menu, seed_root, make_item):
    """Items A, B, C under the root with positions 3, 1, 2."""
    items = {
        "A": make_item(seed_menu, seed_root, "Alpha", 3),
        "B": make_item(seed_menu, seed_root, "Bravo", 1),
        "C": make_item(seed_menu, seed_root, "Charlie", 2),
    }
    db_session.commit()
    return items
