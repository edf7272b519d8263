"""
Tests for mutation hooks and the transaction boundary.

Tests cover:
- Hook invocation order and counts on create and update
- before_* hooks rewriting attributes
- Rollback when a hook fails
- DatabaseError wrapping of store failures
"""

import pytest

from menu_api.repositories import MenuRepository
from menu_api.services.domain import MenuService
from menu_api.services.events import CompositeHooks, EntityHooks, LoggingHooks
from shared.infrastructure.db import transaction
from shared.utils.exceptions import DatabaseError, NotFoundError


class RecordingHooks(EntityHooks):
    """Hooks that record every call."""

    def __init__(self):
        self.calls = []

    def before_create(self, attributes):
        self.calls.append("before_create")
        return attributes

    def after_create(self, entity):
        self.calls.append("after_create")

    def before_update(self, entity, attributes):
        self.calls.append("before_update")
        return attributes

    def after_update(self, entity):
        self.calls.append("after_update")


class SlugNameHooks(EntityHooks):
    def before_create(self, attributes):
        return {**attributes, "name": attributes["name"].strip().lower()}

    def before_update(self, entity, attributes):
        if "name" in attributes:
            return {**attributes, "name": attributes["name"].strip().lower()}
        return attributes


class FailingAfterUpdate(EntityHooks):
    def after_update(self, entity):
        raise RuntimeError("search index unavailable")


class TestHookInvocation:
    def test_create_calls_each_hook_once_in_order(self, db_session, tenant, locale):
        hooks = RecordingHooks()
        repo = MenuRepository(db_session, tenant, locale, hooks=hooks)

        repo.create({"name": "main"})

        assert hooks.calls == ["before_create", "after_create"]

    def test_update_calls_each_hook_once_in_order(self, db_session, tenant, locale):
        hooks = RecordingHooks()
        repo = MenuRepository(db_session, tenant, locale, hooks=hooks)
        menu = repo.create({"name": "main"})
        hooks.calls.clear()

        repo.update_by_criteria(menu.id, {"name": "footer"})

        assert hooks.calls == ["before_update", "after_update"]

    def test_no_update_hooks_when_nothing_matches(self, db_session, tenant, locale):
        hooks = RecordingHooks()
        repo = MenuRepository(db_session, tenant, locale, hooks=hooks)

        repo.update_by_criteria(999_999, {"name": "ghost"})

        assert hooks.calls == []

    def test_before_hooks_rewrite_attributes(self, db_session, tenant, locale):
        repo = MenuRepository(db_session, tenant, locale, hooks=SlugNameHooks())

        menu = repo.create({"name": "  Main "})
        assert menu.name == "main"

        repo.update(menu, {"name": "FOOTER"})
        assert menu.name == "footer"

    def test_composite_hooks_chain_before_hooks(self, db_session, tenant, locale):
        recording = RecordingHooks()
        hooks = CompositeHooks(SlugNameHooks(), recording, LoggingHooks("menu"))
        repo = MenuRepository(db_session, tenant, locale, hooks=hooks)

        menu = repo.create({"name": "Header"})

        assert menu.name == "header"
        assert recording.calls == ["before_create", "after_create"]

    def test_bulk_update_fires_hooks_per_record(self, db_session, tenant, locale):
        hooks = RecordingHooks()
        repo = MenuRepository(db_session, tenant, locale, hooks=hooks)
        ids = [repo.create({"name": f"m{i}"}).id for i in range(3)]
        hooks.calls.clear()

        repo.bulk_update(ids, {"primary": True})

        assert hooks.calls.count("before_update") == 3
        assert hooks.calls.count("after_update") == 3


class TestTransaction:
    def test_commits_on_success(self, db_session, menu_service):
        with transaction(db_session, "create menu"):
            menu = menu_service.create({"name": "main"})

        db_session.rollback()
        assert menu_service.get_one(menu.id) is not None

    def test_failing_hook_rolls_back_update(self, db_session, tenant, locale, seed_menu):
        service = MenuService(db_session, tenant, locale, hooks=FailingAfterUpdate())

        with pytest.raises(RuntimeError):
            with transaction(db_session, "update menu"):
                service.update_by_criteria(seed_menu.id, {"name": "changed", "en": {"title": "Changed"}})

        reloaded = service.get_one(seed_menu.id)
        assert reloaded.name == "main"
        assert reloaded.title_for("en") == "Main menu"

    def test_application_errors_propagate_unchanged(self, db_session, menu_service, seed_menu):
        with pytest.raises(NotFoundError):
            with transaction(db_session, "update menu"):
                menu_service.update_by_criteria(seed_menu.id, {"name": "changed"})
                raise NotFoundError("Menu", 999)

        assert menu_service.get_one(seed_menu.id).name == "main"

    def test_store_failure_becomes_database_error(self, db_session, menu_service):
        with pytest.raises(DatabaseError) as exc:
            with transaction(db_session, "create menu"):
                menu_service.create({"name": None})

        assert exc.value.status_code == 500
        assert menu_service.list()[0] == []
