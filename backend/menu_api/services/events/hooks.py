"""
Mutation hooks for menus and menu items.

Repositories call the hooks of their entity around every create and
update, exactly once each and in this order:

    before_create(attrs) -> attrs   persist   after_create(entity)
    before_update(entity, attrs) -> attrs   persist   after_update(entity)

A before_* hook may return a modified attribute mapping. An exception
raised by any hook propagates to the caller, so the surrounding
transaction rolls back.

Usage:
    class AuditHooks(EntityHooks):
        def after_update(self, entity):
            audit.record("menu.updated", entity.id)

    repo = MenuRepository(db, tenant, locale, hooks=AuditHooks())
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class EntityHooks:
    """Default hooks: pass attributes through, observe nothing."""

    def before_create(self, attributes: dict[str, Any]) -> dict[str, Any]:
        return attributes

    def after_create(self, entity: Any) -> None:
        pass

    def before_update(self, entity: Any, attributes: dict[str, Any]) -> dict[str, Any]:
        return attributes

    def after_update(self, entity: Any) -> None:
        pass


class LoggingHooks(EntityHooks):
    """Hooks that log every persisted mutation of an entity type."""

    def __init__(self, entity_type: str):
        self._entity_type = entity_type

    def after_create(self, entity: Any) -> None:
        logger.info(f"{self._entity_type} created", entity_id=entity.id)

    def after_update(self, entity: Any) -> None:
        logger.info(f"{self._entity_type} updated", entity_id=entity.id)


class CompositeHooks(EntityHooks):
    """
    Chain several hook sets. before_* hooks run in order, each receiving
    the attributes returned by the previous one.
    """

    def __init__(self, *hooks: EntityHooks):
        self._hooks = hooks

    def before_create(self, attributes: dict[str, Any]) -> dict[str, Any]:
        return self._chain(lambda h, attrs: h.before_create(attrs), attributes)

    def after_create(self, entity: Any) -> None:
        for hook in self._hooks:
            hook.after_create(entity)

    def before_update(self, entity: Any, attributes: dict[str, Any]) -> dict[str, Any]:
        return self._chain(lambda h, attrs: h.before_update(entity, attrs), attributes)

    def after_update(self, entity: Any) -> None:
        for hook in self._hooks:
            hook.after_update(entity)

    def _chain(
        self,
        call: Callable[[EntityHooks, dict[str, Any]], dict[str, Any]],
        attributes: dict[str, Any],
    ) -> dict[str, Any]:
        for hook in self._hooks:
            attributes = call(hook, attributes)
        return attributes
