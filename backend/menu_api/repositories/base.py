"""
Generic Repository driven by QuerySpec.

Builds tenant-aware queries from a parsed QuerySpec and runs the
list / get-one / update-by / delete-by / bulk operations shared by all
menu entities.

Usage:
    repo = QueryRepository(Menu, db, tenant, locale, entity_type="menu")

    menus, page_meta = repo.list(spec)
    menu = repo.get_one("main", spec.with_filter(field="name"))
    repo.update_by_criteria(menu.id, {"en": {"title": "Main"}})
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Date, Select, String, cast, func, or_, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session, load_only, selectinload

from menu_api.models import Base
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.events.hooks import EntityHooks
from menu_api.services.query.spec import QuerySpec
from shared.config.constants import DEFAULT_DATE_FIELD, OrderWay
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import MalformedQueryError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Attributes never written from request data
_PROTECTED_ATTRIBUTES = frozenset({"id", "created_at", "updated_at"})

# Timestamp columns matched as text by the search filter
_SEARCHABLE_TIMESTAMPS = ("created_at", "updated_at")


@dataclass(frozen=True)
class PageMeta:
    """Pagination metadata of a paginated list."""

    total: int
    last_page: int
    per_page: int
    current_page: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "lastPage": self.last_page,
            "perPage": self.per_page,
            "currentPage": self.current_page,
        }


class QueryRepository(Generic[ModelT]):
    """
    Repository executing QuerySpecs against one model.

    Tenant scoping: when the tenant context is active, every query is
    restricted to rows of the current tenant. get_one widens that match to
    tenant-less rows when the entity type is shareable.
    """

    entity_type: str = ""

    def __init__(
        self,
        model: type[ModelT],
        session: Session,
        tenant: TenantContext,
        locale: LocaleContext,
        *,
        hooks: EntityHooks | None = None,
        entity_type: str | None = None,
    ):
        self._model = model
        self._session = session
        self._tenant = tenant
        self._locale = locale
        self._hooks = hooks or EntityHooks()
        if entity_type is not None:
            self.entity_type = entity_type
        elif not self.entity_type:
            self.entity_type = model.__tablename__

        mapper = sa_inspect(model)
        self._column_names = {attr.key for attr in mapper.column_attrs}
        self._relationship_names = set(mapper.relationships.keys())
        self._aliases: dict[str, str] = getattr(model, "__attribute_aliases__", {})

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    @property
    def tenant(self) -> TenantContext:
        return self._tenant

    @property
    def locale(self) -> LocaleContext:
        return self._locale

    # =========================================================================
    # Query Building
    # =========================================================================

    def _base_query(self) -> Select:
        """select(model) restricted to the default tenant scope."""
        return self._apply_tenant_scope(select(self._model))

    def _has_tenant_column(self) -> bool:
        return "tenant_id" in self._column_names

    def _apply_tenant_scope(self, query: Select, *, include_central: bool = False) -> Select:
        if not self._tenant.is_active or not self._has_tenant_column():
            return query
        tenant_column = self._model.tenant_id
        if include_central:
            return query.where(
                or_(
                    tenant_column == self._tenant.current_tenant_id(),
                    tenant_column.is_(None),
                )
            )
        return query.where(tenant_column == self._tenant.current_tenant_id())

    def _column(self, name: str, purpose: str) -> Any:
        """Mapped column attribute for a request-supplied name."""
        attribute = self._aliases.get(name, name)
        if attribute not in self._column_names:
            raise MalformedQueryError(
                f"unknown {purpose} field '{name}'", entity=self.entity_type, field=name
            )
        return getattr(self._model, attribute)

    def _apply_includes(self, query: Select, spec: QuerySpec) -> Select:
        """Eager load requested relations. The wildcard keeps the default (none)."""
        options = []
        for name in spec.relations:
            if name not in self._relationship_names:
                raise MalformedQueryError(
                    f"unknown relation '{name}'", entity=self.entity_type, relation=name
                )
            options.append(selectinload(getattr(self._model, name)))
        if options:
            query = query.options(*options)
        return query

    def _apply_filters(self, query: Select, spec: QuerySpec) -> Select:
        """Conjunctive filters; the search term is one disjunctive group."""
        query_filter = spec.filter

        if query_filter.date is not None:
            date_filter = query_filter.date
            column = self._column(date_filter.field or DEFAULT_DATE_FIELD, "date")
            if date_filter.date_from is not None:
                query = query.where(func.date(column, type_=Date) >= date_filter.date_from)
            if date_filter.date_to is not None:
                query = query.where(func.date(column, type_=Date) <= date_filter.date_to)

        if query_filter.search:
            query = query.where(self._search_clause(query_filter.search, query_filter.locale))

        if query_filter.name is not None and "name" in self._column_names:
            query = query.where(self._model.name == query_filter.name)

        for field_name, value in query_filter.exact.items():
            attribute = self._aliases.get(field_name, field_name)
            if attribute not in self._column_names:
                logger.debug(
                    "Ignoring filter on unknown field",
                    entity=self.entity_type,
                    field=field_name,
                )
                continue
            query = query.where(self._exact_clause(getattr(self._model, attribute), field_name, value))

        return query

    def _search_clause(self, term: str, locale: str | None) -> Any:
        """Title in the locale, or id / timestamps rendered as text."""
        clauses = []
        if "translations" in self._relationship_names:
            translation = sa_inspect(self._model).relationships["translations"].mapper.class_
            clauses.append(
                self._model.translations.any(
                    (translation.locale == (locale or self._locale.current_locale()))
                    & translation.title.icontains(term, autoescape=True)
                )
            )
        clauses.append(cast(self._model.id, String).contains(term, autoescape=True))
        for name in _SEARCHABLE_TIMESTAMPS:
            if name in self._column_names:
                clauses.append(cast(getattr(self._model, name), String).contains(term, autoescape=True))
        return or_(*clauses)

    def _exact_clause(self, column: Any, field_name: str, value: Any) -> Any:
        try:
            if value is None:
                return column.is_(None)
            if isinstance(value, list):
                return column.in_([_coerce(column, v) for v in value])
            return column == _coerce(column, value)
        except ValueError:
            raise MalformedQueryError(
                f"invalid value for filter '{field_name}'", entity=self.entity_type, value=value
            )

    def _apply_order(self, query: Select, spec: QuerySpec) -> Select:
        """filter.order, defaulting to newest first. Ties break on id."""
        order = spec.filter.order
        column = self._column(order.field, "order") if order else self._model.created_at
        way = order.way if order else OrderWay.DESC
        if way == OrderWay.ASC:
            return query.order_by(column.asc(), self._model.id.asc())
        return query.order_by(column.desc(), self._model.id.desc())

    def _apply_fields(self, query: Select, spec: QuerySpec) -> Select:
        """Restrict loaded columns; the primary key is always loaded."""
        if not spec.fields:
            return query
        columns = [self._column(name, "select") for name in spec.fields]
        return query.options(load_only(self._model.id, *columns))

    def _filtered_query(self, spec: QuerySpec) -> Select:
        return self._apply_filters(self._base_query(), spec)

    def _match_query(self, criteria: Any, spec: QuerySpec, *, include_central: bool = False) -> Select | None:
        """Query matching a single record by the criteria field, None when uncoercible."""
        column = self._column(spec.criteria_field, "criteria")
        try:
            value = _coerce(column, criteria)
        except ValueError:
            return None
        query = self._apply_tenant_scope(select(self._model), include_central=include_central)
        return query.where(column == value).order_by(self._model.id.asc()).limit(1)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list(self, spec: QuerySpec | None = None) -> tuple[list[ModelT], PageMeta | None]:
        """
        Records matching the spec.

        Returns:
            (records, page_meta); page_meta is None unless spec.page is set.
        """
        spec = spec or QuerySpec()
        filtered = self._filtered_query(spec)

        query = self._apply_includes(filtered, spec)
        query = self._apply_order(query, spec)
        query = self._apply_fields(query, spec)

        if spec.paginated:
            per_page = min(spec.take or settings.default_page_size, settings.max_page_size)
            total = self._count_query(filtered)
            query = query.offset((spec.page - 1) * per_page).limit(per_page)
            records = list(self._session.scalars(query).all())
            page_meta = PageMeta(
                total=total,
                last_page=max(1, -(-total // per_page)),
                per_page=per_page,
                current_page=spec.page,
            )
            return records, page_meta

        if spec.take:
            query = query.limit(spec.take)
        return list(self._session.scalars(query).all()), None

    def count(self, spec: QuerySpec | None = None) -> int:
        """Number of records matching the spec filters."""
        return self._count_query(self._filtered_query(spec or QuerySpec()))

    def _count_query(self, filtered: Select) -> int:
        query = select(func.count()).select_from(filtered.order_by(None).subquery())
        return self._session.scalar(query) or 0

    def get_one(self, criteria: Any, spec: QuerySpec | None = None) -> ModelT | None:
        """
        Single record whose criteria field (filter.field, default id) equals criteria.

        For shareable entity types under an active tenant, rows without a
        tenant match as well. Returns None when nothing matches.
        """
        spec = spec or QuerySpec()
        include_central = self._tenant.is_active and self._tenant.is_shareable(self.entity_type)
        query = self._match_query(criteria, spec, include_central=include_central)
        if query is None:
            return None
        query = self._apply_includes(query, spec)
        query = self._apply_fields(query, spec)
        return self._session.scalar(query)

    def find_by_id(self, entity_id: int) -> ModelT | None:
        """Record by primary key within the tenant scope."""
        return self._session.scalar(self._base_query().where(self._model.id == entity_id))

    def find_by_ids(self, entity_ids: Iterable[int]) -> list[ModelT]:
        """Records by primary key within the tenant scope (order not guaranteed)."""
        entity_ids = list(entity_ids)
        if not entity_ids:
            return []
        query = self._base_query().where(self._model.id.in_(entity_ids))
        return list(self._session.scalars(query).all())

    def find_first(self, criteria: Any, spec: QuerySpec | None = None) -> ModelT | None:
        """First record matching criteria within the default tenant scope."""
        query = self._match_query(criteria, spec or QuerySpec())
        if query is None:
            return None
        return self._session.scalar(query)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> ModelT:
        """Create a record: before_create, persist, after_create."""
        attributes = self._hooks.before_create(dict(data))

        entity = self._model()
        self._fill(entity, attributes)
        if self._has_tenant_column():
            if self._tenant.is_active:
                entity.tenant_id = self._tenant.current_tenant_id()
            elif "tenant_id" in attributes:
                entity.tenant_id = attributes["tenant_id"]

        self._session.add(entity)
        self._session.flush()
        self._hooks.after_create(entity)

        logger.info(f"Created {self.entity_type}", entity_id=entity.id)
        return entity

    def update(self, entity: ModelT, data: Mapping[str, Any]) -> ModelT:
        """Merge data onto an entity: before_update, persist, after_update."""
        attributes = self._hooks.before_update(entity, dict(data))
        self._fill(entity, attributes)
        self._session.flush()
        self._hooks.after_update(entity)

        logger.debug(f"Updated {self.entity_type}", entity_id=entity.id)
        return entity

    def update_by_criteria(
        self, criteria: Any, data: Mapping[str, Any], spec: QuerySpec | None = None
    ) -> ModelT | None:
        """
        Update the first record matching criteria.

        Returns:
            The updated record, or None (and no write) when nothing matches.
        """
        entity = self.find_first(criteria, spec)
        if entity is None:
            logger.debug(f"No {self.entity_type} to update", criteria=criteria)
            return None
        return self.update(entity, data)

    def delete(self, entity: ModelT) -> None:
        self._session.delete(entity)
        self._session.flush()
        logger.info(f"Deleted {self.entity_type}", entity_id=entity.id)

    def delete_by_criteria(self, criteria: Any, spec: QuerySpec | None = None) -> None:
        """Delete the first record matching criteria. No match is a no-op."""
        entity = self.find_first(criteria, spec)
        if entity is None:
            logger.debug(f"No {self.entity_type} to delete", criteria=criteria)
            return
        self.delete(entity)

    def bulk_update(self, entity_ids: Sequence[int], data: Mapping[str, Any]) -> list[ModelT]:
        """Apply the same update to every id, in the given order."""
        entities = {entity.id: entity for entity in self.find_by_ids(entity_ids)}
        updated = []
        for entity_id in entity_ids:
            entity = entities.get(entity_id)
            if entity is None:
                logger.warning(f"Skipping missing {self.entity_type}", entity_id=entity_id)
                continue
            updated.append(self.update(entity, data))
        return updated

    def bulk_delete(self, entity_ids: Sequence[int]) -> None:
        """Delete every id in the list."""
        for entity in self.find_by_ids(entity_ids):
            self._session.delete(entity)
        self._session.flush()
        logger.info(f"Deleted {self.entity_type} batch", count=len(entity_ids))

    # =========================================================================
    # Attribute Filling
    # =========================================================================

    def _fill(self, entity: ModelT, data: Mapping[str, Any]) -> None:
        """
        Copy request data onto an entity.

        - column names (or their aliases) set the column
        - a supported locale code with a mapping fills that translation
        - translated attribute names fill the current-locale translation
        - anything else is ignored
        """
        translated = getattr(self._model, "__translated_attributes__", ())
        current_locale_values: dict[str, Any] = {}

        for key, value in data.items():
            if self._locale.is_supported(key) and isinstance(value, Mapping):
                self._fill_translation(entity, key, value)
                continue
            attribute = self._aliases.get(key, key)
            if attribute in _PROTECTED_ATTRIBUTES or attribute == "tenant_id":
                continue
            if attribute in self._column_names:
                setattr(entity, attribute, value)
            elif attribute in translated:
                current_locale_values[attribute] = value

        if current_locale_values:
            self._fill_translation(entity, self._locale.current_locale(), current_locale_values)

    def _fill_translation(self, entity: ModelT, locale: str, values: Mapping[str, Any]) -> None:
        if "translations" not in self._relationship_names:
            return
        translation_mapper = sa_inspect(self._model).relationships["translations"].mapper
        writable = {
            attr.key
            for attr in translation_mapper.column_attrs
            if attr.key not in ("id", "locale") and not any(c.foreign_keys for c in attr.columns)
        }

        translation = entity.translate(locale)
        if translation is None:
            translation = translation_mapper.class_(locale=locale)
            entity.translations.append(translation)

        for key, value in values.items():
            if key in writable:
                setattr(translation, key, value)


def _coerce(column: Any, value: Any) -> Any:
    """
    Convert request strings to the column's Python type.

    Raises:
        ValueError: The value cannot represent the column type.
    """
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if not isinstance(value, str):
        return value
    if python_type is bool:
        lowered = value.strip().lower()
        if lowered in ("1", "true"):
            return True
        if lowered in ("0", "false"):
            return False
        raise ValueError(value)
    if python_type is int:
        return int(value)
    return value
