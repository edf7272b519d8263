"""
QuerySpec - structured list/filter/sort/pagination intent.

Built once by the parser at the request boundary and consumed as
immutable data by repositories and services.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.config.constants import (
    DEFAULT_CRITERIA_FIELD,
    DEFAULT_DATE_FIELD,
    INCLUDE_ALL,
    Limits,
    OrderWay,
)


class DateFilter(BaseModel):
    """Inclusive date range on a named field, compared on the date part."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = DEFAULT_DATE_FIELD
    date_from: date | None = Field(default=None, alias="from")
    date_to: date | None = Field(default=None, alias="to")

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        # Accept full timestamps, only the date part is compared
        if isinstance(value, str) and len(value) > 10:
            try:
                return datetime.fromisoformat(value).date()
            except ValueError:
                return value
        return value


class OrderFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = DEFAULT_DATE_FIELD
    way: Literal["asc", "desc"] = OrderWay.DESC

    @field_validator("way", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class QueryFilter(BaseModel):
    """
    Filter part of a QuerySpec. Every field is optional; an empty filter
    places no restriction.

    field is not a restriction: it names the column single-record
    operations match their criteria against.
    """

    model_config = ConfigDict(frozen=True)

    date: DateFilter | None = None
    order: OrderFilter | None = None
    search: str | None = None
    locale: str | None = None
    name: str | None = None
    field: str | None = None
    exact: dict[str, Any] = Field(default_factory=dict)

    @field_validator("search", mode="before")
    @classmethod
    def _normalize_search(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()[: Limits.MAX_SEARCH_TERM_LENGTH]
            return value or None
        return value


class QuerySpec(BaseModel):
    """
    Parsed representation of a list/get request.

    - include: relation names to eager load ("*" keeps the default, empty set)
    - fields: columns to load; empty means all
    - page: page number, None disables pagination
    - take: page size when paginating, result cap otherwise
    """

    model_config = ConfigDict(frozen=True)

    include: tuple[str, ...] = ()
    filter: QueryFilter = Field(default_factory=QueryFilter)
    fields: tuple[str, ...] = ()
    page: int | None = Field(default=None, ge=1)
    take: int | None = Field(default=None, ge=1)

    @property
    def includes_all(self) -> bool:
        return INCLUDE_ALL in self.include

    @property
    def relations(self) -> tuple[str, ...]:
        """
        Relations to eager load.

        The wildcard does not expand to every relation: it resolves to the
        default include set, which is empty.
        """
        if self.includes_all:
            return ()
        return self.include

    @property
    def paginated(self) -> bool:
        return self.page is not None

    @property
    def criteria_field(self) -> str:
        return self.filter.field or DEFAULT_CRITERIA_FIELD

    def with_filter(self, **changes: Any) -> QuerySpec:
        """Copy of this spec with some filter fields replaced."""
        return self.model_copy(update={"filter": self.filter.model_copy(update=changes)})
