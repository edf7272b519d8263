"""
Query Specification Parser.

Turns the raw parameter bag of a request (query string values or a JSON
body) into a QuerySpec. Absent parameters default to "no restriction";
only present parameters with an invalid shape are rejected.

Accepted parameters:
    include  "translations,children" or ["translations", "children"]
    fields   "id,menu_id,position" or a list
    filter   JSON string or mapping:
             {"date": {"field": "created_at", "from": "2024-01-01", "to": "2024-12-31"},
              "order": {"field": "position", "way": "asc"},
              "search": "about", "locale": "en", "name": "main",
              "field": "name", <any other column>: <value or list of values>}
    page     page number; absent, 0 or false disables pagination
    take     page size when paginating, result cap otherwise
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from menu_api.services.context import LocaleContext
from menu_api.services.query.spec import QueryFilter, QuerySpec
from shared.config.constants import Limits
from shared.config.logging import get_logger
from shared.utils.exceptions import MalformedQueryError

logger = get_logger(__name__)

# Filter keys with a dedicated meaning; anything else is an exact match
_FILTER_KEYS = frozenset({"date", "order", "search", "locale", "name", "field"})

_SCALARS = (str, int, float, bool)


def parse_query_params(
    params: Mapping[str, Any] | None,
    locale: LocaleContext | None = None,
) -> QuerySpec:
    """
    Parse request parameters into a QuerySpec.

    Args:
        params: Raw parameters (strings, lists, nested mappings).
        locale: When given, filter.locale defaults to the active locale.

    Raises:
        MalformedQueryError: A present parameter has an invalid shape.
    """
    params = params or {}

    filter_data = _parse_filter(params.get("filter"))
    if locale is not None and not filter_data.get("locale"):
        filter_data["locale"] = locale.current_locale()

    try:
        spec = QuerySpec(
            include=_parse_list(params.get("include"), "include"),
            fields=_parse_list(params.get("fields"), "fields"),
            page=_parse_optional_int(params.get("page"), "page"),
            take=_parse_optional_int(params.get("take"), "take"),
            filter=QueryFilter.model_validate(filter_data),
        )
    except PydanticValidationError as e:
        raise MalformedQueryError(_describe(e), errors=e.error_count()) from e

    if len(spec.include) > Limits.MAX_INCLUDE_RELATIONS:
        raise MalformedQueryError(
            f"include accepts at most {Limits.MAX_INCLUDE_RELATIONS} relations"
        )

    logger.debug(
        "Parsed query",
        include=spec.include,
        fields=spec.fields,
        page=spec.page,
        take=spec.take,
    )
    return spec


def _parse_list(value: Any, name: str) -> tuple[str, ...]:
    """Comma-separated string or list of strings into a tuple of names."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = []
        for entry in value:
            if not isinstance(entry, str):
                raise MalformedQueryError(f"{name} entries must be strings", value=entry)
            parts.extend(entry.split(","))
    else:
        raise MalformedQueryError(f"{name} must be a string or a list", value=value)
    return tuple(part.strip() for part in parts if part.strip())


def _parse_optional_int(value: Any, name: str) -> int | None:
    """Int-like value; None, empty, 0 and false mean absent."""
    if value is None or value is False or value == "":
        return None
    if isinstance(value, str) and value.strip().lower() in ("false", "null"):
        return None
    if isinstance(value, float) and not value.is_integer():
        raise MalformedQueryError(f"{name} must be an integer", value=value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise MalformedQueryError(f"{name} must be an integer", value=value)
    if number < 0:
        raise MalformedQueryError(f"{name} cannot be negative", value=value)
    return number or None


def _parse_filter(value: Any) -> dict[str, Any]:
    """Filter mapping with unknown keys folded into exact matches."""
    if value is None or value == "":
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedQueryError("filter is not valid JSON", position=e.pos)
    if not isinstance(value, Mapping):
        raise MalformedQueryError("filter must be an object", value=value)

    data: dict[str, Any] = {}
    exact: dict[str, Any] = {}
    for key, entry in value.items():
        if key in _FILTER_KEYS:
            if entry is not None:
                data[key] = entry
        elif key == "exact" and isinstance(entry, Mapping):
            for field_name, field_value in entry.items():
                exact[field_name] = _exact_value(field_name, field_value)
        else:
            exact[key] = _exact_value(key, entry)
    if exact:
        data["exact"] = exact
    return data


def _exact_value(key: str, value: Any) -> Any:
    if value is None or isinstance(value, _SCALARS):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, _SCALARS) for v in value):
        return list(value)
    raise MalformedQueryError(f"filter.{key} must be a value or a list of values", value=value)


def _describe(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"
