"""
Query building: QuerySpec value types and the request parameter parser.

Usage:
    from menu_api.services.query import parse_query_params

    spec = parse_query_params(request.query_params, locale)
    items, page_meta = repo.list(spec)
"""

from .spec import DateFilter, OrderFilter, QueryFilter, QuerySpec
from .parser import parse_query_params

__all__ = [
    "DateFilter",
    "OrderFilter",
    "QueryFilter",
    "QuerySpec",
    "parse_query_params",
]
