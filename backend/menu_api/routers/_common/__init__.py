"""
Common utilities shared across routers.
"""

from .dependencies import (
    get_locale_context,
    get_menu_item_service,
    get_menu_service,
    get_query_spec,
    get_tenant_context,
    get_uri_generator,
)
from .pagination import PaginatedResponse, data_response, dump

__all__ = [
    # Dependencies
    "get_locale_context",
    "get_menu_item_service",
    "get_menu_service",
    "get_query_spec",
    "get_tenant_context",
    "get_uri_generator",
    # Responses
    "PaginatedResponse",
    "data_response",
    "dump",
]
