"""
Centralized constants for the menu service.

Usage:
    from shared.config.constants import LinkType, Limits, EntityTypes

    if data.get("link_type") == LinkType.PAGE:
        ...
"""

from typing import Final


# =============================================================================
# Menu Items
# =============================================================================


class LinkType:
    """Menu item link type constants."""

    PAGE: Final[str] = "page"
    URL: Final[str] = "url"
    INTERNAL: Final[str] = "internal"
    NONE: Final[str] = "none"

    ALL: Final[list[str]] = [PAGE, URL, INTERNAL, NONE]


class LinkTarget:
    """HTML target attribute values for menu item links."""

    SELF: Final[str] = "_self"
    BLANK: Final[str] = "_blank"


# =============================================================================
# Multi-tenancy
# =============================================================================


class EntityTypes:
    """
    Entity type names used by the central-data setting.
    Must match the values listed in TENANT_WITH_CENTRAL_DATA.
    """

    MENU: Final[str] = "menu"
    MENU_ITEM: Final[str] = "menuitem"


# =============================================================================
# Query Building
# =============================================================================


class OrderWay:
    """Sort direction values accepted in filter.order.way."""

    ASC: Final[str] = "asc"
    DESC: Final[str] = "desc"

    ALL: Final[list[str]] = [ASC, DESC]


# Relation wildcard accepted in the include parameter
INCLUDE_ALL: Final[str] = "*"

# Field used to match a single record when filter.field is not given
DEFAULT_CRITERIA_FIELD: Final[str] = "id"

# Field used for date filters and default ordering
DEFAULT_DATE_FIELD: Final[str] = "created_at"


class Limits:
    """Query limits."""

    MAX_SEARCH_TERM_LENGTH: Final[int] = 100
    MAX_INCLUDE_RELATIONS: Final[int] = 20
