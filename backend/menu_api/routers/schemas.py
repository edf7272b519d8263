"""
Pydantic schemas for the menu API endpoints.

Request bodies wrap their payload in "attributes". Translatable values
are sent either per locale ({"en": {"title": "Home"}}) or flat, in which
case they apply to the request locale.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from menu_api.models import Menu, MenuItem


# =============================================================================
# Request Schemas
# =============================================================================


class MenuAttributes(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    primary: bool = False


class MenuItemAttributes(BaseModel):
    """Create payload. parent_id and position are resolved when omitted."""

    model_config = ConfigDict(extra="allow")

    menu_id: int
    parent_id: int | None = None
    position: int | None = Field(default=None, ge=0)
    link_type: str | None = None
    page_id: int | None = None


class MenuCreate(BaseModel):
    attributes: MenuAttributes


class MenuItemCreate(BaseModel):
    attributes: MenuItemAttributes


class AttributesUpdate(BaseModel):
    """Partial update: only keys present in attributes are written."""

    attributes: dict[str, Any] = Field(default_factory=dict)


class OrderingUpdate(BaseModel):
    """
    Ordering of menu items: {"menuitems": [...]} or a bare list of entries.
    Entries are ids or {"id", "parent_id"?, "position"?, "children"?}.
    """

    attributes: dict[str, Any] | list[Any]


# =============================================================================
# Response Schemas
# =============================================================================


class MenuTranslationOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    locale: str
    title: str | None = None
    status: bool


class MenuOutput(BaseModel):
    id: int
    name: str
    primary: bool
    tenant_id: int | None = None
    title: str | None = None
    status: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    translations: dict[str, MenuTranslationOutput] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, menu: Menu, locale: str) -> "MenuOutput":
        current = menu.translate(locale)
        return cls(
            id=menu.id,
            name=menu.name,
            primary=menu.primary,
            tenant_id=menu.tenant_id,
            title=current.title if current else None,
            status=current.status if current else False,
            created_at=menu.created_at,
            updated_at=menu.updated_at,
            translations={
                t.locale: MenuTranslationOutput.model_validate(t) for t in menu.translations
            },
        )


class MenuItemTranslationOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    locale: str
    title: str | None = None
    uri: str | None = None
    url: str | None = None
    description: str | None = None
    status: bool


class MenuItemOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    menu_id: int
    parent_id: int | None = None
    page_id: int | None = None
    position: int
    target: str | None = None
    link_type: str
    css_class: str | None = Field(default=None, serialization_alias="class")
    icon: str | None = None
    is_root: bool
    tenant_id: int | None = None
    title: str | None = None
    uri: str | None = None
    url: str | None = None
    status: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    translations: dict[str, MenuItemTranslationOutput] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, item: MenuItem, locale: str) -> "MenuItemOutput":
        current = item.translate(locale)
        return cls(
            id=item.id,
            menu_id=item.menu_id,
            parent_id=item.parent_id,
            page_id=item.page_id,
            position=item.position,
            target=item.target,
            link_type=item.link_type,
            css_class=item.class_,
            icon=item.icon,
            is_root=item.is_root,
            tenant_id=item.tenant_id,
            title=current.title if current else None,
            uri=current.uri if current else None,
            url=current.url if current else None,
            status=current.status if current else False,
            created_at=item.created_at,
            updated_at=item.updated_at,
            translations={
                t.locale: MenuItemTranslationOutput.model_validate(t) for t in item.translations
            },
        )
