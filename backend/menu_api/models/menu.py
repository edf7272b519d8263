"""
Navigation Models: Menu, MenuTranslation, MenuItem, MenuItemTranslation.

Table names follow the menu__* convention of the existing schema. Titles
(and the item class column) are nullable: legacy rows may have none.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import LinkTarget, LinkType

from .base import Base, BigIntPK, TimestampMixin, TranslatableMixin


class Menu(TimestampMixin, TranslatableMixin, Base):
    """
    A named navigation menu owning a tree of items.
    tenant_id NULL marks central data, visible to tenants when the
    "menu" entity type is configured as shareable.
    """

    __tablename__ = "menu__menus"
    __translated_attributes__ = ("title", "status")

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tenant_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)

    # Relationships
    translations: Mapped[list["MenuTranslation"]] = relationship(
        back_populates="menu", cascade="all, delete-orphan"
    )
    items: Mapped[list["MenuItem"]] = relationship(
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuItem.position",
    )

    @property
    def root_item(self) -> Optional["MenuItem"]:
        """The item top-level entries attach to when no parent is given."""
        for item in self.items:
            if item.is_root:
                return item
        return None


class MenuTranslation(Base):
    """Per-locale title and publication status of a menu."""

    __tablename__ = "menu__menu_translations"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    menu_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu__menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    locale: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    menu: Mapped["Menu"] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("menu_id", "locale", name="uq_menu_translation_locale"),
    )


class MenuItem(TimestampMixin, TranslatableMixin, Base):
    """
    A node in a menu tree.

    Every non-root item has a parent within the same menu; sibling order
    is given by position within the parent scope.
    """

    __tablename__ = "menu__menuitems"
    __translated_attributes__ = ("title", "uri", "url", "status", "description")
    # Request keys that differ from the Python attribute name
    __attribute_aliases__ = {"class": "class_"}

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    menu_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu__menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("menu__menuitems.id", ondelete="CASCADE"), nullable=True, index=True
    )
    page_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    target: Mapped[Optional[str]] = mapped_column(String(10), default=LinkTarget.SELF)
    link_type: Mapped[str] = mapped_column(String(20), default=LinkType.PAGE, nullable=False)
    class_: Mapped[Optional[str]] = mapped_column("class", Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_root: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tenant_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)

    # Relationships
    menu: Mapped["Menu"] = relationship(back_populates="items")
    parent: Mapped[Optional["MenuItem"]] = relationship(
        back_populates="children", remote_side="MenuItem.id"
    )
    children: Mapped[list["MenuItem"]] = relationship(
        back_populates="parent", cascade="all, delete", order_by="MenuItem.position"
    )
    translations: Mapped[list["MenuItemTranslation"]] = relationship(
        back_populates="menuitem", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_menuitem_menu_parent_position", "menu_id", "parent_id", "position"),
    )


class MenuItemTranslation(Base):
    """Per-locale title and link of a menu item."""

    __tablename__ = "menu__menuitem_translations"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    menuitem_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu__menuitems.id", ondelete="CASCADE"), nullable=False, index=True
    )
    locale: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uri: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    menuitem: Mapped["MenuItem"] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("menuitem_id", "locale", name="uq_menuitem_translation_locale"),
    )
