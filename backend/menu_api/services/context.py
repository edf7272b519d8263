"""
Request Context - tenant and locale collaborators.

Both are plain values built once per request and passed explicitly into
repositories and services.

Usage:
    tenant = TenantContext(tenant_id=4, central_entities=frozenset({"menu"}))
    locale = LocaleContext(locale="es", supported=("en", "es"))

    repo = MenuRepository(db, tenant=tenant, locale=locale)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shared.config.settings import settings


@dataclass(frozen=True)
class TenantContext:
    """
    Current tenant identity.

    tenant_id None means central context: no tenant scoping is applied.
    central_entities lists entity types whose tenant-less rows are also
    visible to tenants (see TENANT_WITH_CENTRAL_DATA).
    """

    tenant_id: int | None = None
    central_entities: frozenset[str] = field(default_factory=frozenset)

    def current_tenant_id(self) -> int | None:
        return self.tenant_id

    def is_shareable(self, entity_type: str) -> bool:
        return entity_type in self.central_entities

    @property
    def is_active(self) -> bool:
        """True when a tenant is identified for this request."""
        return self.tenant_id is not None

    @classmethod
    def central(cls) -> TenantContext:
        """Context without a tenant, as used by central administration."""
        return cls(tenant_id=None, central_entities=settings.central_data_entities)

    @classmethod
    def for_tenant(cls, tenant_id: int | None) -> TenantContext:
        """Context for a tenant with central-data entities taken from settings."""
        return cls(tenant_id=tenant_id, central_entities=settings.central_data_entities)


@dataclass(frozen=True)
class LocaleContext:
    """Active locale and the ordered list of supported locales."""

    locale: str
    supported: tuple[str, ...]

    def __post_init__(self):
        if not self.supported:
            raise ValueError("LocaleContext requires at least one supported locale")

    def current_locale(self) -> str:
        return self.locale

    def supported_locales(self) -> tuple[str, ...]:
        return self.supported

    def is_supported(self, code: str) -> bool:
        return code in self.supported

    @classmethod
    def from_settings(cls, requested: str | None = None) -> LocaleContext:
        """
        Build from settings, honouring a requested locale when it is supported.
        Unsupported or missing requests fall back to DEFAULT_LOCALE.
        """
        supported = tuple(settings.supported_locale_list)
        locale = requested if requested in supported else settings.default_locale
        return cls(locale=locale, supported=supported)
