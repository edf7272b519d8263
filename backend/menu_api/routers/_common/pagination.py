"""
Response envelopes for list and single-record endpoints.

Usage:
    records, page_meta = service.list(spec)
    return PaginatedResponse(items=[...], page_meta=page_meta).to_dict()
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from menu_api.repositories import PageMeta


def dump(value: Any) -> Any:
    """JSON-ready value; pydantic models use their serialization aliases."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [dump(entry) for entry in value]
    return value


def data_response(data: Any) -> dict[str, Any]:
    return {"data": dump(data)}


@dataclass
class PaginatedResponse:
    """
    {"data": [...]} plus {"meta": {"page": {...}}} when the request was paginated.
    """

    items: list[Any]
    page_meta: PageMeta | None = None

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {"data": dump(self.items)}
        if self.page_meta is not None:
            response["meta"] = {"page": self.page_meta.to_dict()}
        return response

    @property
    def has_more(self) -> bool:
        if self.page_meta is None:
            return False
        return self.page_meta.current_page < self.page_meta.last_page
