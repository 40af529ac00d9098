"""
Shapes of the structured blobs stored on an order row.

Rows written by older clients may hold anything, so reads go through
parse_items / parse_address and get a ParseResult back instead of an
exception. A bad row renders as an inline error string; the rest of the
list is unaffected.
"""
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

T = TypeVar("T")

ITEMS_PARSE_ERROR = "Error parsing items"
ADDRESS_PARSE_ERROR = "Error parsing address"


class OrderItemPayload(BaseModel):
    id: str | None = None
    name: str
    quantity: int = Field(gt=0)
    price: Decimal
    image: str | None = None


class DeliveryAddressPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    city: str
    postal_code: str = Field(alias="postalCode")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult[T]":
        return cls(False, error=error)


_items_adapter = TypeAdapter(list[OrderItemPayload])


def _load(raw: Any) -> Any:
    if isinstance(raw, (str, bytes)):
        return json.loads(raw)
    return raw


def parse_items(raw: Any) -> ParseResult[list[OrderItemPayload]]:
    try:
        return ParseResult.success(_items_adapter.validate_python(_load(raw)))
    except (ValueError, ValidationError):
        return ParseResult.failure(ITEMS_PARSE_ERROR)


def parse_address(raw: Any) -> ParseResult[DeliveryAddressPayload]:
    try:
        return ParseResult.success(DeliveryAddressPayload.model_validate(_load(raw)))
    except (ValueError, ValidationError):
        return ParseResult.failure(ADDRESS_PARSE_ERROR)


def dump_items(items: list[OrderItemPayload]) -> list[dict]:
    return [item.model_dump(mode="json", exclude_none=True) for item in items]


def dump_address(address: DeliveryAddressPayload) -> dict:
    return address.model_dump(mode="json", by_alias=True)
