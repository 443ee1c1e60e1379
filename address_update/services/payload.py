from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from address_update.services.addresses import Address


@dataclass(frozen=True)
class CustomerMetadata:
    customer_name: str
    shopify_id: Optional[int] = None
    recharge_id: Optional[int] = None
    email: Optional[str] = None
    date_time: Optional[str] = None


@dataclass(frozen=True)
class Subscription:
    id: str
    name: str
    address: Address

    @property
    def display(self) -> str:
        return self.address.display


@dataclass(frozen=True)
class DecodedPayload:
    customer: CustomerMetadata
    subscriptions: List[Subscription] = field(default_factory=list)


def extract_customer_payload(data: Any) -> Optional[Dict[str, Any]]:
    """
    Pull the customer object out of an inbound automation payload.

    Accepts `[{"output": {...}}]`, `{"output": {...}}` or the bare object.
    Returns None unless both `customer_name` and `subscriptions` are present.
    """
    candidate: Any = None
    if isinstance(data, list):
        first = data[0] if data else None
        if isinstance(first, dict) and first.get("output"):
            candidate = first["output"]
    elif isinstance(data, dict):
        output = data.get("output")
        if isinstance(output, dict) and output.get("customer_name"):
            candidate = output
        elif data.get("customer_name"):
            candidate = data

    if not isinstance(candidate, dict):
        return None
    if not candidate.get("customer_name") or candidate.get("subscriptions") is None:
        return None
    if not isinstance(candidate["subscriptions"], list):
        return None
    return candidate


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def decode_subscription(item: Dict[str, Any]) -> Subscription:
    address = item.get("current_address")
    if isinstance(address, dict):
        parsed = Address.from_payload(address)
    else:
        parsed = Address.from_display(str(item.get("address") or ""))
    return Subscription(
        id=str(item.get("id") or ""),
        name=str(item.get("recipient_name") or item.get("name") or ""),
        address=parsed,
    )


def decode_payload(data: Any) -> Optional[DecodedPayload]:
    payload = extract_customer_payload(data)
    if payload is None:
        return None

    customer = CustomerMetadata(
        customer_name=str(payload["customer_name"]),
        # older automation runs send the Shopify id as customer_id
        shopify_id=_optional_int(payload.get("shopify_id", payload.get("customer_id"))),
        recharge_id=_optional_int(payload.get("recharge_id")),
        email=_optional_str(payload.get("email")),
        date_time=_optional_str(payload.get("date_time")),
    )
    subscriptions = [
        decode_subscription(item)
        for item in payload["subscriptions"]
        if isinstance(item, dict) and item.get("id") is not None
    ]
    return DecodedPayload(customer=customer, subscriptions=subscriptions)


# Loaded when no webhook has been received yet and DEMO_FALLBACK_ENABLED is set.
DEMO_PAYLOAD: Dict[str, Any] = {
    "customer_name": "Jane Doe",
    "shopify_id": 7818727325739,
    "recharge_id": 211519611,
    "email": "jane.doe@example.com",
    "date_time": "2025-09-19T10:40:18-05:00",
    "subscriptions": [
        {"id": "1", "recipient_name": "ayush", "address": "123 Maple Street, Apt 4B\nSpringfield, IL 62704"},
        {"id": "2", "recipient_name": "rahul", "address": "456 Oak Avenue, Suite 12\nChicago, IL 60616"},
    ],
}
