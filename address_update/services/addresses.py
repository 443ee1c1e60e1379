from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from address_update.core.normalize import normalize_state

DEFAULT_COUNTRY = "United States"
OUTBOUND_COUNTRY_CODE = "US"
REQUIRED_FIELDS = ("street", "city", "state", "zip")
EDITABLE_FIELDS = ("street", "city", "state", "zip", "country")


def _clean(value: Optional[Any]) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Address:
    address1: str = ""
    city: str = ""
    province: str = ""
    zip: str = ""
    country_code: str = OUTBOUND_COUNTRY_CODE

    @classmethod
    def from_payload(cls, data: Optional[Dict[str, Any]]) -> "Address":
        data = data or {}
        return cls(
            address1=_clean(data.get("address1")),
            city=_clean(data.get("city")),
            province=normalize_state(_clean(data.get("province"))),
            zip=_clean(data.get("zip")),
            country_code=_clean(data.get("country_code")).upper() or OUTBOUND_COUNTRY_CODE,
        )

    @classmethod
    def from_display(cls, display: str) -> "Address":
        """
        Positional parse of "street\\ncity, state zip".

        Assumes exactly one ", " between city and "state zip" and no space
        inside the state or zip; anything else yields empty fields.
        """
        lines = (display or "").split("\n")
        street = lines[0] if lines else ""
        city_state_zip = lines[1] if len(lines) > 1 else ""
        city_parts = city_state_zip.split(", ")
        city = city_parts[0] if city_parts else ""
        state_zip = city_parts[1] if len(city_parts) > 1 else ""
        state_parts = state_zip.split(" ")
        state = state_parts[0] if state_parts else ""
        zip_code = state_parts[1] if len(state_parts) > 1 else ""
        return cls(address1=street, city=city, province=normalize_state(state), zip=zip_code)

    @property
    def display(self) -> str:
        return f"{self.address1}\n{self.city}, {self.province} {self.zip}"

    def to_outbound(self) -> Dict[str, str]:
        return {
            "address1": self.address1,
            "city": self.city,
            "province": self.province,
            "zip": self.zip,
            "country_code": OUTBOUND_COUNTRY_CODE,
        }


@dataclass
class EditableAddress:
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = DEFAULT_COUNTRY

    @classmethod
    def from_address(cls, address: Address) -> "EditableAddress":
        return cls(
            street=address.address1,
            city=address.city,
            state=normalize_state(address.province),
            zip=address.zip,
        )

    def missing_fields(self) -> List[str]:
        return [field for field in REQUIRED_FIELDS if not getattr(self, field)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_outbound(self) -> Dict[str, str]:
        return {
            "address1": self.street,
            "city": self.city,
            "province": self.state,
            "zip": self.zip,
            "country_code": OUTBOUND_COUNTRY_CODE,
        }

    def to_dict(self) -> Dict[str, str]:
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}


def street_from_suggestion(suggestion: str) -> str:
    return (suggestion or "").split(",")[0].strip()
