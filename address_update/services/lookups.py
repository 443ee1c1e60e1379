from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from anyio import to_thread

from address_update.core.normalize import clean_zip, normalize_state
from address_update.core.settings import S
from address_update.metrics import record_lookup

logger = logging.getLogger(__name__)

MIN_ZIP_LENGTH = 5
MIN_STREET_QUERY_LENGTH = 3
SEARCH_COUNTRY_QUALIFIER = "USA"


@dataclass(frozen=True)
class LocationResult:
    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.city or self.state)


NO_LOCATION = LocationResult()


def _headers() -> Dict[str, str]:
    return {"User-Agent": S.lookup_user_agent, "Accept": "application/json"}


def lookup_zip(zipcode: str) -> LocationResult:
    cleaned = clean_zip(zipcode)
    if len(cleaned) < MIN_ZIP_LENGTH:
        return NO_LOCATION

    url = f"{S.zip_lookup_base_url}/{cleaned}"
    try:
        r = requests.get(url, headers=_headers(), timeout=S.lookup_timeout_seconds)
        if r.status_code >= 300:
            raise requests.HTTPError(f"zip lookup failed: HTTP {r.status_code}")
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Error fetching location from zipcode %s: %s", cleaned, exc)
        record_lookup("zip", "error")
        return NO_LOCATION

    places = (data.get("places") or []) if isinstance(data, dict) else []
    if not isinstance(places, list) or not places:
        record_lookup("zip", "empty")
        return NO_LOCATION

    place = places[0]
    if not isinstance(place, dict):
        record_lookup("zip", "empty")
        return NO_LOCATION
    state = place.get("state")
    city = place.get("place name")
    record_lookup("zip", "ok")
    return LocationResult(
        city=city or None,
        state=normalize_state(state) if state else None,
    )


def search_street(query: str, city: str, state: str) -> List[str]:
    if not query or len(query) < MIN_STREET_QUERY_LENGTH:
        return []

    params: Dict[str, Any] = {
        "format": "json",
        "q": f"{query}, {city}, {state}, {SEARCH_COUNTRY_QUALIFIER}",
        "countrycodes": "us",
        "limit": S.suggestion_limit,
        "addressdetails": 1,
    }
    try:
        r = requests.get(S.suggestion_search_url, params=params, headers=_headers(), timeout=S.lookup_timeout_seconds)
        if r.status_code >= 300:
            raise requests.HTTPError(f"address search failed: HTTP {r.status_code}")
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Error fetching address suggestions for %r: %s", query, exc)
        record_lookup("suggestion", "error")
        return []

    if not isinstance(data, list):
        record_lookup("suggestion", "empty")
        return []
    suggestions = [item.get("display_name") for item in data if isinstance(item, dict)]
    suggestions = [s for s in suggestions if s]
    record_lookup("suggestion", "ok" if suggestions else "empty")
    return suggestions


async def fetch_location_from_zip(zipcode: str) -> LocationResult:
    if len(clean_zip(zipcode)) < MIN_ZIP_LENGTH:
        return NO_LOCATION
    return await to_thread.run_sync(lookup_zip, zipcode)


async def fetch_address_suggestions(query: str, city: str, state: str) -> List[str]:
    if not query or len(query) < MIN_STREET_QUERY_LENGTH:
        return []
    return await to_thread.run_sync(search_street, query, city, state)


class LookupClient:
    """Location and street lookups as used by the form."""

    async def location(self, zipcode: str) -> LocationResult:
        return await fetch_location_from_zip(zipcode)

    async def suggestions(self, query: str, city: str, state: str) -> List[str]:
        return await fetch_address_suggestions(query, city, state)
