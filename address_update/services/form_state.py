from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request

from address_update.core.normalize import normalize_state
from address_update.core.settings import S
from address_update.services.addresses import EDITABLE_FIELDS, EditableAddress, street_from_suggestion
from address_update.services.debounce import Debouncer
from address_update.services.lookups import LocationResult, LookupClient, MIN_ZIP_LENGTH
from address_update.services.payload import CustomerMetadata, DecodedPayload, Subscription

logger = logging.getLogger(__name__)


class FormState:
    """
    Address form for one customer session.

    Holds the decoded subscriptions, which of them are selected, and one
    EditableAddress per selected subscription. Selection and the address map
    always change together. Zip and street edits schedule debounced lookups
    whose results are merged back on the event loop.
    """

    def __init__(
        self,
        lookups: Optional[LookupClient] = None,
        *,
        zip_delay: float = S.zip_debounce_seconds,
        street_delay: float = S.street_debounce_seconds,
        blur_delay: float = S.blur_grace_seconds,
    ) -> None:
        self.lookups = lookups or LookupClient()
        self.blur_delay = blur_delay
        self.customer: Optional[CustomerMetadata] = None
        self.subscriptions: List[Subscription] = []
        self.selected: List[str] = []
        self.addresses: Dict[str, EditableAddress] = {}
        self.suggestions: Dict[str, List[str]] = {}
        self.show_suggestions: Dict[str, bool] = {}
        self.loaded = False
        self._zip_debounce = Debouncer(zip_delay, name="zip")
        self._street_debounce = Debouncer(street_delay, name="street")
        self._blur_timers: Dict[str, asyncio.TimerHandle] = {}

    # ------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------
    def load(self, decoded: DecodedPayload) -> bool:
        if self.loaded:
            return False
        self.customer = decoded.customer
        self.subscriptions = list(decoded.subscriptions)
        self.selected = []
        self.addresses = {}
        if self.subscriptions:
            first = self.subscriptions[0]
            self.selected.append(first.id)
            self.addresses[first.id] = EditableAddress.from_address(first.address)
        self.loaded = True
        logger.info(
            "Loaded form for %s with %d subscription(s)",
            self.customer.customer_name,
            len(self.subscriptions),
        )
        return True

    def subscription(self, subscription_id: str) -> Subscription:
        for sub in self.subscriptions:
            if sub.id == subscription_id:
                return sub
        raise HTTPException(404, "subscription not found")

    def address(self, subscription_id: str) -> EditableAddress:
        address = self.addresses.get(subscription_id)
        if address is None:
            raise HTTPException(404, "subscription not selected")
        return address

    # ------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------
    def toggle(self, subscription_id: str, selected: bool) -> None:
        if selected:
            self.select(subscription_id)
        else:
            self.deselect(subscription_id)

    def select(self, subscription_id: str) -> EditableAddress:
        sub = self.subscription(subscription_id)
        if subscription_id not in self.selected:
            self.selected.append(subscription_id)
        if subscription_id not in self.addresses:
            self.addresses[subscription_id] = EditableAddress.from_address(sub.address)
        return self.addresses[subscription_id]

    def deselect(self, subscription_id: str) -> None:
        if subscription_id in self.selected:
            self.selected.remove(subscription_id)
        self.addresses.pop(subscription_id, None)
        self.suggestions.pop(subscription_id, None)
        self.show_suggestions.pop(subscription_id, None)
        self._zip_debounce.cancel(subscription_id)
        self._street_debounce.cancel(subscription_id)
        self._cancel_blur(subscription_id)

    # ------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------
    def edit_field(self, subscription_id: str, field: str, value: str) -> EditableAddress:
        if field not in EDITABLE_FIELDS:
            raise HTTPException(400, f"Unknown address field: {field}")
        address = self.address(subscription_id)
        value = value or ""
        if field == "state":
            value = normalize_state(value)
        setattr(address, field, value)

        if field == "zip":
            self._schedule_location(subscription_id, value)
        elif field == "street" and address.city and address.state:
            self._schedule_suggestions(subscription_id, value, address.city, address.state)
        return address

    def _schedule_location(self, subscription_id: str, zipcode: str) -> None:
        async def fetch() -> LocationResult:
            if len(zipcode) < MIN_ZIP_LENGTH:
                return LocationResult()
            return await self.lookups.location(zipcode)

        self._zip_debounce.schedule(subscription_id, fetch, lambda loc: self.apply_location(subscription_id, loc))

    def _schedule_suggestions(self, subscription_id: str, query: str, city: str, state: str) -> None:
        async def fetch() -> List[str]:
            return await self.lookups.suggestions(query, city, state)

        self._street_debounce.schedule(subscription_id, fetch, lambda items: self.apply_suggestions(subscription_id, items))

    def apply_location(self, subscription_id: str, location: LocationResult) -> None:
        address = self.addresses.get(subscription_id)
        if address is None or not location.found:
            return
        if location.state:
            address.state = location.state
        if location.city:
            address.city = location.city

    def apply_suggestions(self, subscription_id: str, suggestions: List[str]) -> None:
        if subscription_id not in self.addresses:
            return
        self.suggestions[subscription_id] = list(suggestions)
        self.show_suggestions[subscription_id] = len(suggestions) > 0

    # ------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------
    def select_suggestion(self, subscription_id: str, suggestion: str) -> EditableAddress:
        address = self.address(subscription_id)
        address.street = street_from_suggestion(suggestion)
        self._cancel_blur(subscription_id)
        self.show_suggestions[subscription_id] = False
        return address

    def blur(self, subscription_id: str) -> None:
        # Keep the list up briefly so a click on a suggestion still lands.
        self._cancel_blur(subscription_id)
        loop = asyncio.get_running_loop()
        self._blur_timers[subscription_id] = loop.call_later(self.blur_delay, self.hide_suggestions, subscription_id)

    def hide_suggestions(self, subscription_id: str) -> None:
        self._blur_timers.pop(subscription_id, None)
        if subscription_id in self.show_suggestions:
            self.show_suggestions[subscription_id] = False

    def _cancel_blur(self, subscription_id: str) -> None:
        handle = self._blur_timers.pop(subscription_id, None)
        if handle is not None:
            handle.cancel()

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------
    async def wait_idle(self) -> None:
        await self._zip_debounce.wait_idle()
        await self._street_debounce.wait_idle()

    def close(self) -> None:
        self._zip_debounce.cancel_all()
        self._street_debounce.cancel_all()
        for subscription_id in list(self._blur_timers):
            self._cancel_blur(subscription_id)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "loaded": self.loaded,
            "customer_name": self.customer.customer_name if self.customer else "",
            "subscriptions": [{"id": s.id, "name": s.name, "address": s.display} for s in self.subscriptions],
            "selected": list(self.selected),
            "addresses": {sid: self.addresses[sid].to_dict() for sid in self.selected if sid in self.addresses},
            "suggestions": {
                sid: {"items": list(items), "visible": bool(self.show_suggestions.get(sid))}
                for sid, items in self.suggestions.items()
            },
        }


def get_form_state(request: Request) -> FormState:
    return request.app.state.form
