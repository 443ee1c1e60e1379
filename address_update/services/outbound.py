from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from anyio import to_thread

from address_update.core.settings import S
from address_update.metrics import record_submission
from address_update.services.form_state import FormState
from address_update.services.payload import CustomerMetadata

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Your address will be updated successfully!"
DEGRADED_MESSAGE = "Address update submitted, but there was an issue with the server."
INCOMPLETE_MESSAGE = "Please select at least one subscription and fill all required address fields."

STATUS_SUCCESS = "success"
STATUS_DEGRADED = "degraded"
STATUS_REJECTED = "rejected"


@dataclass
class SubmissionResult:
    status: str
    message: str
    records: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS


def validate_submission(form: FormState) -> Optional[str]:
    if not form.selected:
        return INCOMPLETE_MESSAGE
    for subscription_id in form.selected:
        address = form.addresses.get(subscription_id)
        if address is None or not address.is_complete():
            return INCOMPLETE_MESSAGE
    return None


def build_update_records(form: FormState) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for subscription_id in form.selected:
        sub = form.subscription(subscription_id)
        records.append({
            "subscription_id": subscription_id,
            "subscription_name": sub.name,
            "old_address": sub.address.to_outbound(),
            "new_address": form.address(subscription_id).to_outbound(),
        })
    return records


def _id_param(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def build_query_params(customer: Optional[CustomerMetadata], records: List[Dict[str, Any]]) -> Dict[str, str]:
    customer = customer or CustomerMetadata(customer_name="")
    return {
        "customer_name": customer.customer_name,
        "shopify_id": _id_param(customer.shopify_id),
        "recharge_id": _id_param(customer.recharge_id),
        "email": customer.email or "",
        "date_time": customer.date_time or "",
        "updated_subscriptions": json.dumps(records),
    }


def send_updates(params: Dict[str, str]) -> bool:
    try:
        r = requests.get(
            S.automation_webhook_url,
            params=params,
            headers={"Content-Type": "application/json"},
            timeout=S.outbound_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.warning("Automation webhook call failed: %s", exc)
        return False
    if r.status_code >= 300:
        logger.warning("Automation webhook returned HTTP %s: %s", r.status_code, r.text[:500])
        return False
    return True


async def submit_updates(form: FormState) -> SubmissionResult:
    problem = validate_submission(form)
    if problem:
        record_submission(STATUS_REJECTED)
        return SubmissionResult(status=STATUS_REJECTED, message=problem)

    records = build_update_records(form)
    params = build_query_params(form.customer, records)
    ok = await to_thread.run_sync(send_updates, params)

    status = STATUS_SUCCESS if ok else STATUS_DEGRADED
    record_submission(status)
    logger.info("Submitted %d address update(s): %s", len(records), status)
    return SubmissionResult(
        status=status,
        message=SUCCESS_MESSAGE if ok else DEGRADED_MESSAGE,
        records=records,
    )
