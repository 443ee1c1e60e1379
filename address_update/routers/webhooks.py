from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from address_update.core.normalize import client_ip_from_request
from address_update.metrics import record_webhook, record_webhook_rejected
from address_update.models import GenericWebhookAck, WebhookAck, WebhookDataResp
from address_update.services.payload import extract_customer_payload
from address_update.services.webhook_store import WebhookStore, build_entry, get_webhook_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

CUSTOMER_DATA_WEBHOOK_ID = "customer-data"
INVALID_PAYLOAD_MESSAGE = "Invalid data format. Expected customer_name and subscriptions in output object."


async def _read_json(req: Request) -> Any:
    body = await req.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        # Deliveries are recorded even when the body is not JSON.
        logger.debug("Non-JSON body on %s %s", req.method, req.url.path)
        return None


@router.post("/webhook/customer-data", response_model=WebhookAck)
async def receive_customer_data(req: Request, store: WebhookStore = Depends(get_webhook_store)):
    data = await _read_json(req)
    customer = extract_customer_payload(data)
    if customer is None:
        record_webhook_rejected()
        logger.warning("Rejected customer-data webhook from %s", client_ip_from_request(req))
        return JSONResponse(status_code=400, content={"success": False, "message": INVALID_PAYLOAD_MESSAGE})

    entry = build_entry(req, CUSTOMER_DATA_WEBHOOK_ID, data)
    store.replace(entry)
    record_webhook(CUSTOMER_DATA_WEBHOOK_ID)
    logger.info(
        "Customer data received for %s (%d subscriptions)",
        customer["customer_name"],
        len(customer["subscriptions"]),
    )
    return {
        "success": True,
        "message": "Customer data received successfully",
        "customer_name": customer["customer_name"],
        "customer_id": customer.get("customer_id", customer.get("shopify_id")),
        "email": customer.get("email"),
        "subscriptions_count": len(customer["subscriptions"]),
        "timestamp": entry.timestamp,
    }


@router.api_route(
    "/webhook/{webhook_id}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=GenericWebhookAck,
)
async def receive_webhook(webhook_id: str, req: Request, store: WebhookStore = Depends(get_webhook_store)):
    if req.method == "GET":
        data: Any = dict(req.query_params)
    else:
        data = await _read_json(req)

    entry = build_entry(req, webhook_id, data)
    store.push(entry)
    record_webhook(webhook_id)
    logger.info("Webhook received: %s /webhook/%s", req.method, webhook_id)
    return {
        "success": True,
        "message": "Webhook data received successfully",
        "webhookId": webhook_id,
        "timestamp": entry.timestamp,
        "method": req.method,
        "dataReceived": data,
    }


@router.get("/api/webhook-data", response_model=WebhookDataResp)
async def list_webhook_data(store: WebhookStore = Depends(get_webhook_store)):
    entries = [entry.to_dict() for entry in store.entries()]
    return {"success": True, "data": entries, "count": len(entries)}


@router.delete("/api/webhook-data")
async def clear_webhook_data(store: WebhookStore = Depends(get_webhook_store)):
    store.clear()
    return {"success": True, "message": "Webhook data cleared"}
