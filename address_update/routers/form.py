from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from address_update.core.settings import S
from address_update.models import (
    FormFieldReq,
    FormSelectReq,
    FormStateResp,
    FormSuggestionReq,
    SubmitResp,
)
from address_update.services.form_state import FormState, get_form_state
from address_update.services.outbound import STATUS_REJECTED, submit_updates
from address_update.services.payload import DEMO_PAYLOAD, decode_payload
from address_update.services.webhook_store import WebhookStore, get_webhook_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ui/form", tags=["form"])


def load_form_once(form: FormState, store: WebhookStore) -> bool:
    """Populate the form from the newest decodable webhook entry, at most once per session."""
    if form.loaded:
        return False
    for entry in store.entries():
        decoded = decode_payload(entry.data)
        if decoded is not None:
            return form.load(decoded)
    if S.demo_fallback_enabled:
        logger.info("No customer webhook stored; loading demo data")
        return form.load(decode_payload(DEMO_PAYLOAD))
    return False


@router.get("", response_model=FormStateResp)
async def ui_get_form(
    form: FormState = Depends(get_form_state),
    store: WebhookStore = Depends(get_webhook_store),
):
    load_form_once(form, store)
    return form.snapshot()


@router.post("/select", response_model=FormStateResp)
async def ui_select_subscription(body: FormSelectReq, form: FormState = Depends(get_form_state)):
    form.toggle(body.subscription_id, body.selected)
    return form.snapshot()


@router.patch("/addresses/{subscription_id}", response_model=FormStateResp)
async def ui_edit_address(subscription_id: str, body: FormFieldReq, form: FormState = Depends(get_form_state)):
    form.edit_field(subscription_id, body.field, body.value)
    return form.snapshot()


@router.post("/addresses/{subscription_id}/suggestion", response_model=FormStateResp)
async def ui_pick_suggestion(subscription_id: str, body: FormSuggestionReq, form: FormState = Depends(get_form_state)):
    form.select_suggestion(subscription_id, body.suggestion)
    return form.snapshot()


@router.post("/addresses/{subscription_id}/blur")
async def ui_blur_address(subscription_id: str, form: FormState = Depends(get_form_state)):
    form.address(subscription_id)
    form.blur(subscription_id)
    return {"ok": True}


@router.post("/submit", response_model=SubmitResp)
async def ui_submit_form(form: FormState = Depends(get_form_state)):
    result = await submit_updates(form)
    if result.status == STATUS_REJECTED:
        raise HTTPException(400, result.message)
    return {"status": result.status, "message": result.message, "records": result.records}


@router.post("/reset")
async def ui_reset_form(req: Request):
    previous = req.app.state.form
    previous.close()
    req.app.state.form = FormState(lookups=previous.lookups)
    return {"ok": True}
