from __future__ import annotations

from fastapi import APIRouter

from address_update.core.time import now_iso
from address_update.metrics import uptime_seconds

router = APIRouter(tags=["misc"])

@router.get("/health")
async def health():
    return {"status": "OK", "timestamp": now_iso(), "uptime": uptime_seconds()}

@router.get("/api/ping")
async def ping():
    return {"ok": True}
