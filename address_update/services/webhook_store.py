from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import Request

from address_update.core.normalize import client_ip_from_request
from address_update.core.settings import S
from address_update.core.time import now_iso, now_ms


@dataclass
class WebhookEntry:
    id: str
    webhook_id: str
    timestamp: str
    method: str
    data: Any
    headers: Dict[str, str] = field(default_factory=dict)
    ip: str = "0.0.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "webhookId": self.webhook_id,
            "timestamp": self.timestamp,
            "method": self.method,
            "data": self.data,
            "headers": self.headers,
            "ip": self.ip,
        }


def build_entry(req, webhook_id: str, data: Any) -> WebhookEntry:
    return WebhookEntry(
        id=f"webhook-{now_ms()}",
        webhook_id=webhook_id,
        timestamp=now_iso(),
        method=req.method,
        data=data,
        headers=dict(req.headers),
        ip=client_ip_from_request(req),
    )


class WebhookStore:
    """
    In-memory webhook entries, newest first.

    Customer-data deliveries replace everything with a single entry; generic
    deliveries are prepended and capped at `limit`.
    """

    def __init__(self, limit: int = S.webhook_history_limit) -> None:
        self.limit = limit
        self._entries: List[WebhookEntry] = []

    def replace(self, entry: WebhookEntry) -> None:
        self._entries = [entry]

    def push(self, entry: WebhookEntry) -> None:
        self._entries.insert(0, entry)
        del self._entries[self.limit:]

    def latest(self) -> Optional[WebhookEntry]:
        return self._entries[0] if self._entries else None

    def entries(self) -> List[WebhookEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)


def get_webhook_store(request: Request) -> WebhookStore:
    return request.app.state.webhook_store
