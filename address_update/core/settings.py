from __future__ import annotations

import os
from dataclasses import dataclass

@dataclass(frozen=True)
class Settings:
    # Server
    app_title: str = os.environ.get("APP_TITLE", "Subscription Address Update")
    host: str = os.environ.get("HOST", "0.0.0.0")
    port: int = int(os.environ.get("PORT", "3001"))
    log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()
    metrics_enabled: bool = os.environ.get("METRICS_ENABLED", "1") not in ("0", "false", "False")

    # Location lookup (Zippopotam.us, US scope)
    zip_lookup_base_url: str = os.environ.get("ZIP_LOOKUP_BASE_URL", "https://api.zippopotam.us/us").rstrip("/")

    # Street suggestions (Nominatim)
    suggestion_search_url: str = os.environ.get(
        "SUGGESTION_SEARCH_URL",
        "https://nominatim.openstreetmap.org/search",
    )
    suggestion_limit: int = int(os.environ.get("SUGGESTION_LIMIT", "5"))

    lookup_timeout_seconds: float = float(os.environ.get("LOOKUP_TIMEOUT_SECONDS", "10"))
    # Nominatim rejects requests without an identifying agent
    lookup_user_agent: str = os.environ.get("LOOKUP_USER_AGENT", "subscription-address-update/0.1")

    # Outbound automation endpoint (n8n)
    automation_webhook_url: str = os.environ.get(
        "AUTOMATION_WEBHOOK_URL",
        "https://historybymail.app.n8n.cloud/webhook/d93e3a8c-9f3b-410e-a375-6d301cf7d4a4",
    )
    outbound_timeout_seconds: float = float(os.environ.get("OUTBOUND_TIMEOUT_SECONDS", "20"))

    # Form timing
    zip_debounce_seconds: float = float(os.environ.get("ZIP_DEBOUNCE_SECONDS", "0.5"))
    street_debounce_seconds: float = float(os.environ.get("STREET_DEBOUNCE_SECONDS", "0.3"))
    blur_grace_seconds: float = float(os.environ.get("BLUR_GRACE_SECONDS", "0.2"))

    # Webhook relay
    webhook_history_limit: int = int(os.environ.get("WEBHOOK_HISTORY_LIMIT", "100"))
    demo_fallback_enabled: bool = os.environ.get("DEMO_FALLBACK_ENABLED", "0") not in ("0", "false", "False")


S = Settings()
