from __future__ import annotations

import os

import httpx
import structlog

logger = structlog.get_logger(__name__)

NOTIFY_INBOX_URL = os.getenv("NOTIFY_INBOX_URL", "")
NOTIFY_BEARER_TOKEN = os.getenv("NOTIFY_BEARER_TOKEN", "")
FUNCTION_SECRET = os.getenv("FUNCTION_SECRET", "")
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))


class InboxNotifier:
    """Posts "new inbox message" notifications to the external e-mail function.

    Delivery is fire-and-forget: the response status is never inspected and
    transport failures are logged, not raised.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {NOTIFY_BEARER_TOKEN}",
            "x-function-secret": FUNCTION_SECRET,
        }

    def notify_inbox(self, recipient_user_id: str, sender_name: str) -> None:
        if not NOTIFY_INBOX_URL:
            logger.info("inbox_notify_skipped", reason="NOTIFY_INBOX_URL not set", recipient=recipient_user_id)
            return
        body = {"recipient_user_id": recipient_user_id, "sender_name": sender_name}
        try:
            if self._client is not None:
                self._client.post(NOTIFY_INBOX_URL, json=body, headers=self._headers())
            else:
                httpx.post(
                    NOTIFY_INBOX_URL,
                    json=body,
                    headers=self._headers(),
                    timeout=NOTIFY_TIMEOUT_SECONDS,
                )
        except httpx.HTTPError as exc:
            logger.warning("inbox_notify_failed", recipient=recipient_user_id, error=str(exc))
