"""
HTTP contact notifier.

POSTs `{name, email, subject, message}` to the serverless email
function. Every failure is turned into a FAILED result; nothing is
raised to the caller.
"""

from __future__ import annotations

import logging

import httpx

from folio.adapters.http.rest_client import error_detail
from folio.core.ports.notify import ContactMessage, NotifyResult

logger = logging.getLogger(__name__)


class HttpContactNotifier:
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        function_path: str = "/functions/v1/send-contact-email",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/{function_path.lstrip('/')}"
        self._anon_key = anon_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def notify(self, message: ContactMessage) -> NotifyResult:
        try:
            response = await self._client.post(
                self.endpoint,
                json=message.as_json(),
                headers={
                    "Authorization": f"Bearer {self._anon_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            logger.warning("Email service error: %s", exc)
            return NotifyResult.failed(str(exc) or type(exc).__name__)

        if not response.is_success:
            detail = error_detail(response)
            logger.warning("Email sending failed (%s): %s", response.status_code, detail)
            return NotifyResult.failed(detail, status_code=response.status_code)

        return NotifyResult.sent(response.status_code)
