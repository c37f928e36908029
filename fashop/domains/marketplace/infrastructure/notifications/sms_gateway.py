"""
SMS Notification Gateway

Sends rendered templates through the configured HTTP SMS provider:

    POST {SMS_API_URL}
    {"to": "+224...", "message": "...", "sender": "FASHOP", "api_key": "..."}

When no provider is configured, delivery is simulated and logged, so
development and test environments never send real messages.
"""

import logging
import time
from typing import Any

import httpx

from fashop.config.settings import Settings, get_settings
from fashop.core.domain import NotificationException
from fashop.domains.marketplace.application.ports import (
    INotificationGateway,
    NotificationResult,
    NotificationTemplate,
)

from .templates import render_message

logger = logging.getLogger(__name__)


class SmsNotificationGateway(INotificationGateway):
    """
    INotificationGateway backed by an HTTP SMS API.

    Example:
        gateway = SmsNotificationGateway()
        result = await gateway.notify(
            "+224622000000",
            NotificationTemplate.LOW_STOCK,
            {"product_name": "Robe wax", "sku": "ROBE-1", "stock": 1, "min_stock": 2},
        )
    """

    PROVIDER = "local"
    SIMULATION_PROVIDER = "simulation"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            settings: Application settings (defaults to the cached instance)
            transport: Optional httpx transport, used to stub the provider
        """
        self._settings = settings or get_settings()
        self._transport = transport

        if self._settings.SMS_ENABLED and not self._settings.sms_configured:
            logger.info("SMS provider not configured, notifications run in simulation mode")

    async def notify(
        self,
        recipient: str,
        template_type: NotificationTemplate,
        data: dict[str, Any],
    ) -> NotificationResult:
        """
        Render and send one message.

        Raises:
            NotificationException: Provider unreachable, timed out or the
                connection broke mid-request
        """
        if not self._settings.SMS_ENABLED:
            return NotificationResult(success=False, provider="disabled", error="SMS notifications are disabled")

        message = render_message(template_type, data)

        if not self._settings.sms_configured:
            return self._simulate(recipient, message)

        return await self._send(recipient, message)

    def _simulate(self, recipient: str, message: str) -> NotificationResult:
        logger.info(f"[SIMULATION] SMS from {self._settings.SMS_SENDER} to {recipient}: {message[:100]}")
        return NotificationResult(
            success=True,
            provider=self.SIMULATION_PROVIDER,
            message_id=f"sim_{int(time.time() * 1000)}",
        )

    async def _send(self, recipient: str, message: str) -> NotificationResult:
        payload = {
            "to": recipient,
            "message": message,
            "sender": self._settings.SMS_SENDER,
            "api_key": self._settings.SMS_API_KEY,
        }

        try:
            async with httpx.AsyncClient(timeout=self._settings.SMS_TIMEOUT, transport=self._transport) as client:
                response = await client.post(self._settings.SMS_API_URL, json=payload)

        except httpx.ConnectError as e:
            logger.error(f"SMS connection error: {e}")
            raise NotificationException(self.PROVIDER, f"Could not connect to SMS provider: {e}", e) from e

        except httpx.TimeoutException as e:
            logger.error(f"SMS timeout error: {e}")
            raise NotificationException(self.PROVIDER, f"SMS provider request timed out: {e}", e) from e

        except httpx.HTTPError as e:
            logger.error(f"SMS transport error ({type(e).__name__}): {e}")
            raise NotificationException(self.PROVIDER, f"SMS provider request failed: {e}", e) from e

        if response.is_error:
            logger.warning(f"SMS provider rejected message to {recipient}: HTTP {response.status_code}")
            return NotificationResult(
                success=False,
                provider=self.PROVIDER,
                error=f"HTTP {response.status_code}: {response.text[:200]}",
            )

        try:
            body = response.json()
        except ValueError:
            body = {}
        message_id = body.get("message_id") if isinstance(body, dict) else None
        logger.info(f"SMS sent to {recipient}: {message_id}")
        return NotificationResult(success=True, provider=self.PROVIDER, message_id=message_id)
