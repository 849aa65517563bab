"""Messenger adapter: Send API client, webhook verification and event handlers."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import httpx
import logfire

from fbmessenger.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_HOST,
    FACEBOOK_GRAPH_API_VERSION,
    SEND_API_PATH,
    WEBHOOK_SUBSCRIBE_MODE,
)
from fbmessenger.exceptions import FacebookAPIError, TransportError
from fbmessenger.logging_config import mask_pii
from fbmessenger.models.messages import AttachmentType, Message
from fbmessenger.models.responses import SendResponse
from fbmessenger.models.webhook import EventKind, WebhookRequest
from fbmessenger.services.decoder import decode_response
from fbmessenger.services.dispatcher import EventDispatcher, EventHandler

if TYPE_CHECKING:
    import asyncio

    from fbmessenger.config import Settings


class Messenger:
    """
    Facebook Messenger adapter for a single Page.

    Register handlers by assigning the ``*_received`` attributes; each is
    called as ``handler(messenger, sender_id, payload)``. Any handler left
    as None means events of that kind are dropped.

    Example:
        >>> messenger = Messenger(access_token="...", verify_token="secret")
        >>> async def on_message(msng, sender_id, message):
        ...     await msng.send_text_message(sender_id, f"You said: {message.text}")
        >>> messenger.message_received = on_message
    """

    def __init__(
        self,
        access_token: str,
        verify_token: str = "",
        page_id: str = "",
        *,
        http_client: httpx.AsyncClient | None = None,
        api_url: str | None = None,
        graph_api_version: str = FACEBOOK_GRAPH_API_VERSION,
        timeout: float = FACEBOOK_API_TIMEOUT_SECONDS,
        dispatcher: EventDispatcher | None = None,
    ):
        """
        Args:
            access_token: Page access token used for the Send API
            verify_token: Shared secret for the webhook handshake
            page_id: Facebook Page ID
            http_client: Optional injected client; owned by the caller
            api_url: Base URL override (mock server); defaults to the Graph API
            graph_api_version: Version segment of the default base URL
            timeout: Timeout for the client created when none is injected
            dispatcher: Optional dispatcher shared between adapters
        """
        self.access_token = access_token
        self.verify_token = verify_token
        self.page_id = page_id
        self.http_client = http_client
        self.timeout = timeout
        self.dispatcher = dispatcher or EventDispatcher()

        self._base_url = (api_url or f"{FACEBOOK_GRAPH_API_HOST}/{graph_api_version}").rstrip("/")
        self._messages_url: str | None = None
        self._owns_client = False

        self.message_received: EventHandler | None = None
        self.delivery_received: EventHandler | None = None
        self.postback_received: EventHandler | None = None
        self.optin_received: EventHandler | None = None
        self.read_received: EventHandler | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> Messenger:
        """Build an adapter from application settings."""
        return cls(
            access_token=settings.facebook_page_access_token,
            verify_token=settings.facebook_verify_token,
            page_id=settings.facebook_page_id,
            api_url=settings.facebook_api_base_url,
            graph_api_version=settings.facebook_graph_api_version,
            timeout=settings.facebook_api_timeout_seconds,
            dispatcher=EventDispatcher(settings.max_concurrent_handlers),
        )

    async def __aenter__(self) -> Messenger:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ==========================================================================
    # HTTP client
    # ==========================================================================

    def get_client(self) -> httpx.AsyncClient:
        """Return the HTTP client, creating one on first use."""
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self.http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
            self._owns_client = False

    @property
    def messages_url(self) -> str:
        """Send API endpoint, built once per adapter."""
        if self._messages_url is None:
            self._messages_url = f"{self._base_url}/{SEND_API_PATH}"
        return self._messages_url

    # ==========================================================================
    # Send API
    # ==========================================================================

    def new_text_message(self, recipient_id: int, text: str) -> Message:
        """Create a text message for ``recipient_id``."""
        return Message.text_message(recipient_id, text)

    async def send_message(self, message: Message) -> SendResponse:
        """
        Send a message via the Facebook Send API.

        Args:
            message: Message envelope to send

        Returns:
            SendResponse with the message and recipient IDs

        Raises:
            TransportError: Connection, DNS or timeout failure
            ResponseDecodeError: Response body was not valid JSON
            FacebookAPIError: Facebook returned an error object
        """
        start_time = time.time()
        payload = message.to_payload()

        logfire.info(
            "Sending Facebook message",
            url=self.messages_url,
            recipient_id=message.recipient.id,
            has_text=message.message.text is not None,
            has_attachment=message.message.attachment is not None,
        )

        try:
            response = await self.get_client().post(
                self.messages_url,
                params={"access_token": self.access_token},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            elapsed = time.time() - start_time
            logfire.error(
                "Facebook API request error",
                recipient_id=message.recipient.id,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=elapsed * 1000,
            )
            raise TransportError(f"Request to Facebook failed: {e}") from e

        elapsed = time.time() - start_time
        try:
            result = decode_response(response)
        except FacebookAPIError as e:
            logfire.error(
                "Facebook message send failed",
                recipient_id=message.recipient.id,
                status_code=response.status_code,
                error_code=e.code,
                error_message=e.message,
                fbtrace_id=e.error.fbtrace_id,
                access_token=mask_pii(self.access_token),
                response_time_ms=elapsed * 1000,
            )
            raise

        logfire.info(
            "Facebook message sent successfully",
            recipient_id=result.recipient_id,
            status_code=response.status_code,
            message_id=result.message_id,
            response_time_ms=elapsed * 1000,
        )
        return result

    async def send_text_message(self, recipient_id: int, text: str) -> SendResponse:
        """Shorthand for building a text message and sending it."""
        return await self.send_message(self.new_text_message(recipient_id, text))

    async def send_attachment(
        self,
        recipient_id: int,
        attachment_type: AttachmentType | str,
        url: str,
    ) -> SendResponse:
        """Send an image, audio, video or file attachment by URL."""
        return await self.send_message(
            Message.attachment_message(recipient_id, attachment_type, url)
        )

    # ==========================================================================
    # Webhook
    # ==========================================================================

    def verify_webhook(
        self,
        mode: str | None,
        token: str | None,
        challenge: str | None,
    ) -> str | None:
        """
        Check a webhook subscription handshake.

        Facebook sends e.g.
        ``hub.mode=subscribe&hub.challenge=1085525140&hub.verify_token=my_token``.

        Returns:
            The challenge to echo back ("" if absent), or None on mismatch
        """
        if mode == WEBHOOK_SUBSCRIBE_MODE and token is not None and token == self.verify_token:
            return challenge or ""
        return None

    def handler_for(self, kind: EventKind) -> EventHandler | None:
        """Registered handler for an event kind, if any."""
        return {
            EventKind.MESSAGE: self.message_received,
            EventKind.DELIVERY: self.delivery_received,
            EventKind.POSTBACK: self.postback_received,
            EventKind.OPTIN: self.optin_received,
            EventKind.READ: self.read_received,
        }[kind]

    def dispatch(self, request: WebhookRequest) -> list[asyncio.Task]:
        """Fire handlers for every routable event in ``request``."""
        return self.dispatcher.dispatch(self, request)
