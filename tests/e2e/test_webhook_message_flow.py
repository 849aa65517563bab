"""End-to-end tests for webhook event processing flow."""

import asyncio
from unittest.mock import MagicMock

import httpx
import pytest

from fbmessenger.main import create_app
from fbmessenger.models.webhook import FacebookMessage, FacebookPostback


@pytest.fixture
def asgi_client(messenger, mock_logfire):
    """Async client calling the app in-process, on the test's event loop."""
    app = create_app(messenger=messenger)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


class TestWebhookMessageFlow:
    """Test POST /webhook decoding and dispatch."""

    @pytest.mark.asyncio
    async def test_message_dispatched_to_handler(self, asgi_client, messenger, sample_webhook_payload):
        received = []

        async def on_message(msng, sender_id, message):
            received.append((sender_id, message))

        messenger.message_received = on_message

        async with asgi_client as client:
            response = await client.post("/webhook", json=sample_webhook_payload)
        await messenger.dispatcher.drain(timeout=5)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert len(received) == 1
        sender_id, message = received[0]
        assert sender_id == 1254459154682919
        assert isinstance(message, FacebookMessage)
        assert message.text == "hello, world!"

    @pytest.mark.asyncio
    async def test_response_does_not_wait_for_handlers(self, asgi_client, messenger, sample_webhook_payload):
        release = asyncio.Event()
        finished = []

        async def on_message(msng, sender_id, message):
            await release.wait()
            finished.append(sender_id)

        messenger.message_received = on_message

        async with asgi_client as client:
            response = await client.post("/webhook", json=sample_webhook_payload)

        assert response.status_code == 200
        assert finished == []
        assert messenger.dispatcher.pending == 1

        release.set()
        await messenger.dispatcher.drain(timeout=5)
        assert finished == [1254459154682919]

    @pytest.mark.asyncio
    async def test_handler_replies_through_send_api(
        self, asgi_client, messenger, mock_messenger_api, send_url, multi_entry_payload
    ):
        route = mock_messenger_api.post(send_url).mock(
            return_value=httpx.Response(200, json={"recipient_id": "3", "message_id": "mid.r"})
        )

        async def on_postback(msng, sender_id, postback: FacebookPostback):
            await msng.send_text_message(sender_id, f"You picked {postback.payload}")

        messenger.postback_received = on_postback

        async with asgi_client as client:
            response = await client.post("/webhook", json=multi_entry_payload)
        await messenger.dispatcher.drain(timeout=5)

        assert response.status_code == 200
        assert route.call_count == 1
        request = route.calls.last.request
        assert request.url.params["access_token"] == "test-page-token"
        assert b"You picked GET_STARTED" in request.content

    @pytest.mark.asyncio
    async def test_invalid_json_rejected(self, asgi_client, messenger):
        messenger.dispatch = MagicMock()

        async with asgi_client as client:
            response = await client.post(
                "/webhook",
                content=b"{broken",
                headers={"content-type": "application/json"},
            )

        assert response.status_code == 400
        assert response.json() == {"status": "invalid_payload"}
        messenger.dispatch.assert_not_called()

    @pytest.mark.asyncio
    async def test_schema_mismatch_rejected(self, asgi_client):
        async with asgi_client as client:
            response = await client.post("/webhook", json={"object": "page", "entry": [{"messaging": 5}]})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_page_object_ignored(self, asgi_client, messenger, sample_webhook_payload):
        messenger.dispatch = MagicMock()
        sample_webhook_payload["object"] = "instagram"

        async with asgi_client as client:
            response = await client.post("/webhook", json=sample_webhook_payload)

        assert response.json() == {"status": "ignored"}
        messenger.dispatch.assert_not_called()

    def test_sync_client_post(self, test_client, messenger, multi_entry_payload):
        messenger.dispatch = MagicMock(return_value=[])

        response = test_client.post("/webhook", json=multi_entry_payload)

        assert response.status_code == 200
        (request,), _ = messenger.dispatch.call_args
        assert len(request.entry) == 2
        assert sum(len(entry.messaging) for entry in request.entry) == 6
