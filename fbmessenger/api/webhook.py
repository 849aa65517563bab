"""Facebook webhook endpoints.

GET handles the subscription handshake; POST receives event batches,
decodes them and hands each event to the adapter's dispatcher. Handlers
run on background tasks, so the POST answers as soon as they are spawned.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from fbmessenger.constants import WEBHOOK_OBJECT_PAGE
from fbmessenger.exceptions import WebhookDecodeError
from fbmessenger.services.decoder import decode_request
from fbmessenger.services.messenger import Messenger

logger = logging.getLogger(__name__)
router = APIRouter()


def get_messenger(request: Request) -> Messenger:
    """Messenger adapter attached to the application at startup."""
    return request.app.state.messenger


async def _hub_param(request: Request, name: str) -> str | None:
    value = request.query_params.get(name)
    if value is None and request.headers.get("content-type", "").startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        form_value = form.get(name)
        value = form_value if isinstance(form_value, str) else None
    return value


@router.get("")
async def verify_webhook(request: Request, messenger: Messenger = Depends(get_messenger)):
    """Facebook webhook verification endpoint."""
    challenge = messenger.verify_webhook(
        mode=await _hub_param(request, "hub.mode"),
        token=await _hub_param(request, "hub.verify_token"),
        challenge=await _hub_param(request, "hub.challenge"),
    )

    if challenge is not None:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge)

    logger.warning("Webhook verification failed")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(request: Request, messenger: Messenger = Depends(get_messenger)):
    """Handle incoming Facebook Messenger webhook events."""
    body = await request.body()

    try:
        fb_request = decode_request(body)
    except WebhookDecodeError as e:
        logger.warning("Discarding undecodable webhook payload: %s", e)
        return JSONResponse({"status": "invalid_payload"}, status_code=400)

    if fb_request.object != WEBHOOK_OBJECT_PAGE:
        logger.info("Ignoring webhook for object type %r", fb_request.object)
        return {"status": "ignored"}

    tasks = messenger.dispatch(fb_request)
    logger.debug(
        "Dispatched %d handler task(s) from %d webhook entries",
        len(tasks),
        len(fb_request.entry),
    )
    return {"status": "ok"}
