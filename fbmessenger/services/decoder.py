"""Decode webhook request bodies and Send API responses."""

import httpx
import logfire
from pydantic import ValidationError

from fbmessenger.constants import LOG_RESPONSE_BODY_CHARS
from fbmessenger.exceptions import (
    FacebookAPIError,
    ResponseDecodeError,
    WebhookDecodeError,
)
from fbmessenger.models.responses import RawSendResponse, SendResponse
from fbmessenger.models.webhook import WebhookRequest


def decode_request(body: bytes | str) -> WebhookRequest:
    """
    Decode a webhook POST body into a WebhookRequest.

    Args:
        body: Raw JSON body as received from Facebook

    Returns:
        Parsed webhook request with entries and messaging events

    Raises:
        WebhookDecodeError: If the body is not JSON or does not match the schema
    """
    try:
        return WebhookRequest.model_validate_json(body)
    except ValidationError as e:
        raise WebhookDecodeError(f"Invalid webhook payload: {e.error_count()} error(s)") from e


def decode_response(response: httpx.Response) -> SendResponse:
    """
    Decode a Send API response.

    A body carrying an ``error`` object is a failure regardless of the
    HTTP status code.

    Raises:
        ResponseDecodeError: If the body is not valid JSON for a send response
        FacebookAPIError: If Facebook reported an error
    """
    try:
        raw = RawSendResponse.model_validate_json(response.content)
    except ValidationError as e:
        logfire.error(
            "Could not decode Facebook send response",
            status_code=response.status_code,
            response_body=response.text[:LOG_RESPONSE_BODY_CHARS],
        )
        raise ResponseDecodeError(
            f"Invalid send response (HTTP {response.status_code})"
        ) from e

    if raw.error is not None:
        raise FacebookAPIError(raw.error, status_code=response.status_code)

    return SendResponse(message_id=raw.message_id, recipient_id=raw.recipient_id)
