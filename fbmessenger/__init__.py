"""Facebook Messenger Send API client and webhook adapter."""

from fbmessenger.exceptions import (
    DecodeError,
    FacebookAPIError,
    MessengerError,
    ResponseDecodeError,
    TransportError,
    WebhookDecodeError,
)
from fbmessenger.models import (
    EventKind,
    Message,
    SendResponse,
    WebhookRequest,
)
from fbmessenger.services.decoder import decode_request
from fbmessenger.services.dispatcher import EventDispatcher
from fbmessenger.services.messenger import Messenger

__all__ = [
    "DecodeError",
    "EventDispatcher",
    "EventKind",
    "FacebookAPIError",
    "Message",
    "Messenger",
    "MessengerError",
    "ResponseDecodeError",
    "SendResponse",
    "TransportError",
    "WebhookDecodeError",
    "WebhookRequest",
    "decode_request",
]
