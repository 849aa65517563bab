"""Exception hierarchy for the Messenger adapter.

Outbound failures fall into three groups:

- ``TransportError``: the request never produced a response
  (connection refused, DNS failure, timeout).
- ``ResponseDecodeError``: a response arrived but its body is not JSON.
- ``FacebookAPIError``: the Graph API answered with an ``error`` object.

Inbound webhook bodies that cannot be decoded raise ``WebhookDecodeError``.
"""

from fbmessenger.models.responses import GraphAPIError


class MessengerError(Exception):
    """Base class for all adapter errors."""


class TransportError(MessengerError):
    """Network-level failure talking to the Graph API."""


class DecodeError(MessengerError):
    """A JSON body could not be decoded into the expected model."""


class WebhookDecodeError(DecodeError):
    """Inbound webhook body is malformed or does not match the schema."""


class ResponseDecodeError(DecodeError):
    """Send API response body could not be decoded."""


class FacebookAPIError(MessengerError):
    """The Graph API reported an error for a send request."""

    def __init__(self, error: GraphAPIError, status_code: int | None = None):
        super().__init__(f"Facebook API error {error.code}: {error.message}")
        self.error = error
        self.status_code = status_code

    @property
    def code(self) -> int | None:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message
