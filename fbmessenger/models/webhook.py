"""Incoming Facebook Messenger webhook models.

A webhook POST carries a batch of entries, each with an ordered list of
messaging events. Every event holds exactly one of five payload variants;
the platform guarantees this, the schema does not, so ``MessagingEvent``
resolves the variant in a fixed priority order.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _WebhookModel(BaseModel):
    """Base for webhook models: unknown platform fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class Participant(_WebhookModel):
    """Sender or recipient of a messaging event."""
    id: int


class Coordinates(_WebhookModel):
    """Location shared through a location attachment."""
    lat: float
    long: float


class IncomingAttachmentPayload(_WebhookModel):
    url: str | None = None
    coordinates: Coordinates | None = None
    title: str | None = None


class IncomingAttachment(_WebhookModel):
    """Attachment received from a user."""
    type: str
    payload: IncomingAttachmentPayload | None = None


class QuickReply(_WebhookModel):
    payload: str = ""


class FacebookMessage(_WebhookModel):
    """Message sent by a user to the page."""
    mid: str = ""
    seq: int | None = None
    text: str | None = None
    attachments: list[IncomingAttachment] = Field(default_factory=list)
    quick_reply: QuickReply | None = None
    is_echo: bool = False


class FacebookDelivery(_WebhookModel):
    """Delivery report for messages sent by the page."""
    mids: list[str] = Field(default_factory=list)
    watermark: int = 0
    seq: int | None = None


class FacebookPostback(_WebhookModel):
    """Button click (postback) payload."""
    payload: str = ""
    title: str | None = None


class FacebookOptin(_WebhookModel):
    """Send-to-Messenger / plugin opt-in."""
    ref: str = ""


class FacebookRead(_WebhookModel):
    """Read receipt; everything up to ``watermark`` was read."""
    watermark: int = 0
    seq: int | None = None


class EventKind(str, Enum):
    """Payload variant of a messaging event, in dispatch priority order."""

    MESSAGE = "message"
    DELIVERY = "delivery"
    POSTBACK = "postback"
    OPTIN = "optin"
    READ = "read"


class MessagingEvent(_WebhookModel):
    """Single messaging event inside a webhook entry."""

    sender: Participant
    recipient: Participant
    timestamp: int = 0
    message: FacebookMessage | None = None
    delivery: FacebookDelivery | None = None
    postback: FacebookPostback | None = None
    optin: FacebookOptin | None = None
    read: FacebookRead | None = None

    @property
    def sender_id(self) -> int:
        return self.sender.id

    def variants(self):
        """Yield ``(kind, payload)`` for every populated variant, in priority order."""
        for kind in EventKind:
            payload = getattr(self, kind.value)
            if payload is not None:
                yield kind, payload

    @property
    def kind(self) -> EventKind | None:
        """First populated variant in priority order, or None."""
        return next((kind for kind, _ in self.variants()), None)

    @property
    def payload(
        self,
    ) -> FacebookMessage | FacebookDelivery | FacebookPostback | FacebookOptin | FacebookRead | None:
        kind = self.kind
        if kind is None:
            return None
        return getattr(self, kind.value)


class WebhookEntry(_WebhookModel):
    """Facebook webhook entry."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = ""
    time: int = 0
    messaging: list[MessagingEvent] = Field(default_factory=list)


class WebhookRequest(_WebhookModel):
    """Facebook webhook payload."""
    object: str = ""
    entry: list[WebhookEntry] = Field(default_factory=list)

    def events(self):
        """Iterate over all messaging events in entry order."""
        for entry in self.entry:
            yield from entry.messaging
