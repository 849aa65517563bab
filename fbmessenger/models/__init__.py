"""Pydantic models for the Messenger Send API and webhooks."""

from fbmessenger.models.messages import (
    Attachment,
    AttachmentPayload,
    AttachmentType,
    Message,
    MessageContent,
    MessagingType,
    NotificationType,
    Recipient,
)
from fbmessenger.models.responses import GraphAPIError, SendResponse
from fbmessenger.models.webhook import (
    EventKind,
    FacebookDelivery,
    FacebookMessage,
    FacebookOptin,
    FacebookPostback,
    FacebookRead,
    MessagingEvent,
    WebhookEntry,
    WebhookRequest,
)

__all__ = [
    "Attachment",
    "AttachmentPayload",
    "AttachmentType",
    "EventKind",
    "FacebookDelivery",
    "FacebookMessage",
    "FacebookOptin",
    "FacebookPostback",
    "FacebookRead",
    "GraphAPIError",
    "Message",
    "MessageContent",
    "MessagingEvent",
    "MessagingType",
    "NotificationType",
    "Recipient",
    "SendResponse",
    "WebhookEntry",
    "WebhookRequest",
]
