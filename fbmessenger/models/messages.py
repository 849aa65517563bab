"""Outgoing Facebook Messenger Send API models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, model_validator


class AttachmentType(str, Enum):
    """Media types accepted by URL-based attachments."""

    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"


class MessagingType(str, Enum):
    """Purpose of the message being sent."""

    RESPONSE = "RESPONSE"
    UPDATE = "UPDATE"
    MESSAGE_TAG = "MESSAGE_TAG"


class NotificationType(str, Enum):
    """Push notification behaviour on the recipient's device."""

    REGULAR = "REGULAR"
    SILENT_PUSH = "SILENT_PUSH"
    NO_PUSH = "NO_PUSH"


class Recipient(BaseModel):
    """Message recipient (page-scoped user ID)."""
    id: int


class AttachmentPayload(BaseModel):
    """Attachment payload referencing media by URL."""
    url: str
    is_reusable: bool | None = None


class Attachment(BaseModel):
    """Structured attachment."""
    type: AttachmentType
    payload: AttachmentPayload


class MessageContent(BaseModel):
    """Message body: either text or a single attachment."""

    text: str | None = None
    attachment: Attachment | None = None

    @model_validator(mode="after")
    def _exactly_one_body(self) -> "MessageContent":
        if (self.text is None) == (self.attachment is None):
            raise ValueError("message must contain exactly one of text or attachment")
        return self


class Message(BaseModel):
    """Send API request envelope: ``{recipient: {id}, message: {...}}``."""

    recipient: Recipient
    message: MessageContent
    messaging_type: MessagingType | None = None
    notification_type: NotificationType | None = None

    @classmethod
    def text_message(cls, recipient_id: int, text: str) -> "Message":
        """Build a plain text message for ``recipient_id``."""
        return cls(recipient=Recipient(id=recipient_id), message=MessageContent(text=text))

    @classmethod
    def attachment_message(
        cls,
        recipient_id: int,
        attachment_type: AttachmentType | str,
        url: str,
        is_reusable: bool | None = None,
    ) -> "Message":
        """Build a message carrying a single media attachment fetched from ``url``."""
        attachment = Attachment(
            type=AttachmentType(attachment_type),
            payload=AttachmentPayload(url=url, is_reusable=is_reusable),
        )
        return cls(
            recipient=Recipient(id=recipient_id),
            message=MessageContent(attachment=attachment),
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)
