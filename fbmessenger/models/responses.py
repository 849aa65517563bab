"""Send API response models."""

from pydantic import BaseModel


class GraphAPIError(BaseModel):
    """Error object returned by the Graph API."""
    message: str = ""
    type: str | None = None
    code: int | None = None
    error_subcode: int | None = None
    fbtrace_id: str | None = None


class SendResponse(BaseModel):
    """Successful Send API response."""
    message_id: str
    recipient_id: int | None = None


class RawSendResponse(BaseModel):
    """Send API body before it is split into success or error."""
    message_id: str = ""
    recipient_id: int | None = None
    error: GraphAPIError | None = None
