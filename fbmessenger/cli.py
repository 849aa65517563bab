"""Typer-based command line for sending messages and running the webhook server."""

import asyncio
import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import typer

from fbmessenger.config import get_settings
from fbmessenger.exceptions import FacebookAPIError, MessengerError
from fbmessenger.models.messages import AttachmentType, Message
from fbmessenger.models.responses import SendResponse
from fbmessenger.services.messenger import Messenger

app = typer.Typer(help="Facebook Messenger Send API and webhook tools.")


async def _send(message: Message) -> SendResponse:
    async with Messenger.from_settings(get_settings()) as messenger:
        return await messenger.send_message(message)


def _run_send(message: Message) -> None:
    try:
        result = asyncio.run(_send(message))
    except FacebookAPIError as e:
        typer.echo(f"Facebook error {e.code}: {e.message}", err=True)
        raise typer.Exit(code=1)
    except MessengerError as e:
        typer.echo(f"Send failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(result.message_id)


@app.command("send-text")
def send_text(
    recipient_id: int = typer.Argument(..., help="Page-scoped ID of the recipient"),
    text: str = typer.Argument(..., help="Message text"),
):
    """Send a text message and print the message ID."""
    _run_send(Message.text_message(recipient_id, text))


@app.command("send-attachment")
def send_attachment(
    recipient_id: int = typer.Argument(..., help="Page-scoped ID of the recipient"),
    attachment_type: AttachmentType = typer.Argument(..., help="image, audio, video or file"),
    url: str = typer.Argument(..., help="Public URL of the media"),
):
    """Send a media attachment by URL and print the message ID."""
    _run_send(Message.attachment_message(recipient_id, attachment_type, url))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    app_path: str = typer.Option(
        "fbmessenger.main:app",
        "--app",
        help="ASGI app as module:attr, e.g. mybot.web:app built with create_app(messenger)",
    ),
):
    """
    Run the webhook server with uvicorn.

    The default app has no handlers registered, so it answers the
    verification handshake but dispatches nothing. Point ``--app`` at an
    app created with ``create_app(messenger)`` to handle events.
    """
    import uvicorn

    uvicorn.run(app_path, host=host, port=port)


if __name__ == "__main__":
    app()
