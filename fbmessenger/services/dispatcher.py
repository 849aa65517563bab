"""Fan webhook events out to user-registered handlers.

Each messaging event is routed to at most one handler, chosen by the
first populated payload variant (message, delivery, postback, optin,
read) that has a registered handler. Handlers run on their own asyncio
tasks; the webhook response does not wait for them. Spawned tasks are
tracked so the host can drain them on shutdown, and a semaphore bounds
how many run at once.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import logfire

from fbmessenger.constants import MAX_CONCURRENT_HANDLERS
from fbmessenger.models.webhook import EventKind, WebhookRequest

if TYPE_CHECKING:
    from fbmessenger.services.messenger import Messenger

EventHandler = Callable[["Messenger", int, Any], Awaitable[None] | None]


def _is_async_callable(handler: EventHandler) -> bool:
    """True for ``async def`` functions and objects with an ``async def __call__``."""
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    )


class EventDispatcher:
    """Spawns and tracks handler tasks for decoded webhook requests."""

    def __init__(self, max_concurrent_handlers: int = MAX_CONCURRENT_HANDLERS):
        if max_concurrent_handlers < 1:
            raise ValueError("max_concurrent_handlers must be at least 1")
        self.max_concurrent_handlers = max_concurrent_handlers
        self._semaphore: asyncio.Semaphore | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of handler tasks not yet finished."""
        return len(self._tasks)

    def dispatch(self, messenger: Messenger, request: WebhookRequest) -> list[asyncio.Task]:
        """
        Spawn one handler task per routable event in ``request``.

        Events are visited in entry order, then messaging order. For each
        event the first populated variant that also has a registered
        handler fires; an event with no such variant is skipped without
        logging.

        Must be called from a running event loop.

        Returns:
            The spawned tasks, in event order. Callers may await them or not.
        """
        tasks = []
        for event in request.events():
            for kind, payload in event.variants():
                handler = messenger.handler_for(kind)
                if handler is not None:
                    tasks.append(self.spawn(handler, messenger, event.sender_id, payload, kind))
                    break
        return tasks

    def spawn(
        self,
        handler: EventHandler,
        messenger: Messenger,
        sender_id: int,
        payload: Any,
        kind: EventKind,
    ) -> asyncio.Task:
        """Start ``handler`` on a tracked task."""
        task = asyncio.create_task(
            self._run(handler, messenger, sender_id, payload, kind),
            name=f"fbmessenger-{kind.value}-{sender_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self,
        handler: EventHandler,
        messenger: Messenger,
        sender_id: int,
        payload: Any,
        kind: EventKind,
    ) -> None:
        if self._semaphore is None:
            # Created lazily so it binds to the loop that runs the handlers
            self._semaphore = asyncio.Semaphore(self.max_concurrent_handlers)

        async with self._semaphore:
            try:
                if _is_async_callable(handler):
                    await handler(messenger, sender_id, payload)
                else:
                    result = await asyncio.to_thread(handler, messenger, sender_id, payload)
                    if inspect.isawaitable(result):
                        await result
            except Exception as e:
                logfire.error(
                    "Webhook event handler failed",
                    event_kind=kind.value,
                    sender_id=sender_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    async def drain(self, timeout: float | None = None) -> tuple[int, int]:
        """
        Wait for outstanding handler tasks, cancelling any still running
        after ``timeout`` seconds.

        Returns:
            (completed_count, cancelled_count)
        """
        if not self._tasks:
            return 0, 0

        logfire.info(
            "Waiting for pending handler tasks to complete",
            task_count=len(self._tasks),
            timeout_seconds=timeout,
        )
        done, pending = await asyncio.wait(
            set(self._tasks),
            timeout=timeout,
            return_when=asyncio.ALL_COMPLETED,
        )

        if pending:
            logfire.warn(
                "Cancelling remaining handler tasks after timeout",
                completed_count=len(done),
                cancelled_count=len(pending),
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        return len(done), len(pending)
