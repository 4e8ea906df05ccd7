import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from chatbot_registry.event_definitions import BaseCommand, CommandType
from chatbot_registry.exceptions import (
    MailboxFullError,
    RegistryError,
    RegistryNotRunningError,
)

logger = logging.getLogger(__name__)

CommandHandler = Callable[[BaseCommand], Awaitable[Any]]


@dataclass
class _Envelope:
    command: BaseCommand
    # Set only for ask(); fire-and-forget posts carry no reply channel
    reply: Optional[asyncio.Future] = None


class Mailbox:
    """Inbound command queue drained by a single listener task.

    Every command is handled to completion before the next one is taken off
    the queue, so handlers never run concurrently for the same mailbox.
    """

    def __init__(self, name: str, maxsize: int = 0):
        self.name = name
        self.maxsize = maxsize
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._handlers: Dict[CommandType, CommandHandler] = {}
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self._accepting = False
        logger.debug(f"Mailbox[{name}]: initialized (maxsize={maxsize}).")

    @property
    def is_running(self) -> bool:
        return self._accepting and self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Number of commands waiting to be handled."""
        return self._queue.qsize()

    def register_handler(self, command_type: CommandType, handler: CommandHandler) -> None:
        """Routes commands of ``command_type`` to ``handler``. One handler per type."""
        if command_type in self._handlers:
            raise ValueError(f"Mailbox[{self.name}]: handler for '{command_type.value}' already registered")
        self._handlers[command_type] = handler
        logger.debug(f"Mailbox[{self.name}]: {handler.__name__} handles '{command_type.value}'.")

    def start(self) -> None:
        """Spawns the listener task. Must be called from within a running event loop."""
        if self._task is not None and not self._task.done():
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._listener(), name=f"mailbox-{self.name}")
        self._accepting = True
        logger.info(f"Mailbox[{self.name}]: listener started.")

    def post(self, command: BaseCommand) -> None:
        """Enqueues ``command`` without waiting for it to be handled."""
        self._enqueue(_Envelope(command))

    async def ask(self, command: BaseCommand) -> Any:
        """Enqueues ``command`` and waits for the handler's return value.

        Exceptions raised by the handler are re-raised here.
        """
        future = asyncio.get_running_loop().create_future()
        self._enqueue(_Envelope(command, future))
        return await future

    def _enqueue(self, envelope: _Envelope) -> None:
        if not self.is_running:
            raise RegistryNotRunningError(self.name)
        try:
            self._queue.put_nowait(envelope)
        except asyncio.QueueFull:
            raise MailboxFullError(self.name, self.maxsize) from None

    def _log_extra(self, command: BaseCommand) -> Dict[str, str]:
        return {"registry": self.name, "command_id": command.command_id}

    async def _listener(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    envelope = await asyncio.wait_for(self._queue.get(), timeout=1.0)
                except asyncio.TimeoutError:
                    continue
                try:
                    # None is the wake-up sentinel pushed by shutdown()
                    if envelope is not None:
                        await self._dispatch(envelope)
                finally:
                    self._queue.task_done()
        except BaseException as e:
            # Listener is gone: refuse new commands and release queued asks
            self._accepting = False
            discarded = self._discard_pending()
            logger.error(
                f"Mailbox[{self.name}]: listener stopped by {type(e).__name__}; "
                f"{discarded} pending commands discarded.",
                extra={"registry": self.name},
            )
            raise

    async def _dispatch(self, envelope: _Envelope) -> None:
        command = envelope.command
        handler = self._handlers.get(command.command_type)
        if handler is None:
            error = RegistryError(f"Mailbox[{self.name}]: no handler for '{command.command_type.value}'")
            logger.warning(f"{error} (command {command.command_id} dropped)", extra=self._log_extra(command))
            if envelope.reply is not None and not envelope.reply.done():
                envelope.reply.set_exception(error)
            return

        try:
            result = await handler(command)
        except Exception as e:
            if envelope.reply is not None and not envelope.reply.done():
                envelope.reply.set_exception(e)
            else:
                logger.error(
                    f"Mailbox[{self.name}]: Error in {handler.__name__} for command "
                    f"{command.command_id} ('{command.command_type.value}'): {e}",
                    extra=self._log_extra(command),
                )
            return
        except BaseException:
            if envelope.reply is not None and not envelope.reply.done():
                envelope.reply.cancel()
            raise

        if envelope.reply is not None and not envelope.reply.done():
            envelope.reply.set_result(result)

    def _discard_pending(self) -> int:
        discarded = 0
        while True:
            try:
                envelope = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if envelope is not None:
                discarded += 1
                if envelope.reply is not None and not envelope.reply.done():
                    envelope.reply.cancel()
            self._queue.task_done()
        return discarded

    async def shutdown(self, drain: bool = True) -> None:
        """Stops accepting commands and waits for the listener to finish.

        With ``drain`` the commands already queued are handled first; otherwise
        they are discarded and their pending asks are cancelled. Concurrent
        calls are safe; each returns once the listener has exited.
        """
        self._accepting = False
        task = self._task
        if task is None:
            return
        logger.info(f"Mailbox[{self.name}]: Shutdown initiated ({self.pending} pending, drain={drain}).")
        if drain and not task.done():
            await self._queue.join()
        else:
            discarded = self._discard_pending()
            if discarded:
                logger.warning(f"Mailbox[{self.name}]: discarded {discarded} pending commands.")
        if not self._stop_event.is_set():
            self._stop_event.set()
            self._queue.put_nowait(None)
        await asyncio.gather(task, return_exceptions=True)
        if self._task is task:
            self._task = None
            # The sentinel may still be queued if the listener saw the stop flag first
            self._discard_pending()
            logger.info(f"Mailbox[{self.name}]: shutdown complete.")
