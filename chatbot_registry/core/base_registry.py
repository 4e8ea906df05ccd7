"""
Base class for mailbox-backed registries.

A registry owns one collection of entities. The collection is only touched by
handlers running on the registry's own Mailbox listener, so no locking is
needed: callers interact with it exclusively by submitting commands.
"""

import asyncio
import logging
from typing import Dict, Optional, Sequence

from chatbot_registry.config import IdentifierPolicy
from chatbot_registry.event_definitions import BaseCommand
from chatbot_registry.exceptions import (
    DuplicateIdentifierError,
    MissingIdentifierError,
    RegistryError,
)
from chatbot_registry.mailbox import Mailbox

logger = logging.getLogger(__name__)


class BaseRegistry:
    """Lifecycle and identifier checks shared by ChatbotTracker and ConversationStore."""

    registry_name = "Registry"

    def __init__(
        self,
        policy: IdentifierPolicy = IdentifierPolicy.LENIENT,
        maxsize: int = 0,
        drain_on_shutdown: bool = True,
    ):
        self.policy = IdentifierPolicy(policy)
        self.drain_on_shutdown = drain_on_shutdown
        self.mailbox = Mailbox(self.registry_name, maxsize=maxsize)
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self.mailbox.is_running

    def start(self) -> None:
        """Starts the sequential consumer. Idempotent."""
        if self.mailbox.is_running:
            return
        # Same event object for the whole lifetime so a waiting run() sees stop()
        self._stop_event.clear()
        self.mailbox.start()
        logger.info(f"{self.registry_name}: Started (policy={self.policy.value}).")

    async def run(self) -> None:
        """Starts the registry and waits until stop() is requested."""
        self.start()
        await self._stop_event.wait()
        logger.info(f"{self.registry_name}: Stopped.")

    async def stop(self) -> None:
        logger.info(f"{self.registry_name}: Stop requested.")
        await self.mailbox.shutdown(drain=self.drain_on_shutdown)
        self._stop_event.set()

    def _check_identifier(self, identifier: str, records: Sequence) -> Optional[RegistryError]:
        """Strict-mode admission check for a new record. Returns the rejection, if any."""
        if self.policy is not IdentifierPolicy.STRICT:
            return None
        if not identifier:
            return MissingIdentifierError(self.registry_name)
        if any(record.id == identifier for record in records):
            return DuplicateIdentifierError(identifier, self.registry_name)
        return None

    def _log_extra(self, command: BaseCommand) -> Dict[str, str]:
        return {"registry": self.registry_name, "command_id": command.command_id}

    def _report_rejection(self, command: BaseCommand, error: RegistryError) -> RegistryError:
        logger.warning(
            f"{self.registry_name}: Rejected '{command.command_type.value}' "
            f"command {command.command_id}: {error}",
            extra=self._log_extra(command),
        )
        return error
