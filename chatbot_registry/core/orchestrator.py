"""
Registry lifetime management.

RegistryOrchestrator builds exactly one ChatbotTracker and one
ConversationStore from the application configuration and owns their
lifetime: both are started together and torn down together. Nothing here is
module-level state; callers hold the orchestrator for as long as they need
the registries.
"""

import logging
from typing import Optional

from chatbot_registry.config import AppConfig, create_settings
from chatbot_registry.core.chatbot_tracker import ChatbotTracker, DeliveryHandler
from chatbot_registry.core.conversation_store import ConversationStore
from chatbot_registry.utils.logging_config import init_logging

logger = logging.getLogger(__name__)


class RegistryOrchestrator:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        delivery_handler: Optional[DeliveryHandler] = None,
        configure_logging: bool = False,
    ):
        self.config = config or create_settings()
        if configure_logging:
            init_logging(self.config.logging)

        registry_cfg = self.config.registry
        self.tracker = ChatbotTracker(
            policy=registry_cfg.identifier_policy,
            maxsize=registry_cfg.tracker_queue_size,
            drain_on_shutdown=registry_cfg.drain_on_shutdown,
            delivery_handler=delivery_handler,
        )
        self.store = ConversationStore(
            policy=registry_cfg.identifier_policy,
            maxsize=registry_cfg.store_queue_size,
            drain_on_shutdown=registry_cfg.drain_on_shutdown,
        )
        self.registries = [self.tracker, self.store]

    @property
    def is_running(self) -> bool:
        return all(registry.is_running for registry in self.registries)

    def start(self) -> None:
        logger.info("Orchestrator: Starting registries...")
        for registry in self.registries:
            registry.start()
        logger.info("Orchestrator: All registries started.")

    async def stop(self) -> None:
        logger.info("Orchestrator: Starting shutdown sequence for all registries...")
        for registry in reversed(self.registries):
            await registry.stop()
        logger.info("Orchestrator: Shutdown complete.")

    async def __aenter__(self) -> "RegistryOrchestrator":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
