import logging
from typing import Awaitable, Callable, List, Optional

from chatbot_registry.config import IdentifierPolicy
from chatbot_registry.core.base_registry import BaseRegistry
from chatbot_registry.event_definitions import (
    CommandType,
    FindChatbotCommand,
    ListChatbotsCommand,
    RegisterChatbotCommand,
    SendMessageCommand,
)
from chatbot_registry.exceptions import RegistryError, UnknownRecipientError
from chatbot_registry.models import Chatbot

logger = logging.getLogger(__name__)

DeliveryHandler = Callable[[str, Chatbot], Awaitable[None]]


class ChatbotTracker(BaseRegistry):
    """Authoritative in-memory registry of chatbots for this process.

    ``register`` and ``send_message`` are fire-and-forget; the ``*_and_wait``
    variants wait for the command to be handled and return the strict-mode
    rejection (or None) instead of raising it.

    ``send_message`` does not deliver anything unless a ``delivery_handler``
    was supplied. Without one the command is consumed as a no-op.
    """

    registry_name = "ChatbotTracker"

    def __init__(
        self,
        policy: IdentifierPolicy = IdentifierPolicy.LENIENT,
        maxsize: int = 0,
        drain_on_shutdown: bool = True,
        delivery_handler: Optional[DeliveryHandler] = None,
    ):
        super().__init__(policy=policy, maxsize=maxsize, drain_on_shutdown=drain_on_shutdown)
        self._chatbots: List[Chatbot] = []
        self._delivery_handler = delivery_handler

        self.mailbox.register_handler(CommandType.REGISTER_CHATBOT, self._handle_register_chatbot)
        self.mailbox.register_handler(CommandType.SEND_MESSAGE, self._handle_send_message)
        self.mailbox.register_handler(CommandType.LIST_CHATBOTS, self._handle_list_chatbots)
        self.mailbox.register_handler(CommandType.FIND_CHATBOT, self._handle_find_chatbot)

    # --- submission API ---

    def register(self, chatbot: Chatbot) -> None:
        self.mailbox.post(RegisterChatbotCommand(chatbot=chatbot))

    async def register_and_wait(self, chatbot: Chatbot) -> Optional[RegistryError]:
        return await self.mailbox.ask(RegisterChatbotCommand(chatbot=chatbot))

    def send_message(self, text: str, chatbot: Chatbot) -> None:
        self.mailbox.post(SendMessageCommand(text=text, chatbot=chatbot))

    async def send_message_and_wait(self, text: str, chatbot: Chatbot) -> Optional[RegistryError]:
        return await self.mailbox.ask(SendMessageCommand(text=text, chatbot=chatbot))

    async def list_chatbots(self) -> List[Chatbot]:
        """Copies of the registered chatbots in registration order."""
        return await self.mailbox.ask(ListChatbotsCommand())

    async def find_by_id(self, chatbot_id: str) -> Optional[Chatbot]:
        return await self.mailbox.ask(FindChatbotCommand(chatbot_id=chatbot_id))

    async def count(self) -> int:
        return len(await self.list_chatbots())

    # --- handlers (run on the mailbox listener only) ---

    def _find(self, chatbot_id: str) -> Optional[Chatbot]:
        for chatbot in self._chatbots:
            if chatbot.id == chatbot_id:
                return chatbot
        return None

    async def _handle_register_chatbot(self, command: RegisterChatbotCommand) -> Optional[RegistryError]:
        chatbot = command.chatbot
        error = self._check_identifier(chatbot.id, self._chatbots)
        if error is not None:
            return self._report_rejection(command, error)
        self._chatbots.append(chatbot)
        logger.info(
            f"ChatbotTracker: Registered '{chatbot.name}' ({chatbot.id or '<unassigned>'}). "
            f"Total: {len(self._chatbots)}",
            extra=self._log_extra(command),
        )
        return None

    async def _handle_send_message(self, command: SendMessageCommand) -> Optional[RegistryError]:
        recipient = command.chatbot
        if self.policy is IdentifierPolicy.STRICT and self._find(recipient.id) is None:
            return self._report_rejection(command, UnknownRecipientError(recipient.id))
        if self._delivery_handler is None:
            logger.debug(
                f"ChatbotTracker: Message for '{recipient.name}' ({recipient.id}) accepted, no delivery configured.",
                extra=self._log_extra(command),
            )
            return None
        await self._delivery_handler(command.text, recipient)
        logger.debug(f"ChatbotTracker: Message delivered to '{recipient.name}' ({recipient.id}).", extra=self._log_extra(command))
        return None

    async def _handle_list_chatbots(self, command: ListChatbotsCommand) -> List[Chatbot]:
        return [chatbot.model_copy(deep=True) for chatbot in self._chatbots]

    async def _handle_find_chatbot(self, command: FindChatbotCommand) -> Optional[Chatbot]:
        chatbot = self._find(command.chatbot_id)
        return chatbot.model_copy(deep=True) if chatbot is not None else None
