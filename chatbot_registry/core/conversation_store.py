import logging
from typing import List, Optional

from chatbot_registry.config import IdentifierPolicy
from chatbot_registry.core.base_registry import BaseRegistry
from chatbot_registry.event_definitions import (
    CommandType,
    FindConversationCommand,
    ListConversationsCommand,
    StoreConversationCommand,
)
from chatbot_registry.exceptions import RegistryError
from chatbot_registry.models import Conversation

logger = logging.getLogger(__name__)


class ConversationStore(BaseRegistry):
    """Authoritative in-memory registry of conversations for this process."""

    registry_name = "ConversationStore"

    def __init__(
        self,
        policy: IdentifierPolicy = IdentifierPolicy.LENIENT,
        maxsize: int = 0,
        drain_on_shutdown: bool = True,
    ):
        super().__init__(policy=policy, maxsize=maxsize, drain_on_shutdown=drain_on_shutdown)
        self._conversations: List[Conversation] = []

        self.mailbox.register_handler(CommandType.STORE_CONVERSATION, self._handle_store_conversation)
        self.mailbox.register_handler(CommandType.LIST_CONVERSATIONS, self._handle_list_conversations)
        self.mailbox.register_handler(CommandType.FIND_CONVERSATION, self._handle_find_conversation)

    def store(self, conversation: Conversation) -> None:
        self.mailbox.post(StoreConversationCommand(conversation=conversation))

    async def store_and_wait(self, conversation: Conversation) -> Optional[RegistryError]:
        return await self.mailbox.ask(StoreConversationCommand(conversation=conversation))

    async def list_conversations(self) -> List[Conversation]:
        return await self.mailbox.ask(ListConversationsCommand())

    async def find_by_id(self, conversation_id: str) -> Optional[Conversation]:
        return await self.mailbox.ask(FindConversationCommand(conversation_id=conversation_id))

    async def count(self) -> int:
        return len(await self.list_conversations())

    async def _handle_store_conversation(self, command: StoreConversationCommand) -> Optional[RegistryError]:
        conversation = command.conversation
        error = self._check_identifier(conversation.id, self._conversations)
        if error is not None:
            return self._report_rejection(command, error)
        self._conversations.append(conversation)
        logger.info(
            f"ConversationStore: Stored conversation {conversation.id or '<unassigned>'} "
            f"(created_at={conversation.created_at}, {len(conversation.messages)} messages). "
            f"Total: {len(self._conversations)}",
            extra=self._log_extra(command),
        )
        return None

    async def _handle_list_conversations(self, command: ListConversationsCommand) -> List[Conversation]:
        return [conversation.model_copy(deep=True) for conversation in self._conversations]

    async def _handle_find_conversation(self, command: FindConversationCommand) -> Optional[Conversation]:
        for conversation in self._conversations:
            if conversation.id == command.conversation_id:
                return conversation.model_copy(deep=True)
        return None
