from pydantic import BaseModel, Field, field_validator
from enum import Enum
from datetime import datetime, timezone
import uuid

from chatbot_registry.models import Chatbot, Conversation


class CommandType(str, Enum):
    REGISTER_CHATBOT = "register_chatbot"
    SEND_MESSAGE = "send_message"
    STORE_CONVERSATION = "store_conversation"
    # Read-side commands, answered through Mailbox.ask()
    LIST_CHATBOTS = "list_chatbots"
    FIND_CHATBOT = "find_chatbot"
    LIST_CONVERSATIONS = "list_conversations"
    FIND_CONVERSATION = "find_conversation"


class BaseCommand(BaseModel):
    command_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier for the command")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Command creation timestamp")
    command_type: CommandType = Field(..., description="The operation this command requests")

    @field_validator('timestamp', mode='before')
    def ensure_timezone_aware(cls, v):
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        if isinstance(v, (int, float)):
            return datetime.fromtimestamp(v, tz=timezone.utc)
        return v

    @classmethod
    def get_command_type(cls) -> CommandType:
        """Return the default command type for this class."""
        return cls.model_fields["command_type"].default


# --- Write commands ---
# Entity arguments are deep-copied on construction: once sent, the registry's
# copy is independent of whatever the sender keeps doing with its own object.

class RegisterChatbotCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.REGISTER_CHATBOT, frozen=True)
    chatbot: Chatbot

    @field_validator('chatbot')
    def copy_chatbot(cls, v: Chatbot) -> Chatbot:
        return v.model_copy(deep=True)


class SendMessageCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.SEND_MESSAGE, frozen=True)
    text: str
    chatbot: Chatbot

    @field_validator('chatbot')
    def copy_chatbot(cls, v: Chatbot) -> Chatbot:
        return v.model_copy(deep=True)


class StoreConversationCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.STORE_CONVERSATION, frozen=True)
    conversation: Conversation

    @field_validator('conversation')
    def copy_conversation(cls, v: Conversation) -> Conversation:
        return v.model_copy(deep=True)


# --- Read commands ---

class ListChatbotsCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.LIST_CHATBOTS, frozen=True)


class FindChatbotCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.FIND_CHATBOT, frozen=True)
    chatbot_id: str


class ListConversationsCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.LIST_CONVERSATIONS, frozen=True)


class FindConversationCommand(BaseCommand):
    command_type: CommandType = Field(CommandType.FIND_CONVERSATION, frozen=True)
    conversation_id: str
