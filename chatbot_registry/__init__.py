"""
Chatbot Registry - in-process tracking of chatbots and conversations.

Each registry owns its collection and is reached only by submitting typed
commands to its mailbox, which a single listener task drains in order.
"""

from chatbot_registry.core.chatbot_tracker import ChatbotTracker
from chatbot_registry.core.conversation_store import ConversationStore
from chatbot_registry.core.orchestrator import RegistryOrchestrator
from chatbot_registry.models import Chatbot, Conversation
from chatbot_registry.utils.identity import generate_id, now

__version__ = "0.1.0"

__all__ = [
    "Chatbot",
    "ChatbotTracker",
    "Conversation",
    "ConversationStore",
    "RegistryOrchestrator",
    "generate_id",
    "now",
]
