"""
Global test configuration and fixtures.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from chatbot_registry.config import AppConfig, IdentifierPolicy, RegistryConfig
from chatbot_registry.core.chatbot_tracker import ChatbotTracker
from chatbot_registry.core.conversation_store import ConversationStore
from chatbot_registry.models import Chatbot, Conversation


@pytest.fixture
def sample_chatbot() -> Chatbot:
    """Provide the SampleBot chatbot with identifier 'id-1'."""
    chatbot = Chatbot(name="SampleBot")
    chatbot.set_id("id-1")
    return chatbot


@pytest.fixture
def sample_conversation() -> Conversation:
    """Provide an empty conversation 'conv-1' created at 1700000000."""
    conversation = Conversation(created_at=1700000000)
    conversation.set_id("conv-1")
    return conversation


@pytest.fixture
def strict_config() -> AppConfig:
    return AppConfig(registry=RegistryConfig(identifier_policy=IdentifierPolicy.STRICT))


@pytest_asyncio.fixture
async def tracker() -> AsyncGenerator[ChatbotTracker, None]:
    """Provide a started lenient ChatbotTracker."""
    registry = ChatbotTracker()
    registry.start()
    try:
        yield registry
    finally:
        await registry.stop()


@pytest_asyncio.fixture
async def strict_tracker() -> AsyncGenerator[ChatbotTracker, None]:
    """Provide a started ChatbotTracker enforcing identifier checks."""
    registry = ChatbotTracker(policy=IdentifierPolicy.STRICT)
    registry.start()
    try:
        yield registry
    finally:
        await registry.stop()


@pytest_asyncio.fixture
async def store() -> AsyncGenerator[ConversationStore, None]:
    """Provide a started lenient ConversationStore."""
    registry = ConversationStore()
    registry.start()
    try:
        yield registry
    finally:
        await registry.stop()


@pytest_asyncio.fixture
async def strict_store() -> AsyncGenerator[ConversationStore, None]:
    registry = ConversationStore(policy=IdentifierPolicy.STRICT)
    registry.start()
    try:
        yield registry
    finally:
        await registry.stop()


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests - fast, isolated tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests - test component interactions"
    )
    config.addinivalue_line(
        "markers", "service: Service tests - exercise a running registry"
    )
    config.addinivalue_line(
        "markers", "error_handling: Tests focused on error conditions"
    )
