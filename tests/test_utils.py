"""Test utilities and helper functions for the registry test suite."""

import asyncio
from typing import Any, List

from chatbot_registry.models import Chatbot


async def wait_for_condition(condition_func, timeout: float = 1.0, interval: float = 0.01):
    """Wait for a condition to become true within a timeout."""
    elapsed = 0
    while elapsed < timeout:
        if condition_func():
            return True
        await asyncio.sleep(interval)
        elapsed += interval
    return False


def make_chatbot(name: str, identifier: str = "") -> Chatbot:
    """Build a chatbot, assigning ``identifier`` when given."""
    chatbot = Chatbot(name=name)
    if identifier:
        chatbot.set_id(identifier)
    return chatbot


class DeliveryRecorder:
    """Async delivery handler that records every (text, chatbot) it receives."""

    def __init__(self):
        self.deliveries: List[Any] = []

    async def __call__(self, text: str, chatbot: Chatbot) -> None:
        self.deliveries.append((text, chatbot))
