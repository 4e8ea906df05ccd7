"""
Custom Exception Classes

This module defines custom exceptions for the chatbot registry
to provide better error handling and debugging information.

Strict-mode rejections (duplicate identifiers, unknown recipients) are
RegistryError subclasses. The registries hand them back as return values
from the blocking submission variants instead of raising them, so callers
decide whether to enforce them.
"""

from typing import Optional


class ChatbotRegistryBaseException(Exception):
    """Base exception for the chatbot registry."""

    pass


class FatalRegistryError(ChatbotRegistryBaseException):
    """Raised when the process cannot continue (e.g. clock read failure)."""

    pass


class ClockError(FatalRegistryError):
    """Raised when the wall clock cannot be read."""

    def __init__(self, original_error: Exception):
        self.original_error = original_error
        super().__init__(f"Unable to read wall clock: {original_error}")


class IdentifierAssignmentError(ChatbotRegistryBaseException):
    """Raised when an entity identifier is assigned twice or assigned empty."""

    def __init__(self, entity: str, current_id: str, new_id: str):
        self.entity = entity
        self.current_id = current_id
        self.new_id = new_id
        if not new_id:
            message = f"Cannot assign an empty identifier to {entity}"
        else:
            message = f"{entity} already has identifier '{current_id}', refusing '{new_id}'"
        super().__init__(message)


class ConfigurationError(ChatbotRegistryBaseException):
    """Raised for configuration problems."""

    pass


class RegistryError(ChatbotRegistryBaseException):
    """Base class for errors reported by a registry or its mailbox."""

    pass


class DuplicateIdentifierError(RegistryError):
    """An entity with the same identifier is already held by the registry."""

    def __init__(self, identifier: str, registry: str):
        self.identifier = identifier
        self.registry = registry
        super().__init__(f"{registry}: identifier '{identifier}' is already registered")


class MissingIdentifierError(RegistryError):
    """An entity was submitted before its identifier was assigned."""

    def __init__(self, registry: str, entity: Optional[str] = None):
        self.registry = registry
        self.entity = entity
        label = f" ({entity})" if entity else ""
        super().__init__(f"{registry}: entity{label} has no identifier assigned")


class UnknownRecipientError(RegistryError):
    """A message was addressed to a chatbot the tracker does not know."""

    def __init__(self, chatbot_id: str):
        self.chatbot_id = chatbot_id
        super().__init__(f"No registered chatbot with identifier '{chatbot_id}'")


class MailboxFullError(RegistryError):
    """A bounded mailbox rejected a command because its queue is full."""

    def __init__(self, mailbox: str, maxsize: int):
        self.mailbox = mailbox
        self.maxsize = maxsize
        super().__init__(f"Mailbox '{mailbox}' is full ({maxsize} pending commands)")


class RegistryNotRunningError(RegistryError):
    """A command was submitted to a mailbox that is not accepting commands."""

    def __init__(self, mailbox: str):
        self.mailbox = mailbox
        super().__init__(f"Mailbox '{mailbox}' is not running")
