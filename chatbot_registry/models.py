"""
Entity records held by the registries.

Both entities are created without an identifier and stamped once with
``set_id`` before they are submitted to their owning registry.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatbot_registry.exceptions import IdentifierAssignmentError
from chatbot_registry.utils.identity import now


class _Entity(BaseModel):
    """Shared set-once identifier handling."""

    model_config = ConfigDict(validate_assignment=True)

    # Frozen for plain assignment; set_id is the only writer
    id: str = Field(default="", frozen=True, description="Unique identifier, empty until assigned")

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    def set_id(self, identifier: str) -> None:
        """Assign the identifier. Allowed exactly once, with a non-empty value."""
        if not identifier or self.id:
            raise IdentifierAssignmentError(type(self).__name__, self.id, identifier)
        self._write_frozen("id", identifier)

    def _write_frozen(self, field: str, value) -> None:
        object.__setattr__(self, field, value)
        self.__pydantic_fields_set__.add(field)


class Chatbot(_Entity):
    """A chatbot identity tracked by the ChatbotTracker."""

    name: str = Field(..., description="Human readable chatbot name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Chatbot name must not be empty")
        return v


class Conversation(_Entity):
    """A conversation record held by the ConversationStore."""

    created_at: int = Field(..., frozen=True, description="Creation time, seconds since epoch")
    messages: Tuple[str, ...] = Field(default=(), frozen=True, description="Append-only message log")

    @classmethod
    def new(cls, created_at: Optional[int] = None) -> "Conversation":
        """Create an empty conversation stamped with ``created_at`` (default: now)."""
        return cls(created_at=created_at if created_at is not None else now())

    def append_message(self, text: str) -> None:
        self._write_frozen("messages", self.messages + (text,))
