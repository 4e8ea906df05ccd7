"""Identifier and timestamp helpers used to stamp registry entities."""

import uuid
from datetime import datetime, timezone

from chatbot_registry.exceptions import ClockError


def generate_id() -> str:
    """Return a fresh random (UUID4) identifier string."""
    return str(uuid.uuid4())


def now() -> int:
    """Return the current UTC wall-clock time as whole seconds since the epoch.

    A clock that cannot be read is fatal: ClockError is raised and must not
    be replaced with a fallback value.
    """
    try:
        return int(datetime.now(timezone.utc).timestamp())
    except (OSError, OverflowError, ValueError) as e:
        raise ClockError(e) from e
