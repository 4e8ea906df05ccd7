"""Tests for identifier and timestamp generation."""

import time
import uuid
from unittest.mock import patch

import pytest

from chatbot_registry.exceptions import ClockError, FatalRegistryError
from chatbot_registry.utils.identity import generate_id, now


@pytest.mark.unit
class TestGenerateId:

    def test_back_to_back_ids_differ(self):
        a = generate_id()
        b = generate_id()
        assert a != b

    def test_many_ids_are_unique(self):
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_id_is_uuid4_string(self):
        parsed = uuid.UUID(generate_id())
        assert parsed.version == 4


@pytest.mark.unit
class TestNow:

    def test_returns_whole_seconds(self):
        value = now()
        assert isinstance(value, int)
        assert abs(value - int(time.time())) <= 1

    def test_clock_failure_is_fatal(self):
        """A clock that cannot be read surfaces as a FatalRegistryError."""
        with patch("chatbot_registry.utils.identity.datetime") as mock_datetime:
            mock_datetime.now.side_effect = OSError("clock unavailable")
            with pytest.raises(ClockError) as exc_info:
                now()
        assert isinstance(exc_info.value, FatalRegistryError)
        assert "clock unavailable" in str(exc_info.value)
