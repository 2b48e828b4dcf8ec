"""
Shared test fixtures and configuration.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_API_REQUESTS", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", tempfile.mkdtemp(prefix="supportchat_test_"))
os.environ.setdefault("AI_PROVIDER", "openai")

from supportchat.llm.base import LLMProvider, LLMMessage, UpstreamError  # noqa: E402
from supportchat.sessions import SessionStore  # noqa: E402


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class ScriptedProvider(LLMProvider):
    """Provider that replays canned deltas and records what it was sent."""

    name = "scripted"

    def __init__(self, deltas=None, answer: str = "Scripted answer", fail_after: Optional[int] = None):
        super().__init__(api_key="test-key", model="scripted-model")
        self.deltas = list(deltas or [])
        self.answer = answer
        self.fail_after = fail_after
        self.calls: List[List[LLMMessage]] = []
        self.pulled = 0

    async def complete_once(self, messages, max_tokens=None):
        self.calls.append(messages)
        if self.fail_after is not None:
            raise UpstreamError(self.name, 502, "bad gateway")
        return self.answer

    async def complete_streaming(self, messages, max_tokens=None):
        self.calls.append(messages)
        for index, delta in enumerate(self.deltas):
            if self.fail_after is not None and index >= self.fail_after:
                raise UpstreamError(self.name, 502, "bad gateway")
            self.pulled += 1
            yield delta
        if self.fail_after is not None and self.fail_after >= len(self.deltas):
            raise UpstreamError(self.name, None, "connection reset")


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(ttl=timedelta(minutes=30), clock=clock)


@pytest.fixture
def scripted_provider():
    """Factory for ScriptedProvider instances."""
    return ScriptedProvider
