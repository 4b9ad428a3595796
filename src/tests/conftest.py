"""
Shared test helpers.
"""

import pytest


class StubGenerator:
    """Stands in for TextGenerator; records every request.

    ``reply`` is a string, an exception instance, or a callable
    ``(system, user) -> str`` (which may also return an exception instance).
    A list is consumed one item per call, the last item repeating.
    """

    def __init__(self, reply):
        self._replies = list(reply) if isinstance(reply, list) else [reply]
        self.calls: list[tuple[str, str, float]] = []

    async def generate(self, system: str, user: str, temperature: float = 0.1) -> str:
        self.calls.append((system, user, temperature))
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if callable(reply) and not isinstance(reply, Exception):
            reply = reply(system, user)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def users(self) -> list[str]:
        return [user for _, user, _ in self.calls]


@pytest.fixture
def stub_generator():
    return StubGenerator


@pytest.fixture
def sample_srt():
    return (
        "1\n00:00:01,000 --> 00:00:04,000\nHello\n\n"
        "2\n00:00:04,000 --> 00:00:06,000\nWorld\n"
    )
