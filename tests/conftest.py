"""
Shared fixtures for the real-time messaging test suite.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from hfc.nucleus.dispatcher import EventDispatcher
from hfc.nucleus.registry import PresenceRegistry
from hfc.nucleus.router import MessageRouter
from hfc.nucleus.state import MemoryState


def make_connection(address=("127.0.0.1", 50000)):
    """A stand-in for a websocket connection that records what is sent to it."""
    connection = AsyncMock()
    connection.remote_address = address
    return connection


async def wait_until(predicate, timeout=2.0):
    """Polls `predicate` until it is true or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


@pytest.fixture
def registry():
    return PresenceRegistry()


@pytest.fixture
def router(registry):
    return MessageRouter(registry)


@pytest.fixture
def state():
    return MemoryState()


@pytest.fixture
def dispatcher(registry, router, state):
    return EventDispatcher(registry, router, state)
