"""
Shared fixtures for marketplace_client tests.
"""
from typing import AsyncIterator, Iterable, List

import pytest

from marketplace_client.config import ClientConfig
from marketplace_client.effects import Navigator, Notifier
from marketplace_client.session import MemoryStorage, SessionState

BASE_URL = "https://api.example.com"


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: List[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)


class RecordingNavigator(Navigator):
    def __init__(self) -> None:
        self.paths: List[str] = []

    def navigate(self, path: str) -> None:
        self.paths.append(path)


async def chunked(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


@pytest.fixture
def config():
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def session(storage):
    return SessionState(storage)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def navigator():
    return RecordingNavigator()
