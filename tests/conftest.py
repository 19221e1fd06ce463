"""Shared fixtures: isolated room state wired to a recording transport."""

from typing import Any

import pytest

from backend import ConnectionRegistry, RoomStore
from coordinator import SessionCoordinator
from relay import RelayDispatcher


class RecordingTransport:
    """Transport that records every delivery in order."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, Any]] = []

    def deliver(self, connection_id: str, event: str, payload: Any) -> None:
        self.sent.append((connection_id, event, payload))

    def events_for(self, connection_id: str, event: str | None = None) -> list[tuple[str, Any]]:
        return [
            (name, payload)
            for target, name, payload in self.sent
            if target == connection_id and (event is None or name == event)
        ]

    def clear(self) -> None:
        self.sent.clear()


class SequentialIds:
    """Room id factory returning preset ids, then numbered fallbacks."""

    def __init__(self, *ids: str) -> None:
        self._ids = list(ids)
        self._counter = 0

    def __call__(self) -> str:
        if self._ids:
            return self._ids.pop(0)
        self._counter += 1
        return f"R{self._counter:05d}"


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def rooms() -> RoomStore:
    return RoomStore(capacity=10, id_factory=SequentialIds())


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def relay(transport: RecordingTransport) -> RelayDispatcher:
    return RelayDispatcher(transport)


@pytest.fixture
def coordinator(rooms: RoomStore, registry: ConnectionRegistry, relay: RelayDispatcher) -> SessionCoordinator:
    return SessionCoordinator(rooms=rooms, registry=registry, relay=relay)
