"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from swaps.domain import EventStatus
from swaps.services import SwapService
from swaps.stores.memory_store import InMemorySwapStorage
from tests.slots import at


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def storage() -> InMemorySwapStorage:
    return InMemorySwapStorage(lock_timeout=1.0)


@pytest.fixture
def service(storage: InMemorySwapStorage) -> SwapService:
    return SwapService(storage, max_attempts=3, retry_backoff_seconds=0)


@pytest.fixture
def make_event(service: SwapService):
    """Create an event through the service with sensible defaults."""

    def _make(
        owner_id: int,
        title: str = "Shift",
        start_hour: int = 10,
        status: EventStatus | None = EventStatus.SWAPPABLE,
    ):
        return service.create_event(
            title=title,
            starts_at=at(start_hour),
            ends_at=at(start_hour + 1),
            owner_id=owner_id,
            status=status,
        )

    return _make
