"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. They hold data only;
every business rule lives in the services.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager

from swaps.domain import Event, EventId, EventStatus, SwapRequest, SwapRequestId


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(
        self, owner_id: int | None = None, status: EventStatus | None = None
    ) -> list[Event]:
        """Return events ordered by created_at, optionally filtered."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Insert or update an event and return the stored form."""
        ...

    @abstractmethod
    def save_events(self, events: Iterable[Event]) -> None:
        """Insert or update several events as one group."""
        ...


class SwapRequestStore(ABC):
    """Interface for swap request persistence operations."""

    @abstractmethod
    def list_swap_requests(
        self, target_event_ids: Iterable[EventId] | None = None
    ) -> list[SwapRequest]:
        """Return live swap requests, optionally only those targeting the given events."""
        ...

    @abstractmethod
    def get_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        """Return a swap request by ID, or None if not found."""
        ...

    @abstractmethod
    def save_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        ...

    @abstractmethod
    def delete_swap_request(self, swap_request_id: SwapRequestId) -> None:
        ...


class SwapTransaction(EventStore, SwapRequestStore):
    """Both stores bound to one atomic unit that can lock rows.

    Rows must be locked before they are read for a decision and written.
    Locks are held until the transaction ends.
    """

    @abstractmethod
    def lock_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        """Lock events in ascending id order and return those that exist.

        Raises:
            ContentionError: If a lock could not be acquired in time.
        """
        ...

    @abstractmethod
    def lock_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        """Lock a swap request and return it, or None if not found.

        Raises:
            ContentionError: If the lock could not be acquired in time.
        """
        ...


class SwapStorage(ABC):
    """Entry point to the stores and their transactional boundary."""

    @property
    @abstractmethod
    def events(self) -> EventStore:
        ...

    @property
    @abstractmethod
    def swap_requests(self) -> SwapRequestStore:
        ...

    @abstractmethod
    def atomic(self) -> AbstractContextManager[SwapTransaction]:
        """Open a transaction.

        Writes take effect together when the block exits normally and are
        discarded when it raises.
        """
        ...
