"""In-memory implementation of the swap stores.

Thread-safe adapter for development and tests. A transaction buffers its
writes and applies them in one step on commit, so concurrent readers never
observe a half-applied swap. Row locks are plain ``threading.Lock`` objects
keyed by record id and acquired with a bounded wait.
"""

import threading
from collections.abc import Hashable, Iterable, Iterator
from contextlib import contextmanager

from swaps.domain import Event, EventId, EventStatus, SwapRequest, SwapRequestId
from swaps.domain.errors import ContentionError
from swaps.stores.interfaces import (
    EventStore,
    SwapRequestStore,
    SwapStorage,
    SwapTransaction,
)


def _filter_events(
    events: Iterable[Event], owner_id: int | None, status: EventStatus | None
) -> list[Event]:
    matched = [
        event
        for event in events
        if (owner_id is None or event.owner_id == owner_id)
        and (status is None or event.status is status)
    ]
    return sorted(matched, key=lambda event: event.created_at)


def _filter_swap_requests(
    swap_requests: Iterable[SwapRequest], target_event_ids: Iterable[EventId] | None
) -> list[SwapRequest]:
    if target_event_ids is None:
        matched = list(swap_requests)
    else:
        targets = set(target_event_ids)
        matched = [req for req in swap_requests if req.target_event_id in targets]
    return sorted(matched, key=lambda req: req.created_at)


class InMemoryEventStore(EventStore):
    """Dictionary-backed event store sharing the storage guard."""

    def __init__(self, guard: threading.Lock) -> None:
        self._guard = guard
        self._rows: dict[EventId, Event] = {}

    def list_events(
        self, owner_id: int | None = None, status: EventStatus | None = None
    ) -> list[Event]:
        with self._guard:
            rows = list(self._rows.values())
        return _filter_events(rows, owner_id, status)

    def get_event(self, event_id: EventId) -> Event | None:
        with self._guard:
            return self._rows.get(event_id)

    def save_event(self, event: Event) -> Event:
        with self._guard:
            self._rows[event.id] = event
        return event

    def save_events(self, events: Iterable[Event]) -> None:
        with self._guard:
            for event in events:
                self._rows[event.id] = event

    def snapshot(self) -> dict[EventId, Event]:
        with self._guard:
            return dict(self._rows)

    def _apply(self, events: dict[EventId, Event]) -> None:
        # Caller holds the storage guard.
        self._rows.update(events)


class InMemorySwapRequestStore(SwapRequestStore):
    """Dictionary-backed swap request store sharing the storage guard."""

    def __init__(self, guard: threading.Lock) -> None:
        self._guard = guard
        self._rows: dict[SwapRequestId, SwapRequest] = {}

    def list_swap_requests(
        self, target_event_ids: Iterable[EventId] | None = None
    ) -> list[SwapRequest]:
        with self._guard:
            rows = list(self._rows.values())
        return _filter_swap_requests(rows, target_event_ids)

    def get_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        with self._guard:
            return self._rows.get(swap_request_id)

    def save_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        with self._guard:
            self._rows[swap_request.id] = swap_request
        return swap_request

    def delete_swap_request(self, swap_request_id: SwapRequestId) -> None:
        with self._guard:
            self._rows.pop(swap_request_id, None)

    def snapshot(self) -> dict[SwapRequestId, SwapRequest]:
        with self._guard:
            return dict(self._rows)

    def _apply(self, changes: dict[SwapRequestId, SwapRequest | None]) -> None:
        # Caller holds the storage guard. None deletes the row.
        for swap_request_id, swap_request in changes.items():
            if swap_request is None:
                self._rows.pop(swap_request_id, None)
            else:
                self._rows[swap_request_id] = swap_request


class InMemorySwapTransaction(SwapTransaction):
    """Buffered unit of work over an InMemorySwapStorage."""

    def __init__(self, storage: "InMemorySwapStorage") -> None:
        self._storage = storage
        self._events: dict[EventId, Event] = {}
        # None marks a pending delete.
        self._swap_requests: dict[SwapRequestId, SwapRequest | None] = {}
        self._held: list[threading.Lock] = []
        self._held_keys: set[Hashable] = set()

    def _acquire(self, key: Hashable) -> None:
        if key in self._held_keys:
            return
        lock = self._storage.row_lock(key)
        if not lock.acquire(timeout=self._storage.lock_timeout):
            raise ContentionError()
        self._held.append(lock)
        self._held_keys.add(key)

    def lock_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        locked = {}
        for event_id in sorted(set(event_ids)):
            self._acquire(("event", event_id))
            event = self.get_event(event_id)
            if event is not None:
                locked[event_id] = event
        return locked

    def lock_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        self._acquire(("swap_request", swap_request_id))
        return self.get_swap_request(swap_request_id)

    def list_events(
        self, owner_id: int | None = None, status: EventStatus | None = None
    ) -> list[Event]:
        rows = self._storage.events.snapshot()
        rows.update(self._events)
        return _filter_events(rows.values(), owner_id, status)

    def get_event(self, event_id: EventId) -> Event | None:
        if event_id in self._events:
            return self._events[event_id]
        return self._storage.events.get_event(event_id)

    def save_event(self, event: Event) -> Event:
        self._events[event.id] = event
        return event

    def save_events(self, events: Iterable[Event]) -> None:
        for event in events:
            self._events[event.id] = event

    def list_swap_requests(
        self, target_event_ids: Iterable[EventId] | None = None
    ) -> list[SwapRequest]:
        rows: dict[SwapRequestId, SwapRequest | None] = dict(
            self._storage.swap_requests.snapshot()
        )
        rows.update(self._swap_requests)
        live = [req for req in rows.values() if req is not None]
        return _filter_swap_requests(live, target_event_ids)

    def get_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        if swap_request_id in self._swap_requests:
            return self._swap_requests[swap_request_id]
        return self._storage.swap_requests.get_swap_request(swap_request_id)

    def save_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        self._swap_requests[swap_request.id] = swap_request
        return swap_request

    def delete_swap_request(self, swap_request_id: SwapRequestId) -> None:
        self._swap_requests[swap_request_id] = None

    def commit(self) -> None:
        self._storage.apply(self._events, self._swap_requests)

    def release(self) -> None:
        while self._held:
            self._held.pop().release()
        self._held_keys.clear()


class InMemorySwapStorage(SwapStorage):
    """Process-local storage for both stores."""

    def __init__(self, lock_timeout: float = 5.0) -> None:
        self.lock_timeout = lock_timeout
        self._guard = threading.Lock()
        self._events = InMemoryEventStore(self._guard)
        self._swap_requests = InMemorySwapRequestStore(self._guard)
        self._row_locks: dict[Hashable, threading.Lock] = {}

    @property
    def events(self) -> InMemoryEventStore:
        return self._events

    @property
    def swap_requests(self) -> InMemorySwapRequestStore:
        return self._swap_requests

    @contextmanager
    def atomic(self) -> Iterator[InMemorySwapTransaction]:
        tx = InMemorySwapTransaction(self)
        try:
            yield tx
            tx.commit()
        finally:
            tx.release()

    def row_lock(self, key: Hashable) -> threading.Lock:
        with self._guard:
            return self._row_locks.setdefault(key, threading.Lock())

    def apply(
        self,
        events: dict[EventId, Event],
        swap_requests: dict[SwapRequestId, SwapRequest | None],
    ) -> None:
        """Apply a transaction's buffered writes in one step.

        A deleted swap request also drops its row lock entry. Its id is
        never reused, so a waiter still holding the old lock only finds
        the request gone.
        """
        with self._guard:
            self._events._apply(events)
            self._swap_requests._apply(swap_requests)
            for swap_request_id, swap_request in swap_requests.items():
                if swap_request is None:
                    self._row_locks.pop(("swap_request", swap_request_id), None)

    def tracked_lock_count(self) -> int:
        with self._guard:
            return len(self._row_locks)
