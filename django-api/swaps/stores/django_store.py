"""Django ORM implementation of the swap stores.

Row locks use SELECT ... FOR UPDATE inside ``transaction.atomic()``. On
PostgreSQL the wait for a lock is bounded by a transaction-local
``lock_timeout``. Lock timeouts, deadlocks and SQLite's "database is locked"
all surface as ``OperationalError`` and are reported as ContentionError.
"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from django.db import OperationalError, connection, transaction

from swaps import models as orm
from swaps.domain import (
    Event,
    EventId,
    EventStatus,
    SwapRequest,
    SwapRequestId,
    SwapRequestStatus,
    TimeWindow,
)
from swaps.domain.errors import ContentionError
from swaps.stores.interfaces import (
    EventStore,
    SwapRequestStore,
    SwapStorage,
    SwapTransaction,
)


def event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(value=row.id),
        title=row.title,
        window=TimeWindow(starts_at=row.starts_at, ends_at=row.ends_at),
        owner_id=row.owner_id,
        status=EventStatus(row.status),
        created_at=row.created_at,
    )


def swap_request_to_domain(row: orm.SwapRequest) -> SwapRequest:
    return SwapRequest(
        id=SwapRequestId(value=row.id),
        requestor_event_id=EventId(value=row.requestor_event_id),
        target_event_id=EventId(value=row.target_event_id),
        title=row.title,
        window=TimeWindow(starts_at=row.starts_at, ends_at=row.ends_at),
        status=SwapRequestStatus(row.status),
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Database-backed event store using Django ORM."""

    def list_events(
        self, owner_id: int | None = None, status: EventStatus | None = None
    ) -> list[Event]:
        rows = orm.Event.objects.all()
        if owner_id is not None:
            rows = rows.filter(owner_id=owner_id)
        if status is not None:
            rows = rows.filter(status=status.value)
        return [event_to_domain(row) for row in rows]

    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(id=event_id.value).first()
        return event_to_domain(row) if row is not None else None

    def save_event(self, event: Event) -> Event:
        row, _ = orm.Event.objects.update_or_create(
            id=event.id.value,
            defaults={
                "title": event.title,
                "starts_at": event.window.starts_at,
                "ends_at": event.window.ends_at,
                "owner_id": event.owner_id,
                "status": event.status.value,
                "created_at": event.created_at,
            },
        )
        return event_to_domain(row)

    def save_events(self, events: Iterable[Event]) -> None:
        with transaction.atomic():
            for event in events:
                self.save_event(event)


class DjangoSwapRequestStore(SwapRequestStore):
    """Database-backed swap request store using Django ORM."""

    def list_swap_requests(
        self, target_event_ids: Iterable[EventId] | None = None
    ) -> list[SwapRequest]:
        rows = orm.SwapRequest.objects.all()
        if target_event_ids is not None:
            rows = rows.filter(
                target_event_id__in=[event_id.value for event_id in target_event_ids]
            )
        return [swap_request_to_domain(row) for row in rows]

    def get_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        row = orm.SwapRequest.objects.filter(id=swap_request_id.value).first()
        return swap_request_to_domain(row) if row is not None else None

    def save_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        row, _ = orm.SwapRequest.objects.update_or_create(
            id=swap_request.id.value,
            defaults={
                "requestor_event_id": swap_request.requestor_event_id.value,
                "target_event_id": swap_request.target_event_id.value,
                "title": swap_request.title,
                "starts_at": swap_request.window.starts_at,
                "ends_at": swap_request.window.ends_at,
                "status": swap_request.status.value,
                "created_at": swap_request.created_at,
            },
        )
        return swap_request_to_domain(row)

    def delete_swap_request(self, swap_request_id: SwapRequestId) -> None:
        orm.SwapRequest.objects.filter(id=swap_request_id.value).delete()


class DjangoSwapTransaction(DjangoEventStore, DjangoSwapRequestStore, SwapTransaction):
    """Stores bound to the enclosing ``transaction.atomic()`` block."""

    def lock_events(self, event_ids: Iterable[EventId]) -> dict[EventId, Event]:
        rows = (
            orm.Event.objects.select_for_update()
            .filter(id__in=[event_id.value for event_id in set(event_ids)])
            .order_by("id")
        )
        return {EventId(value=row.id): event_to_domain(row) for row in rows}

    def lock_swap_request(self, swap_request_id: SwapRequestId) -> SwapRequest | None:
        row = (
            orm.SwapRequest.objects.select_for_update()
            .filter(id=swap_request_id.value)
            .first()
        )
        return swap_request_to_domain(row) if row is not None else None


class DjangoSwapStorage(SwapStorage):
    """Storage over the default Django database connection."""

    def __init__(self, lock_timeout_ms: int | None = None) -> None:
        self._lock_timeout_ms = lock_timeout_ms
        self._events = DjangoEventStore()
        self._swap_requests = DjangoSwapRequestStore()

    @property
    def events(self) -> DjangoEventStore:
        return self._events

    @property
    def swap_requests(self) -> DjangoSwapRequestStore:
        return self._swap_requests

    @contextmanager
    def atomic(self) -> Iterator[DjangoSwapTransaction]:
        try:
            with transaction.atomic():
                self._bound_lock_wait()
                yield DjangoSwapTransaction()
        except OperationalError as exc:
            raise ContentionError() from exc

    def _bound_lock_wait(self) -> None:
        if not self._lock_timeout_ms or connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            cursor.execute(
                "SELECT set_config('lock_timeout', %s, true)",
                [f"{self._lock_timeout_ms}ms"],
            )
