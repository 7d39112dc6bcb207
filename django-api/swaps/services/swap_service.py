"""Swap service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Operations that read state to decide on a write run inside one storage
transaction with the affected rows locked: the swap request first, then its
events in ascending id order. Lock contention is retried a bounded number of
times before ContentionError reaches the caller.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar

from swaps.domain import (
    Event,
    EventId,
    EventStatus,
    SwapRequest,
    SwapRequestId,
    TimeWindow,
)
from swaps.domain.errors import (
    ConsistencyFaultError,
    ContentionError,
    EventNotFoundError,
    InvalidIdError,
    InvalidTransitionError,
    SwapRequestNotFoundError,
    ValidationError,
)
from swaps.stores.interfaces import SwapStorage, SwapTransaction

logger = logging.getLogger(__name__)
consistency_logger = logging.getLogger("swaps.consistency")

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except ValueError as exc:
        raise InvalidIdError("event ID") from exc


def _parse_swap_request_id(value: str) -> SwapRequestId:
    try:
        return SwapRequestId.from_string(value)
    except ValueError as exc:
        raise InvalidIdError("swap request ID") from exc


def _parse_status(value: EventStatus | str) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown event status: {value}") from exc


def _build_window(starts_at: datetime, ends_at: datetime) -> TimeWindow:
    try:
        return TimeWindow(starts_at=starts_at, ends_at=ends_at)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def _clean_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title must not be empty")
    return cleaned


class SwapService:
    """Service for event ownership swaps."""

    def __init__(
        self,
        storage: SwapStorage,
        max_attempts: int = 3,
        retry_backoff_seconds: float = 0.05,
    ) -> None:
        self._storage = storage
        self._max_attempts = max(1, max_attempts)
        self._retry_backoff_seconds = retry_backoff_seconds

    # Reads

    def list_swappable_events(self, user_id: int) -> list[Event]:
        """Return SWAPPABLE events owned by anyone but user_id."""
        events = self._storage.events.list_events(status=EventStatus.SWAPPABLE)
        return [event for event in events if event.is_swappable_for(user_id)]

    def list_user_events(self, user_id: int) -> list[Event]:
        return self._storage.events.list_events(owner_id=user_id)

    def list_incoming_swap_requests(self, user_id: int) -> list[SwapRequest]:
        """Return live swap requests that target one of user_id's events."""
        owned = self._storage.events.list_events(owner_id=user_id)
        if not owned:
            return []
        return self._storage.swap_requests.list_swap_requests(
            target_event_ids=[event.id for event in owned]
        )

    # Writes

    def create_event(
        self,
        title: str,
        starts_at: datetime,
        ends_at: datetime,
        owner_id: int,
        status: EventStatus | str | None = None,
    ) -> Event:
        """Create an event, BUSY unless SWAPPABLE is requested explicitly.

        Raises:
            ValidationError: On an empty title, a reversed or empty time
                window, or an initial status of SWAP_PENDING.
        """
        initial = EventStatus.BUSY if status is None else _parse_status(status)
        if initial is EventStatus.SWAP_PENDING:
            raise ValidationError("SWAP_PENDING can only be set by a swap request")
        event = Event(
            id=EventId.generate(),
            title=_clean_title(title),
            window=_build_window(starts_at, ends_at),
            owner_id=owner_id,
            status=initial,
            created_at=_now(),
        )
        stored = self._storage.events.save_event(event)
        logger.info(
            "Event %s created for user %s as %s",
            stored.id,
            owner_id,
            stored.status.value,
        )
        return stored

    def mark_event(self, event_id: str, status: EventStatus | str) -> Event:
        """Set an event to BUSY or SWAPPABLE.

        Raises:
            InvalidIdError: If event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            InvalidTransitionError: If status is SWAP_PENDING or the event
                has a swap in flight.
        """
        target_id = _parse_event_id(event_id)
        new_status = _parse_status(status)

        def mark(tx: SwapTransaction) -> Event:
            event = self._require_event(tx.lock_events([target_id]), target_id)
            return tx.save_event(event.mark(new_status))

        marked = self._run_atomic("mark_event", mark)
        logger.info("Event %s marked %s", marked.id, marked.status.value)
        return marked

    def update_event(
        self,
        event_id: str,
        title: str | None = None,
        starts_at: datetime | None = None,
        ends_at: datetime | None = None,
    ) -> Event:
        """Partially update title and time window.

        Status and owner are never touched here. The merged window is
        validated again, so a partial update cannot reverse the slot.

        Raises:
            InvalidIdError: If event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ValidationError: On an empty title or an invalid merged window.
        """
        target_id = _parse_event_id(event_id)
        new_title = _clean_title(title) if title is not None else None

        def update(tx: SwapTransaction) -> Event:
            event = self._require_event(tx.lock_events([target_id]), target_id)
            window = _build_window(
                starts_at if starts_at is not None else event.window.starts_at,
                ends_at if ends_at is not None else event.window.ends_at,
            )
            edited = event.edit(
                title=new_title if new_title is not None else event.title,
                window=window,
            )
            return tx.save_event(edited)

        return self._run_atomic("update_event", update)

    def place_swap_request(
        self, requestor_event_id: str, target_event_id: str
    ) -> SwapRequest:
        """Offer requestor_event_id in exchange for target_event_id.

        Raises:
            InvalidIdError: If either id is not a valid UUID.
            ValidationError: If both ids name the same event.
            EventNotFoundError: If either event does not exist.
            EventNotSwappableError: If either event is not SWAPPABLE.
        """
        requestor_id = _parse_event_id(requestor_event_id)
        target_id = _parse_event_id(target_event_id)
        if requestor_id == target_id:
            raise ValidationError("An event cannot be swapped with itself")

        def place(tx: SwapTransaction) -> SwapRequest:
            events = tx.lock_events([requestor_id, target_id])
            requestor = self._require_event(events, requestor_id)
            target = self._require_event(events, target_id)
            pending = [requestor.begin_swap(), target.begin_swap()]
            swap_request = tx.save_swap_request(
                SwapRequest.open(requestor, target, created_at=_now())
            )
            tx.save_events(pending)
            return swap_request

        swap_request = self._run_atomic("place_swap_request", place)
        logger.info(
            "Swap request %s placed: %s -> %s",
            swap_request.id,
            requestor_id,
            target_id,
        )
        return swap_request

    def process_swap_request(self, swap_request_id: str, accept: bool) -> None:
        """Accept or reject a swap request and delete it.

        Acceptance exchanges the owners and leaves both events BUSY.
        Rejection keeps the owners and makes both events SWAPPABLE again.

        Raises:
            InvalidIdError: If swap_request_id is not a valid UUID.
            SwapRequestNotFoundError: If the request does not exist,
                including when it was already processed.
            ConsistencyFaultError: If the request's events are missing or
                not pending.
        """
        request_id = _parse_swap_request_id(swap_request_id)

        def settle(tx: SwapTransaction) -> None:
            swap_request = tx.lock_swap_request(request_id)
            if swap_request is None:
                raise SwapRequestNotFoundError(swap_request_id)
            events = tx.lock_events(swap_request.event_ids)
            requestor = events.get(swap_request.requestor_event_id)
            target = events.get(swap_request.target_event_id)
            if requestor is None or target is None:
                raise self._consistency_fault(
                    swap_request, "references a missing event"
                )
            try:
                settled = [
                    requestor.settle_swap(accept, new_owner_id=target.owner_id),
                    target.settle_swap(accept, new_owner_id=requestor.owner_id),
                ]
            except InvalidTransitionError as exc:
                raise self._consistency_fault(
                    swap_request, "references an event that is not pending"
                ) from exc
            tx.save_events(settled)
            tx.delete_swap_request(swap_request.id)

        self._run_atomic("process_swap_request", settle)
        logger.info(
            "Swap request %s %s", request_id, "accepted" if accept else "rejected"
        )

    # Helpers

    def _require_event(self, events: dict[EventId, Event], event_id: EventId) -> Event:
        event = events.get(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def _consistency_fault(
        self, swap_request: SwapRequest, detail: str
    ) -> ConsistencyFaultError:
        message = f"Swap request {swap_request.id} {detail}"
        consistency_logger.critical(
            message,
            extra={
                "swap_request_id": str(swap_request.id),
                "requestor_event_id": str(swap_request.requestor_event_id),
                "target_event_id": str(swap_request.target_event_id),
            },
        )
        return ConsistencyFaultError(message)

    def _run_atomic(self, operation: str, work: Callable[[SwapTransaction], T]) -> T:
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._storage.atomic() as tx:
                    return work(tx)
            except ContentionError:
                if attempt == self._max_attempts:
                    logger.error(
                        "%s gave up after %d attempts on lock contention",
                        operation,
                        attempt,
                    )
                    raise
                logger.warning(
                    "%s hit lock contention, retrying (attempt %d of %d)",
                    operation,
                    attempt,
                    self._max_attempts,
                )
                time.sleep(self._retry_backoff_seconds * attempt)
        raise AssertionError("unreachable")
