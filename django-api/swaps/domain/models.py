"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in swaps/models.py (persistence layer).

Status transitions of the swap state machine live here:

    BUSY <-> SWAPPABLE           mark()
    SWAPPABLE -> SWAP_PENDING    begin_swap()
    SWAP_PENDING -> BUSY         settle_swap(accepted=True)
    SWAP_PENDING -> SWAPPABLE    settle_swap(accepted=False)

Every transition returns a new instance; nothing mutates in place.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from swaps.domain.errors import EventNotSwappableError, InvalidTransitionError
from swaps.domain.value_objects import (
    EventId,
    EventStatus,
    SwapRequestId,
    SwapRequestStatus,
    TimeWindow,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of a user-owned time slot."""

    id: EventId
    title: str
    window: TimeWindow
    owner_id: int
    status: EventStatus
    created_at: datetime

    def is_swappable_for(self, user_id: int) -> bool:
        return self.status is EventStatus.SWAPPABLE and self.owner_id != user_id

    def mark(self, status: EventStatus) -> "Event":
        """Toggle between BUSY and SWAPPABLE."""
        if status is EventStatus.SWAP_PENDING:
            raise InvalidTransitionError(
                "SWAP_PENDING can only be set by a swap request"
            )
        if self.status is EventStatus.SWAP_PENDING:
            raise InvalidTransitionError(
                "Event has a swap in flight and cannot be re-marked"
            )
        return replace(self, status=status)

    def begin_swap(self) -> "Event":
        if self.status is not EventStatus.SWAPPABLE:
            raise EventNotSwappableError(str(self.id))
        return replace(self, status=EventStatus.SWAP_PENDING)

    def settle_swap(self, accepted: bool, new_owner_id: int) -> "Event":
        """Close a pending swap.

        The new owner is applied only when the swap was accepted.
        """
        if self.status is not EventStatus.SWAP_PENDING:
            raise InvalidTransitionError("Event has no swap in flight")
        if accepted:
            return replace(self, owner_id=new_owner_id, status=EventStatus.BUSY)
        return replace(self, status=EventStatus.SWAPPABLE)

    def edit(self, title: str, window: TimeWindow) -> "Event":
        return replace(self, title=title, window=window)


@dataclass(frozen=True)
class SwapRequest:
    """Domain representation of a pending offer to exchange two events.

    title and window are a snapshot of the requestor event taken when the
    request was placed. They are informational and may go stale.
    """

    id: SwapRequestId
    requestor_event_id: EventId
    target_event_id: EventId
    title: str
    window: TimeWindow
    status: SwapRequestStatus
    created_at: datetime

    @classmethod
    def open(cls, requestor: Event, target: Event, created_at: datetime) -> "SwapRequest":
        return cls(
            id=SwapRequestId.generate(),
            requestor_event_id=requestor.id,
            target_event_id=target.id,
            title=requestor.title,
            window=requestor.window,
            status=SwapRequestStatus.SWAP_PENDING,
            created_at=created_at,
        )

    @property
    def event_ids(self) -> tuple[EventId, EventId]:
        return (self.requestor_event_id, self.target_event_id)
