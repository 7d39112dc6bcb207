from swaps.domain.models import Event, SwapRequest
from swaps.domain.value_objects import (
    EventId,
    EventStatus,
    SwapRequestId,
    SwapRequestStatus,
    TimeWindow,
)

__all__ = [
    "Event",
    "SwapRequest",
    "EventId",
    "SwapRequestId",
    "EventStatus",
    "SwapRequestStatus",
    "TimeWindow",
]
