"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True, order=True)
class EventId:
    """Unique identifier for an Event.

    Ordering is used to acquire row locks in a canonical sequence.
    """

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SwapRequestId:
    """Unique identifier for a SwapRequest."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


class EventStatus(Enum):
    """States an event cycles through."""

    BUSY = "BUSY"
    SWAPPABLE = "SWAPPABLE"
    SWAP_PENDING = "SWAP_PENDING"


class SwapRequestStatus(Enum):
    """States of a swap request. Only pending requests are ever stored."""

    SWAP_PENDING = "SWAP_PENDING"


@dataclass(frozen=True)
class TimeWindow:
    """Half-open time slot; must end strictly after it starts."""

    starts_at: datetime
    ends_at: datetime

    def __post_init__(self) -> None:
        if self.starts_at.tzinfo is None or self.ends_at.tzinfo is None:
            raise ValueError("Time window bounds must be timezone-aware")
        if self.ends_at <= self.starts_at:
            raise ValueError("Time window must end after it starts")

    def __str__(self) -> str:
        return f"{self.starts_at.isoformat()}/{self.ends_at.isoformat()}"
