"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models

from swaps.domain.value_objects import EventStatus, SwapRequestStatus

EVENT_STATUS_CHOICES = [(status.value, status.value) for status in EventStatus]
SWAP_REQUEST_STATUS_CHOICES = [
    (status.value, status.value) for status in SwapRequestStatus
]


class Event(models.Model):
    """Persistence model for user-owned time slots."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    owner_id = models.BigIntegerField()
    status = models.CharField(
        max_length=16,
        choices=EVENT_STATUS_CHOICES,
        default=EventStatus.BUSY.value,
    )
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["owner_id", "status"], name="event_owner_status_idx"
            ),
            models.Index(fields=["status"], name="event_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(ends_at__gt=models.F("starts_at")),
                name="event_ends_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"


class SwapRequest(models.Model):
    """Persistence model for pending swap requests."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requestor_event = models.ForeignKey(
        Event, on_delete=models.PROTECT, related_name="offered_swaps"
    )
    target_event = models.ForeignKey(
        Event, on_delete=models.PROTECT, related_name="incoming_swaps"
    )
    title = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=SWAP_REQUEST_STATUS_CHOICES,
        default=SwapRequestStatus.SWAP_PENDING.value,
    )
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["requestor_event"], name="swap_unique_requestor_event"
            ),
            models.UniqueConstraint(
                fields=["target_event"], name="swap_unique_target_event"
            ),
            models.CheckConstraint(
                condition=~models.Q(requestor_event=models.F("target_event")),
                name="swap_distinct_events",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.requestor_event_id} -> {self.target_event_id}"
