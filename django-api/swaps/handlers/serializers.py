"""Serializers for request input and domain model responses."""

from rest_framework import serializers

from swaps.domain.value_objects import EventStatus

MARKABLE_STATUSES = [EventStatus.BUSY.value, EventStatus.SWAPPABLE.value]


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    starts_at = serializers.DateTimeField(source="window.starts_at")
    ends_at = serializers.DateTimeField(source="window.ends_at")
    owner_id = serializers.IntegerField()
    status = serializers.CharField(source="status.value")


class SwapRequestSerializer(serializers.Serializer):
    """Serializer for SwapRequest domain model."""

    id = serializers.UUIDField(source="id.value")
    requestor_event_id = serializers.UUIDField(source="requestor_event_id.value")
    target_event_id = serializers.UUIDField(source="target_event_id.value")
    title = serializers.CharField()
    starts_at = serializers.DateTimeField(source="window.starts_at")
    ends_at = serializers.DateTimeField(source="window.ends_at")
    status = serializers.CharField(source="status.value")


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    owner_id = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=MARKABLE_STATUSES, required=False)


class EventUpdateSerializer(serializers.Serializer):
    """All fields optional; omitted fields keep their stored values."""

    title = serializers.CharField(max_length=255, required=False)
    starts_at = serializers.DateTimeField(required=False)
    ends_at = serializers.DateTimeField(required=False)


class MarkEventSerializer(serializers.Serializer):
    # SWAP_PENDING is accepted here so the engine can reject it with a
    # transition error instead of a generic field error.
    status = serializers.ChoiceField(choices=[status.value for status in EventStatus])


class SwapRequestCreateSerializer(serializers.Serializer):
    requestor_event_id = serializers.CharField()
    target_event_id = serializers.CharField()


class SwapDecisionSerializer(serializers.Serializer):
    accept = serializers.BooleanField()
