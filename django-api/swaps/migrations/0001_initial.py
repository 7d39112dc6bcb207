import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                ("owner_id", models.BigIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("BUSY", "BUSY"),
                            ("SWAPPABLE", "SWAPPABLE"),
                            ("SWAP_PENDING", "SWAP_PENDING"),
                        ],
                        default="BUSY",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["owner_id", "status"],
                        name="event_owner_status_idx",
                    ),
                    models.Index(fields=["status"], name="event_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(ends_at__gt=models.F("starts_at")),
                        name="event_ends_after_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SwapRequest",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[("SWAP_PENDING", "SWAP_PENDING")],
                        default="SWAP_PENDING",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                (
                    "requestor_event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="offered_swaps",
                        to="swaps.event",
                    ),
                ),
                (
                    "target_event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_swaps",
                        to="swaps.event",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["requestor_event"],
                        name="swap_unique_requestor_event",
                    ),
                    models.UniqueConstraint(
                        fields=["target_event"], name="swap_unique_target_event"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("requestor_event", models.F("target_event")),
                            _negated=True,
                        ),
                        name="swap_distinct_events",
                    ),
                ],
            },
        ),
    ]
