"""Engine tuning read from the ``SWAPS`` Django setting."""

from dataclasses import dataclass

from django.conf import settings

DEFAULTS = {
    "MAX_ATTEMPTS": 3,
    "RETRY_BACKOFF_SECONDS": 0.05,
    "LOCK_TIMEOUT_MS": 2000,
}


@dataclass(frozen=True)
class SwapSettings:
    max_attempts: int
    retry_backoff_seconds: float
    lock_timeout_ms: int


def swap_settings() -> SwapSettings:
    values = {**DEFAULTS, **getattr(settings, "SWAPS", {})}
    return SwapSettings(
        max_attempts=int(values["MAX_ATTEMPTS"]),
        retry_backoff_seconds=float(values["RETRY_BACKOFF_SECONDS"]),
        lock_timeout_ms=int(values["LOCK_TIMEOUT_MS"]),
    )
