"""Concurrency tests for the swap engine over the in-memory storage.

Run with: pytest tests/test_concurrency.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from swaps.domain import EventStatus
from swaps.domain.errors import (
    ContentionError,
    DomainError,
    EventNotSwappableError,
    SwapRequestNotFoundError,
)
from swaps.services import SwapService
from swaps.stores.memory_store import InMemorySwapStorage
from tests.slots import at

ROUNDS = 20


def run_together(*calls):
    """Start every call at the same instant and collect result or error."""
    barrier = threading.Barrier(len(calls))

    def run(call):
        barrier.wait()
        try:
            return call(), None
        except DomainError as exc:
            return None, exc

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        futures = [pool.submit(run, call) for call in calls]
        return [future.result() for future in futures]


class TestConcurrentPlacement:
    """At most one live swap request may reference an event."""

    @pytest.mark.parametrize("round_number", range(ROUNDS))
    def test_shared_target_admits_one_request(
        self, service: SwapService, storage: InMemorySwapStorage, make_event, round_number
    ):
        a = make_event(owner_id=1)
        b = make_event(owner_id=2)
        c = make_event(owner_id=3)

        outcomes = run_together(
            lambda: service.place_swap_request(str(a.id), str(b.id)),
            lambda: service.place_swap_request(str(c.id), str(b.id)),
        )

        placed = [result for result, error in outcomes if error is None]
        errors = [error for result, error in outcomes if error is not None]
        assert len(placed) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], EventNotSwappableError)
        assert storage.swap_requests.list_swap_requests() == placed

        winner = placed[0].requestor_event_id
        loser = c.id if winner == a.id else a.id
        assert storage.events.get_event(winner).status is EventStatus.SWAP_PENDING
        assert storage.events.get_event(loser).status is EventStatus.SWAPPABLE

    @pytest.mark.parametrize("round_number", range(ROUNDS))
    def test_crossed_requests_do_not_deadlock(
        self, service: SwapService, storage: InMemorySwapStorage, make_event, round_number
    ):
        """Offering a for b and b for a at once locks in the same order."""
        a = make_event(owner_id=1)
        b = make_event(owner_id=2)

        outcomes = run_together(
            lambda: service.place_swap_request(str(a.id), str(b.id)),
            lambda: service.place_swap_request(str(b.id), str(a.id)),
        )

        assert sum(error is None for _, error in outcomes) == 1
        assert len(storage.swap_requests.list_swap_requests()) == 1


class TestConcurrentDecision:
    """A swap request is settled exactly once."""

    @pytest.mark.parametrize("round_number", range(ROUNDS))
    def test_double_accept_settles_once(
        self, service: SwapService, storage: InMemorySwapStorage, make_event, round_number
    ):
        a = make_event(owner_id=1)
        b = make_event(owner_id=2)
        swap_request = service.place_swap_request(str(a.id), str(b.id))

        outcomes = run_together(
            lambda: service.process_swap_request(str(swap_request.id), accept=True),
            lambda: service.process_swap_request(str(swap_request.id), accept=True),
        )

        errors = [error for _, error in outcomes if error is not None]
        assert len(errors) == 1
        assert isinstance(errors[0], SwapRequestNotFoundError)
        assert storage.events.get_event(a.id).owner_id == 2
        assert storage.events.get_event(b.id).owner_id == 1

    def test_mark_racing_placement_never_clobbers_pending(
        self, service: SwapService, storage: InMemorySwapStorage, make_event
    ):
        for _ in range(ROUNDS):
            a = make_event(owner_id=1)
            b = make_event(owner_id=2)

            run_together(
                lambda: service.place_swap_request(str(a.id), str(b.id)),
                lambda: service.mark_event(str(b.id), EventStatus.BUSY),
            )

            pending = {
                event_id
                for req in storage.swap_requests.list_swap_requests()
                for event_id in req.event_ids
            }
            for event in (storage.events.get_event(a.id), storage.events.get_event(b.id)):
                assert (event.status is EventStatus.SWAP_PENDING) == (event.id in pending)


class TestLockTimeout:
    """Lock waits are bounded and surface as ContentionError."""

    def test_held_lock_times_out(self):
        storage = InMemorySwapStorage(lock_timeout=0.05)
        service = SwapService(storage, max_attempts=2, retry_backoff_seconds=0)
        event = service.create_event(
            "Shift", at(10), at(11), owner_id=1, status=EventStatus.SWAPPABLE
        )

        with storage.atomic() as tx:
            tx.lock_events([event.id])
            with ThreadPoolExecutor(max_workers=1) as pool:
                future = pool.submit(service.mark_event, str(event.id), "BUSY")
                with pytest.raises(ContentionError):
                    future.result()

        assert storage.events.get_event(event.id).status is EventStatus.SWAPPABLE
        assert service.mark_event(str(event.id), "BUSY").status is EventStatus.BUSY


class TestRowLockCleanup:
    """Settled swap requests leave no row lock behind."""

    def test_repeated_decisions_keep_lock_table_flat(
        self, service: SwapService, storage: InMemorySwapStorage, make_event
    ):
        a = make_event(owner_id=1)
        b = make_event(owner_id=2)

        for _ in range(5):
            swap_request = service.place_swap_request(str(a.id), str(b.id))
            service.process_swap_request(str(swap_request.id), accept=False)

        # Only the two event locks remain.
        assert storage.tracked_lock_count() == 2

    def test_rolled_back_decision_keeps_request_lockable(
        self, service: SwapService, storage: InMemorySwapStorage, make_event
    ):
        a = make_event(owner_id=1)
        b = make_event(owner_id=2)
        swap_request = service.place_swap_request(str(a.id), str(b.id))

        with pytest.raises(RuntimeError):
            with storage.atomic() as tx:
                tx.lock_swap_request(swap_request.id)
                tx.delete_swap_request(swap_request.id)
                raise RuntimeError("abort")

        assert storage.swap_requests.get_swap_request(swap_request.id) == swap_request
        service.process_swap_request(str(swap_request.id), accept=True)
        assert storage.events.get_event(a.id).owner_id == 2
        assert storage.tracked_lock_count() == 2
