"""Tests for LifecycleEngine transitions and the events they publish."""

import asyncio

import pytest

from groupfinder.models.submission import SubmissionStatus
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.services.errors import InvalidTransitionError, NotFoundError
from groupfinder.services.lifecycle import LifecycleEngine
from groupfinder.services.propagation import (
    EVENT_APPROVED,
    EVENT_DELETED,
    EVENT_DELISTED,
    EVENT_REJECTED,
    EVENT_SUBMITTED,
    PropagationBus,
)
from groupfinder.services.store import InMemorySubmissionStore


@pytest.mark.asyncio
async def test_submit_publishes_submitted_event(lifecycle, published, free_payload) -> None:
    submission = await lifecycle.submit(free_payload, owner_id="member-1")

    assert submission.status is SubmissionStatus.PENDING
    assert [(e.type, e.submission_id) for e in published] == [
        (EVENT_SUBMITTED, submission.id)
    ]
    assert published[0].payload == submission


@pytest.mark.asyncio
async def test_approve_publishes_event_with_stored_state(
    lifecycle, published, free_payload
) -> None:
    submission = await lifecycle.submit(free_payload)

    approved = await lifecycle.approve(submission.id, notes="Welcome")

    assert approved.status is SubmissionStatus.APPROVED
    assert approved.review_notes == "Welcome"
    assert published[-1].type == EVENT_APPROVED
    assert published[-1].payload == approved


@pytest.mark.asyncio
async def test_reject_then_approve_fails_and_status_stays(
    lifecycle, repository, published, free_payload
) -> None:
    submission = await lifecycle.submit(free_payload)
    await lifecycle.reject(submission.id)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.approve(submission.id)

    assert (await repository.get_by_id(submission.id)).status is SubmissionStatus.REJECTED
    assert [e.type for e in published] == [EVENT_SUBMITTED, EVENT_REJECTED]


@pytest.mark.asyncio
async def test_approved_then_delisted_cannot_be_reapproved(
    lifecycle, repository, free_payload
) -> None:
    submission = await lifecycle.submit(free_payload)
    await lifecycle.approve(submission.id)
    delisted = await lifecycle.delist(submission.id)

    assert delisted.status is SubmissionStatus.DELISTED
    with pytest.raises(InvalidTransitionError):
        await lifecycle.approve(submission.id)
    assert (await repository.get_by_id(submission.id)).status is SubmissionStatus.DELISTED


@pytest.mark.asyncio
async def test_delist_requires_approved(lifecycle, published, free_payload) -> None:
    submission = await lifecycle.submit(free_payload)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.delist(submission.id)

    assert EVENT_DELISTED not in [e.type for e in published]


@pytest.mark.asyncio
async def test_approving_twice_returns_identical_records(lifecycle, free_payload) -> None:
    submission = await lifecycle.submit(free_payload)

    first = await lifecycle.approve(submission.id)
    second = await lifecycle.approve(submission.id)

    assert first == second


@pytest.mark.asyncio
async def test_concurrent_approvals_both_succeed_with_one_write(free_payload) -> None:
    store = InMemorySubmissionStore(latency=0.02)
    bus = PropagationBus()
    engine = LifecycleEngine(
        SubmissionRepository(store, read_timeout=1.0, write_timeout=1.0), bus
    )
    submission = await engine.submit(free_payload)
    feed = store.subscribe_to_changes("community_subs")

    first, second = await asyncio.gather(
        engine.approve(submission.id), engine.approve(submission.id)
    )
    feed.close()
    updates = [change async for change in feed if change.kind == "update"]

    assert first == second
    assert first.status is SubmissionStatus.APPROVED
    assert len(updates) == 1


@pytest.mark.asyncio
async def test_concurrent_approve_and_reject_has_single_winner(free_payload) -> None:
    store = InMemorySubmissionStore(latency=0.02)
    engine = LifecycleEngine(
        SubmissionRepository(store, read_timeout=1.0, write_timeout=1.0), PropagationBus()
    )
    submission = await engine.submit(free_payload)

    results = await asyncio.gather(
        engine.approve(submission.id),
        engine.reject(submission.id),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], InvalidTransitionError)
    stored = await engine.repository.get_by_id(submission.id)
    assert stored.status is winners[0].status


@pytest.mark.asyncio
async def test_remove_deletes_and_publishes(
    lifecycle, repository, published, free_payload
) -> None:
    submission = await lifecycle.submit(free_payload)

    await lifecycle.remove(submission.id)

    assert published[-1].type == EVENT_DELETED
    assert published[-1].payload is None
    with pytest.raises(NotFoundError):
        await repository.get_by_id(submission.id)


@pytest.mark.asyncio
async def test_failed_handler_does_not_fail_the_action(lifecycle, bus, free_payload) -> None:
    def explode(event):
        raise RuntimeError("handler bug")

    bus.subscribe(explode)

    submission = await lifecycle.submit(free_payload)
    approved = await lifecycle.approve(submission.id)

    assert approved.status is SubmissionStatus.APPROVED
