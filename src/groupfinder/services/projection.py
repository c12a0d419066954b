"""Live directory projection.

This module derives the public directory from approved submissions and the
static example communities. The projection is rebuilt from scratch on every
refresh and is never authoritative: the store wins on any disagreement, and a
failed refresh keeps serving the last good list instead of raising.

Refreshes are triggered by:

- explicit reads through :meth:`LiveDirectoryProjection.get_live_communities`
- lifecycle events on the :class:`PropagationBus`
- row changes from the store's change feed, when enabled
- a periodic poll, which is the consistency backstop across processes
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence

from groupfinder.core.settings import settings
from groupfinder.models.submission import SUBMISSIONS_TABLE, JoinType, SubmissionStatus
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.schemas.community import LiveCommunity
from groupfinder.schemas.submission import Submission
from groupfinder.services.errors import SubmissionError
from groupfinder.services.propagation import EVENT_SUBMITTED, BusEvent, PropagationBus
from groupfinder.services.seed import SEED_COMMUNITIES
from groupfinder.services.store import ChangeSubscription, SubmissionStore

logger = logging.getLogger(__name__)

Listener = Callable[[list[LiveCommunity]], None]


def to_live_community(submission: Submission) -> LiveCommunity:
    """Map a submission to its public form, withholding private fields."""
    is_paid = submission.join_type is JoinType.PAID
    show_founder = submission.show_founder_info
    return LiveCommunity(
        id=str(submission.id),
        name=submission.community_name,
        description=submission.short_description,
        long_description=submission.long_description,
        category=submission.category,
        platform=submission.platform,
        join_type=submission.join_type,
        join_link=None if is_paid else submission.join_link,
        price_inr=submission.price_inr if is_paid else None,
        logo_url=submission.logo_url,
        tags=(submission.category, submission.platform),
        founder_name=submission.founder_name if show_founder else None,
        founder_bio=submission.founder_bio if show_founder else None,
        created_at=submission.created_at,
        source="submission",
    )


def merge_communities(
    approved: Iterable[LiveCommunity],
    seeds: Iterable[LiveCommunity],
) -> list[LiveCommunity]:
    """Merge approved entries and seeds by id.

    Approved entries come first in the order given, followed by seeds in
    their fixed order. When an id appears in both, the approved entry wins.
    """
    merged: dict[str, LiveCommunity] = {}
    for community in approved:
        merged.setdefault(community.id, community)
    for community in seeds:
        merged.setdefault(community.id, community)
    return list(merged.values())


class LiveDirectoryProjection:
    """Owns the cached public directory and keeps it fresh."""

    def __init__(
        self,
        repository: SubmissionRepository,
        bus: PropagationBus,
        seeds: Sequence[LiveCommunity] | None = None,
        *,
        poll_interval: float | None = None,
        change_source: SubmissionStore | None = None,
    ) -> None:
        """Initialize the projection.

        Args:
            repository: Source of approved submissions.
            bus: Bus whose lifecycle events trigger an early refresh.
            seeds: Example communities appended after approved ones.
            poll_interval: Seconds between background refreshes.
            change_source: Store whose change feed should trigger refreshes.
        """
        self.repository = repository
        self.bus = bus
        self.seeds: tuple[LiveCommunity, ...] = tuple(
            SEED_COMMUNITIES if seeds is None else seeds
        )
        self.poll_interval = poll_interval or settings.directory_poll_interval_seconds
        self.change_source = change_source

        self._communities: tuple[LiveCommunity, ...] = self.seeds
        self._listeners: list[Listener] = []
        self._started_generation = 0
        self._applied_generation = 0
        self.last_refresh_ok = False

        self._task: asyncio.Task[None] | None = None
        self._feed_task: asyncio.Task[None] | None = None
        self._feed: ChangeSubscription | None = None
        self._stopping = asyncio.Event()
        self._unsubscribe_bus: Callable[[], None] | None = None
        self._bus_refresh: asyncio.Task[None] | None = None
        self._refresh_again = False

    # Reads

    def snapshot(self) -> list[LiveCommunity]:
        """Return the cached directory without touching the store."""
        return list(self._communities)

    def find(self, community_id: str) -> LiveCommunity | None:
        """Look up a community in the cached directory."""
        return next((c for c in self._communities if c.id == community_id), None)

    async def get_live_communities(self) -> list[LiveCommunity]:
        """Recompute and return the directory; falls back to the cache on failure."""
        await self.refresh()
        return self.snapshot()

    async def refresh(self) -> bool:
        """Rebuild the directory from the store.

        Returns:
            True if a new list was applied, False if the store failed or a
            newer refresh already finished first.
        """
        self._started_generation += 1
        generation = self._started_generation
        try:
            approved = await self.repository.list_by_status(SubmissionStatus.APPROVED)
        except SubmissionError as err:
            logger.warning(
                "Directory refresh failed, serving %d cached entries: %s",
                len(self._communities),
                err,
            )
            self.last_refresh_ok = False
            return False
        except Exception:
            logger.exception("Unexpected error refreshing the directory")
            self.last_refresh_ok = False
            return False

        if generation < self._applied_generation:
            logger.debug("Discarding stale directory refresh %d", generation)
            return False

        self._applied_generation = generation
        self._communities = tuple(
            merge_communities((to_live_community(s) for s in approved), self.seeds)
        )
        self.last_refresh_ok = True
        logger.debug(
            "Directory refreshed: %d approved, %d total", len(approved), len(self._communities)
        )
        self._notify()
        return True

    # Listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; it receives the current list right away."""
        self._listeners.append(listener)
        self._deliver(listener, self.snapshot())

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def _notify(self) -> None:
        current = self.snapshot()
        for listener in list(self._listeners):
            self._deliver(listener, current)

    @staticmethod
    def _deliver(listener: Listener, communities: list[LiveCommunity]) -> None:
        try:
            listener(list(communities))
        except Exception:
            logger.exception("Directory listener %r failed", listener)

    # Background refresh

    async def start(self) -> None:
        """Start polling and listening for bus and store changes."""
        if self._unsubscribe_bus is None:
            self._unsubscribe_bus = self.bus.subscribe(self._on_bus_event)

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

        if self.change_source is not None and (self._feed_task is None or self._feed_task.done()):
            self._feed = self.change_source.subscribe_to_changes(SUBMISSIONS_TABLE)
            self._feed_task = asyncio.create_task(self._follow_changes(self._feed))

    async def stop(self) -> None:
        """Stop background work started by :meth:`start`."""
        if self._unsubscribe_bus is not None:
            self._unsubscribe_bus()
            self._unsubscribe_bus = None

        self._stopping.set()
        if self._task is not None:
            await self._task
            self._task = None

        if self._feed is not None:
            self._feed.close()
            self._feed = None
        if self._feed_task is not None:
            await self._feed_task
            self._feed_task = None

        if self._bus_refresh is not None:
            self._bus_refresh.cancel()
            await asyncio.gather(self._bus_refresh, return_exceptions=True)
            self._bus_refresh = None

    async def _run(self) -> None:
        interval = max(0.1, float(self.poll_interval))
        while not self._stopping.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except TimeoutError:
                continue

    async def _follow_changes(self, feed: ChangeSubscription) -> None:
        async for change in feed:
            if change.kind == "insert":
                # New rows are always pending and never public.
                continue
            await self.refresh()

    def _on_bus_event(self, event: BusEvent) -> None:
        if event.type == EVENT_SUBMITTED:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; %s event left to the poller", event.type)
            return
        if self._bus_refresh is not None and not self._bus_refresh.done():
            # A burst of events shares one running refresh plus at most one follow-up.
            self._refresh_again = True
            return
        self._bus_refresh = loop.create_task(self._refresh_for_bus())

    async def _refresh_for_bus(self) -> None:
        self._refresh_again = True
        while self._refresh_again:
            self._refresh_again = False
            await self.refresh()
