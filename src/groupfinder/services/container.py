"""Construction of the service graph.

Components are built once per application (or CLI run) and passed to each
other explicitly; nothing here starts work at import time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from groupfinder.core.settings import Settings
from groupfinder.db.session import Base, SessionLocal
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.services.admin_actions import AdminActions
from groupfinder.services.authz import Authorizer
from groupfinder.services.lifecycle import LifecycleEngine
from groupfinder.services.notifications import SubmissionNotifier
from groupfinder.services.projection import LiveDirectoryProjection
from groupfinder.services.propagation import PropagationBus
from groupfinder.services.store import (
    InMemorySubmissionStore,
    SqlSubmissionStore,
    SubmissionStore,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """All long-lived services for one process."""

    store: SubmissionStore
    bus: PropagationBus
    repository: SubmissionRepository
    engine: LifecycleEngine
    projection: LiveDirectoryProjection
    authorizer: Authorizer
    admin: AdminActions
    notifier: SubmissionNotifier | None = None

    async def start(self) -> None:
        if self.notifier is not None:
            self.notifier.attach(self.bus)
        await self.projection.start()

    async def stop(self) -> None:
        await self.projection.stop()
        if self.notifier is not None:
            await self.notifier.close()
        await self.store.close()


def build_store(config: Settings) -> SubmissionStore:
    """Create the store selected by ``STORE_BACKEND``."""
    if config.store_backend == "memory":
        logger.warning("Using the in-memory submission store; data is not persisted")
        return InMemorySubmissionStore()

    store = SqlSubmissionStore(SessionLocal, Base.metadata)
    if config.auto_create_tables:
        store.create_schema()
    return store


def build_container(config: Settings, store: SubmissionStore | None = None) -> ServiceContainer:
    """Wire the services described by ``config``."""
    store = store if store is not None else build_store(config)
    bus = PropagationBus()
    repository = SubmissionRepository(
        store,
        read_timeout=config.store_read_timeout_seconds,
        write_timeout=config.store_write_timeout_seconds,
    )
    engine = LifecycleEngine(repository, bus)
    projection = LiveDirectoryProjection(
        repository,
        bus,
        poll_interval=config.directory_poll_interval_seconds,
        change_source=store if config.directory_use_change_feed else None,
    )
    authorizer = Authorizer(repository, config.admin_user_ids)
    notifier = None
    if config.webhook_enabled and config.submission_webhook_url:
        notifier = SubmissionNotifier(
            config.submission_webhook_url,
            public_base_url=config.public_base_url,
            timeout=config.submission_webhook_timeout_seconds,
        )
    return ServiceContainer(
        store=store,
        bus=bus,
        repository=repository,
        engine=engine,
        projection=projection,
        authorizer=authorizer,
        admin=AdminActions(engine, authorizer),
        notifier=notifier,
    )
