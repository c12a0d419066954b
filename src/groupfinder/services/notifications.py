"""Webhook notification sent to the site owner when a community is submitted."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from groupfinder.models.submission import JoinType
from groupfinder.schemas.submission import Submission
from groupfinder.services.propagation import EVENT_SUBMITTED, BusEvent, PropagationBus

logger = logging.getLogger(__name__)


def build_payload(submission: Submission, public_base_url: str) -> dict[str, Any]:
    """Return the webhook body for a new submission."""
    payload: dict[str, Any] = {
        "subject": f"New community submission: {submission.community_name}",
        "submission_id": submission.id,
        "community_name": submission.community_name,
        "founder_name": submission.founder_name,
        "category": submission.category,
        "platform": submission.platform,
        "short_description": submission.short_description,
        "join_type": submission.join_type.value,
        "submitted_at": submission.created_at.isoformat(),
        "admin_link": f"{public_base_url.rstrip('/')}/api/v1/admin/submissions?status=pending",
    }
    if submission.join_type is JoinType.PAID:
        payload["price_inr"] = submission.price_inr
    else:
        payload["join_link"] = submission.join_link
    return payload


class SubmissionNotifier:
    """Posts a JSON message to a webhook for every ``submitted`` bus event.

    Delivery failures are logged and never affect the submission itself.
    """

    def __init__(
        self,
        webhook_url: str,
        *,
        public_base_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.public_base_url = public_base_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None
        self._pending: set[asyncio.Task[bool]] = set()
        self._unsubscribe: Any = None

    def attach(self, bus: PropagationBus) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = bus.subscribe(self._on_event)

    def _on_event(self, event: BusEvent) -> None:
        if event.type != EVENT_SUBMITTED or not isinstance(event.payload, Submission):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running loop; skipping notification for %s", event.submission_id)
            return
        task = loop.create_task(self.send(event.payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def send(self, submission: Submission) -> bool:
        """Deliver the notification; returns False if the webhook failed."""
        payload = build_payload(submission, self.public_base_url)
        try:
            response = await self._client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Submission %s notification failed: %s", submission.id, exc)
            return False
        logger.info("Notified webhook about submission %s", submission.id)
        return True

    async def drain(self) -> None:
        """Wait for notifications already scheduled."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.drain()
        if self._owns_client:
            await self._client.aclose()
