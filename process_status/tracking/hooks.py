import logging
from typing import Any, Mapping

from worker_sdk.callbacks import LifecycleCallbacks

from process_status.domain.errors import MissingIdentityError
from process_status.settings import settings
from process_status.tracking.tracker import LifecycleTracker

logger = logging.getLogger(__name__)

class StatusHooks:
    """
    Binds worker lifecycle events to a LifecycleTracker.

    Each hook pulls the process identity out of the job payload and fails
    with MissingIdentityError before touching the store if it is not there.
    """

    def __init__(self, tracker: LifecycleTracker, identity_field: str = settings.IDENTITY_FIELD):
        self.tracker = tracker
        self.identity_field = identity_field

    def identity_of(self, payload: Any) -> str:
        if not isinstance(payload, Mapping):
            raise MissingIdentityError(self.identity_field)

        value = payload.get(self.identity_field)
        if value is None or value == "":
            raise MissingIdentityError(self.identity_field)
        return str(value)

    async def on_enqueue(self, payload: Mapping[str, Any], job_class: str):
        await self.tracker.track_enqueue(self.identity_of(payload), payload, job_class)

    async def on_start(self, payload: Mapping[str, Any]):
        await self.tracker.track_start(self.identity_of(payload))

    async def on_retry(self, payload: Mapping[str, Any], error: str):
        identity = self.identity_of(payload)
        logger.info("Process %s will be retried after: %s", identity, error)
        await self.tracker.track_retry(identity)

    async def on_failure(self, payload: Mapping[str, Any], error: str):
        await self.tracker.track_failure(self.identity_of(payload))

    async def on_completion(self, payload: Mapping[str, Any]):
        await self.tracker.track_completion(self.identity_of(payload))

    def as_callbacks(self) -> LifecycleCallbacks:
        return LifecycleCallbacks(
            on_enqueue=self.on_enqueue,
            on_start=self.on_start,
            on_retry=self.on_retry,
            on_failure=self.on_failure,
            on_completion=self.on_completion,
        )
