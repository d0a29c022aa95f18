import logging
import warnings
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from process_status.api.v1.metrics import STATUS_READS, STATUS_WRITES, STATUS_WRITE_FAILURES
from process_status.domain.errors import CorruptStatusWarning, DeserializationError, StoreUnavailableError
from process_status.domain.models import RetryAttempt, StatusDocument
from process_status.domain.states import LifecycleEvent, ProcessStatus
from process_status.store.redis_store import StatusStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class LifecycleTracker:
    """
    Records lifecycle events of a process into its status document.

    Every operation reads the current document, merges the event's fields
    into it and writes the result back with a refreshed expiry. Callers are
    expected to fire events in lifecycle order:

        enqueue -> start -> (retry)* -> failure | completion

    The order is not validated here.
    """

    def __init__(self, store: StatusStore, clock: Optional[Clock] = None, ttl: Optional[int] = None):
        self.store = store
        self.clock = clock or utc_now
        self.ttl = ttl

    def _now(self) -> str:
        return self.clock().isoformat()

    async def describe(self, identity: str) -> Optional[StatusDocument]:
        """
        Current status document for a process, or None if unknown/expired.

        An undecodable stored value is reported with a CorruptStatusWarning and
        treated as absent, so the next write starts from an empty document.
        StoreUnavailableError propagates.
        """
        try:
            document = await self.store.get(identity)
        except DeserializationError as e:
            STATUS_READS.labels(result="corrupt").inc()
            logger.warning("Treating status of process %s as absent: %s", identity, e)
            warnings.warn(str(e), CorruptStatusWarning, stacklevel=2)
            return None

        STATUS_READS.labels(result="hit" if document is not None else "miss").inc()
        return document

    async def _update(
        self,
        identity: str,
        event: LifecycleEvent,
        change: Callable[[StatusDocument], StatusDocument],
    ) -> StatusDocument:
        try:
            base = await self.describe(identity) or StatusDocument()
            document = change(base)
            await self.store.set(identity, document, self.ttl)
        except StoreUnavailableError as e:
            STATUS_WRITE_FAILURES.labels(event=event, error=type(e).__name__).inc()
            logger.error("Could not record %s for process %s: %s", event, identity, e)
            raise

        STATUS_WRITES.labels(event=event).inc()
        logger.debug("Process %s: %s -> %s", identity, event, document.get("status"))
        return document

    async def _set_status(self, identity: str, event: LifecycleEvent, **fields: Any) -> StatusDocument:
        return await self._update(identity, event, lambda base: base.merged(**fields))

    async def track_enqueue(self, identity: str, payload: Mapping[str, Any], job_class: str) -> StatusDocument:
        return await self._set_status(
            identity,
            LifecycleEvent.ENQUEUED,
            vars=dict(payload),
            job_class=job_class,
            created_at=self._now(),
            status=ProcessStatus.QUEUED,
        )

    async def track_start(self, identity: str) -> StatusDocument:
        return await self._set_status(
            identity,
            LifecycleEvent.STARTED,
            started_at=self._now(),
            status=ProcessStatus.WORKING,
        )

    async def track_retry(self, identity: str) -> StatusDocument:
        """
        Appends a retry record snapshotting the attempt's created_at/started_at.

        Must run before track_failure for the same attempt; status is unchanged.
        """
        failed_at = self._now()
        return await self._update(
            identity,
            LifecycleEvent.RETRIED,
            lambda base: base.with_retry(RetryAttempt.snapshot(base, failed_at)),
        )

    async def track_failure(self, identity: str) -> StatusDocument:
        return await self._set_status(
            identity,
            LifecycleEvent.FAILED,
            failed_at=self._now(),
            status=ProcessStatus.FAILED,
        )

    async def track_completion(self, identity: str) -> StatusDocument:
        return await self._set_status(
            identity,
            LifecycleEvent.COMPLETED,
            stopped_at=self._now(),
            status=ProcessStatus.COMPLETED,
        )
