import asyncio
import logging
from typing import Callable, Any, Coroutine, Optional
from uuid import UUID

from worker_sdk.callbacks import LifecycleCallbacks
from worker_sdk.client import WorkerClient

logger = logging.getLogger(__name__)

Handler = Callable[[dict], Coroutine[Any, Any, dict]]

# job_status the orchestrator answers with when a failed job goes back to the queue
RETRY_PENDING = "pending"

class Worker:
    """
    Polls for jobs, runs the handler and reports the outcome, firing the
    lifecycle callbacks around each attempt.
    """

    def __init__(
        self,
        base_url: str,
        worker_id: str,
        handler: Handler,
        tenant_id: Optional[str] = None,
        callbacks: Optional[LifecycleCallbacks] = None,
        client: Optional[WorkerClient] = None,
        idle_interval: float = 1.0,
    ):
        self.client = client or WorkerClient(base_url, worker_id, tenant_id=tenant_id)
        self.handler = handler
        self.callbacks = callbacks or LifecycleCallbacks()
        self.idle_interval = idle_interval
        self.running = False
        self._shutdown_event = asyncio.Event()

    async def run(self):
        self.running = True
        self._shutdown_event.clear()
        logger.info("Worker %s started", self.client.worker_id)

        try:
            while self.running:
                job_data = await self.client.poll()
                if job_data:
                    await self.process_job(job_data)
                    continue

                try:
                    await asyncio.wait_for(self._shutdown_event.wait(), timeout=self.idle_interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self.client.close()
            logger.info("Worker stopped")

    def stop(self):
        self.running = False
        self._shutdown_event.set()

    async def process_job(self, job_data: dict):
        try:
            job = job_data['job']
            job_id = UUID(job['id'])
            lease_token = UUID(job_data['lease_token'])
            payload = job['payload']
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Received malformed job payload: %s", e)
            return

        logger.info("Processing Job %s", job_id)
        await self.callbacks.dispatch("on_start", payload)

        try:
            result = await self.handler(payload)
        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            logger.error("Job %s failed: %s", job_id, error_msg)
            await self._report_failure(job_id, lease_token, payload, error_msg)
            return

        if await self.client.complete(job_id, lease_token, result):
            logger.info("Job %s completed", job_id)
            await self.callbacks.dispatch("on_completion", payload)
        else:
            logger.error("Job %s handler succeeded but completion ACK failed", job_id)

    async def _report_failure(self, job_id: UUID, lease_token: UUID, payload: dict, error: str):
        reply = await self.client.fail(job_id, lease_token, error)
        if reply is None:
            logger.error("Failed to report failure for job %s", job_id)
        elif reply.get("job_status") == RETRY_PENDING:
            # on_retry snapshots the attempt, so it has to see it before on_failure stamps it
            await self.callbacks.dispatch("on_retry", payload, error)

        await self.callbacks.dispatch("on_failure", payload, error)
