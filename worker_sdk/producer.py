import logging
from typing import Any, Dict, Optional

from worker_sdk.callbacks import LifecycleCallbacks
from worker_sdk.client import WorkerClient

logger = logging.getLogger(__name__)

class JobProducer:
    """Submits jobs and fires on_enqueue once the orchestrator has accepted them."""

    def __init__(self, client: WorkerClient, callbacks: Optional[LifecycleCallbacks] = None):
        self.client = client
        self.callbacks = callbacks or LifecycleCallbacks()

    async def enqueue(self, payload: Dict[str, Any], job_class: str, tenant_id: Optional[str] = None, **options: Any) -> Dict[str, Any]:
        job = await self.client.enqueue(payload, tenant_id=tenant_id, **options)
        logger.info("Enqueued %s as job %s", job_class, job.get("id"))
        await self.callbacks.dispatch("on_enqueue", payload, job_class)
        return job
