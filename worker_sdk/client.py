import logging
from typing import Any, Dict, Optional
from uuid import UUID

import httpx

logger = logging.getLogger(__name__)

class WorkerClient:
    """
    Orchestrator calls a status-tracked worker needs: submit, poll and
    report the outcome of an attempt.
    """

    def __init__(self, base_url: str, worker_id: str, tenant_id: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.worker_id = worker_id
        self.tenant_id = tenant_id
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=10.0)

    def _headers(self, tenant_id: Optional[str]) -> Dict[str, str]:
        return {"X-Tenant-ID": tenant_id} if tenant_id else {}

    async def _report(self, job_id: UUID, outcome: str, body: Dict[str, Any]) -> httpx.Response:
        resp = await self.client.post(
            f"/api/v1/workers/{job_id}/{outcome}",
            json={"worker_id": self.worker_id, **body},
            headers=self._headers(self.tenant_id),
        )
        resp.raise_for_status()
        return resp

    async def enqueue(self, payload: Dict[str, Any], tenant_id: Optional[str] = None, **options: Any) -> Dict[str, Any]:
        """
        Submits a job. Raises httpx.HTTPError if the orchestrator rejects it;
        nothing should be tracked for a job that was never queued.
        """
        tid = tenant_id or self.tenant_id
        resp = await self.client.post(
            "/api/v1/jobs",
            json={"tenant_id": tid, "payload": payload, **options},
            headers=self._headers(tid),
        )
        resp.raise_for_status()
        return resp.json()

    async def poll(self) -> Optional[Dict[str, Any]]:
        body = {"worker_id": self.worker_id}
        if self.tenant_id:
            body["tenant_id"] = self.tenant_id

        try:
            resp = await self.client.post("/api/v1/workers/poll", json=body, headers=self._headers(self.tenant_id))
            resp.raise_for_status()
            return resp.json() or None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Poll failed for worker=%s tenant=%s: %s", self.worker_id, self.tenant_id, e)
            return None

    async def complete(self, job_id: UUID, lease_token: UUID, result: Dict[str, Any]) -> bool:
        try:
            await self._report(job_id, "complete", {"lease_token": str(lease_token), "result": result})
            return True
        except httpx.HTTPError as e:
            logger.warning("Complete failed for worker=%s job=%s: %s", self.worker_id, job_id, e)
            return False

    async def fail(self, job_id: UUID, lease_token: UUID, error: str) -> Optional[Dict[str, Any]]:
        """
        Reports a failed attempt. Returns the orchestrator's reply, whose
        job_status is "pending" when another attempt has been scheduled,
        or None if the report did not go through.
        """
        try:
            resp = await self._report(job_id, "fail", {"lease_token": str(lease_token), "error": error})
            return resp.json() or {}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Fail request failed for worker=%s job=%s: %s", self.worker_id, job_id, e)
            return None

    async def close(self):
        await self.client.aclose()
