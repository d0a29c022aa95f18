import asyncio
import logging
import os
import sys
import uuid

logging.basicConfig(level=logging.INFO)

sys.path.append(os.getcwd())

from process_status.settings import settings
from process_status.store.redis_store import StatusStore
from process_status.tracking.hooks import StatusHooks
from process_status.tracking.tracker import LifecycleTracker

async def verify_status_tracking():
    print(f"Connecting to {settings.REDIS_URL}...")
    store = StatusStore.from_url(settings.REDIS_URL)
    if not await store.ping():
        print("Redis is not reachable")
        sys.exit(1)

    tracker = LifecycleTracker(store)
    hooks = StatusHooks(tracker)

    process_id = f"verify-{uuid.uuid4()}"
    payload = {settings.IDENTITY_FIELD: process_id, "msg": "hello"}

    try:
        # 1. First attempt fails and is retried
        await hooks.on_enqueue(payload, "VerifyJob")
        await hooks.on_start(payload)
        await hooks.on_retry(payload, "RuntimeError: first attempt")
        await hooks.on_failure(payload, "RuntimeError: first attempt")

        doc = await tracker.describe(process_id)
        assert doc["status"] == "failed", doc
        assert len(doc.retries) == 1, doc
        print(f"After retry: {doc.to_json()}")

        # 2. Second attempt succeeds
        await hooks.on_enqueue(payload, "VerifyJob")
        await hooks.on_start(payload)
        await hooks.on_completion(payload)

        doc = await tracker.describe(process_id)
        assert doc["status"] == "completed", doc
        assert doc["vars"] == payload, doc
        assert len(doc.retries) == 1, doc
        print(f"After completion: {doc.to_json()}")

        ttl = await store.client.ttl(store.key_for(process_id))
        assert 0 < ttl <= settings.STATUS_TTL_SECONDS, ttl
        print(f"Key {store.key_for(process_id)} expires in {ttl}s")

        print("Status tracking verified.")
    finally:
        await store.client.delete(store.key_for(process_id))
        await store.aclose()

if __name__ == "__main__":
    try:
        asyncio.run(verify_status_tracking())
    except KeyboardInterrupt:
        pass
