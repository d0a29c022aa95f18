import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from process_status.domain.errors import StoreUnavailableError
from process_status.domain.models import StatusDocument
from process_status.settings import settings

logger = logging.getLogger(__name__)

KEY_TEMPLATE = "{namespace}:status:{identity}"

class StatusStore:
    """
    Thin accessor for status documents kept in Redis, one key per process.

    There is no partial-update primitive here: callers read, merge in memory
    and write the whole document back. Two writers racing on the same key can
    lose an update.
    """

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        namespace: str = settings.STATUS_NAMESPACE,
        ttl_seconds: int = settings.STATUS_TTL_SECONDS,
    ):
        self.client = client
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(
        cls,
        url: str = settings.REDIS_URL,
        socket_timeout: float = settings.REDIS_SOCKET_TIMEOUT,
        **kwargs: Any,
    ) -> "StatusStore":
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            decode_responses=True,
        )
        return cls(client, **kwargs)

    def key_for(self, identity: str) -> str:
        return KEY_TEMPLATE.format(namespace=self.namespace, identity=identity)

    async def get(self, identity: str) -> Optional[StatusDocument]:
        """
        Returns the stored document, or None if it was never written or has expired.
        Raises DeserializationError if the stored value is not a document.
        """
        key = self.key_for(identity)
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            raise StoreUnavailableError("get", key, str(e)) from e

        if raw is None:
            return None
        return StatusDocument.from_json(raw, source=key)

    async def set(self, identity: str, document: StatusDocument, ttl: Optional[int] = None) -> None:
        key = self.key_for(identity)
        expiry = ttl if ttl is not None else self.ttl_seconds
        try:
            await self.client.setex(key, expiry, document.to_json())
        except RedisError as e:
            raise StoreUnavailableError("set", key, str(e)) from e
        logger.debug("Stored status for %s (ttl=%ss)", key, expiry)

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.warning("Status store ping failed: %s", e)
            return False

    async def aclose(self) -> None:
        await self.client.aclose()
