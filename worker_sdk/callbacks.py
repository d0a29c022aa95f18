import logging
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Optional

logger = logging.getLogger(__name__)

Callback = Callable[..., Coroutine[Any, Any, Any]]

@dataclass
class LifecycleCallbacks:
    """
    Named hooks the worker SDK fires around a job's lifecycle.

        on_enqueue(payload, job_class)  after a job is submitted
        on_start(payload)               before the handler runs
        on_retry(payload, error)        the orchestrator scheduled another attempt
        on_failure(payload, error)      the handler raised (after on_retry, if any)
        on_completion(payload)          the handler succeeded and was acknowledged
    """
    on_enqueue: Optional[Callback] = None
    on_start: Optional[Callback] = None
    on_retry: Optional[Callback] = None
    on_failure: Optional[Callback] = None
    on_completion: Optional[Callback] = None

    async def dispatch(self, name: str, *args: Any) -> None:
        callback = getattr(self, name)
        if callback is None:
            return

        # Instrumentation must never take the job down with it
        try:
            await callback(*args)
        except Exception as e:
            logger.warning("Lifecycle callback %s failed: %s", name, e, exc_info=True)
