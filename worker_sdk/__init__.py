from .callbacks import LifecycleCallbacks
from .client import WorkerClient
from .producer import JobProducer
from .worker import Handler, Worker

__all__ = [
    "Handler",
    "JobProducer",
    "LifecycleCallbacks",
    "Worker",
    "WorkerClient",
]
