from enum import StrEnum, auto

class ProcessStatus(StrEnum):
    QUEUED = auto()     # Enqueued, waiting for a worker
    WORKING = auto()    # Worker has started execution
    FAILED = auto()     # Last attempt failed
    COMPLETED = auto()  # Finished successfully

class LifecycleEvent(StrEnum):
    ENQUEUED = auto()
    STARTED = auto()
    RETRIED = auto()
    FAILED = auto()
    COMPLETED = auto()
