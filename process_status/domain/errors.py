class StatusTrackingError(Exception):
    """Base exception for process status tracking errors."""
    pass

class MissingIdentityError(StatusTrackingError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Lifecycle payload has no '{field}' field")

class StoreUnavailableError(StatusTrackingError):
    def __init__(self, operation: str, key: str, reason: str):
        self.operation = operation
        self.key = key
        super().__init__(f"Status store {operation} failed for {key}: {reason}")

class DeserializationError(StatusTrackingError):
    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Stored status at {key} is not a valid document: {reason}")

class CorruptStatusWarning(UserWarning):
    """A stored status document could not be decoded and was treated as absent."""
