import json
from dataclasses import dataclass, field
from typing import Optional, Any

from process_status.domain.errors import DeserializationError
from process_status.domain.states import ProcessStatus

@dataclass
class RetryAttempt:
    failed_at: str
    created_at: Optional[str] = None
    started_at: Optional[str] = None

    @classmethod
    def snapshot(cls, document: "StatusDocument", failed_at: str) -> "RetryAttempt":
        """
        Captures the enqueue/start timestamps known right now for the attempt
        that is about to be marked failed.
        """
        return cls(
            failed_at=failed_at,
            created_at=document.get("created_at"),
            started_at=document.get("started_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        # Timestamps the attempt never reached are left out, not nulled
        data: dict[str, Any] = {}
        if self.created_at is not None:
            data["created_at"] = self.created_at
        if self.started_at is not None:
            data["started_at"] = self.started_at
        data["failed_at"] = self.failed_at
        return data

@dataclass
class StatusDocument:
    """
    Cumulative known facts about one process.

    Every update is a shallow merge: incoming keys overwrite, everything else
    already stored (including fields this code does not know about) is kept.
    """
    fields: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __contains__(self, key: str) -> bool:
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    @property
    def status(self) -> Optional[ProcessStatus]:
        value = self.fields.get("status")
        try:
            return ProcessStatus(value) if value is not None else None
        except ValueError:
            return None

    @property
    def retries(self) -> list[dict[str, Any]]:
        # A foreign non-list value is not a retry history
        value = self.fields.get("retries")
        return list(value) if isinstance(value, list) else []

    def merged(self, **changes: Any) -> "StatusDocument":
        return StatusDocument({**self.fields, **changes})

    def with_retry(self, attempt: RetryAttempt) -> "StatusDocument":
        return self.merged(retries=[*self.retries, attempt.to_dict()])

    def to_dict(self) -> dict[str, Any]:
        return dict(self.fields)

    def to_json(self) -> str:
        return json.dumps(self.fields, separators=(",", ":"), default=str)

    @classmethod
    def from_json(cls, raw: str | bytes, source: str = "<unknown>") -> "StatusDocument":
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise DeserializationError(source, str(e)) from e

        if not isinstance(data, dict):
            raise DeserializationError(source, f"expected a JSON object, got {type(data).__name__}")

        return cls(data)
