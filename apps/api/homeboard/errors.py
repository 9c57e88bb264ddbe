from __future__ import annotations

import uuid


class HomeboardError(Exception):
    code = "homeboard_error"
    retryable = False

    def __init__(self, message: str, *, error_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_id = error_id or str(uuid.uuid4())

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message, "error_id": self.error_id}


class ValidationError(HomeboardError):
    """Dashboard data is not JSON round-trippable; raised before any write."""

    code = "validation_error"


class NotFoundError(HomeboardError):
    code = "not_found"


class ConflictError(HomeboardError):
    code = "conflict"


class CorruptSnapshotError(HomeboardError):
    """A stored version exists but its data cannot be parsed."""

    code = "corrupt_snapshot"


class TransactionFailure(HomeboardError):
    """The atomic write was rolled back; the live document is unchanged."""

    code = "transaction_failure"
    retryable = True
