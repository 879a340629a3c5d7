from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


class ChatflowError(Exception):
    """Base error. Subclasses set the HTTP status used by the API layer."""

    status_code: int = 500
    code: str = "chatflow_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "detail": self.message}


class TransientServiceError(ChatflowError):
    """Language-model service unavailable or returned unusable output."""

    status_code = 503
    code = "transient_service_error"


@dataclass
class SchemaIssue:
    path: str
    rule: str
    message: str
    field_index: Optional[int] = None
    field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SchemaValidationError(ChatflowError):
    status_code = 422
    code = "schema_validation_error"

    def __init__(self, issues: List[SchemaIssue]):
        self.issues = issues
        summary = "; ".join(f"{i.path}: {i.message}" for i in issues)
        super().__init__(f"Invalid chatflow schema: {summary}")

    @property
    def rules(self) -> List[str]:
        return [issue.rule for issue in self.issues]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["issues"] = [issue.to_dict() for issue in self.issues]
        return data


class UnknownFieldType(ChatflowError):
    status_code = 422
    code = "unknown_field_type"

    def __init__(self, field_type: Any):
        self.field_type = field_type
        super().__init__(f"Unknown field type: {field_type!r}")


class PersistenceError(ChatflowError):
    status_code = 503
    code = "persistence_error"


class NotFoundError(ChatflowError):
    status_code = 404
    code = "not_found"


class ChatflowNotReadyError(ChatflowError):
    """Publishing requires a non-empty, validated schema."""

    status_code = 409
    code = "chatflow_not_ready"


class ShareTokenExhaustedError(ChatflowError):
    code = "share_token_exhausted"


class SubmissionClosedError(ChatflowError):
    """Submission already reached a terminal status."""

    status_code = 409
    code = "submission_closed"


class InvalidAnswerError(ChatflowError):
    status_code = 422
    code = "invalid_answer"


class SessionCompletedError(ChatflowError):
    status_code = 409
    code = "session_completed"


class GenerationTimeoutError(ChatflowError):
    """Generation still running after the poller's last attempt."""

    status_code = 504
    code = "generation_timeout"


class GenerationFailedError(ChatflowError):
    status_code = 502
    code = "generation_failed"


class JobEnqueueError(ChatflowError):
    """The background job broker refused the generation job."""

    status_code = 503
    code = "job_enqueue_failed"
