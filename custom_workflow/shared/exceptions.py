"""Structured exception hierarchy for the custom workflow client."""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel


class ApiErrorBody(BaseModel):
    """Error body returned by the remote API on non-2xx responses"""
    message: str = ""
    errors: Dict[str, List[str]] = {}

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class WorkflowClientError(Exception):
    """Base exception for workflow client errors"""

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context
        super().__init__(message)


class ValidationFailed(WorkflowClientError):
    """Payload does not conform to the workflow schema.

    ``errors`` maps each offending field key to its ordered error messages.
    """

    def __init__(self, errors: Dict[str, List[str]], **context):
        self.errors = errors
        messages = [
            f"{field}: {error}"
            for field, field_errors in errors.items()
            for error in field_errors
        ]
        super().__init__("Validation failed: " + "; ".join(messages), **context)


class NotFound(WorkflowClientError):
    pass


class TransportError(WorkflowClientError):
    pass


class RemoteRejected(WorkflowClientError):
    """Remote API answered with a non-2xx status"""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[Dict[str, List[str]]] = None,
        **context
    ):
        self.status_code = status_code
        self.errors = errors or {}
        super().__init__(f"HTTP {status_code}: {message}", **context)


class MalformedResponse(WorkflowClientError):
    pass


class PollingTimeout(WorkflowClientError):
    pass
