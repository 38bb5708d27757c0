"""Errors raised by the clean room and the assistant."""

from typing import Optional


class RejectionError(Exception):
    """Template id is not on the approved list. Policy violation, never retried."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Query template not approved: {template_id!r}")


class ExecutionError(Exception):
    """The aggregation engine failed on an approved template."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PersistenceError(Exception):
    """Writing an audit record or a result snapshot failed."""

    pass


class LLMError(Exception):
    """The chat completion endpoint failed or answered something unusable."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)
