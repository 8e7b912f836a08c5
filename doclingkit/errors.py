"""Exception hierarchy raised by the Docling Serve client."""

from __future__ import annotations


class DoclingError(Exception):
    """Base class for every error raised by this package."""


class _PrefixedError(DoclingError):
    """An error whose message is shown after a fixed category prefix."""

    prefix = "error"

    def __str__(self) -> str:
        detail = super().__str__()
        return f"{self.prefix}: {detail}"


class HttpError(_PrefixedError):
    """Network-level or HTTP transport failure (connection refused, DNS, ...)."""

    prefix = "http error"


class DecodeError(_PrefixedError, ValueError):
    """A response or payload could not be decoded into the expected shape."""

    prefix = "json deserialization error"


class FileReadError(_PrefixedError):
    """A local file could not be read for upload."""

    prefix = "io error"


class ApiError(DoclingError):
    """The server answered with a non-success HTTP status code."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"api error (HTTP {status_code}): {body}")


class TaskFailedError(DoclingError):
    """An asynchronous task ended in failure on the server."""

    def __init__(self, task_id: str, status: str) -> None:
        self.task_id = task_id
        self.status = status
        super().__init__(f"task {task_id} failed with status: {status}")


class TaskTimeoutError(DoclingError):
    """Waiting for an asynchronous task took longer than allowed."""

    def __init__(self, task_id: str, elapsed_secs: float) -> None:
        self.task_id = task_id
        self.elapsed_secs = elapsed_secs
        super().__init__(f"task {task_id} timed out after {elapsed_secs:.1f}s")