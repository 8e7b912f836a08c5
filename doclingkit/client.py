"""Asynchronous HTTP client for a Docling Serve instance."""

from __future__ import annotations

import asyncio
import time
from datetime import timedelta
from typing import Any, Iterable, Optional, Union

import httpx

from .enums import TargetName
from .errors import ApiError, DecodeError, HttpError, TaskFailedError, TaskTimeoutError
from .multipart import PathLike, _format_float, build_form_fields, read_file_parts
from .request_types import (
    ConvertDocumentsRequest,
    ConvertDocumentsRequestOptions,
    HttpSource,
)
from .response_types import (
    ConvertDocumentResponse,
    HealthCheckResponse,
    TaskStatusResponse,
)

Timeout = Union[float, timedelta]

_DEFAULT_POLL_WAIT = 5.0


def _seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class DoclingClient:
    """Async client for the Docling Serve conversion API."""

    def __init__(self, base_url: str, api_key: Optional[str] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._http = httpx.AsyncClient(timeout=None, follow_redirects=True)

    @classmethod
    def with_api_key(cls, base_url: str, api_key: str) -> "DoclingClient":
        """Create a client that sends ``Authorization: Bearer <key>`` to secured endpoints."""
        return cls(base_url, api_key)

    def url(self, path: str) -> str:
        """Return the full URL for an API path."""
        return f"{self.base_url}{path}"

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> "DoclingClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        if self.api_key is None:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _request(self, method: str, url: str, *, secured: bool = True, **kwargs: Any) -> Any:
        """Send a request, raise on failure, and return the decoded JSON body."""
        headers = self._auth_headers() if secured else {}
        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HttpError(str(exc)) from exc
        if not response.is_success:
            raise ApiError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc

    async def _build_multipart(
        self,
        file_paths: Iterable[PathLike],
        options: Optional[ConvertDocumentsRequestOptions],
        target_type: Optional[TargetName],
    ) -> dict[str, Any]:
        files = await asyncio.to_thread(read_file_parts, list(file_paths))
        data: dict[str, list[str]] = {}
        for name, value in build_form_fields(options, target_type):
            data.setdefault(name, []).append(value)
        return {"files": files, "data": data}

    async def _poll_until_complete(
        self,
        task_id: str,
        timeout: Timeout,
        poll_interval_secs: Optional[float],
    ) -> ConvertDocumentResponse:
        poll_wait = _DEFAULT_POLL_WAIT if poll_interval_secs is None else poll_interval_secs
        limit = _seconds(timeout)
        start = time.monotonic()
        while True:
            elapsed = time.monotonic() - start
            if elapsed > limit:
                raise TaskTimeoutError(task_id, elapsed)
            status = await self.poll_task_status(task_id, poll_wait)
            if status.task_status == "SUCCESS":
                return await self.get_task_result(task_id)
            if status.task_status == "FAILURE":
                raise TaskFailedError(task_id, "FAILURE")

    @staticmethod
    def _url_request(
        url: str, options: Optional[ConvertDocumentsRequestOptions]
    ) -> ConvertDocumentsRequest:
        return ConvertDocumentsRequest(sources=[HttpSource(url=url)], options=options)

    # ------------------------------------------------------------------
    # Health and version
    # ------------------------------------------------------------------

    async def health(self) -> HealthCheckResponse:
        """Check that the server is up (``GET /health``)."""
        body = await self._request("GET", self.url("/health"), secured=False)
        return HealthCheckResponse.from_dict(body)

    async def version(self) -> dict[str, Any]:
        """Return server and component versions (``GET /version``)."""
        body = await self._request("GET", self.url("/version"), secured=False)
        if not isinstance(body, dict):
            raise DecodeError(f"expected an object for version, got {type(body).__name__}")
        return body

    # ------------------------------------------------------------------
    # URL conversion
    # ------------------------------------------------------------------

    async def convert_source(
        self, url: str, options: Optional[ConvertDocumentsRequestOptions] = None
    ) -> ConvertDocumentResponse:
        """Convert a document fetched from a URL and wait for the result."""
        return await self.convert(self._url_request(url, options))

    async def convert(self, request: ConvertDocumentsRequest) -> ConvertDocumentResponse:
        """Convert documents described by a full request body."""
        body = await self._request(
            "POST", self.url("/v1/convert/source"), json=request.to_dict()
        )
        return ConvertDocumentResponse.from_dict(body)

    async def convert_source_async(
        self, url: str, options: Optional[ConvertDocumentsRequestOptions] = None
    ) -> TaskStatusResponse:
        """Submit a URL for background conversion and return the new task."""
        return await self.convert_async(self._url_request(url, options))

    async def convert_async(self, request: ConvertDocumentsRequest) -> TaskStatusResponse:
        """Submit a full request body for background conversion."""
        body = await self._request(
            "POST", self.url("/v1/convert/source/async"), json=request.to_dict()
        )
        return TaskStatusResponse.from_dict(body)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def poll_task_status(
        self, task_id: str, wait_secs: Optional[float] = None
    ) -> TaskStatusResponse:
        """Fetch a task's status, long-polling up to ``wait_secs`` when given."""
        url = self.url(f"/v1/status/poll/{task_id}")
        if wait_secs is not None:
            url = f"{url}?wait={_format_float(wait_secs)}"
        body = await self._request("GET", url)
        return TaskStatusResponse.from_dict(body)

    async def get_task_result(self, task_id: str) -> ConvertDocumentResponse:
        """Fetch the result of a finished task."""
        body = await self._request("GET", self.url(f"/v1/result/{task_id}"))
        return ConvertDocumentResponse.from_dict(body)

    async def wait_for_conversion(
        self,
        url: str,
        options: Optional[ConvertDocumentsRequestOptions] = None,
        timeout: Timeout = 300.0,
        poll_interval_secs: Optional[float] = None,
    ) -> ConvertDocumentResponse:
        """Submit a URL for background conversion and wait until it finishes."""
        task = await self.convert_source_async(url, options)
        return await self._poll_until_complete(task.task_id, timeout, poll_interval_secs)

    # ------------------------------------------------------------------
    # File upload
    # ------------------------------------------------------------------

    async def convert_file(
        self,
        file_paths: Iterable[PathLike],
        options: Optional[ConvertDocumentsRequestOptions] = None,
        target_type: Optional[TargetName] = None,
    ) -> ConvertDocumentResponse:
        """Upload local files and wait for their conversion."""
        payload = await self._build_multipart(file_paths, options, target_type)
        body = await self._request("POST", self.url("/v1/convert/file"), **payload)
        return ConvertDocumentResponse.from_dict(body)

    async def convert_file_async(
        self,
        file_paths: Iterable[PathLike],
        options: Optional[ConvertDocumentsRequestOptions] = None,
        target_type: Optional[TargetName] = None,
    ) -> TaskStatusResponse:
        """Upload local files for background conversion and return the new task."""
        payload = await self._build_multipart(file_paths, options, target_type)
        body = await self._request("POST", self.url("/v1/convert/file/async"), **payload)
        return TaskStatusResponse.from_dict(body)

    async def wait_for_file_conversion(
        self,
        file_paths: Iterable[PathLike],
        options: Optional[ConvertDocumentsRequestOptions] = None,
        target_type: Optional[TargetName] = None,
        timeout: Timeout = 300.0,
        poll_interval_secs: Optional[float] = None,
    ) -> ConvertDocumentResponse:
        """Upload local files for background conversion and wait until it finishes."""
        task = await self.convert_file_async(file_paths, options, target_type)
        return await self._poll_until_complete(task.task_id, timeout, poll_interval_secs)