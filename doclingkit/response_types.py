"""Response payloads returned by the Docling Serve endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .enums import ConversionStatus, DoclingComponentType, ProfilingScope, TaskType
from .errors import DecodeError
from .request_types import (
    _as_any,
    _as_float,
    _as_int,
    _as_str,
    _enum_decoder,
    _list_of,
    _require_key,
    _require_mapping,
)

_decode_component = _enum_decoder(DoclingComponentType)
_decode_scope = _enum_decoder(ProfilingScope)
_decode_status = _enum_decoder(ConversionStatus)
_decode_task_type = _enum_decoder(TaskType)


def _required(data: Mapping, key: str, what: str, decode: Callable[[Any, str], Any]) -> Any:
    return decode(_require_key(data, key, what), key)


def _optional(data: Mapping, key: str, decode: Callable[[Any, str], Any]) -> Any:
    """Missing keys and nulls both decode to ``None``."""
    value = data.get(key)
    return None if value is None else decode(value, key)


def _defaulted(
    data: Mapping,
    key: str,
    decode: Callable[[Any, str], Any],
    default: Callable[[], Any],
) -> Any:
    """A missing key takes the default; a present value must decode."""
    if key not in data:
        return default()
    return decode(data[key], key)


@dataclass
class ExportDocumentResponse:
    """The converted document in each requested format."""

    filename: str
    md_content: Optional[str] = None
    json_content: Optional[Any] = None
    html_content: Optional[str] = None
    text_content: Optional[str] = None
    doctags_content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ExportDocumentResponse":
        """Decode a document object."""
        data = _require_mapping(data, "document")
        return cls(
            filename=_required(data, "filename", "document", _as_str),
            md_content=_optional(data, "md_content", _as_str),
            json_content=_optional(data, "json_content", _as_any),
            html_content=_optional(data, "html_content", _as_str),
            text_content=_optional(data, "text_content", _as_str),
            doctags_content=_optional(data, "doctags_content", _as_str),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "filename": self.filename,
            "md_content": self.md_content,
            "json_content": self.json_content,
            "html_content": self.html_content,
            "text_content": self.text_content,
            "doctags_content": self.doctags_content,
        }


@dataclass
class ErrorItem:
    """An error reported by one component during conversion."""

    component_type: DoclingComponentType
    module_name: str
    error_message: str

    @classmethod
    def from_dict(cls, data: Any) -> "ErrorItem":
        """Decode an error entry."""
        data = _require_mapping(data, "error item")
        return cls(
            component_type=_required(data, "component_type", "error item", _decode_component),
            module_name=_required(data, "module_name", "error item", _as_str),
            error_message=_required(data, "error_message", "error item", _as_str),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "component_type": self.component_type.value,
            "module_name": self.module_name,
            "error_message": self.error_message,
        }


@dataclass
class ProfilingItem:
    """Timing information for one conversion step."""

    scope: ProfilingScope
    count: int = 0
    times: list[float] = field(default_factory=list)
    start_timestamps: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ProfilingItem":
        """Decode a profiling entry."""
        data = _require_mapping(data, "profiling item")
        return cls(
            scope=_required(data, "scope", "profiling item", _decode_scope),
            count=_defaulted(data, "count", _as_int, int),
            times=_defaulted(data, "times", _list_of(_as_float), list),
            start_timestamps=_defaulted(data, "start_timestamps", _list_of(_as_str), list),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "scope": self.scope.value,
            "count": self.count,
            "times": list(self.times),
            "start_timestamps": list(self.start_timestamps),
        }


def _timings(value: Any, name: str) -> dict[str, ProfilingItem]:
    value = _require_mapping(value, name)
    return {_as_str(key, name): ProfilingItem.from_dict(item) for key, item in value.items()}


@dataclass
class ConvertDocumentResponse:
    """Result of a conversion delivered in the response body."""

    document: ExportDocumentResponse
    status: ConversionStatus
    processing_time: float
    errors: list[ErrorItem] = field(default_factory=list)
    timings: dict[str, ProfilingItem] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "ConvertDocumentResponse":
        """Decode a conversion result."""
        data = _require_mapping(data, "conversion response")
        return cls(
            document=ExportDocumentResponse.from_dict(
                _require_key(data, "document", "conversion response")
            ),
            status=_required(data, "status", "conversion response", _decode_status),
            processing_time=_required(data, "processing_time", "conversion response", _as_float),
            errors=_defaulted(
                data,
                "errors",
                _list_of(lambda item, _name: ErrorItem.from_dict(item)),
                list,
            ),
            timings=_defaulted(data, "timings", _timings, dict),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "document": self.document.to_dict(),
            "status": self.status.value,
            "errors": [error.to_dict() for error in self.errors],
            "processing_time": self.processing_time,
            "timings": {name: item.to_dict() for name, item in self.timings.items()},
        }


@dataclass
class PresignedUrlConvertDocumentResponse:
    """Summary returned when results are delivered outside the body."""

    processing_time: float
    num_converted: int
    num_succeeded: int
    num_failed: int

    @classmethod
    def from_dict(cls, data: Any) -> "PresignedUrlConvertDocumentResponse":
        """Decode a delivery summary."""
        what = "presigned response"
        data = _require_mapping(data, what)
        return cls(
            processing_time=_required(data, "processing_time", what, _as_float),
            num_converted=_required(data, "num_converted", what, _as_int),
            num_succeeded=_required(data, "num_succeeded", what, _as_int),
            num_failed=_required(data, "num_failed", what, _as_int),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "processing_time": self.processing_time,
            "num_converted": self.num_converted,
            "num_succeeded": self.num_succeeded,
            "num_failed": self.num_failed,
        }


@dataclass
class TaskProcessingMeta:
    """Progress counters of an asynchronous task."""

    num_docs: int
    num_processed: int = 0
    num_succeeded: int = 0
    num_failed: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "TaskProcessingMeta":
        """Decode task progress."""
        data = _require_mapping(data, "task meta")
        return cls(
            num_docs=_required(data, "num_docs", "task meta", _as_int),
            num_processed=_defaulted(data, "num_processed", _as_int, int),
            num_succeeded=_defaulted(data, "num_succeeded", _as_int, int),
            num_failed=_defaulted(data, "num_failed", _as_int, int),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "num_docs": self.num_docs,
            "num_processed": self.num_processed,
            "num_succeeded": self.num_succeeded,
            "num_failed": self.num_failed,
        }


def _task_meta(value: Any, name: str) -> TaskProcessingMeta:
    return TaskProcessingMeta.from_dict(value)


@dataclass
class TaskStatusResponse:
    """State of an asynchronous task, from submission or polling."""

    task_id: str
    task_type: TaskType
    task_status: str
    task_position: Optional[int] = None
    task_meta: Optional[TaskProcessingMeta] = None

    @classmethod
    def from_dict(cls, data: Any) -> "TaskStatusResponse":
        """Decode a task status."""
        data = _require_mapping(data, "task status")
        return cls(
            task_id=_required(data, "task_id", "task status", _as_str),
            task_type=_required(data, "task_type", "task status", _decode_task_type),
            task_status=_required(data, "task_status", "task status", _as_str),
            task_position=_optional(data, "task_position", _as_int),
            task_meta=_optional(data, "task_meta", _task_meta),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "task_id": self.task_id,
            "task_type": self.task_type.value,
            "task_status": self.task_status,
            "task_position": self.task_position,
            "task_meta": None if self.task_meta is None else self.task_meta.to_dict(),
        }


@dataclass
class HealthCheckResponse:
    """Answer of the health endpoint."""

    status: str = "ok"

    @classmethod
    def from_dict(cls, data: Any) -> "HealthCheckResponse":
        """Decode a health answer; a missing status means ``ok``."""
        data = _require_mapping(data, "health response")
        return cls(status=_defaulted(data, "status", _as_str, lambda: "ok"))

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {"status": self.status}


@dataclass
class ValidationErrorDetail:
    """One validation failure reported by the server."""

    loc: list[Any]
    msg: str
    error_type: str

    @classmethod
    def from_dict(cls, data: Any) -> "ValidationErrorDetail":
        """Decode a validation detail; the wire key ``type`` maps to ``error_type``."""
        what = "validation error detail"
        data = _require_mapping(data, what)
        return cls(
            loc=_required(data, "loc", what, _list_of(_as_any)),
            msg=_required(data, "msg", what, _as_str),
            error_type=_required(data, "type", what, _as_str),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {"loc": list(self.loc), "msg": self.msg, "type": self.error_type}


@dataclass
class HttpValidationError:
    """Body of a validation failure (HTTP 422)."""

    detail: list[ValidationErrorDetail] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "HttpValidationError":
        """Decode a validation failure body."""
        data = _require_mapping(data, "validation error")
        return cls(
            detail=_defaulted(
                data,
                "detail",
                _list_of(lambda item, _name: ValidationErrorDetail.from_dict(item)),
                list,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {"detail": [item.to_dict() for item in self.detail]}


__all__ = [
    "ConvertDocumentResponse",
    "DecodeError",
    "ErrorItem",
    "ExportDocumentResponse",
    "HealthCheckResponse",
    "HttpValidationError",
    "PresignedUrlConvertDocumentResponse",
    "ProfilingItem",
    "TaskProcessingMeta",
    "TaskStatusResponse",
    "ValidationErrorDetail",
]