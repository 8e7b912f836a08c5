"""Request payloads for the Docling Serve conversion endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Optional, Union

from .enums import (
    ImageRefMode,
    InputFormat,
    OcrEngine,
    OutputFormat,
    PdfBackend,
    ProcessingPipeline,
    TableFormerMode,
    VlmModelType,
)
from .errors import DecodeError

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_Decoder = Callable[[Any, str], Any]


def _require_mapping(data: Any, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _require_key(data: Mapping, key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise DecodeError(f"missing field `{key}` in {what}") from None


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"`{name}` must be a string, got {type(value).__name__}")
    return value


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"`{name}` must be a boolean, got {type(value).__name__}")
    return value


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"`{name}` must be a number, got {type(value).__name__}")
    return float(value)


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"`{name}` must be an integer, got {type(value).__name__}")
    if not _I64_MIN <= value <= _I64_MAX:
        raise DecodeError(f"`{name}` is out of the 64-bit integer range")
    return value


def _as_any(value: Any, name: str) -> Any:
    return value


def _enum_decoder(enum_cls: type[Enum]) -> _Decoder:
    def decode(value: Any, name: str) -> Enum:
        try:
            return enum_cls(value)
        except ValueError:
            raise DecodeError(
                f"unknown {enum_cls.__name__} value {value!r} for `{name}`"
            ) from None

    return decode


def _list_of(item: _Decoder) -> _Decoder:
    def decode(value: Any, name: str) -> list:
        if not isinstance(value, list):
            raise DecodeError(f"`{name}` must be an array, got {type(value).__name__}")
        return [item(element, name) for element in value]

    return decode


def _page_range(value: Any, name: str) -> tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise DecodeError(f"`{name}` must be an array of two integers")
    start, end = value
    return (_as_int(start, name), _as_int(end, name))


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


@dataclass
class HttpSource:
    """Fetch the document from an HTTP URL."""

    url: str
    headers: Optional[dict[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting headers when unset."""
        data: dict[str, Any] = {"kind": "http", "url": self.url}
        if self.headers is not None:
            data["headers"] = dict(self.headers)
        return data


@dataclass
class FileSource:
    """Inline document given as base64-encoded content."""

    base64_string: str
    filename: str

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form."""
        return {
            "kind": "file",
            "base64_string": self.base64_string,
            "filename": self.filename,
        }


Source = Union[HttpSource, FileSource]


def source_from_dict(data: Any) -> Source:
    """Decode a source object tagged by its ``kind`` field."""
    data = _require_mapping(data, "source")
    kind = _require_key(data, "kind", "source")
    if kind == "http":
        url = _as_str(_require_key(data, "url", "http source"), "url")
        raw_headers = data.get("headers")
        headers = None
        if raw_headers is not None:
            raw_headers = _require_mapping(raw_headers, "headers")
            headers = {
                _as_str(key, "headers"): _as_str(value, "headers")
                for key, value in raw_headers.items()
            }
        return HttpSource(url=url, headers=headers)
    if kind == "file":
        return FileSource(
            base64_string=_as_str(
                _require_key(data, "base64_string", "file source"), "base64_string"
            ),
            filename=_as_str(_require_key(data, "filename", "file source"), "filename"),
        )
    raise DecodeError(f"unknown source kind {kind!r}")


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------


class Target(Enum):
    """Where the conversion result is delivered."""

    INBODY = "inbody"
    ZIP = "zip"

    def to_dict(self) -> dict[str, str]:
        """Return the wire form, tagged by ``kind``."""
        return {"kind": self.value}

    @classmethod
    def from_dict(cls, data: Any) -> "Target":
        """Decode a target object tagged by its ``kind`` field."""
        data = _require_mapping(data, "target")
        kind = _require_key(data, "kind", "target")
        try:
            return cls(kind)
        except ValueError:
            raise DecodeError(f"unknown target kind {kind!r}") from None

    @classmethod
    def default(cls) -> "Target":
        """Return the target used when none is given (in-body)."""
        return cls.INBODY


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass
class ConvertDocumentsRequestOptions:
    """Conversion options; every unset field is left to the server's default."""

    from_formats: Optional[list[InputFormat]] = None
    to_formats: Optional[list[OutputFormat]] = None
    image_export_mode: Optional[ImageRefMode] = None
    do_ocr: Optional[bool] = None
    force_ocr: Optional[bool] = None
    ocr_engine: Optional[OcrEngine] = None
    ocr_lang: Optional[list[str]] = None
    pdf_backend: Optional[PdfBackend] = None
    table_mode: Optional[TableFormerMode] = None
    table_cell_matching: Optional[bool] = None
    pipeline: Optional[ProcessingPipeline] = None
    page_range: Optional[tuple[int, int]] = None
    document_timeout: Optional[float] = None
    abort_on_error: Optional[bool] = None
    do_table_structure: Optional[bool] = None
    include_images: Optional[bool] = None
    images_scale: Optional[float] = None
    md_page_break_placeholder: Optional[str] = None
    do_code_enrichment: Optional[bool] = None
    do_formula_enrichment: Optional[bool] = None
    do_picture_classification: Optional[bool] = None
    do_chart_extraction: Optional[bool] = None
    do_picture_description: Optional[bool] = None
    picture_description_area_threshold: Optional[float] = None
    vlm_pipeline_model: Optional[VlmModelType] = None
    picture_description_local: Optional[Any] = None
    picture_description_api: Optional[Any] = None
    vlm_pipeline_model_local: Optional[Any] = None
    vlm_pipeline_model_api: Optional[Any] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form with unset fields left out."""
        return {
            f.name: _encode(value)
            for f in fields(self)
            if (value := getattr(self, f.name)) is not None
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ConvertDocumentsRequestOptions":
        """Decode options; unknown keys are ignored and nulls mean unset."""
        data = _require_mapping(data, "options")
        values = {
            name: decode(data[name], name)
            for name, decode in _OPTION_DECODERS.items()
            if data.get(name) is not None
        }
        return cls(**values)


_OPTION_DECODERS: dict[str, _Decoder] = {
    "from_formats": _list_of(_enum_decoder(InputFormat)),
    "to_formats": _list_of(_enum_decoder(OutputFormat)),
    "image_export_mode": _enum_decoder(ImageRefMode),
    "do_ocr": _as_bool,
    "force_ocr": _as_bool,
    "ocr_engine": _enum_decoder(OcrEngine),
    "ocr_lang": _list_of(_as_str),
    "pdf_backend": _enum_decoder(PdfBackend),
    "table_mode": _enum_decoder(TableFormerMode),
    "table_cell_matching": _as_bool,
    "pipeline": _enum_decoder(ProcessingPipeline),
    "page_range": _page_range,
    "document_timeout": _as_float,
    "abort_on_error": _as_bool,
    "do_table_structure": _as_bool,
    "include_images": _as_bool,
    "images_scale": _as_float,
    "md_page_break_placeholder": _as_str,
    "do_code_enrichment": _as_bool,
    "do_formula_enrichment": _as_bool,
    "do_picture_classification": _as_bool,
    "do_chart_extraction": _as_bool,
    "do_picture_description": _as_bool,
    "picture_description_area_threshold": _as_float,
    "vlm_pipeline_model": _enum_decoder(VlmModelType),
    "picture_description_local": _as_any,
    "picture_description_api": _as_any,
    "vlm_pipeline_model_local": _as_any,
    "vlm_pipeline_model_api": _as_any,
}


# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------


@dataclass
class ConvertDocumentsRequest:
    """Body of the source conversion endpoints."""

    sources: list[Source]
    options: Optional[ConvertDocumentsRequestOptions] = None
    target: Optional[Target] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting unset options and target."""
        data: dict[str, Any] = {"sources": [source.to_dict() for source in self.sources]}
        if self.options is not None:
            data["options"] = self.options.to_dict()
        if self.target is not None:
            data["target"] = self.target.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "ConvertDocumentsRequest":
        """Decode a full request body."""
        data = _require_mapping(data, "request")
        raw_sources = _require_key(data, "sources", "request")
        if not isinstance(raw_sources, list):
            raise DecodeError("`sources` must be an array")
        raw_options = data.get("options")
        raw_target = data.get("target")
        return cls(
            sources=[source_from_dict(item) for item in raw_sources],
            options=(
                None
                if raw_options is None
                else ConvertDocumentsRequestOptions.from_dict(raw_options)
            ),
            target=None if raw_target is None else Target.from_dict(raw_target),
        )