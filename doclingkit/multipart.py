"""Building blocks for multipart/form-data file uploads."""

from __future__ import annotations

import json
import math
import os
from decimal import Decimal
from enum import Enum
from pathlib import Path, PurePath
from typing import Any, Iterable, Optional, Union

from .enums import TargetName
from .errors import FileReadError
from .request_types import ConvertDocumentsRequestOptions

PathLike = Union[str, "os.PathLike[str]"]

_DEFAULT_MIME = "application/octet-stream"

_MIME_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "html": "text/html",
    "htm": "text/html",
    "md": "text/markdown",
    "csv": "text/csv",
    "json": "application/json",
    "xml": "application/xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "bmp": "image/bmp",
    "webp": "image/webp",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "vtt": "text/vtt",
}

_LIST_FIELDS = ("from_formats", "to_formats", "ocr_lang")
_ENUM_FIELDS = (
    "image_export_mode",
    "ocr_engine",
    "pdf_backend",
    "table_mode",
    "pipeline",
    "vlm_pipeline_model",
)
_BOOL_FIELDS = (
    "do_ocr",
    "force_ocr",
    "table_cell_matching",
    "abort_on_error",
    "do_table_structure",
    "include_images",
    "do_code_enrichment",
    "do_formula_enrichment",
    "do_picture_classification",
    "do_chart_extraction",
    "do_picture_description",
)
_FLOAT_FIELDS = ("document_timeout", "images_scale", "picture_description_area_threshold")
_STRING_FIELDS = ("md_page_break_placeholder",)
_JSON_FIELDS = (
    "picture_description_local",
    "picture_description_api",
    "vlm_pipeline_model_local",
    "vlm_pipeline_model_api",
)


def guess_mime_type(path: PathLike) -> str:
    """Guess a file's MIME type from its (case-sensitive) extension."""
    suffix = PurePath(path).suffix
    if not suffix:
        return _DEFAULT_MIME
    return _MIME_TYPES.get(suffix[1:], _DEFAULT_MIME)


def read_file_parts(file_paths: Iterable[PathLike]) -> list[tuple[str, tuple[str, bytes, str]]]:
    """Read each file and return ``("files", (filename, content, mime))`` parts in order."""
    parts = []
    for raw_path in file_paths:
        path = Path(raw_path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileReadError(str(exc)) from exc
        filename = path.name or "file"
        parts.append(("files", (filename, content, guess_mime_type(path))))
    return parts


def _wire(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _format_float(value: float) -> str:
    """Shortest round-trip decimal form, without exponent or trailing ``.0``."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _format_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def build_form_fields(
    options: Optional[ConvertDocumentsRequestOptions],
    target_type: Optional[TargetName],
) -> list[tuple[str, str]]:
    """Flatten the target and options into ordered text form fields.

    List values become repeated fields with the same name.
    """
    form: list[tuple[str, str]] = []
    if target_type is not None:
        form.append(("target_type", _wire(target_type)))
    if options is None:
        return form

    for name in _LIST_FIELDS:
        values = getattr(options, name)
        if values is not None:
            form.extend((name, _wire(item)) for item in values)
    if options.page_range is not None:
        start, end = options.page_range
        form.append(("page_range", str(int(start))))
        form.append(("page_range", str(int(end))))

    for name in _ENUM_FIELDS:
        value = getattr(options, name)
        if value is not None:
            form.append((name, _wire(value)))
    for name in _BOOL_FIELDS:
        value = getattr(options, name)
        if value is not None:
            form.append((name, _format_bool(value)))
    for name in _FLOAT_FIELDS:
        value = getattr(options, name)
        if value is not None:
            form.append((name, _format_float(value)))
    for name in _STRING_FIELDS:
        value = getattr(options, name)
        if value is not None:
            form.append((name, value))
    for name in _JSON_FIELDS:
        value = getattr(options, name)
        if value is not None:
            form.append((name, _format_json(value)))
    return form