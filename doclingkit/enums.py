"""Enumerations used by the Docling Serve API, with their wire values."""

from __future__ import annotations

from enum import Enum


class _WireEnum(str, Enum):
    """String enum whose text form is its wire value."""

    def __str__(self) -> str:
        return self.value


class InputFormat(_WireEnum):
    """A document format supported by document backend parsers."""

    DOCX = "docx"
    PPTX = "pptx"
    HTML = "html"
    IMAGE = "image"
    PDF = "pdf"
    ASCIIDOC = "asciidoc"
    MD = "md"
    CSV = "csv"
    XLSX = "xlsx"
    XML_USPTO = "xml_uspto"
    XML_JATS = "xml_jats"
    METS_GBS = "mets_gbs"
    JSON_DOCLING = "json_docling"
    AUDIO = "audio"
    VTT = "vtt"


class OutputFormat(_WireEnum):
    """Output format for document conversion."""

    MD = "md"
    JSON = "json"
    YAML = "yaml"
    HTML = "html"
    HTML_SPLIT_PAGE = "html_split_page"
    TEXT = "text"
    DOCTAGS = "doctags"


class ImageRefMode(_WireEnum):
    """Image export mode for the document."""

    PLACEHOLDER = "placeholder"
    EMBEDDED = "embedded"
    REFERENCED = "referenced"


class TableFormerMode(_WireEnum):
    """Table structure extraction mode."""

    FAST = "fast"
    ACCURATE = "accurate"


class PdfBackend(_WireEnum):
    """Available PDF parsing backends."""

    PYPDFIUM2 = "pypdfium2"
    DLPARSE_V1 = "dlparse_v1"
    DLPARSE_V2 = "dlparse_v2"
    DLPARSE_V4 = "dlparse_v4"


class ProcessingPipeline(_WireEnum):
    """Available document processing pipeline types."""

    LEGACY = "legacy"
    STANDARD = "standard"
    VLM = "vlm"
    ASR = "asr"


class OcrEngine(_WireEnum):
    """OCR engine options."""

    AUTO = "auto"
    EASYOCR = "easyocr"
    OCRMAC = "ocrmac"
    RAPIDOCR = "rapidocr"
    TESSEROCR = "tesserocr"
    TESSERACT = "tesseract"


class ConversionStatus(_WireEnum):
    """Status of a document conversion."""

    PENDING = "pending"
    STARTED = "started"
    FAILURE = "failure"
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    SKIPPED = "skipped"


class DoclingComponentType(_WireEnum):
    """Component that reported a conversion error."""

    DOCUMENT_BACKEND = "document_backend"
    MODEL = "model"
    DOC_ASSEMBLER = "doc_assembler"
    USER_INPUT = "user_input"
    PIPELINE = "pipeline"


class ProfilingScope(_WireEnum):
    """Scope of a profiling entry."""

    PAGE = "page"
    DOCUMENT = "document"


class TaskType(_WireEnum):
    """Kind of asynchronous task."""

    CONVERT = "convert"
    CHUNK = "chunk"


class VlmModelType(_WireEnum):
    """VLM model presets."""

    SMOLDOCLING = "smoldocling"
    SMOLDOCLING_VLLM = "smoldocling_vllm"
    GRANITE_VISION = "granite_vision"
    GRANITE_VISION_VLLM = "granite_vision_vllm"
    GRANITE_VISION_OLLAMA = "granite_vision_ollama"
    GOT_OCR_2 = "got_ocr_2"
    GRANITE_DOCLING = "granite_docling"
    GRANITE_DOCLING_VLLM = "granite_docling_vllm"
    DEEPSEEKOCR_OLLAMA = "deepseekocr_ollama"


class TargetName(_WireEnum):
    """Target type sent as a plain form field in multipart uploads."""

    INBODY = "inbody"
    ZIP = "zip"

    @classmethod
    def default(cls) -> "TargetName":
        """Return the target used when none is given (in-body)."""
        return cls.INBODY