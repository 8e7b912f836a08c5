import json

import pytest

from doclingkit.enums import OcrEngine, OutputFormat, PdfBackend
from doclingkit.errors import DecodeError
from doclingkit.request_types import (
    ConvertDocumentsRequest,
    ConvertDocumentsRequestOptions,
    FileSource,
    HttpSource,
    Target,
    source_from_dict,
)


def test_source_http_serialization():
    data = HttpSource(url="https://example.com/doc.pdf").to_dict()
    assert data["kind"] == "http"
    assert data["url"] == "https://example.com/doc.pdf"
    assert "headers" not in data


def test_source_http_with_headers_round_trip():
    source = HttpSource(
        url="https://example.com/doc.pdf",
        headers={"Authorization": "Bearer token"},
    )
    decoded = source_from_dict(json.loads(json.dumps(source.to_dict())))
    assert isinstance(decoded, HttpSource)
    assert decoded.url == "https://example.com/doc.pdf"
    assert decoded.headers["Authorization"] == "Bearer token"


def test_source_file_serialization():
    data = FileSource(base64_string="SGVsbG8gV29ybGQ=", filename="test.pdf").to_dict()
    assert data["kind"] == "file"
    assert data["base64_string"] == "SGVsbG8gV29ybGQ="
    assert data["filename"] == "test.pdf"


def test_source_file_round_trip():
    source = FileSource(base64_string="SGVsbG8gV29ybGQ=", filename="test.pdf")
    assert source_from_dict(source.to_dict()) == source


def test_source_deserialize_from_tagged_json():
    source = source_from_dict({"kind": "http", "url": "https://arxiv.org/pdf/2206.01062"})
    assert source == HttpSource(url="https://arxiv.org/pdf/2206.01062", headers=None)


def test_source_unknown_kind_is_rejected():
    with pytest.raises(DecodeError):
        source_from_dict({"kind": "s3", "url": "https://example.com/doc.pdf"})


def test_source_missing_url_is_rejected():
    with pytest.raises(DecodeError):
        source_from_dict({"kind": "http"})


def test_target_inbody_serialization():
    assert Target.INBODY.to_dict() == {"kind": "inbody"}


def test_target_zip_serialization():
    assert Target.ZIP.to_dict() == {"kind": "zip"}


def test_target_default_is_inbody():
    assert Target.default().to_dict()["kind"] == "inbody"


def test_target_round_trip():
    assert Target.from_dict(json.loads('{"kind":"zip"}')) is Target.ZIP


def test_target_unknown_kind_is_rejected():
    with pytest.raises(DecodeError):
        Target.from_dict({"kind": "s3"})


def test_options_default_serializes_to_empty_object():
    assert ConvertDocumentsRequestOptions().to_dict() == {}


def test_options_with_some_fields_set():
    opts = ConvertDocumentsRequestOptions(
        to_formats=[OutputFormat.MD, OutputFormat.TEXT],
        do_ocr=True,
        ocr_engine=OcrEngine.EASYOCR,
    )
    data = opts.to_dict()
    assert data["to_formats"] == ["md", "text"]
    assert data["do_ocr"] is True
    assert data["ocr_engine"] == "easyocr"
    assert "from_formats" not in data
    assert "force_ocr" not in data
    assert "pdf_backend" not in data


def test_options_page_range_serializes_as_array():
    data = ConvertDocumentsRequestOptions(page_range=(1, 5)).to_dict()
    assert data["page_range"] == [1, 5]


def test_options_page_range_round_trip_large_value():
    opts = ConvertDocumentsRequestOptions.from_dict({"page_range": [1, 9223372036854775807]})
    assert opts.page_range == (1, 9223372036854775807)


def test_options_page_range_beyond_i64_is_rejected():
    with pytest.raises(DecodeError):
        ConvertDocumentsRequestOptions.from_dict({"page_range": [1, 9223372036854775808]})


def test_options_round_trip_through_json():
    opts = ConvertDocumentsRequestOptions(
        to_formats=[OutputFormat.MD, OutputFormat.JSON],
        pdf_backend=PdfBackend.DLPARSE_V4,
        ocr_lang=["en", "de"],
        images_scale=2.0,
        md_page_break_placeholder="<!-- page -->",
        picture_description_api={"url": "http://localhost:8000", "params": {}},
    )
    decoded = ConvertDocumentsRequestOptions.from_dict(json.loads(json.dumps(opts.to_dict())))
    assert decoded == opts


def test_options_unknown_enum_value_is_rejected():
    with pytest.raises(DecodeError):
        ConvertDocumentsRequestOptions.from_dict({"ocr_engine": "nope"})


def test_options_wrong_type_is_rejected():
    with pytest.raises(DecodeError):
        ConvertDocumentsRequestOptions.from_dict({"do_ocr": "yes"})


def test_full_request_serialization():
    request = ConvertDocumentsRequest(
        sources=[HttpSource(url="https://example.com/doc.pdf")],
        options=ConvertDocumentsRequestOptions(to_formats=[OutputFormat.MD]),
        target=None,
    )
    data = request.to_dict()
    assert data["sources"][0]["kind"] == "http"
    assert data["sources"][0]["url"] == "https://example.com/doc.pdf"
    assert data["options"]["to_formats"] == ["md"]
    assert "target" not in data


def test_request_with_target_zip():
    request = ConvertDocumentsRequest(
        sources=[HttpSource(url="https://example.com/doc.pdf")],
        options=None,
        target=Target.ZIP,
    )
    data = request.to_dict()
    assert data["target"]["kind"] == "zip"
    assert "options" not in data


def test_request_empty_sources():
    assert ConvertDocumentsRequest(sources=[]).to_dict()["sources"] == []


def test_request_round_trip():
    request = ConvertDocumentsRequest(
        sources=[
            HttpSource(url="https://example.com/doc.pdf"),
            FileSource(base64_string="SGVsbG8gV29ybGQ=", filename="test.pdf"),
        ],
        options=ConvertDocumentsRequestOptions(do_ocr=False),
        target=Target.INBODY,
    )
    assert ConvertDocumentsRequest.from_dict(request.to_dict()) == request


def test_request_missing_sources_is_rejected():
    with pytest.raises(DecodeError):
        ConvertDocumentsRequest.from_dict({"options": {}})