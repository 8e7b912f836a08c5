import json

import httpx
import pytest
import respx

from doclingkit.cli import build_parser, main

SERVER = "http://docling.test"


def convert_response_json(md="# Hello World\n\nThis is a test document."):
    return {
        "document": {
            "filename": "test.pdf",
            "md_content": md,
            "json_content": None,
            "html_content": None,
            "text_content": None,
            "doctags_content": None,
        },
        "status": "success",
        "errors": [],
        "processing_time": 1.234,
        "timings": {},
    }


def task_status_json(task_id, status):
    return {
        "task_id": task_id,
        "task_type": "convert",
        "task_status": status,
        "task_position": None,
        "task_meta": {
            "num_docs": 1,
            "num_processed": 1 if status == "SUCCESS" else 0,
            "num_succeeded": 1 if status == "SUCCESS" else 0,
            "num_failed": 1 if status == "FAILURE" else 0,
        },
    }


@pytest.fixture
def mock_server():
    with respx.mock(base_url=SERVER, assert_all_called=False) as router:
        yield router


def test_parser_defaults_for_convert_url():
    args = build_parser().parse_args(["convert-url", "https://example.com/doc.pdf"])
    assert args.server == "http://127.0.0.1:5001"
    assert args.url == "https://example.com/doc.pdf"
    assert args.to_formats is None
    assert args.do_ocr is None
    assert args.background is False
    assert args.timeout == 300.0
    assert args.poll_interval == 5.0
    assert args.preview == 500


def test_parser_rejects_unknown_output_format():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["convert-url", "https://example.com/doc.pdf", "--to", "pdf"])


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_health_prints_status_and_versions(mock_server, capsys):
    health = mock_server.get("/health").respond(json={"status": "ok"})
    mock_server.get("/version").respond(json={"version": "1.12.0", "docling": "2.31.0"})

    assert main(["--server", SERVER, "--api-key", "token", "health"]) == 0

    out = capsys.readouterr().out
    assert "Health status: ok" in out
    assert "  version: 1.12.0" in out
    assert "  docling: 2.31.0" in out
    assert "authorization" not in health.calls.last.request.headers


def test_health_server_error_exits_with_failure(mock_server, capsys):
    mock_server.get("/health").respond(500, text="Internal Server Error")

    assert main(["--server", SERVER, "health"]) == 1

    err = capsys.readouterr().err
    assert "api error (HTTP 500): Internal Server Error" in err


def test_convert_url_without_options_sends_plain_request(mock_server, capsys):
    route = mock_server.post("/v1/convert/source").respond(json=convert_response_json())

    assert main(["--server", SERVER, "convert-url", "https://example.com/doc.pdf"]) == 0

    body = json.loads(route.calls.last.request.content)
    assert body == {"sources": [{"kind": "http", "url": "https://example.com/doc.pdf"}]}
    out = capsys.readouterr().out
    assert "Status: success" in out
    assert "Filename: test.pdf" in out
    assert "# Hello World" in out


def test_convert_url_with_options_and_key(mock_server):
    route = mock_server.post("/v1/convert/source").respond(json=convert_response_json())

    code = main(
        [
            "--server",
            SERVER,
            "--api-key",
            "token",
            "convert-url",
            "https://example.com/doc.pdf",
            "--to",
            "md",
            "--to",
            "text",
            "--ocr",
        ]
    )

    assert code == 0
    request = route.calls.last.request
    assert request.headers["authorization"] == "Bearer token"
    body = json.loads(request.content)
    assert body["options"] == {"to_formats": ["md", "text"], "do_ocr": True}


def test_convert_url_preview_truncates_markdown(mock_server, capsys):
    mock_server.post("/v1/convert/source").respond(json=convert_response_json(md="# Hello"))

    assert main(["--server", SERVER, "convert-url", "https://example.com/doc.pdf", "--preview", "3"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert "# H" in lines
    assert "# Hello" not in lines


def test_convert_url_background_success(mock_server, capsys):
    mock_server.post("/v1/convert/source/async").respond(
        json=task_status_json("task-005", "PENDING")
    )
    poll = mock_server.get("/v1/status/poll/task-005").respond(
        json=task_status_json("task-005", "SUCCESS")
    )
    mock_server.get("/v1/result/task-005").respond(json=convert_response_json())

    code = main(
        [
            "--server",
            SERVER,
            "convert-url",
            "https://example.com/doc.pdf",
            "--background",
            "--poll-interval",
            "1",
        ]
    )

    assert code == 0
    assert poll.calls.last.request.url.params["wait"] == "1"
    out = capsys.readouterr().out
    assert "Task submitted: task-005" in out
    assert "  Status: SUCCESS" in out
    assert "Filename: test.pdf" in out


def test_convert_url_background_failure(mock_server, capsys):
    mock_server.post("/v1/convert/source/async").respond(
        json=task_status_json("task-fail", "PENDING")
    )
    mock_server.get("/v1/status/poll/task-fail").respond(
        json=task_status_json("task-fail", "FAILURE")
    )
    result_route = mock_server.get("/v1/result/task-fail").respond(json=convert_response_json())

    code = main(["--server", SERVER, "convert-url", "https://example.com/doc.pdf", "--background"])

    assert code == 1
    assert "task task-fail failed with status: FAILURE" in capsys.readouterr().err
    assert result_route.call_count == 0


def test_convert_url_background_timeout(mock_server, capsys):
    mock_server.post("/v1/convert/source/async").respond(
        json=task_status_json("task-slow", "PENDING")
    )
    poll = mock_server.get("/v1/status/poll/task-slow").respond(
        json=task_status_json("task-slow", "STARTED")
    )

    code = main(
        [
            "--server",
            SERVER,
            "convert-url",
            "https://example.com/doc.pdf",
            "--background",
            "--timeout",
            "-1",
        ]
    )

    assert code == 1
    assert "task task-slow timed out" in capsys.readouterr().err
    assert poll.call_count == 0


def test_convert_file_uploads_multipart(mock_server, tmp_path, capsys):
    route = mock_server.post("/v1/convert/file").respond(json=convert_response_json())
    document = tmp_path / "document.pdf"
    document.write_bytes(b"fake pdf content")

    code = main(
        [
            "--server",
            SERVER,
            "convert-file",
            str(document),
            "--target",
            "inbody",
            "--to",
            "md",
        ]
    )

    assert code == 0
    request = route.calls.last.request
    assert request.headers["content-type"].startswith("multipart/form-data")
    content = request.content
    assert b"fake pdf content" in content
    assert b'name="target_type"' in content
    assert b'name="to_formats"' in content
    assert b"application/pdf" in content
    assert "Filename: test.pdf" in capsys.readouterr().out


def test_convert_file_background(mock_server, tmp_path, capsys):
    mock_server.post("/v1/convert/file/async").respond(
        json=task_status_json("file-task-002", "PENDING")
    )
    mock_server.get("/v1/status/poll/file-task-002").respond(
        json=task_status_json("file-task-002", "SUCCESS")
    )
    mock_server.get("/v1/result/file-task-002").respond(json=convert_response_json())
    document = tmp_path / "document.pdf"
    document.write_bytes(b"fake pdf content")

    assert main(["--server", SERVER, "convert-file", str(document), "--background"]) == 0

    out = capsys.readouterr().out
    assert "Task submitted: file-task-002" in out
    assert "Progress: 1/1 processed, 1 succeeded, 0 failed" in out


def test_convert_file_missing_path_reports_io_error(mock_server, tmp_path, capsys):
    route = mock_server.post("/v1/convert/file").respond(json=convert_response_json())

    code = main(["--server", SERVER, "convert-file", str(tmp_path / "missing.pdf")])

    assert code == 1
    assert "io error" in capsys.readouterr().err
    assert route.call_count == 0


def test_connection_failure_reports_http_error(mock_server, capsys):
    mock_server.get("/health").mock(side_effect=httpx.ConnectError("refused"))

    assert main(["--server", SERVER, "health"]) == 1
    assert "http error" in capsys.readouterr().err