# doclingkit

An asynchronous Python client for a Docling Serve instance. It asks the
server to convert documents, either fetched by the server from a URL or
uploaded from local disk, into Markdown, JSON, HTML, plain text or DocTags.
Both ways the server offers are covered: a single call that waits until the
conversion is done, and background tasks that you submit, poll and then
collect.

## What this package does not do

It converts nothing by itself. Every conversion is performed by a running
Docling Serve instance that the client talks to over HTTP; without one, the
calls fail with `HttpError`. It also does not store or unpack results: ZIP
delivery can be requested as a target, but the client only decodes JSON
response bodies.

## Installation

```sh
pip install doclingkit
```

The only runtime dependency is `httpx`.

## Quick start

```python
import asyncio

from doclingkit.client import DoclingClient


async def main():
    async with DoclingClient("http://127.0.0.1:5001") as client:
        health = await client.health()
        print("Health:", health.status)

        for key, value in (await client.version()).items():
            print(f"  {key}: {value}")

        result = await client.convert_source("https://arxiv.org/pdf/2206.01062", None)
        print(result.status.value, f"{result.processing_time:.2f}s")
        if result.document.md_content:
            print(result.document.md_content[:500])


asyncio.run(main())
```

Trailing slashes on the base URL are stripped, so `"http://127.0.0.1:5001/"`
works just as well. `client.url("/health")` shows the full URL a path maps
to. Use the client as an async context manager, or call `await client.aclose()`
when done.

## Authentication

If the server is protected by an API key, build the client with one. The
key is sent as `Authorization: Bearer <key>` on the conversion, polling and
result endpoints; `/health` and `/version` are always called without it.

```python
client = DoclingClient.with_api_key("http://127.0.0.1:5001", "placeholder")
# equivalent: DoclingClient("http://127.0.0.1:5001", "placeholder")
```

## Conversion options

Every field of `ConvertDocumentsRequestOptions` is optional; whatever you
leave as `None` is omitted from the request and the server applies its own
default.

```python
from doclingkit.enums import OcrEngine, OutputFormat
from doclingkit.request_types import ConvertDocumentsRequestOptions

options = ConvertDocumentsRequestOptions(
    to_formats=[OutputFormat.MD, OutputFormat.TEXT],
    do_ocr=True,
    ocr_engine=OcrEngine.EASYOCR,
    page_range=(1, 5),
)
result = await client.convert_source("https://example.com/doc.pdf", options)
print(result.document.text_content)
```

The enumerations in `doclingkit.enums` (`InputFormat`, `OutputFormat`,
`ImageRefMode`, `TableFormerMode`, `PdfBackend`, `ProcessingPipeline`,
`OcrEngine`, `VlmModelType`, `TargetName`, and the response-side
`ConversionStatus`, `DoclingComponentType`, `ProfilingScope`, `TaskType`) are
string enums whose value and `str()` are the exact wire strings, for example
`str(OutputFormat.HTML_SPLIT_PAGE) == "html_split_page"`.

For full control over sources and the delivery target, build a request
yourself and pass it to `convert` or `convert_async`:

```python
from doclingkit.request_types import ConvertDocumentsRequest, FileSource, HttpSource, Target

request = ConvertDocumentsRequest(
    sources=[
        HttpSource(url="https://example.com/doc.pdf", headers={"Authorization": "Bearer token"}),
        FileSource(base64_string="SGVsbG8gV29ybGQ=", filename="hello.pdf"),
    ],
    target=Target.default(),  # Target.INBODY; Target.ZIP is the other choice
)
result = await client.convert(request)
```

Every request type has `to_dict()` giving its JSON form (unset fields left
out), and `Target`, `ConvertDocumentsRequestOptions` and
`ConvertDocumentsRequest` have `from_dict()`; sources are decoded with
`source_from_dict()`, which picks the class from the `kind` field.

## Responses

Results are dataclasses in `doclingkit.response_types`:

- `ConvertDocumentResponse` — `document` (an `ExportDocumentResponse` with
  `filename`, `md_content`, `json_content`, `html_content`, `text_content`,
  `doctags_content`), `status`, `processing_time`, `errors` (a list of
  `ErrorItem`) and `timings` (a dict of `ProfilingItem`).
- `TaskStatusResponse` — `task_id`, `task_type`, `task_status` (a plain
  string such as `"PENDING"`, `"STARTED"`, `"SUCCESS"`, `"FAILURE"`),
  `task_position` and `task_meta` (a `TaskProcessingMeta` with progress
  counters).
- `HealthCheckResponse` — `status`, `"ok"` when the server omits it.
- `PresignedUrlConvertDocumentResponse`, `HttpValidationError` and
  `ValidationErrorDetail` for the other shapes the server sends.

Each has `from_dict()` and `to_dict()`. Missing optional fields become
`None`, missing lists and maps become empty, and a malformed payload raises
`DecodeError`.

## Uploading local files

Local files are uploaded as `multipart/form-data` with a MIME type guessed
from each file's extension (`application/octet-stream` when unknown).
Several files can be sent in one call. Options are sent as form fields; list
options become repeated fields.

```python
from doclingkit.enums import TargetName

result = await client.convert_file(["./document.pdf"], options, TargetName.INBODY)
result = await client.convert_file(["./document.pdf", "./report.docx"], None, None)
```

The helpers behind this are public in `doclingkit.multipart`:
`guess_mime_type(path)`, `read_file_parts(file_paths)` and
`build_form_fields(options, target_type)`.

## Background conversion

Submit a task, poll it with server-side long polling, then fetch the result:

```python
task = await client.convert_source_async("https://arxiv.org/pdf/2206.01062", None)

while True:
    status = await client.poll_task_status(task.task_id, 5.0)
    if status.task_meta is not None:
        print(f"{status.task_meta.num_processed}/{status.task_meta.num_docs} processed")
    if status.task_status in ("SUCCESS", "FAILURE"):
        break

if status.task_status == "SUCCESS":
    result = await client.get_task_result(task.task_id)
```

Passing `None` as the wait checks the status without a `wait` parameter.
`convert_async(request)` and `convert_file_async(paths, options, target)`
submit tasks the same way.

Or let the client do all three steps. The timeout is the overall limit, in
seconds or as a `datetime.timedelta` (300 seconds by default); the poll
interval is how long the server may hold each poll open (5 seconds when
`None`).

```python
result = await client.wait_for_conversion(
    "https://arxiv.org/pdf/2206.01062", None, timeout=300.0, poll_interval_secs=5.0
)
result = await client.wait_for_file_conversion(
    ["./document.pdf"], None, None, timeout=300.0, poll_interval_secs=5.0
)
```

## Errors

Every failure raises a subclass of `doclingkit.errors.DoclingError`:

| Exception          | Raised when                                              |
|--------------------|----------------------------------------------------------|
| `HttpError`        | the connection fails (refused, DNS, and so on)           |
| `ApiError`         | the server answers with a non-success status; carries `status_code` and `body` |
| `DecodeError`      | a response body or payload cannot be decoded (also a `ValueError`) |
| `FileReadError`    | a local file for upload cannot be read                   |
| `TaskFailedError`  | a background task ends with `FAILURE`; carries `task_id` and `status` |
| `TaskTimeoutError` | waiting for a task exceeds the timeout; carries `task_id` and `elapsed_secs` |

```python
from doclingkit.errors import ApiError

try:
    await client.convert_source("https://example.com/doc.pdf", None)
except ApiError as exc:
    print(exc.status_code, exc.body)
```

## Command line

The package installs a `doclingkit` command. Global options `--server`
(default `http://127.0.0.1:5001`) and `--api-key` come before the
subcommand.

```sh
doclingkit health
doclingkit convert-url https://arxiv.org/pdf/2206.01062 --to md --to text --ocr
doclingkit convert-file ./document.pdf ./report.docx --target inbody --background
doclingkit --help
```

- `health` prints the health status and the version information.
- `convert-url URL` and `convert-file PATH...` convert and print the
  status, processing time, filename and a preview of the Markdown and text
  output. Both take `--to FORMAT` (repeatable), `--ocr` / `--no-ocr`,
  `--background` (submit a task and print its progress while polling),
  `--timeout` (default 300), `--poll-interval` (default 5) and `--preview`
  (characters shown, default 500). `convert-file` also takes
  `--target {inbody,zip}`.

On any client error the command prints it to standard error and exits with
status 1.

## Running the tests

```sh
pip install "doclingkit[test]"
pytest
```