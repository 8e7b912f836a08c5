"""Command-line front end for a Docling Serve instance."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from typing import Optional, Sequence

from .client import DoclingClient
from .enums import OutputFormat, TargetName
from .errors import DoclingError, TaskFailedError, TaskTimeoutError
from .request_types import ConvertDocumentsRequestOptions
from .response_types import ConvertDocumentResponse, TaskStatusResponse

DEFAULT_SERVER = "http://127.0.0.1:5001"
DEFAULT_PREVIEW_CHARS = 500
DEFAULT_TIMEOUT_SECS = 300.0
DEFAULT_POLL_SECS = 5.0


def _add_conversion_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--to",
        dest="to_formats",
        action="append",
        choices=[fmt.value for fmt in OutputFormat],
        help="output format to request; repeat for several",
    )
    parser.add_argument(
        "--ocr",
        dest="do_ocr",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="enable or disable OCR (server default when omitted)",
    )
    parser.add_argument(
        "--background",
        action="store_true",
        help="submit as a background task and poll until it finishes",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECS,
        help="seconds to wait for a background task",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_SECS,
        help="server-side long-poll wait per status request, in seconds",
    )
    parser.add_argument(
        "--preview",
        type=int,
        default=DEFAULT_PREVIEW_CHARS,
        help="number of characters of text output to show",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command-line tool."""
    parser = argparse.ArgumentParser(
        prog="doclingkit", description="Convert documents with a Docling Serve instance."
    )
    parser.add_argument("--server", default=DEFAULT_SERVER, help="base URL of the server")
    parser.add_argument("--api-key", default=None, help="bearer key for secured endpoints")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("health", help="check server health and show version information")

    url_parser = commands.add_parser("convert-url", help="convert a document fetched from a URL")
    url_parser.add_argument("url", help="HTTP URL of the document")
    _add_conversion_arguments(url_parser)

    file_parser = commands.add_parser("convert-file", help="upload and convert local files")
    file_parser.add_argument("paths", nargs="+", help="local files to convert")
    file_parser.add_argument(
        "--target",
        choices=[target.value for target in TargetName],
        default=None,
        help="where the result is delivered (server default when omitted)",
    )
    _add_conversion_arguments(file_parser)
    return parser


def _options(args: argparse.Namespace) -> Optional[ConvertDocumentsRequestOptions]:
    if args.to_formats is None and args.do_ocr is None:
        return None
    return ConvertDocumentsRequestOptions(
        to_formats=(
            None if args.to_formats is None else [OutputFormat(fmt) for fmt in args.to_formats]
        ),
        do_ocr=args.do_ocr,
    )


def _print_result(result: ConvertDocumentResponse, preview: int) -> None:
    document = result.document
    print(f"Status: {result.status.value}")
    print(f"Processing time: {result.processing_time:.2f}s")
    print(f"Filename: {document.filename}")
    if document.md_content is not None:
        print(f"Markdown (first {preview} chars):")
        print(document.md_content[:preview])
    if document.text_content is not None:
        print(f"Plain text (first {preview} chars):")
        print(document.text_content[:preview])
    if document.json_content is not None:
        print("JSON content: (present, structured DoclingDocument)")


def _print_progress(status: TaskStatusResponse) -> None:
    position = "" if status.task_position is None else f", position={status.task_position}"
    print(f"  Status: {status.task_status}{position}")
    meta = status.task_meta
    if meta is not None:
        print(
            f"    Progress: {meta.num_processed}/{meta.num_docs} processed, "
            f"{meta.num_succeeded} succeeded, {meta.num_failed} failed"
        )


async def _follow_task(
    client: DoclingClient, task: TaskStatusResponse, args: argparse.Namespace
) -> ConvertDocumentResponse:
    """Poll a submitted task, reporting progress, and fetch its result."""
    print(f"Task submitted: {task.task_id}")
    start = time.monotonic()
    while True:
        elapsed = time.monotonic() - start
        if elapsed > args.timeout:
            raise TaskTimeoutError(task.task_id, elapsed)
        status = await client.poll_task_status(task.task_id, args.poll_interval)
        _print_progress(status)
        if status.task_status == "SUCCESS":
            return await client.get_task_result(task.task_id)
        if status.task_status == "FAILURE":
            raise TaskFailedError(task.task_id, "FAILURE")


async def _health(client: DoclingClient) -> None:
    health = await client.health()
    print(f"Health status: {health.status}")
    version = await client.version()
    print("Version info:")
    for key, value in version.items():
        print(f"  {key}: {value}")


async def _convert_url(client: DoclingClient, args: argparse.Namespace) -> None:
    options = _options(args)
    if args.background:
        task = await client.convert_source_async(args.url, options)
        result = await _follow_task(client, task, args)
    else:
        result = await client.convert_source(args.url, options)
    _print_result(result, args.preview)


async def _convert_file(client: DoclingClient, args: argparse.Namespace) -> None:
    options = _options(args)
    target = None if args.target is None else TargetName(args.target)
    if args.background:
        task = await client.convert_file_async(args.paths, options, target)
        result = await _follow_task(client, task, args)
    else:
        result = await client.convert_file(args.paths, options, target)
    _print_result(result, args.preview)


async def _run(args: argparse.Namespace) -> None:
    async with DoclingClient(args.server, args.api_key) as client:
        if args.command == "health":
            await _health(client)
        elif args.command == "convert-url":
            await _convert_url(client, args)
        else:
            await _convert_file(client, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except DoclingError as exc:
        print(f"doclingkit: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())