"""Async client, data models and command line for a Docling Serve document conversion server."""

__version__ = "0.1.1"

__all__ = [
    "cli",
    "client",
    "enums",
    "errors",
    "multipart",
    "request_types",
    "response_types",
]