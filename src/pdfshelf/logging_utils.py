from __future__ import annotations

from copy import copy, deepcopy
from typing import Any

from uvicorn.config import LOGGING_CONFIG
from uvicorn.logging import AccessFormatter as UvicornAccessFormatter

from .routes import decode_path


def readable_request_path(full_path: str) -> str:
    """Decode a request path for the log, dropping any query string.

    The query is split off before decoding so an encoded ``%3F`` inside a
    document name stays part of the path.
    """
    raw_path = full_path.split("?", 1)[0]
    return decode_path(raw_path)


class DecodedPathAccessFormatter(UvicornAccessFormatter):
    """Access log formatter that shows document paths as they appear in the tree."""

    def formatMessage(self, record):  # type: ignore[override]
        try:
            client_addr, method, full_path, http_version, status_code = record.args
        except (TypeError, ValueError):
            return super().formatMessage(record)
        if not isinstance(full_path, str):
            return super().formatMessage(record)
        readable = copy(record)
        readable.args = (client_addr, method, readable_request_path(full_path), http_version, status_code)
        return super().formatMessage(readable)


def build_uvicorn_log_config(debug: bool = False) -> dict[str, Any]:
    config = deepcopy(LOGGING_CONFIG)
    access = config.get("formatters", {}).get("access")
    if isinstance(access, dict):
        access["()"] = "pdfshelf.logging_utils.DecodedPathAccessFormatter"
    if debug:
        for logger in config.get("loggers", {}).values():
            if isinstance(logger, dict) and "level" in logger:
                logger["level"] = "DEBUG"
    return config


__all__ = ["DecodedPathAccessFormatter", "build_uvicorn_log_config", "readable_request_path"]
