from __future__ import annotations

import logging

from pdfshelf.logging_utils import DecodedPathAccessFormatter, build_uvicorn_log_config, readable_request_path


def _access_record(full_path: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %d',
        args=("127.0.0.1:5000", "GET", full_path, "1.1", 200),
        exc_info=None,
    )


def test_readable_request_path_decodes_and_drops_query() -> None:
    assert readable_request_path("/Reports/Q1%20Report.pdf?download=1") == "/Reports/Q1 Report.pdf"
    assert readable_request_path("/What%3F.pdf") == "/What?.pdf"
    assert readable_request_path("/%E8%AB%96%E6%96%87.pdf") == "/論文.pdf"


def test_access_formatter_logs_tree_paths() -> None:
    formatter = DecodedPathAccessFormatter(fmt="%(request_line)s %(status_code)s", use_colors=False)
    line = formatter.format(_access_record("/A/My%20Doc.pdf?x=1"))
    assert line.startswith("GET /A/My Doc.pdf HTTP/1.1")


def test_log_config_uses_formatter_and_debug_levels() -> None:
    config = build_uvicorn_log_config(debug=True)
    assert config["formatters"]["access"]["()"] == "pdfshelf.logging_utils.DecodedPathAccessFormatter"
    assert all(logger.get("level") == "DEBUG" for logger in config["loggers"].values() if "level" in logger)
    quiet = build_uvicorn_log_config()
    assert quiet["loggers"]["uvicorn"]["level"] == "INFO"
