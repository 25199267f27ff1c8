from __future__ import annotations

import argparse
import os
import socket
import sys
from importlib import metadata
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.table import Table

from .app import set_debug_logging
from .logging_utils import build_uvicorn_log_config
from .render import human_size
from .scan import DATA_FILENAME, DEFAULT_EXTENSIONS, scan_documents, write_source
from .search import SEARCH_RESULT_LIMIT, search
from .search_index import build_index
from .tree import SourceLoadError, count_nodes, load_source, lookup
from .web import WebConfig, create_app

try:
    __version__ = metadata.version("pdfshelf")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"

DEBUG_ENV = "PDFSHELF_DEBUG"


def _debug_from_env() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def build_scan_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfshelf scan",
        description="Scan a document root and write the tree consumed by the browser.",
    )
    parser.add_argument("root", help="Document root to scan.")
    parser.add_argument(
        "-o",
        "--output",
        help=f"Output JSON path (default: <root>/{DATA_FILENAME}).",
    )
    parser.add_argument(
        "--ext",
        action="append",
        dest="extensions",
        help="File extension to include (repeatable, default: .pdf).",
    )
    return parser


def build_search_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfshelf search",
        description="Search folder and document names in a generated tree.",
    )
    parser.add_argument("data", help="Path to the generated data.json.")
    parser.add_argument("query", help="Case-insensitive name fragment.")
    parser.add_argument(
        "--limit",
        type=int,
        default=SEARCH_RESULT_LIMIT,
        help=f"Maximum number of results (default: {SEARCH_RESULT_LIMIT}).",
    )
    return parser


def build_web_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfshelf web",
        description="Serve the folder and PDF browser over HTTP.",
    )
    parser.add_argument("root", help="Document root the tree paths are relative to.")
    parser.add_argument("--data", help=f"Tree JSON (default: <root>/{DATA_FILENAME}).")
    parser.add_argument("--prefs", help="View-mode preference file (default: inside root).")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1).")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000).")
    parser.add_argument(
        "--scan",
        action="store_true",
        help="Regenerate the tree JSON before serving.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging (routes, index builds, modal events).",
    )
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfshelf",
        description="Browse a folder tree of PDFs in the browser.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("command", nargs="?", choices=["scan", "search", "web"], help="Subcommand to run.")
    return parser


def _run_scan(args: argparse.Namespace) -> int:
    root = Path(args.root).expanduser().resolve()
    output = Path(args.output).expanduser() if args.output else root / DATA_FILENAME
    extensions = tuple(args.extensions) if args.extensions else DEFAULT_EXTENSIONS
    try:
        payload = scan_documents(root, extensions)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    write_source(payload, output)
    console = Console()
    console.print(f"Wrote {output}")
    return 0


def _run_search(args: argparse.Namespace) -> int:
    try:
        tree = load_source(Path(args.data).expanduser())
    except SourceLoadError as exc:
        raise SystemExit(str(exc)) from exc
    results = search(args.query, build_index(tree), limit=max(1, args.limit))
    console = Console()
    if not results:
        console.print(f"No matches for {args.query!r} among {count_nodes(tree)} entries.")
        return 1
    table = Table(title=f'Search results for "{args.query.strip().lower()}"')
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    for entry in results:
        size = ""
        if not entry.is_folder:
            node = lookup(tree, entry.path)
            size = human_size(getattr(node, "size", 0))
        table.add_row(entry.type, entry.name, entry.path, size)
    console.print(table)
    return 0


def _resolve_local_ip(host: str) -> str:
    if host not in {"0.0.0.0", "::"}:
        return host
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"


def _run_web(args: argparse.Namespace) -> int:
    root = Path(args.root).expanduser().resolve()
    data_file = Path(args.data).expanduser().resolve() if args.data else None
    prefs_file = Path(args.prefs).expanduser().resolve() if args.prefs else None
    debug = bool(args.debug) or _debug_from_env()
    set_debug_logging(debug)

    config = WebConfig(
        root=root,
        data_file=data_file,
        preferences_file=prefs_file,
        host=args.host,
        port=args.port,
    )
    if args.scan:
        try:
            write_source(scan_documents(root), config.resolved_data_file())
        except FileNotFoundError as exc:
            raise SystemExit(str(exc)) from exc

    try:
        app = create_app(config)
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    if app.state.shelf.state.failed:
        print(app.state.shelf.state.load_error, file=sys.stderr)
    url = f"http://{_resolve_local_ip(args.host)}:{args.port}/"
    print(f"Serving PDFs from {root}")
    print(f"Web URL: {url}")
    print("Press Ctrl+C to stop.\n")
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="debug" if debug else "info",
        log_config=build_uvicorn_log_config(debug),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] == "scan":
        return _run_scan(build_scan_parser().parse_args(argv[1:]))
    if argv and argv[0] == "search":
        return _run_search(build_search_parser().parse_args(argv[1:]))
    if argv and argv[0] == "web":
        return _run_web(build_web_parser().parse_args(argv[1:]))

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parser.parse_args(argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
