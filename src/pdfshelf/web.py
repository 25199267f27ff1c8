from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from .app import ShelfApp
from .browser import ClientNavigator
from .scan import DATA_FILENAME
from .state import PREFERENCES_FILENAME, PreferenceStore
from .tree import Document, lookup, node_to_payload
from .web_assets import SHELF_FAVICON_URL


@dataclass(slots=True)
class WebConfig:
    root: Path
    data_file: Path | None = None
    preferences_file: Path | None = None
    host: str = "127.0.0.1"
    port: int = 8000

    def resolved_data_file(self) -> Path:
        return self.data_file or (self.root / DATA_FILENAME)

    def resolved_preferences_file(self) -> Path:
        return self.preferences_file or (self.root / PREFERENCES_FILENAME)


INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>PDF Shelf</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="icon" type="image/svg+xml" href="__SHELF_FAVICON__">
  <style>
    :root {
      color-scheme: light dark;
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
      --bg: #f8fafc;
      --panel: #ffffff;
      --outline: #e2e8f0;
      --text: #0f172a;
      --muted: #64748b;
      --accent: #2563eb;
    }
    body { margin: 0; background: var(--bg); color: var(--text); }
    .hidden { display: none !important; }
    .app { display: grid; grid-template-columns: 300px 1fr; min-height: 100vh; }
    aside { border-right: 1px solid var(--outline); padding: 1rem; overflow-y: auto; }
    aside input { width: 100%; padding: 0.5rem; box-sizing: border-box; margin-bottom: 1rem; }
    aside ul { list-style: none; padding-left: 0.8rem; margin: 0; }
    aside li[aria-expanded="false"] > ul { display: none; }
    aside a { color: inherit; text-decoration: none; display: block; padding: 0.2rem 0; }
    aside li.folder > a { display: inline-block; }
    .folder-toggle { background: none; border: 0; color: var(--muted); cursor: pointer; padding: 0 0.3rem; }
    aside li[aria-expanded="true"] > .folder-toggle { transform: rotate(90deg); }
    main { padding: 1.5rem; }
    .toolbar { display: flex; justify-content: space-between; align-items: center; margin-bottom: 1rem; }
    #breadcrumbs a { color: var(--accent); text-decoration: none; }
    .folder-title { text-align: center; }
    .items.grid { display: grid; gap: 1.2rem; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); }
    .items.list { border: 1px solid var(--outline); border-radius: 12px; background: var(--panel); }
    .card { display: flex; flex-direction: column; align-items: center; border: 1px solid var(--outline);
            border-radius: 14px; padding: 1.2rem; background: var(--panel); color: inherit; text-decoration: none; }
    .card .icon { font-size: 2.4rem; }
    .row { display: flex; align-items: center; gap: 0.8rem; padding: 0.8rem 1rem; color: inherit; text-decoration: none;
           border-bottom: 1px solid var(--outline); }
    .row .open { flex: 1; display: flex; gap: 0.6rem; color: inherit; text-decoration: none; }
    .size, .path, .hint { color: var(--muted); font-size: 0.8rem; }
    .actions { display: flex; gap: 0.5rem; margin-top: 0.8rem; }
    .result { display: flex; justify-content: space-between; border: 1px solid var(--outline);
              border-radius: 8px; padding: 0.7rem; margin-bottom: 0.5rem; }
    .empty, .not-found, .load-error { text-align: center; color: var(--muted); padding: 4rem 1rem; }
    #modal { position: fixed; inset: 0; z-index: 20; }
    #modal-backdrop { position: absolute; inset: 0; background: rgba(15, 23, 42, 0.6); }
    #modal-panel { position: absolute; inset: 3rem; display: flex; flex-direction: column;
                   background: var(--panel); border-radius: 14px; overflow: hidden; }
    #modal-header { display: flex; justify-content: space-between; padding: 0.7rem 1rem; }
    #modal-frame { flex: 1; border: 0; width: 100%; }
  </style>
</head>
<body>
  <div class="app">
    <aside>
      <input id="search" type="search" placeholder="Search PDFs" autocomplete="off">
      <nav id="tree">__SHELF_SIDEBAR__</nav>
    </aside>
    <main>
      <div class="toolbar">
        <div id="breadcrumbs"></div>
        <button id="toggle-view" type="button"></button>
      </div>
      <div id="content"></div>
    </main>
  </div>
  <div id="modal" class="hidden">
    <div id="modal-backdrop"></div>
    <div id="modal-panel">
      <div id="modal-header">
        <strong id="modal-title"></strong>
        <span><a id="modal-download" download>Download</a> <button id="modal-close" type="button">Close</button></span>
      </div>
      <iframe id="modal-frame" title="Document viewer"></iframe>
    </div>
  </div>
  <script>
    const $ = (id) => document.getElementById(id);
    const resourceUrl = (path) => "/" + path.split("/").map(encodeURIComponent).join("/");

    async function post(url, body) {
      const res = await fetch(url, {
        method: "POST",
        headers: { "Content-Type": "application/json" },
        body: JSON.stringify(body || {}),
      });
      return res.json();
    }

    function location_state(extra) {
      return Object.assign({ fragment: location.hash || "#/", history_length: history.length }, extra || {});
    }

    function apply(screen) {
      $("content").innerHTML = screen.content;
      $("breadcrumbs").innerHTML = screen.breadcrumbs_html;
      const isList = screen.view_mode === "list";
      $("toggle-view").textContent = isList ? "Grid View" : "List View";
      $("toggle-view").setAttribute("aria-pressed", String(isList));
      if (screen.modal) {
        $("modal-title").textContent = screen.modal.title;
        $("modal-download").href = resourceUrl(screen.modal.resource_url);
        $("modal-download").setAttribute("download", screen.modal.download_name);
        const src = resourceUrl(screen.modal.resource_url);
        if ($("modal-frame").getAttribute("src") !== src) $("modal-frame").setAttribute("src", src);
        $("modal").classList.remove("hidden");
      } else {
        $("modal").classList.add("hidden");
        $("modal-frame").setAttribute("src", "");
      }
      for (const command of screen.commands || []) {
        if (command.action === "back") history.back();
        else if (command.action === "assign") location.hash = command.fragment;
      }
    }

    const route = () => post("/api/navigate", location_state()).then(apply);
    window.addEventListener("hashchange", route);
    $("tree").addEventListener("click", (e) => {
      const toggle = e.target.closest(".folder-toggle");
      if (!toggle) return;
      const item = toggle.closest("li.folder");
      item.setAttribute("aria-expanded", String(item.getAttribute("aria-expanded") !== "true"));
    });
    $("search").addEventListener("input", (e) => post("/api/search", location_state({ query: e.target.value })).then(apply));
    $("toggle-view").addEventListener("click", () => post("/api/view-mode", location_state()).then(apply));
    $("modal-close").addEventListener("click", () => post("/api/modal/close", location_state()).then(apply));
    $("modal-backdrop").addEventListener("click", () => post("/api/modal/backdrop", location_state()).then(apply));
    document.addEventListener("keydown", (e) => {
      if ($("modal").classList.contains("hidden")) return;
      post("/api/keydown", location_state({ key: e.key })).then(apply);
    });
    route();
  </script>
</body>
</html>
"""


def _history_length(payload: dict[str, object]) -> int | None:
    value = payload.get("history_length")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _fragment(payload: dict[str, object]) -> str | None:
    value = payload.get("fragment")
    return value if isinstance(value, str) else None


def create_app(config: WebConfig) -> FastAPI:
    root = config.root.expanduser().resolve()
    if not root.exists() or not root.is_dir():
        raise FileNotFoundError(f"Document root not found: {root}")

    app = FastAPI(title="PDF Shelf")
    app.state.config = config
    app.state.root = root

    navigator = ClientNavigator()
    shelf = ShelfApp(navigator, PreferenceStore(config.resolved_preferences_file()))
    shelf.start(config.resolved_data_file())
    app.state.shelf = shelf
    # Requests run on a thread pool; navigation state has a single writer at a time.
    shelf_lock = threading.Lock()

    def _respond(screen) -> JSONResponse:
        payload = screen.to_payload()
        payload["commands"] = navigator.drain_commands()
        return JSONResponse(payload)

    def _sync(payload: dict[str, object]) -> None:
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload.")
        navigator.sync(_fragment(payload), _history_length(payload))

    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        page = INDEX_HTML.replace("__SHELF_FAVICON__", SHELF_FAVICON_URL)
        return HTMLResponse(page.replace("__SHELF_SIDEBAR__", shelf.sidebar()))

    @app.get("/api/tree")
    def api_tree() -> JSONResponse:
        tree = shelf.state.tree
        if tree is None:
            raise HTTPException(status_code=503, detail=shelf.state.load_error or "Tree not loaded.")
        return JSONResponse({"tree": node_to_payload(tree)})

    @app.post("/api/navigate")
    def api_navigate(payload: dict[str, object] = Body(...)) -> JSONResponse:
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.route(navigator.fragment))

    @app.post("/api/search")
    def api_search(payload: dict[str, object] = Body(...)) -> JSONResponse:
        query = payload.get("query") if isinstance(payload, dict) else None
        if query is not None and not isinstance(query, str):
            raise HTTPException(status_code=400, detail="query must be a string.")
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.search(query))

    @app.post("/api/view-mode")
    def api_toggle_view(payload: dict[str, object] = Body(default={})) -> JSONResponse:
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.toggle_view())

    @app.post("/api/modal/close")
    def api_close_modal(payload: dict[str, object] = Body(default={})) -> JSONResponse:
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.close_modal())

    @app.post("/api/modal/backdrop")
    def api_dismiss_modal(payload: dict[str, object] = Body(default={})) -> JSONResponse:
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.dismiss_modal())

    @app.post("/api/keydown")
    def api_keydown(payload: dict[str, object] = Body(...)) -> JSONResponse:
        key = payload.get("key") if isinstance(payload, dict) else None
        if not isinstance(key, str) or not key:
            raise HTTPException(status_code=400, detail="key is required.")
        with shelf_lock:
            _sync(payload)
            return _respond(shelf.press_key(key))

    @app.get("/{document_path:path}")
    def api_document(document_path: str) -> FileResponse:
        node = lookup(shelf.state.tree, document_path)
        if not isinstance(node, Document):
            raise HTTPException(status_code=404, detail="Document not found.")
        candidate = (root / node.path).resolve()
        try:
            candidate.relative_to(root)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail="Document not found.") from exc
        if not candidate.is_file():
            raise HTTPException(status_code=404, detail="Document not found.")
        return FileResponse(candidate, media_type="application/pdf", filename=node.name, content_disposition_type="inline")

    return app


__all__ = ["INDEX_HTML", "WebConfig", "create_app"]
