from __future__ import annotations

from urllib.parse import quote


def build_shelf_icon_svg(
    label: str = "PDF",
    *,
    folder_color: str = "#2563eb",
    text_color: str = "#f8fafc",
) -> str:
    """Return a square SVG badge shaped like a folder tab."""
    normalized = (label or "PDF").strip().upper()[:3] or "PDF"
    font_size = "18" if len(normalized) > 2 else "24"
    return f"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64" role="img" aria-label="{normalized} shelf">
  <path d="M6 14a6 6 0 0 1 6-6h14l6 6h20a6 6 0 0 1 6 6v30a6 6 0 0 1-6 6H12a6 6 0 0 1-6-6z" fill="{folder_color}" />
  <text x="32" y="44" text-anchor="middle" font-family="Inter, 'Segoe UI', sans-serif"
        font-size="{font_size}" font-weight="700" fill="{text_color}">{normalized}</text>
</svg>"""


def icon_data_url(label: str = "PDF") -> str:
    return "data:image/svg+xml," + quote(build_shelf_icon_svg(label))


SHELF_FAVICON_URL = icon_data_url()


__all__ = ["SHELF_FAVICON_URL", "build_shelf_icon_svg", "icon_data_url"]
