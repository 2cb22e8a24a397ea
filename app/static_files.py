from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.core.config import settings

DEFAULT_STATIC_DIR = Path(__file__).resolve().parent / "static"


def panel_static_dir() -> Path:
    override = str(settings.PANEL_STATIC_DIR or "").strip()
    return Path(override) if override else DEFAULT_STATIC_DIR


def mount_panel_page(app: FastAPI) -> None:
    # Mounted last: "/" would otherwise shadow the API routes.
    app.mount("/", StaticFiles(directory=panel_static_dir(), html=True), name="panel")
