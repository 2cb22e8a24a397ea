from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.security import parse_basic_credentials, verify_panel_credentials

_LOG = logging.getLogger("app.panel_auth")


def _challenge_response() -> JSONResponse:
    realm = str(settings.PANEL_BASIC_REALM or "").replace('"', "'").strip() or "Painel"
    return JSONResponse(
        {"error": "Unauthorized"},
        status_code=401,
        headers={"WWW-Authenticate": f'Basic realm="{realm}", charset="UTF-8"'},
    )


def install_panel_basic_auth(app: FastAPI) -> None:
    """Gate every path of ``app`` (API, static page, health) behind HTTP Basic Auth."""

    @app.middleware("http")
    async def _panel_basic_auth_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)
        credentials = parse_basic_credentials(request.headers.get("Authorization"))
        if credentials is None:
            return _challenge_response()
        username, password = credentials
        if not verify_panel_credentials(username, password):
            _LOG.warning("rejected panel credentials user=%s path=%s", username, request.url.path)
            return _challenge_response()
        request.state.panel_user = username
        return await call_next(request)
