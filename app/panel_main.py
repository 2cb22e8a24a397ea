import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.admin.router import router as admin_router
from app.core.config import settings
from app.core.http_hardening import install_http_hardening
from app.static_files import mount_panel_page

app = FastAPI(title=f"{settings.APP_NAME}-panel", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)
install_http_hardening(app)

app.include_router(admin_router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}


mount_panel_page(app)


if __name__ == "__main__":
    print(f"Painel aberto rodando na porta {settings.PORT}")
    uvicorn.run("app.panel_main:app", host="0.0.0.0", port=settings.PORT)
