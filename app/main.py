import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.http_hardening import install_http_hardening
from app.core.panel_auth import install_panel_basic_auth
from app.api.admin.router import router as admin_router
from app.static_files import mount_panel_page

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_panel_basic_auth(app)
install_http_hardening(app)

app.include_router(admin_router, prefix="/api")

@app.get("/health")
def health():
    return {"status": "ok"}

mount_panel_page(app)


if __name__ == "__main__":
    print(f"Painel rodando na porta {settings.PORT}")
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
