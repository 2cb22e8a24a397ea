from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "galeria-secreta"
    PORT: int = 3000

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    DATABASE_URL: str
    REDIS_URL: str = ""

    # Admin panel (basic-auth variant)
    PANEL_BASIC_USER: str = "admin"
    PANEL_BASIC_PASSWORD: str = "change_me"
    PANEL_BASIC_PASSWORD_HASH: str = ""
    PANEL_BASIC_REALM: str = "Painel Galeria Secreta"
    PANEL_STATIC_DIR: str = ""

    # Application form submission pipeline
    SUBMISSION_API_URL: str = "https://galeria-secreta-backend.onrender.com/api/candidatura"
    SUBMIT_MAX_ATTEMPTS: int = 3
    SUBMIT_BACKOFF_BASE_MS: int = 1000
    SUBMIT_TIMEOUT_SECONDS: float = 30.0
    AUTOSAVE_DEBOUNCE_MS: int = 500
    DRAFT_KEY_PREFIX: str = "galeria_secreta_form_"
    DRAFT_FILE_PATH: str = ".galeria_secreta_drafts.json"
    NOTIFICATION_TTL_MS: int = 6000
    NOTIFICATION_EXIT_MS: int = 400
    NOTIFICATION_ENTER_MS: int = 100
    MAX_PHOTO_MB: int = 10

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def max_photo_bytes(self) -> int:
        return int(self.MAX_PHOTO_MB) * 1024 * 1024

settings = Settings()
