"""Core configuration with Pydantic v2 Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    app_env: str = "development"
    log_level: str = "INFO"
    # Emit JSON log lines instead of plain text
    LOG_JSON: bool = False

    # Rent backend REST API
    RENT_API_BASE_URL: str = "http://localhost:8080/api/v2"
    RENT_API_TIMEOUT_S: float = 10.0
    # Bearer token; empty means anonymous requests
    RENT_API_TOKEN: str = ""
    # Documents (PDF) are served under this path of the API
    RENT_API_DOCUMENTS_PATH: str = "/documents"

    # i18n
    DEFAULT_LOCALE: str = "en"
    # Directory of <locale>.yaml catalogs; empty uses the packaged catalogs
    LOCALES_DIR: str = ""


# Global settings instance
settings = Settings()
