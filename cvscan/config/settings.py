from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "cvscan"
    db_username: str = "cvscan"
    db_password: str = "secret"

    pdf_engine: str = "pdfplumber"

    storage_root: str = "/app/files"
    storage_bucket: str = "cvs"

    max_upload_bytes: int = 10 * 1024 * 1024
    accepted_mime_type: str = "application/pdf"
    extracted_text_max_chars: int = 5000
    stale_scan_minutes: int = 30

    enrichment_provider: str = "tavily"
    tavily_api_key: str = ""
    tavily_api_url: str = "https://api.tavily.com/search"
    tavily_timeout_seconds: int = 30
    tavily_search_depth: str = "advanced"
    tavily_max_results: int = 8
    tavily_topic: str = "general"
