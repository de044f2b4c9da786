import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


load_dotenv()

DEFAULT_JWT_SECRET = "change-me"
DEFAULT_DATABASE_URL = "sqlite:///./signnova.db"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    port: int = 5000
    log_level: str = "INFO"

    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    auth_base_url: str = "http://localhost:5000"
    session_expires_seconds: int = 60 * 60 * 24 * 7
    session_update_age_seconds: int = 60 * 60 * 24

    openai_api_key: str = ""
    transcription_model: str = "whisper-1"
    transcription_language: str = "en"
    transcription_api_url: str = "https://api.openai.com/v1/audio/transcriptions"

    s3_bucket: str = ""
    s3_region: str = ""
    s3_endpoint: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    storage_public_base_url: str = ""

    frontend_urls: list[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


def load_settings() -> Settings:
    """Read settings from the environment (and `.env`, loaded at import)."""
    defaults = Settings()
    return Settings(
        app_env=os.getenv("APP_ENV", defaults.app_env),
        port=_get_int(os.getenv("PORT"), defaults.port),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        database_echo=_get_bool(os.getenv("DATABASE_ECHO"), default=False),
        jwt_secret_key=os.getenv("JWT_SECRET_KEY", defaults.jwt_secret_key),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", defaults.jwt_algorithm),
        auth_base_url=os.getenv("AUTH_BASE_URL", defaults.auth_base_url),
        session_expires_seconds=_get_int(
            os.getenv("SESSION_EXPIRES_SECONDS"), defaults.session_expires_seconds
        ),
        session_update_age_seconds=_get_int(
            os.getenv("SESSION_UPDATE_AGE_SECONDS"), defaults.session_update_age_seconds
        ),
        openai_api_key=os.getenv("OPENAI_API_KEY", defaults.openai_api_key),
        transcription_model=os.getenv("TRANSCRIPTION_MODEL", defaults.transcription_model),
        transcription_language=os.getenv("TRANSCRIPTION_LANGUAGE", defaults.transcription_language),
        transcription_api_url=os.getenv("TRANSCRIPTION_API_URL", defaults.transcription_api_url),
        s3_bucket=os.getenv("S3_BUCKET", defaults.s3_bucket),
        s3_region=os.getenv("S3_REGION", defaults.s3_region),
        s3_endpoint=os.getenv("S3_ENDPOINT", defaults.s3_endpoint),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", defaults.aws_access_key_id),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", defaults.aws_secret_access_key),
        storage_public_base_url=os.getenv("STORAGE_PUBLIC_BASE_URL", defaults.storage_public_base_url),
        frontend_urls=_get_list(os.getenv("FRONTEND_URL"), defaults.frontend_urls),
    )


def validate_runtime_config(settings: Settings) -> None:
    if not settings.is_production:
        return
    if settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")

    missing = [
        name
        for name, value in (
            ("DATABASE_URL", settings.database_url != DEFAULT_DATABASE_URL),
            ("OPENAI_API_KEY", settings.openai_api_key),
            ("S3_BUCKET", settings.s3_bucket),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
