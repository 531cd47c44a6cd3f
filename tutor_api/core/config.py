import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


DEFAULT_JWT_SECRET = "change-me"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed around."""

    app_env: str = "development"
    database_url: str = "postgresql://localhost/tutor_marketplace"
    database_echo: bool = False

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24

    bcrypt_rounds: int = 12

    cors_allowed_origins: list[str] = field(default_factory=lambda: ["http://localhost:4200"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            app_env=os.getenv("APP_ENV", "development"),
            database_url=os.getenv("DATABASE_URL", "postgresql://localhost/tutor_marketplace"),
            database_echo=_get_bool(os.getenv("DATABASE_ECHO"), default=False),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", str(60 * 24))),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            cors_allowed_origins=_get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:4200"]),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


def validate_runtime_config(settings: Settings) -> None:
    if settings.is_production and settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if not 4 <= settings.bcrypt_rounds <= 31:
        raise RuntimeError("BCRYPT_ROUNDS must be between 4 and 31.")
