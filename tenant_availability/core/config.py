from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_ssl: bool = True

    # JWT (tokens are issued by the identity service; we only verify them)
    secret_key: str
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # IANA zone used to decide what "today" and "now" mean for the tenant.
    # Empty means the server's local clock.
    timezone: str = ""

    # Appointment defaults used when a tenant has no settings row
    default_appointment_duration: int = 30
    default_buffer_time: int = 0
    default_min_notice_minutes: int = 60
    default_max_future_days: int = 30
    default_reminder_time_hours: int = 24

    # When true, a date exception may open a weekday that is marked closed.
    # Off by default: a closed weekday short-circuits before exceptions are read.
    exceptions_override_closed_days: bool = False

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
