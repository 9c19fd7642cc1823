from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

DEFAULT_OPENING_HOURS = (
    "09:00,09:30,10:00,10:30,11:00,11:30,"
    "13:30,14:00,14:30,15:00,15:30,16:00,16:30,17:00,17:30"
)


def _split_csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # JWT
    secret_key: str
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    password_reset_expire_minutes: int = 30
    algorithm: str = "HS256"
    bcrypt_rounds: int = 12

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Booking rules
    salon_timezone: str = "America/Sao_Paulo"
    opening_hours: str = DEFAULT_OPENING_HOURS
    closed_weekdays: str = "6,0"  # Python weekday numbers: Sunday, Monday
    slot_step_minutes: int = 30
    booking_window_days: int = 60
    admin_emails: str = ""
    token_cleanup_interval_hours: int = 24

    # Env
    env: str = "development"

    # Email (SMTP). Leave smtp_host empty to disable sending.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Cardoso Sobrancelhas"
    professional_email: str = ""

    # Branding and contact used in emails and calendar events
    site_name: str = "Cardoso Sobrancelhas"
    site_url: str = "http://localhost:5173"
    contact_phone: str = "(11) 99999-9999"
    contact_address: str = "Rua Exemplo, 123 - São Paulo, SP"

    # Google Calendar push. Leave empty to only log the event payload.
    google_calendar_id: str = ""
    google_calendar_token: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def opening_hours_list(self) -> list[str]:
        return _split_csv(self.opening_hours)

    @property
    def closed_weekdays_set(self) -> set[int]:
        return {int(d) for d in _split_csv(self.closed_weekdays)}

    @property
    def admin_emails_list(self) -> list[str]:
        return [e.lower() for e in _split_csv(self.admin_emails)]

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password and self.from_email)

    @property
    def calendar_enabled(self) -> bool:
        return bool(self.google_calendar_id and self.google_calendar_token)


settings = Settings()
