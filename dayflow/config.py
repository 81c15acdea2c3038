from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./dayflow.db"
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    # Reminder defaults for new devices
    default_min_interval_minutes: int = 20
    default_max_interval_minutes: int = 45
    default_fixed_interval_minutes: int = 30

    # Anti-annoyance limits
    min_reminder_spacing_minutes: int = 10
    max_reminders_per_day: int = 20
    auto_snooze_after_dismissals: int = 3
    auto_snooze_duration_minutes: int = 60

    # Focus detection
    deep_focus_minutes: int = 25
    idle_threshold_minutes: int = 10

    class Config:
        env_file = ".env"
        env_prefix = "DAYFLOW_"


settings = Settings()
