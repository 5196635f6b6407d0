from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "gymcore"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/gymcore.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Freeze allowance shared by all invoice-item freezes of a member
    MAX_ITEM_FREEZE_DAYS: int = 30

    # Days before plan end at which a renewal reminder is due
    EXPIRY_REMINDER_DAYS: str = "7,3,1"

    @property
    def expiry_reminder_days(self) -> tuple[int, ...]:
        return tuple(
            int(part) for part in self.EXPIRY_REMINDER_DAYS.split(",") if part.strip()
        )


settings = Settings()
