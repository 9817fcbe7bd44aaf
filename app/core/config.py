from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "doggy_walking"
    # e.g. sqlite:// for tests or a local run
    DATABASE_URL_OVERRIDE: Optional[str] = None

    # when unset, token verification and FCM push are disabled
    FIREBASE_CREDENTIALS: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "America/Mexico_City"

    TRACKING_INTERVAL_SECONDS: int = 600
    QR_EXPIRY_HOURS: int = 24
    FREE_PLAN_MAX_CLIENTS: int = 6
    REALTIME_QUEUE_SIZE: int = 100

    SUPPORT_WHATSAPP_PHONE: str = "524491431962"
    SUPPORT_WHATSAPP_MESSAGE: str = "Hola, necesito ayuda con Doggy-walking"

    class Config:
        env_file = ".env"     # loads .env from the project root

    @property
    def DATABASE_URL(self) -> str:
        """Connection URL used by SQLAlchemy (MySQL unless overridden)"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


# import this object wherever configuration is needed
settings = Settings()
