from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Rubrik Connection
    RUBRIK_HOST: str = Field(default="rubrik.example.com", description="Rubrik cluster IP or Hostname")
    RUBRIK_PORT: int = Field(default=443, description="Rubrik API Port")
    RUBRIK_USERNAME: str = Field(default="", description="Rubrik API Username")
    RUBRIK_PASSWORD: str = Field(default="", description="Rubrik API Password")

    # Derived URL (can be overridden, but usually constructed)
    RUBRIK_BASE_URL: str = Field(default="", description="Full Base URL")

    # Security
    RUBRIK_VERIFY_SSL: bool = Field(
        default=True, description="Verify SSL Certificates (set to false only for self-signed clusters)"
    )
    API_SECRET_TOKEN: str = Field(default="", description="API Key for the stats endpoints")

    # Requests
    RUBRIK_TIMEOUT: float = Field(default=20, description="Per-request timeout in seconds")
    RUBRIK_CONTENT_TYPE: str = Field(default="text/JSON", description="Content-Type header sent to the cluster")
    RUBRIK_RELOGIN_ON_EXPIRY: bool = Field(
        default=False, description="Log in again and retry once when the cluster answers 401"
    )
    RUBRIK_STRICT_STATS: bool = Field(
        default=False, description="Raise on failed stats requests instead of returning zero values"
    )

    # App Config
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO", description="Logging Level (DEBUG, INFO, WARNING, ERROR)")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=True)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.RUBRIK_BASE_URL:
            self.RUBRIK_BASE_URL = f"https://{self.RUBRIK_HOST}:{self.RUBRIK_PORT}"


settings = Settings()
