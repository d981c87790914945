from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = Field("admin-log-gateway", alias="APP_NAME")
    APP_VERSION: str = Field("1.0.0", alias="APP_VERSION")
    PORT: int = Field(8001, alias="PORT")

    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")
    ALLOWED_CORS_ORIGINS: str = Field("*", alias="ALLOWED_CORS_ORIGINS")

    # Where the monitored services write their logs
    APP_LOG_DIR: str = Field("/var/log/app", alias="APP_LOG_DIR")
    CONSOLE_LOG_DIR: str = Field("/var/log/pm2", alias="CONSOLE_LOG_DIR")
    CONSOLE_PROCESS_NAME: str = Field("api-server", alias="CONSOLE_PROCESS_NAME")
    NGINX_ACCESS_LOG: str = Field("/var/log/nginx/access.log", alias="NGINX_ACCESS_LOG")

    LOGS_MAX_LIMIT: int = Field(100, alias="LOGS_MAX_LIMIT")
    STREAM_POLL_INTERVAL: float = Field(0.25, alias="STREAM_POLL_INTERVAL")
    STREAM_ERROR_BUFFER_TIMEOUT: float = Field(0.5, alias="STREAM_ERROR_BUFFER_TIMEOUT")

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True)

    @property
    def cors_origins_list(self) -> list[str]:
        if self.ALLOWED_CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_CORS_ORIGINS.split(",")]


settings = Settings()
