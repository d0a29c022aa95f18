from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Process Status"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Status documents
    STATUS_NAMESPACE: str = "ecs_process"
    STATUS_TTL_SECONDS: int = 24 * 3600
    IDENTITY_FIELD: str = "PROCESS_ID"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
