from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    ENV: str = "prod"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str

    JWT_SECRET: str
    JWT_ACCESS_MINUTES: int = 60 * 24

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_POOL_RECYCLE_SECONDS: int = 1800

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"
    SECURITY_HEADERS_ENABLED: bool = True

    # Session defaults (admin may override on create)
    DEFAULT_STARTING_RATING: float = 1500
    DEFAULT_RATED_POINT_VALUE: float = 7
    DEFAULT_CUP_POINT_VALUE: float = 1000

    DUEL_HISTORY_LIMIT: int = 10

settings = Settings()
