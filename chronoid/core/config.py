from pydantic_settings import BaseSettings

from chronoid.utils.discord_snowflake import DISCORD_EPOCH
from chronoid.utils.duration import Time


class Settings(BaseSettings):
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    EPOCH: int = DISCORD_EPOCH
    WORKER_ID: int = 0
    PROCESS_ID: int = 1
    CACHE_TTL: int = int(Time.MINUTE)
    CACHE_CHECK_INTERVAL: int = int(Time.MINUTE * 10)
    DEFAULT_LOCALE: str = "en"

    class Config:
        env_file = ".env"


settings = Settings()
