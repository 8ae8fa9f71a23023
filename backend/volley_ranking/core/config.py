from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    offline_queue_url: str = "sqlite+pysqlite:///./offline_events.db"

    ranking_min_sample: int = 5
    ranking_default_top_n: int = 10

    overall_weight_quantitative: float = 0.7
    overall_weight_qualitative: float = 0.3
    fundamento_weight_quantitative: float = 0.6
    fundamento_weight_qualitative: float = 0.4

    weight_domain_offset: float = 2.0
    weight_domain_width: float = 5.0

    remote_timeout_seconds: float = 10.0
    local_id_prefix: str = "local_"
    max_sync_attempts: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
