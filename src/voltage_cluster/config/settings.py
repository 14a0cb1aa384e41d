from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VOLTAGE_CLUSTER_")

    log_json: bool = True
    log_level: str = "INFO"
    clustering_config_path: Path = Path("config/clustering.yaml")


@lru_cache
def get_settings() -> Settings:
    return Settings()
