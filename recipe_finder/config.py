import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parent.parent

AuthModeName = Literal["api_key", "user_token_env", "user_token_autocreate"]


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    catalog_path: Path = ROOT_DIR / "data" / "recipes.json"
    database_url: str = "sqlite:///./favorites.db"

    match_mode: Literal["exact", "contains"] = "contains"
    match_threshold: float = 50.0
    suggestion_limit: int = 10
    featured_count: int = 6

    log_level: str = "INFO"

    logmeal_base_url: str = "https://api.logmeal.es"
    logmeal_api_key: str | None = None
    logmeal_user_token: str | None = None
    logmeal_username: str = "recipe-finder"
    logmeal_auth_mode: AuthModeName = "api_key"
    recognition_min_confidence: float = 0.3
    recognition_timeout: float = 30.0


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    # module-level loggers inherit this
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
