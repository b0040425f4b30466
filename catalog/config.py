"""
Configuration for the catalog service, read from the environment (and a local .env).
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """
    Runtime settings. An empty data_file keeps the catalog in memory only;
    an empty collation_locale takes name-sort collation from LANG / LC_ALL.
    """

    data_file: Optional[str] = "data/products.json"
    seed: bool = True
    discard_corrupt: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    collation_locale: str = ""


def get_settings() -> Settings:
    return Settings(
        data_file=os.getenv("CATALOG_DATA_FILE", "data/products.json") or None,
        seed=_env_bool("CATALOG_SEED", True),
        discard_corrupt=_env_bool("CATALOG_DISCARD_CORRUPT", False),
        cors_origins=_env_list("CATALOG_CORS_ORIGINS", "*"),
        log_level=os.getenv("CATALOG_LOG_LEVEL", "INFO").upper(),
        collation_locale=os.getenv("CATALOG_LOCALE", ""),
    )
