import itertools
import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


# =============================================================================
# Backend index declarations
# =============================================================================


class IndexDeclaration(BaseModel):
    """A composite index deployed on the provider collection.

    Mirrors an entry of the managed backend's index file: equality fields
    (any order) followed by the ordering fields.
    """

    equality: list[str] = []
    order_by: list[str] = []


# Equality filters the search form can combine, in any subset
SEARCH_EQUALITY_FIELDS: list[str] = ["type", "city", "accessibility", "home_visits", "available_24_7"]


def search_indexes() -> list[IndexDeclaration]:
    """One rating-ordered index per subset of the search form's filters."""
    return [
        IndexDeclaration(equality=["verified", *combo], order_by=["rating"])
        for size in range(len(SEARCH_EQUALITY_FIELDS) + 1)
        for combo in itertools.combinations(SEARCH_EQUALITY_FIELDS, size)
    ]


DEFAULT_INDEXES: list[IndexDeclaration] = [
    *search_indexes(),
    IndexDeclaration(equality=["verified"], order_by=["rating", "view_count"]),
]


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by CITYHEALTH_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        config_file = os.environ.get("CITYHEALTH_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseSettings):
    name: str = "CityHealth"
    version: str = "1.0.0"
    description: str = "Healthcare provider directory"


class SearchConfig(BaseSettings):
    page_size: int = 20
    cache_ttl_seconds: float = 300.0  # 5 minutes
    cache_max_entries: int = 50
    max_cursors_per_context: int = 20
    # Walk forward through missing pages instead of raising CursorNotAvailableError
    resolve_missing_cursors: bool = True
    history_limit: int = 10


class SuggestionsConfig(BaseSettings):
    limit: int = 10
    per_strategy: int = 3
    popular_limit: int = 5
    emergency_limit: int = 2
    history_types: int = 2  # Distinct service types taken from search history
    strategy_timeout_seconds: float = 3.0
    interaction_limit: int = 10


class NavigationConfig(BaseSettings):
    # http(s) URL or local directory holding page templates; empty uses the bundled pages
    templates_url: str = ""
    login_path: str = "/auth"


class I18nConfig(BaseSettings):
    supported: list[str] = ["ar", "fr", "en"]
    rtl: list[str] = ["ar"]
    fallback: str = "en"
    locales_dir: Path | None = None  # Defaults to the bundled locales
    # http(s) base URL serving <url>/locales/<language>.json; overrides locales_dir when set
    locales_url: str = ""


class DatabaseConfig(BaseSettings):
    url: str | None = None  # None selects the in-memory provider store
    echo: bool = False
    indexes: list[IndexDeclaration] = DEFAULT_INDEXES


class StorageConfig(BaseSettings):
    images_dir: Path = Path("~/.local/share/cityhealth/images")
    public_base_url: str = "http://localhost:8000/images"


class StateConfig(BaseSettings):
    dir: Path = Path("~/.local/state/cityhealth")


class LoggingConfig(BaseSettings):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from CITYHEALTH_LOG_FILE env var."""
        return os.environ.get("CITYHEALTH_LOG_FILE")


class Config(BaseSettings):
    server: Server = Server()
    search: SearchConfig = SearchConfig()
    suggestions: SuggestionsConfig = SuggestionsConfig()
    navigation: NavigationConfig = NavigationConfig()
    i18n: I18nConfig = I18nConfig()
    database: DatabaseConfig = DatabaseConfig()
    storage: StorageConfig = StorageConfig()
    state: StateConfig = StateConfig()
    logging: LoggingConfig = LoggingConfig()

    class Config:
        env_prefix = "CITYHEALTH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"  # Allows CITYHEALTH_SEARCH__PAGE_SIZE override

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - CITYHEALTH_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all loggers pick up
    the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
