"""
Settings loader

Loads settings.yaml and exposes the database / web / logging settings.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import Environment


@dataclass(frozen=True)
class WebConfig:
    """HTTP server settings"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """Application settings (loaded from settings.yaml)

    Immutable so nothing can change it at runtime.
    """

    environment: Environment
    db_path: Path
    web: WebConfig
    log_level: int = logging.INFO


class SettingsLoadError(Exception):
    """Raised when settings.yaml cannot be loaded"""

    pass


def get_db_path(environment: Environment | str) -> Path:
    """Default DB path for an environment

    Args:
        environment: PRODUCTION / DEVELOPMENT (enum or string)

    Returns:
        DB file path
    """
    if isinstance(environment, str):
        environment = Environment(environment.lower())

    if environment == Environment.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Optional nested mapping; an empty key counts as absent"""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"'{name}' in settings.yaml must be a mapping")
    return section


def _parse_log_level(value: Any) -> int:
    if value is None:
        value = Defaults.LOG_LEVEL
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise SettingsLoadError(f"Invalid logging.level: '{value}'")
    return level


def load_config(path: Path | None = None) -> AppConfig:
    """Load settings.yaml

    A missing file yields the development defaults.

    Args:
        path: settings.yaml path (None uses the default location)

    Returns:
        AppConfig instance

    Raises:
        SettingsLoadError: malformed file or invalid values
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        environment = Environment(Defaults.ENVIRONMENT)
        return AppConfig(
            environment=environment,
            db_path=get_db_path(environment),
            web=WebConfig(),
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"Failed to parse settings.yaml: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml must contain a mapping")

    env_str = str(data.get("environment", Defaults.ENVIRONMENT)).lower()
    try:
        environment = Environment(env_str)
    except ValueError as e:
        valid = [env.value for env in Environment]
        raise SettingsLoadError(
            f"Invalid environment: '{env_str}'. Valid values: {valid}"
        ) from e

    database = _section(data, "database")
    db_override = database.get("path")
    db_path = Path(db_override) if db_override else get_db_path(environment)

    web_data = _section(data, "web")
    try:
        web = WebConfig(
            host=str(web_data.get("host", Defaults.WEB_HOST)),
            port=int(web_data.get("port", Defaults.WEB_PORT)),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"Invalid web settings: {e}") from e

    logging_data = _section(data, "logging")

    return AppConfig(
        environment=environment,
        db_path=db_path,
        web=web,
        log_level=_parse_log_level(logging_data.get("level")),
    )


class Settings:
    """Application settings (singleton)

    Loads settings.yaml once and serves the values from it.
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(settings_path)

    @property
    def environment(self) -> Environment:
        """Current environment"""
        assert self._config is not None
        return self._config.environment

    @property
    def db_path(self) -> Path:
        """DB path for the current environment"""
        assert self._config is not None
        return self._config.db_path

    @property
    def web(self) -> WebConfig:
        """HTTP server settings"""
        assert self._config is not None
        return self._config.web

    @property
    def log_level(self) -> int:
        """Console/file log level"""
        assert self._config is not None
        return self._config.log_level

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (tests)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Return the Settings singleton"""
    return Settings(settings_path)
