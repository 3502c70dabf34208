"""
Fixed constants - values that rarely change

Paths are always pathlib.Path so they work on Windows and Linux alike.
"""

from pathlib import Path


# Project root (two levels above this file: core/constants.py -> project/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """Default values"""

    ENVIRONMENT: str = "development"

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # Header carrying the tenant resolved by the upstream auth layer
    TENANT_HEADER: str = "X-Tenant-ID"


class Paths:
    """Project path constants (pathlib, OS independent)"""

    # Directories
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    WORKER_LOGS_DIR: Path = LOGS_DIR / "worker"

    # Settings file
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB files
    PROD_DB: Path = DATA_DIR / "mahall_accounts_prod.db"
    DEV_DB: Path = DATA_DIR / "mahall_accounts_dev.db"
