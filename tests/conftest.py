"""
Shared pytest fixtures

Temporary directories, settings.yaml variants and a temporary database
with the ledger schema initialised.
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema


@pytest.fixture
def temp_dir() -> Path:
    """OS independent temporary directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """settings.yaml for development"""
    content = """# test settings.yaml
environment: development

web:
  host: 0.0.0.0
  port: 9000

logging:
  level: DEBUG
"""
    path = temp_dir / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_settings_file_production(temp_dir: Path) -> Path:
    """settings.yaml for production with a DB override"""
    content = f"""environment: production

database:
  path: {(temp_dir / "prod.db").as_posix()}
"""
    path = temp_dir / "settings_prod.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_settings_file_invalid_environment(temp_dir: Path) -> Path:
    """settings.yaml with an unknown environment"""
    path = temp_dir / "settings_invalid.yaml"
    path.write_text("environment: staging\n", encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def db(temp_dir: Path) -> SQLiteAdapter:
    """Temporary DB with the schema initialised"""
    adapter = SQLiteAdapter(temp_dir / "test_accounts.db")
    await adapter.connect()
    await init_schema(adapter)

    yield adapter

    await adapter.close()
