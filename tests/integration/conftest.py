import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from cvscan.config.settings import Settings
from cvscan.database.connection import close_pool, get_connection, init_pool
from cvscan.database.models import ScanRecord
from cvscan.database.repositories.scan_repository import ScanRepository

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "cvscan" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "cvscan_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text())
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[int], None, None]:
    scan_ids: list[int] = []
    yield scan_ids
    if not scan_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for scan_id in scan_ids:
                cur.execute("DELETE FROM scans WHERE id = %s", (scan_id,))
        conn.commit()


@pytest.fixture
def seed_scan(integration_cleanup: list[int]) -> ScanRecord:
    scan = ScanRepository().insert_scan(
        file_name="cv.pdf",
        file_path=f"{os.urandom(8).hex()}-cv.pdf",
        file_size=2048,
    )
    integration_cleanup.append(scan.id)
    return scan
