# File: tests/conftest.py

import pytest
import os
import sys
import tempfile
import logging
import sqlalchemy
from pathlib import Path
from sqlalchemy import create_engine, text
from sqlalchemy_utils import database_exists, create_database

# 1. Add project root to path
sys.path.append(os.getcwd())

# 2. Point the app at a throwaway SQLite database BEFORE settings are imported
TEST_ROOT = Path(tempfile.gettempdir()) / "scribe_tests"
TEST_ROOT.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("USE_SQLITE", "true")
os.environ.setdefault("SQLITE_PATH", str(TEST_ROOT / "scribe_test.db"))
os.environ.setdefault("SCRIBE_DATA_DIR", str(TEST_ROOT / "data"))
os.environ.setdefault("USE_CUDA", "false")

# 3. Import Settings
from scribe.core.config.settings import settings
from scribe.core.database.connection import engine

# 4. Test Engine (same URL as the app)
TEST_ENGINE = create_engine(settings.DATABASE_URL)


@pytest.fixture(scope="session", autouse=True)
def global_setup():
    """
    Runs once per test session.
    Ensures DB exists and silences chatty loggers.
    """
    logging.getLogger("urllib3").setLevel(logging.ERROR)

    if not database_exists(TEST_ENGINE.url):
        create_database(TEST_ENGINE.url)

    # Import all models to ensure they are registered
    from scribe.core.database.base import Base
    import scribe.core.jobs.models
    import scribe.features.billing.data.sql_models
    import scribe.features.transcription.data.sql_models

    # Create tables once
    Base.metadata.create_all(bind=engine)

    yield

    engine.dispose()
    TEST_ENGINE.dispose()


@pytest.fixture(scope="function", autouse=True)
def clean_db(global_setup):
    """
    Runs before EVERY test.
    Detects DB type and cleans tables appropriately.
    """
    from scribe.core.database.base import Base

    # 1. Safety Check: Ensure tables exist
    Base.metadata.create_all(bind=TEST_ENGINE)

    # 2. Clean Data
    with TEST_ENGINE.connect() as conn:
        trans = conn.begin()

        is_sqlite = "sqlite" in str(TEST_ENGINE.url)

        inspector = sqlalchemy.inspect(TEST_ENGINE)
        table_names = inspector.get_table_names()

        if table_names:
            if is_sqlite:
                # No TRUNCATE in SQLite: disable FK checks and delete in any order
                conn.execute(text("PRAGMA foreign_keys = OFF;"))
                for table in table_names:
                    conn.execute(text(f'DELETE FROM "{table}";'))
                conn.execute(text("PRAGMA foreign_keys = ON;"))
            else:
                conn.execute(text("SET session_replication_role = 'replica';"))
                for table in table_names:
                    conn.execute(text(f'TRUNCATE TABLE "{table}" CASCADE;'))
                conn.execute(text("SET session_replication_role = 'origin';"))

        trans.commit()

    yield
