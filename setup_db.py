# File: setup_db.py
"""
Creates every table of the transcription workflow on the configured database.
Safe to re-run: existing tables are left as they are.
"""

import logging

from scribe.core.config.logging_setup import configure_logging
from scribe.core.config.settings import settings
from scribe.core.database.base import Base
from scribe.core.database.connection import engine

# Register models on Base
import scribe.core.jobs.models  # noqa: F401
import scribe.features.billing.data.sql_models  # noqa: F401
import scribe.features.transcription.data.sql_models  # noqa: F401

logger = logging.getLogger("setup_db")


def main():
    configure_logging()
    settings.ensure_dirs()

    logger.info(f"Creating schema on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine)
    logger.info(f"✅ Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    main()
