# File: scribe/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. All feature models (Run, Account, Transcription) inherit from this.
Base = declarative_base()
