# File: scribe/core/config/settings.py

import os
import shutil
from pathlib import Path


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    # --- Paths ---
    # scribe/core/config/settings.py -> scribe/core/config -> scribe/core -> scribe -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = Path(os.getenv("SCRIBE_DATA_DIR", str(BASE_DIR / "data")))
    TEMP_DIR: Path = Path(os.getenv("SCRIBE_TEMP_DIR", str(DATA_DIR / "tmp")))

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "scribe_db")

    @property
    def DATABASE_URL(self) -> str:
        # Only fallback to SQLite if explicitly requested.
        if _env_bool("USE_SQLITE"):
            return f"sqlite:///{os.getenv('SQLITE_PATH', './scribe.db')}"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")

    # --- Speech-to-text Provider ---
    # "whisper" runs the model locally, "openai" calls the hosted endpoint.
    STT_PROVIDER: str = os.getenv("STT_PROVIDER", "whisper")
    WHISPER_DEVICE: str = "cuda" if _env_bool("USE_CUDA", "true") else "cpu"
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_API_URL: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1")
    OPENAI_TRANSCRIPTION_MODEL: str = os.getenv("OPENAI_TRANSCRIPTION_MODEL", "whisper-1")
    PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "120"))

    # --- Media Limits ---
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024)))
    MAX_WINDOW_SECONDS: float = float(os.getenv("MAX_WINDOW_SECONDS", "600"))
    FALLBACK_DURATION_SECONDS: float = float(os.getenv("FALLBACK_DURATION_SECONDS", "300"))
    SUPPORTED_FORMATS = ("mp3", "mp4", "mpeg", "mpga", "m4a", "ogg", "oga", "wav", "webm")

    # --- Workflow Policy ---
    STEP_MAX_ATTEMPTS: int = int(os.getenv("STEP_MAX_ATTEMPTS", "3"))
    RETRY_BACKOFF_SECONDS: float = float(os.getenv("RETRY_BACKOFF_SECONDS", "1"))
    REFUND_ON_FAILURE: bool = _env_bool("REFUND_ON_FAILURE")
    # "segment_end" or "nominal"
    AGGREGATE_OFFSET_MODE: str = os.getenv("AGGREGATE_OFFSET_MODE", "segment_end")

    # --- Pricing (credits per started minute) ---
    PRICE_PER_MINUTE_TINY: int = int(os.getenv("PRICE_PER_MINUTE_TINY", "1"))
    PRICE_PER_MINUTE_BASE: int = int(os.getenv("PRICE_PER_MINUTE_BASE", "2"))
    PRICE_PER_MINUTE_SMALL: int = int(os.getenv("PRICE_PER_MINUTE_SMALL", "3"))
    PRICE_PER_MINUTE_MEDIUM: int = int(os.getenv("PRICE_PER_MINUTE_MEDIUM", "5"))
    PRICE_PER_MINUTE_LARGE: int = int(os.getenv("PRICE_PER_MINUTE_LARGE", "8"))

    # --- Notifications ---
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_API_URL: str = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org")

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.TEMP_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
