import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path("data") / "jobbridge.db"
DEFAULT_LOG_DIR = Path("logs")


def load_env() -> None:
    """Load .env from the working directory if present.
    Values already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def get_db_path() -> Path:
    value = os.environ.get("JOBBRIDGE_DB", "").strip()
    return Path(value) if value else DEFAULT_DB_PATH


def get_log_level() -> str:
    return os.environ.get("JOBBRIDGE_LOG_LEVEL", "INFO").strip().upper() or "INFO"


def get_log_dir() -> Path:
    value = os.environ.get("JOBBRIDGE_LOG_DIR", "").strip()
    return Path(value) if value else DEFAULT_LOG_DIR
