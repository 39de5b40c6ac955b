"""Environment configuration and logging setup."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
load_dotenv()  # Load .env file (DATABASE_URL, LOG_LEVEL, ...)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
DEFAULT_SQLITE_FILE = 'role_kits.db'


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str
    reprocess_concurrency: int


def resolve_database_url(raw_url: str = '') -> str:
    """Turn DATABASE_URL into an async SQLAlchemy URL.

    Hosted Postgres URLs start with postgres:// but SQLAlchemy needs an
    explicit async driver.  Without a URL, fall back to a local SQLite file.
    """
    if not raw_url:
        db_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), DEFAULT_SQLITE_FILE)
        return f'sqlite+aiosqlite:///{db_path}'
    if raw_url.startswith('postgres://'):
        return raw_url.replace('postgres://', 'postgresql+asyncpg://', 1)
    if raw_url.startswith('postgresql://'):
        return raw_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
    if raw_url.startswith('sqlite:///'):
        return raw_url.replace('sqlite:///', 'sqlite+aiosqlite:///', 1)
    return raw_url


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, '')
    try:
        value = int(raw) if raw else default
    except ValueError:
        logging.getLogger(__name__).warning('Ignoring non-integer %s=%r', name, raw)
        value = default
    return max(value, minimum)


def load_settings() -> Settings:
    return Settings(
        database_url=resolve_database_url(os.environ.get('DATABASE_URL', '')),
        log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        reprocess_concurrency=_int_env('REPROCESS_CONCURRENCY', 1),
    )


settings = load_settings()


def configure_logging(level: str = None) -> None:
    logging.basicConfig(level=getattr(logging, level or settings.log_level, logging.INFO),
                        format=LOG_FORMAT)
    # SQL echo is noisy at INFO
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
