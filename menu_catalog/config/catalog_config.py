"""
Catalog Runtime Configuration

Settings are read from environment variables so the same code runs against
a local SQLite file, an in-memory database in tests, or a server database.

Variables:
- CATALOG_DATABASE_URL: SQLAlchemy URL (default: sqlite:///./menu_catalog.db)
- CATALOG_SQL_ECHO: Echo SQL statements ('true' / 'false')
- CATALOG_LOG_LEVEL: Root log level name
- CATALOG_DEFAULT_PAGE_SIZE / CATALOG_MAX_PAGE_SIZE: Pagination bounds
- CATALOG_NEARBY_RADIUS_KM: Default radius for nearby searches
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from menu_catalog.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass(frozen=True)
class CatalogSettings:
    """Immutable snapshot of the catalog configuration."""

    database_url: str = "sqlite:///./menu_catalog.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    default_page_size: int = 50
    max_page_size: int = 1000
    nearby_radius_km: float = 3.0

    def clamp_limit(self, limit: Optional[int]) -> int:
        """Apply the default page size and the upper bound to a requested limit."""
        if not limit or limit < 1:
            return self.default_page_size
        return min(limit, self.max_page_size)


def _read_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    return raw.lower() in ('true', '1', 'yes')


def _read_number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {key}: {raw!r}", [key])


def load_settings(env: Optional[Mapping[str, str]] = None) -> CatalogSettings:
    """
    Build settings from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        CatalogSettings instance

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed or the
            page size bounds are inconsistent
    """
    env = os.environ if env is None else env
    defaults = CatalogSettings()

    settings = CatalogSettings(
        database_url=env.get('CATALOG_DATABASE_URL', defaults.database_url),
        sql_echo=_read_bool(env, 'CATALOG_SQL_ECHO', defaults.sql_echo),
        log_level=env.get('CATALOG_LOG_LEVEL', defaults.log_level).upper(),
        default_page_size=_read_number(env, 'CATALOG_DEFAULT_PAGE_SIZE', defaults.default_page_size, int),
        max_page_size=_read_number(env, 'CATALOG_MAX_PAGE_SIZE', defaults.max_page_size, int),
        nearby_radius_km=_read_number(env, 'CATALOG_NEARBY_RADIUS_KM', defaults.nearby_radius_km, float),
    )

    if settings.default_page_size < 1 or settings.default_page_size > settings.max_page_size:
        raise ConfigurationError(
            "CATALOG_DEFAULT_PAGE_SIZE must be between 1 and CATALOG_MAX_PAGE_SIZE",
            ['CATALOG_DEFAULT_PAGE_SIZE', 'CATALOG_MAX_PAGE_SIZE'],
        )
    return settings


def configure_logging(level: Optional[str] = None) -> None:
    """Install the catalog log format on the root logger."""
    level_name = (level or load_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logger.info(f"Logging configured at {level_name}")


settings = load_settings()
