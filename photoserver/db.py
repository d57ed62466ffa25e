import asyncio
import logging
from tortoise import Tortoise, connections
from tortoise.exceptions import BaseORMException
from photoserver.config import Settings, settings as default_settings

_logger = logging.getLogger("db")

MODELS = ["photoserver.models"]


def _connection_config(cfg: Settings):
    """Tortoise connection for the photo metadata store.

    DATABASE_URL wins when set (tests use ``sqlite://:memory:``); otherwise a
    pooled MySQL connection is built from the DB_* settings.
    """
    if cfg.DATABASE_URL:
        return cfg.DATABASE_URL.strip().strip('"').strip("'")
    return {
        "engine": "tortoise.backends.mysql",
        "credentials": {
            "host": cfg.DB_HOST,
            "port": cfg.DB_PORT,
            "user": cfg.DB_USERNAME,
            "password": cfg.DB_PASSWORD,
            "database": cfg.DB_TABLE,
            "maxsize": cfg.DB_MAX_OPEN_CONNS,
            "minsize": min(cfg.DB_MAX_IDLE_CONNS, cfg.DB_MAX_OPEN_CONNS),
            "pool_recycle": cfg.DB_CONN_MAX_IDLE_SECONDS,
        },
    }


def build_tortoise_config(cfg: Settings = default_settings) -> dict:
    return {
        "connections": {"default": _connection_config(cfg)},
        "apps": {
            "models": {
                "models": MODELS,
                "default_connection": "default",
            }
        },
        "use_tz": False,
        "timezone": "UTC",
    }


async def init_db(cfg: Settings = default_settings, max_retries: int = 3, delay_seconds: float = 0.5) -> None:
    """Initialize the metadata store connection with retry logic.

    The ``photos`` table is owned by the catalogue that writes it; schemas are
    only generated when DB_GENERATE_SCHEMAS is set (local dev and tests).
    """
    config = build_tortoise_config(cfg)
    for attempt in range(1, max_retries + 1):
        try:
            await Tortoise.init(config=config)
            if cfg.DB_GENERATE_SCHEMAS:
                await Tortoise.generate_schemas(safe=True)
            _logger.info("Database initialized successfully")
            return
        except (BaseORMException, OSError) as exc:
            if attempt == max_retries:
                _logger.error(
                    "Failure connecting to database after %s attempts: %s",
                    attempt,
                    exc,
                )
                raise
            _logger.info(
                "DB init failed (attempt %s/%s): %s; retrying in %.1fs",
                attempt,
                max_retries,
                exc,
                delay_seconds,
            )
            await asyncio.sleep(delay_seconds)


async def close_db() -> None:
    """Close database connections in the current event loop."""
    await connections.close_all()


async def db_healthcheck() -> bool:
    try:
        await connections.get("default").execute_query("SELECT 1")
        return True
    except (BaseORMException, OSError, KeyError) as exc:
        _logger.warning("Database health check failed: %s", exc)
        return False
