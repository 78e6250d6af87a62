"""Runtime configuration for the orders service.

Settings are read from environment variables. ``DATABASE_URL`` wins when
set; otherwise the URL is assembled from the individual ``DB_*`` variables
so the service can be pointed at the ``orders-db`` container without extra
wiring.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _default_database_url() -> str:
    host = os.getenv("DB_HOST", "orders-db")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "orders")
    user = os.getenv("DB_USER", "orders_user")
    password = os.getenv("DB_PASSWORD", "orders-pass")
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        database_url: SQLAlchemy URL of the order store.
        db_startup_timeout: Seconds to wait for the database to accept
            connections during startup.
        log_level: Level name applied to the ``orders`` logger.
        seed_demo_data: When True, two demo orders are upserted at startup.
        cors_allow_origins: Origins allowed by the CORS policy; ``*`` allows
            any origin.
    """

    database_url: str
    db_startup_timeout: float = 30.0
    log_level: str = "INFO"
    seed_demo_data: bool = False
    cors_allow_origins: tuple = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        return cls(
            database_url=os.getenv("DATABASE_URL") or _default_database_url(),
            db_startup_timeout=float(os.getenv("DB_STARTUP_TIMEOUT", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            seed_demo_data=_env_bool("SEED_DEMO_DATA"),
            cors_allow_origins=tuple(
                o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
            ),
        )
