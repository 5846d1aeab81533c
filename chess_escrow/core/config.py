"""
Process configuration (read from the environment once) and logging setup.

NOTE: the on-ledger configuration (admin, minimum bet, nonce counter) is not process configuration.
It is written by Initialize and lives in the contract_config table.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

CONTRACT_NAME = "chess-escrow"
CONTRACT_VERSION = "0.1.0"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///chess_escrow.db"
    echo_sql: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.environ.get("CHESS_ESCROW_DATABASE_URL", Settings.database_url),
        echo_sql=os.environ.get("CHESS_ESCROW_ECHO_SQL", "0").lower() in _TRUTHY,
        log_level=os.environ.get("CHESS_ESCROW_LOG_LEVEL", Settings.log_level).upper(),
    )


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
