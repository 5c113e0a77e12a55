"""
Process bootstrap for the pricing stack.

``bootstrap()`` is called once at startup (or by the CLI/HTTP layer's app
factory): it loads the active configuration, configures structured logging
and initializes the database engine.  ``pricing_service()`` then builds a
PricingService bound to one session.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.orm import Session

from procurement_config import PricingConfig, get_active_config
from procurement_kernel.db.engine import create_tables, init_engine_from_url
from procurement_kernel.logging_config import configure_logging, get_logger
from procurement_kernel.selectors.catalog_selector import CatalogSelector
from procurement_services.pricing_service import PricingService

logger = get_logger("services.runtime")


def bootstrap(
    config: PricingConfig | None = None,
    config_path: Path | None = None,
    create_schema: bool = False,
) -> PricingConfig:
    """
    Apply a configuration to the process.

    Args:
        config: Already loaded configuration; loaded from ``config_path``
            (or the default set) when None.
        config_path: YAML file to load when ``config`` is None.
        create_schema: Create all tables after initializing the engine.
    """
    if config is None:
        config = get_active_config(config_path)

    configure_logging(level=config.logging.level)
    init_engine_from_url(config.database.url, echo=config.database.echo)
    if create_schema:
        create_tables()

    logger.info(
        "runtime_bootstrapped",
        extra={
            "config_name": config.name,
            "default_criterion": config.default_criterion.value,
        },
    )
    return config


def pricing_service(session: Session, config: PricingConfig | None = None) -> PricingService:
    """PricingService reading from ``session`` through a CatalogSelector."""
    return PricingService(CatalogSelector(session), config=config)
