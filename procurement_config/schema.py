"""
Pricing configuration schema.

Defines the runtime settings of the procurement pricing stack.  YAML files
are parsed into these types by the loader; callers only ever see the
frozen ``PricingConfig`` returned by ``procurement_config.get_active_config``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from procurement_kernel.domain.catalog import RankingCriterion


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the synchronized catalog lives."""

    url: str = "sqlite://"
    echo: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class PricingConfig:
    """
    Configuration of the pricing services.

    ``default_criterion`` is used by best-offer queries when the request
    carries no criteria.  An unknown criteria value in a request means
    "priority", whatever the default is.
    """

    name: str
    default_criterion: RankingCriterion = RankingCriterion.PRIORITY
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""
