"""
procurement_config -- single public entrypoint for pricing configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  YAML loading is internal and never exposed to callers.

Architecture position:
    Configuration -- sits above ``procurement_kernel`` and below
    ``procurement_services``.  The kernel and the engines MUST NEVER import
    from ``procurement_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ValueError`` -- schema validation failures.
"""

from __future__ import annotations

from pathlib import Path

from procurement_config.loader import load_pricing_config
from procurement_config.schema import DatabaseConfig, LoggingConfig, PricingConfig
from procurement_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> PricingConfig:
    """The ONLY public configuration entrypoint.

    Guarantees:
        - The returned ``PricingConfig`` has passed schema validation.
        - A ``PROCUREMENT_CONFIG_TRACE`` log entry is emitted on every
          successful call.

    Non-goals:
        - Does NOT cache configs across calls.

    Args:
        config_path: Override path to a YAML file.  Defaults to
            procurement_config/sets/default.yaml.
    """
    path = config_path or _DEFAULT_CONFIG_PATH
    config = load_pricing_config(path)

    _logger.info(
        "PROCUREMENT_CONFIG_TRACE",
        extra={
            "trace_type": "PROCUREMENT_CONFIG_TRACE",
            "config_name": config.name,
            "config_path": str(path),
            "checksum": config.checksum,
            "default_criterion": config.default_criterion.value,
        },
    )
    return config


__all__ = [
    "DatabaseConfig",
    "LoggingConfig",
    "PricingConfig",
    "get_active_config",
]
