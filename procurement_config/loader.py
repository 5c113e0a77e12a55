"""
Configuration Loader (``procurement_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``procurement_config.schema`` dataclasses.  The single public entry point
for runtime config is ``procurement_config.get_active_config()``.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` with descriptive messages; unknown
  ranking criteria or log levels are rejected, never defaulted.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``name`` key  -> ``KeyError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from procurement_config.schema import DatabaseConfig, LoggingConfig, PricingConfig
from procurement_kernel.domain.catalog import RankingCriterion

_VALID_CRITERIA = {c.value for c in RankingCriterion}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning an empty dict for an empty document."""
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return data


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    return DatabaseConfig(
        url=str(data.get("url", DatabaseConfig.url)),
        echo=bool(data.get("echo", False)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", LoggingConfig.level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level}")
    return LoggingConfig(level=level)


def parse_pricing_config(data: dict[str, Any]) -> PricingConfig:
    """
    Parse a configuration mapping into a PricingConfig.

    Raises:
        KeyError: If ``name`` is missing.
        ValueError: On an unknown default criterion or log level.
    """
    criterion = data.get("default_criterion", RankingCriterion.PRIORITY.value)
    if criterion not in _VALID_CRITERIA:
        raise ValueError(
            f"default_criterion must be one of {sorted(_VALID_CRITERIA)}, got {criterion!r}"
        )
    return PricingConfig(
        name=data["name"],
        default_criterion=RankingCriterion(criterion),
        database=parse_database(data.get("database") or {}),
        logging=parse_logging(data.get("logging") or {}),
        checksum=compute_checksum(data),
    )


def load_pricing_config(path: Path) -> PricingConfig:
    return parse_pricing_config(load_yaml(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
