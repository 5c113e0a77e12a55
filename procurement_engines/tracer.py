"""
procurement_engines.tracer -- PROCUREMENT_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine entry point and logs one trace
    record per call: engine name and version, a fingerprint of the pricing
    inputs (quantities, offers, order lines), the outcome and the duration.
    Two calls with the same fingerprint priced the same snapshot, which is
    how a disputed plan is matched to the catalog it was computed from.

Architecture position:
    Engines -- support code; emits a log record, performs no other I/O.

Invariants enforced:
    - The fingerprint depends only on the values of the selected arguments,
      whether they were passed positionally or by keyword.  Decimals keep
      their scale ("8.00" and "8" differ), dict keys are sorted, sequences
      keep their order (offer order matters to the planner).
    - Iterators are never consumed for fingerprinting.

Usage:
    @traced_engine("procurement_planner", "1.0", fingerprint_fields=("required_quantity",))
    def plan(self, required_quantity, ranked_offers):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from procurement_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_TYPE = "PROCUREMENT_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        inner = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}" for f in fields(value)
        )
        return f"{type(value).__name__}({inner})"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    # Generators and other one-shot iterables are not materialized
    return f"<{type(value).__name__}>"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """16-hex-char SHA-256 prefix over the selected arguments; absent ones count as null."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


@dataclass(frozen=True)
class EngineTrace:
    """One engine invocation, as written to the log."""

    engine_name: str
    engine_version: str
    function: str
    input_fingerprint: str
    duration_ms: float
    outcome: str

    def as_extra(self) -> dict[str, Any]:
        return {
            "trace_type": TRACE_TYPE,
            "engine_name": self.engine_name,
            "engine_version": self.engine_version,
            "function": self.function,
            "input_fingerprint": self.input_fingerprint,
            "duration_ms": self.duration_ms,
            "outcome": self.outcome,
        }


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point with a PROCUREMENT_ENGINE_TRACE record.

    The record is written whether the call returns or raises; ``outcome``
    is "ok" or the exception class name.  Exceptions propagate unchanged.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs).arguments
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound)

            outcome = "ok"
            started = time.monotonic()
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                outcome = type(exc).__name__
                raise
            finally:
                trace = EngineTrace(
                    engine_name=engine_name,
                    engine_version=engine_version,
                    function=func.__qualname__,
                    input_fingerprint=fingerprint,
                    duration_ms=round((time.monotonic() - started) * 1000, 2),
                    outcome=outcome,
                )
                _logger.info(TRACE_TYPE, extra=trace.as_extra())

        return wrapper

    return decorator
