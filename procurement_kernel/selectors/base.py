"""
Module: procurement_kernel.selectors.base
Responsibility: Shared plumbing for account-scoped, read-only catalog queries.
Architecture position: Kernel > Selectors.  May import db/ and models/.
    MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Selectors never add, delete, flush or commit.  The caller owns the
      session, and with it the snapshot the engines price against.
    - ``scoped`` is the only way selectors start a query, so every
      statement filters on the owning account.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from procurement_kernel.domain.catalog import EntityId
from procurement_kernel.logging_config import get_logger

logger = get_logger("selectors")


class BaseSelector:
    """Holds the caller's session; subclasses return DTOs, never ORM rows."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def scoped(model: Any, account_id: EntityId) -> Select:
        """``SELECT model WHERE model.account_id = account_id``."""
        return select(model).where(model.account_id == account_id)

    @staticmethod
    def coerce_ids(ids: Sequence[EntityId]) -> list[UUID]:
        """Request ids as UUIDs, in order; ids that are not UUIDs are dropped."""
        result: list[UUID] = []
        for value in ids:
            if isinstance(value, UUID):
                result.append(value)
                continue
            try:
                result.append(UUID(str(value)))
            except ValueError:
                logger.debug("malformed_entity_id", extra={"entity_id": str(value)})
        return result
