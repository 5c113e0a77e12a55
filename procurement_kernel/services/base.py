"""
BaseService -- shared plumbing for write-side catalog services.

Services flush within the caller's transaction and never commit or roll
back: the ERP sync worker or HTTP handler owns the transaction.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from sqlalchemy.orm import Session

from procurement_kernel.domain.catalog import EntityId
from procurement_kernel.exceptions import AccountScopeError, CatalogError

M = TypeVar("M")


class BaseService:

    def __init__(self, session: Session):
        self.session = session

    def _load(
        self,
        model: type[M],
        entity_id: EntityId,
        not_found: Callable[[], CatalogError],
    ) -> M:
        """Row by primary key, or raise the error built by ``not_found``."""
        row = self.session.get(model, entity_id)
        if row is None:
            raise not_found()
        return row

    def _load_in_account(
        self,
        model: type[M],
        entity_id: EntityId,
        account_id: EntityId,
        entity_type: str,
        not_found: Callable[[], CatalogError],
    ) -> M:
        """Like ``_load``, and the row must belong to ``account_id``."""
        row: Any = self._load(model, entity_id, not_found)
        if str(row.account_id) != str(account_id):
            raise AccountScopeError(account_id, entity_type, entity_id)
        return row
