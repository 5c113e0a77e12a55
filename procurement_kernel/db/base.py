"""
Module: procurement_kernel.db.base
Responsibility: Declarative base and shared column conventions for the
    catalog tables synchronized from the ERP.
Architecture position: Kernel > DB.  Imported by every model file.  MUST NOT
    import from models/, services/, selectors/ or outer layers.

Invariants enforced:
    - Every row has a uuid4 primary key stored as a 36-char string, so the
      same schema runs on PostgreSQL and SQLite.
    - Plain Decimal annotations map to Numeric(15, 3) (quantity scale).
      Money columns declare Numeric(15, 2) explicitly.  No float columns.
    - Tenant rows carry a non-null ``account_id`` (AccountScopedMixin);
      rows mirrored from the ERP carry its identifier in ``external_id``.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID stored as String(36); strings and UUIDs bind the same way."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value if isinstance(value, UUID) else UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return UUID(value)


class Base(DeclarativeBase):
    """Declarative base: uuid4 ``id`` plus the catalog type map."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(15, 3),
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base with sync timestamps.

    ``created_at`` doubles as the tie-breaker when offers share a priority,
    so it is set by the database on INSERT and never rewritten.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AccountScopedMixin:
    """Owning account of a tenant row; deleting the account cascades."""

    @declared_attr
    def account_id(cls) -> Mapped[UUID]:
        return mapped_column(
            ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class ExternalIdMixin:
    """ERP identifier of a synchronized row (unique per account)."""

    external_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
