"""
Module: procurement_kernel.models.catalog
Responsibility: ORM persistence for the account-scoped catalog synchronized
    from the ERP: accounts, products, suppliers, offers and order positions,
    plus the coverage link between customer-order and purchase-order lines.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/ (for ``to_dto``).  MUST NOT import from services/ or selectors/.

Invariants enforced:
    - At most one offer per (account, supplier, product): uq_offer_account_supplier_product.
    - Offer.price is Numeric(15, 2); stock and order quantities are Numeric(15, 3).
    - external_id (the ERP identifier) is unique per account for products,
      suppliers and order positions.

Failure modes:
    - IntegrityError on a duplicate offer or external_id within an account.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement_kernel.db.base import (
    AccountScopedMixin,
    Base,
    ExternalIdMixin,
    TrackedBase,
    UUIDString,
)
from procurement_kernel.domain.catalog import (
    Offer,
    OrderPosition,
    OrderPositionType,
    Product,
    Supplier,
)

# ---------------------------------------------------------------------------
# Coverage link (customer-order position -> purchase-order positions)
# ---------------------------------------------------------------------------

order_position_coverage = Table(
    "order_position_coverage",
    Base.metadata,
    Column(
        "customer_position_id",
        UUIDString(),
        ForeignKey("order_positions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "purchase_position_id",
        UUIDString(),
        ForeignKey("order_positions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class AccountModel(TrackedBase):
    """A tenant: every other row is scoped to exactly one account."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True)

    def __repr__(self) -> str:
        return f"<AccountModel {self.name}>"


class ProductModel(AccountScopedMixin, ExternalIdMixin, TrackedBase):
    """A product or product variant (variant -> parent via parent_id)."""

    __tablename__ = "products"

    __table_args__ = (
        UniqueConstraint("account_id", "external_id", name="uq_product_external_id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    article: Mapped[str | None] = mapped_column(String(100), nullable=True)
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )

    def to_dto(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            code=self.code,
            article=self.article,
            parent_id=self.parent_id,
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return f"<ProductModel {self.code or self.name}>"


class SupplierModel(AccountScopedMixin, ExternalIdMixin, TrackedBase):
    """A supplier (counterparty) within an account."""

    __tablename__ = "suppliers"

    __table_args__ = (
        UniqueConstraint("account_id", "external_id", name="uq_supplier_external_id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def to_dto(self) -> Supplier:
        return Supplier(id=self.id, name=self.name, account_id=self.account_id)

    def __repr__(self) -> str:
        return f"<SupplierModel {self.name}>"


class OfferModel(AccountScopedMixin, TrackedBase):
    """
    A supplier's price/stock/priority for one product.

    Guarantees:
        - Unique per (account_id, supplier_id, product_id); writes go through
          OfferService.upsert_offer.
    """

    __tablename__ = "offers"

    __table_args__ = (
        UniqueConstraint(
            "account_id",
            "supplier_id",
            "product_id",
            name="uq_offer_account_supplier_product",
        ),
        Index("idx_offer_account_product", "account_id", "product_id"),
        Index("idx_offer_supplier", "supplier_id"),
    )

    supplier_id: Mapped[UUID] = mapped_column(
        ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    stock: Mapped[Decimal] = mapped_column(Numeric(15, 3), default=Decimal("0"))
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    supplier: Mapped[SupplierModel] = relationship(lazy="joined")
    product: Mapped[ProductModel] = relationship(lazy="joined")

    def to_dto(self) -> Offer:
        return Offer(
            id=self.id,
            product_id=self.product_id,
            supplier_id=self.supplier_id,
            supplier_name=self.supplier.name if self.supplier else "",
            price=self.price,
            stock=self.stock,
            priority=int(self.priority or 0),
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return f"<OfferModel {self.supplier_id}/{self.product_id} p={self.priority}>"


class OrderPositionModel(AccountScopedMixin, ExternalIdMixin, TrackedBase):
    """
    A customer-order or purchase-order line synchronized from the ERP.

    Guarantees:
        - ``purchase_quantity`` is the quantity covered by the linked
          purchase-order positions (maintained by the sync process).
    """

    __tablename__ = "order_positions"

    __table_args__ = (
        UniqueConstraint("account_id", "external_id", name="uq_order_position_external_id"),
        Index("idx_order_position_account_type", "account_id", "type"),
    )

    product_id: Mapped[UUID] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=OrderPositionType.CUSTOMER_ORDER.value
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(15, 3), nullable=False)
    purchase_quantity: Mapped[Decimal] = mapped_column(
        Numeric(15, 3), default=Decimal("0"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))

    product: Mapped[ProductModel] = relationship(lazy="joined")
    covering_positions: Mapped[list["OrderPositionModel"]] = relationship(
        "OrderPositionModel",
        secondary=order_position_coverage,
        primaryjoin=lambda: OrderPositionModel.id == order_position_coverage.c.customer_position_id,
        secondaryjoin=lambda: OrderPositionModel.id == order_position_coverage.c.purchase_position_id,
        lazy="selectin",
    )

    def to_dto(self) -> OrderPosition:
        return OrderPosition(
            id=self.id,
            product_id=self.product_id,
            total_quantity=self.quantity,
            purchase_quantity=self.purchase_quantity,
            price=self.price,
            type=OrderPositionType(self.type),
            product_name=self.product.name if self.product else "",
            product_code=self.product.code if self.product else None,
            account_id=self.account_id,
            covered_by=tuple(p.id for p in self.covering_positions),
        )

    def __repr__(self) -> str:
        return f"<OrderPositionModel {self.external_id} [{self.type}]>"
