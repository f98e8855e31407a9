"""Product model for store catalogs."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base


class Product(Base):
    """A catalog product belonging to exactly one store."""

    __tablename__ = "products"

    store_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (CheckConstraint("stock >= 0", name="stock_non_negative"),)

    def __repr__(self) -> str:
        return f"<Product {self.name} ({self.store_id})>"
