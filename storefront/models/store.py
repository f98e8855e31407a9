"""Store model for seller tenants."""

import enum
from typing import Any

from sqlalchemy import JSON, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base


class StoreStatus(str, enum.Enum):
    """Approval status of a seller's store."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Store(Base):
    """A seller's store.

    Each store is owned by exactly one user (``owner_uid``) and scoped
    products reference it by ``store_id``. Only verified stores appear in
    the public catalog.
    """

    __tablename__ = "stores"

    owner_uid: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    store_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)

    status: Mapped[StoreStatus] = mapped_column(
        Enum(StoreStatus, name="store_status", values_callable=lambda e: [m.value for m in e]),
        default=StoreStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Seller application (product info, social links, sample images)
    application_details: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    # Logo, banner, colors, tagline, description
    branding: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    shipping_policy: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Store {self.store_name} ({self.status.value})>"
