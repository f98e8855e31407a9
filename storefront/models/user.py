"""User model for customers, sellers and admins."""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base


class Role(str, enum.Enum):
    """Closed set of user roles."""

    ADMIN = "admin"
    SELLER = "seller"
    USER = "user"


class User(Base):
    """User record keyed by the external auth uid (``id``)."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
        nullable=False,
    )

    # Back-reference to the store this user owns, set on verification
    store_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
