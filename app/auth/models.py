"""User ORM model for JWT authentication.

Owners sign up with email/password.  Every worker also gets a ``users`` row
with role ``worker`` and a synthesized ``{username}@<worker_email_domain>``
email, so both kinds of principal share one identity table.
"""

from __future__ import annotations

from sqlalchemy import Enum, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from app.models.enums import UserRoleEnum


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Identity account — authenticates via email/password (JWT)."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    role: Mapped[UserRoleEnum] = mapped_column(
        Enum(
            UserRoleEnum,
            name="user_role",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
        default=UserRoleEnum.owner,
        server_default="owner",
    )
    is_active: Mapped[bool] = mapped_column(
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
