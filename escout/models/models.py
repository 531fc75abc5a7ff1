from __future__ import annotations

import hashlib
import hmac
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    JSON,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from escout.extensions import db, bcrypt

JSONType = JSON().with_variant(JSONB, 'postgresql')


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without tz support."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class TimestampedBase(db.Model):
    """Abstract base providing id/created/updated columns."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AccountRole(Enum):
    PLAYER = "player"
    ORGANIZATION = "organization"


class OtpPurpose(Enum):
    SIGNUP = "signup"
    RESET_PASSWORD = "reset_password"


class Account(TimestampedBase):
    __tablename__ = "account"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[AccountRole] = mapped_column(
        SqlEnum(AccountRole, name="account_role", native_enum=False),
        nullable=False,
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # otp, otp_expires_at and otp_purpose are always set or cleared together
    otp: Mapped[str | None] = mapped_column(String(6), nullable=True)
    otp_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    otp_purpose: Mapped[OtpPurpose | None] = mapped_column(
        SqlEnum(OtpPurpose, name="otp_purpose", native_enum=False),
        nullable=True,
    )

    refresh_token_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    audit_logs: Mapped[list["AuditLog"]] = relationship(back_populates="account")

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            return False

    def has_role(self, *roles: AccountRole | str) -> bool:
        role_value = self.role.value if isinstance(self.role, AccountRole) else str(self.role)
        allowed = {r.value if isinstance(r, AccountRole) else str(r) for r in roles}
        return role_value in allowed

    def set_otp(self, code: str, expires_at: datetime, purpose: OtpPurpose) -> None:
        self.otp = code
        self.otp_expires_at = expires_at
        self.otp_purpose = purpose

    def clear_otp(self) -> None:
        self.otp = None
        self.otp_expires_at = None
        self.otp_purpose = None

    def is_otp_expired(self, now: datetime | None = None) -> bool:
        """True once ``now`` is past the stored expiry."""
        expires_at = as_utc(self.otp_expires_at)
        if expires_at is None:
            return True
        return (now or datetime.now(timezone.utc)) > expires_at

    def remember_refresh_token(self, token: str) -> None:
        self.refresh_token_hash = hashlib.sha256(token.encode('utf-8')).hexdigest()

    def forget_refresh_token(self) -> None:
        self.refresh_token_hash = None

    def matches_refresh_token(self, token: str) -> bool:
        if not self.refresh_token_hash:
            return False
        digest = hashlib.sha256(token.encode('utf-8')).hexdigest()
        return hmac.compare_digest(digest, self.refresh_token_hash)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role.value if isinstance(self.role, AccountRole) else self.role,
            'isVerified': bool(self.is_verified),
        }


class AuditLog(db.Model):
    __tablename__ = "audit_log"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    account_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("account.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    meta: Mapped[dict | None] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    account: Mapped[Account | None] = relationship(back_populates="audit_logs")
