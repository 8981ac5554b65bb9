"""
NETLINE Database Models

Tables mirror the collections the dashboard reads through the record
source passthrough:
- users      staff (vendors, system administrators) and clients
- solds      card sales, attributed to the staff member who sold them
- histories  plan activations, attributed to the client who bought them
- variables  named system values, e.g. the connected_users snapshot

``to_document()`` renders each row in the upstream store's field names so
the aggregation engine can consume it exactly like an exported record.
"""

from datetime import datetime, timezone
from typing import Optional, List
from enum import Enum as PyEnum
from flask_login import UserMixin
from netline import db
from werkzeug.security import generate_password_hash, check_password_hash
import sqlalchemy as sa
import sqlalchemy.orm as so


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite drops tzinfo; stored values are UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ===========================================
# Enums
# ===========================================

class RoleType(PyEnum):
    """
    User roles in the system.

    SYSTEM_ADMINISTRATOR: Staff with dashboard access. No sales commission.
    VENDOR: Staff who sell cards. Earns a commission on attributed sales.
    CLIENT: Internet access customer. Cannot sign in to the dashboard.
    """
    SYSTEM_ADMINISTRATOR = "SYSTEM_ADMINISTRATOR"
    VENDOR = "VENDOR"
    CLIENT = "CLIENT"


class SaleStatusType(PyEnum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    OTHER = "OTHER"


# ===========================================
# User Model
# ===========================================

class User(db.Model, UserMixin):
    """Staff member or client. Only staff rows carry a password hash."""
    __tablename__ = "users"

    id: so.Mapped[int] = so.mapped_column(primary_key=True, autoincrement=True)

    created_at: so.Mapped[datetime] = so.mapped_column(
        sa.DateTime(timezone=True), default=_utcnow
    )

    username: so.Mapped[str] = so.mapped_column(
        sa.String(64), index=True, unique=True, nullable=False
    )
    complete_name: so.Mapped[Optional[str]] = so.mapped_column(sa.String(128))
    user_number: so.Mapped[Optional[str]] = so.mapped_column(sa.String(32), index=True)

    password_hash: so.Mapped[Optional[str]] = so.mapped_column(sa.String(256))

    role: so.Mapped[RoleType] = so.mapped_column(
        sa.Enum(RoleType), nullable=False, default=RoleType.CLIENT
    )

    is_active: so.Mapped[bool] = so.mapped_column(default=True)

    # Card sales made by this staff member
    sales: so.Mapped[List["Sale"]] = so.relationship(
        back_populates="seller",
        foreign_keys="[Sale.seller_id]",
    )

    # Plan activations bought by this client
    histories: so.Mapped[List["PlanHistory"]] = so.relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def set_password(self, password: str) -> None:
        """Hash and set the user's password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"

    @property
    def display_name(self) -> str:
        return self.complete_name or self.username

    @property
    def is_system_administrator(self) -> bool:
        return self.role == RoleType.SYSTEM_ADMINISTRATOR

    def to_document(self) -> dict:
        """Public record shape; never includes the password hash."""
        return {
            "_id": str(self.id),
            "username": self.username,
            "name": self.username,
            "complete_name": self.complete_name,
            "user_number": self.user_number,
            "type": self.role.value,
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
        }


# ===========================================
# Sale Model ("solds")
# ===========================================

class Sale(db.Model):
    """A card sold by a staff member."""
    __tablename__ = "solds"

    id: so.Mapped[int] = so.mapped_column(primary_key=True, autoincrement=True)

    created_at: so.Mapped[datetime] = so.mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, index=True
    )

    status: so.Mapped[SaleStatusType] = so.mapped_column(
        sa.Enum(SaleStatusType), nullable=False, default=SaleStatusType.COMPLETED
    )
    profile: so.Mapped[Optional[str]] = so.mapped_column(sa.String(64))
    plan_name: so.Mapped[str] = so.mapped_column(sa.String(128), nullable=False)
    number: so.Mapped[Optional[str]] = so.mapped_column(sa.String(64))
    duration_hour: so.Mapped[Optional[str]] = so.mapped_column(sa.String(16))
    price: so.Mapped[float] = so.mapped_column(sa.Float, nullable=False, default=0.0)
    comment: so.Mapped[Optional[str]] = so.mapped_column(sa.String(255))

    seller_id: so.Mapped[Optional[int]] = so.mapped_column(
        sa.ForeignKey("users.id"), nullable=True
    )
    seller: so.Mapped[Optional[User]] = so.relationship(
        back_populates="sales", foreign_keys=[seller_id]
    )

    client_id: so.Mapped[Optional[int]] = so.mapped_column(
        sa.ForeignKey("users.id"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Sale #{self.id} {self.plan_name} {self.price}>"

    def to_document(self) -> dict:
        return {
            "_id": {"$oid": str(self.id)},
            "status": self.status.value,
            "profile": self.profile,
            "name": self.plan_name,
            "number": self.number,
            "duration_hour": self.duration_hour,
            "price": self.price,
            "by": str(self.seller_id) if self.seller_id is not None else None,
            "user_id": str(self.client_id) if self.client_id is not None else None,
            "comment": self.comment,
            "date": {"$date": _iso(self.created_at)},
        }


# ===========================================
# PlanHistory Model ("histories")
# ===========================================

class PlanHistory(db.Model):
    """A plan activated for a client."""
    __tablename__ = "histories"

    id: so.Mapped[int] = so.mapped_column(primary_key=True, autoincrement=True)

    created_at: so.Mapped[datetime] = so.mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, index=True
    )

    user_id: so.Mapped[Optional[int]] = so.mapped_column(
        sa.ForeignKey("users.id"), nullable=True
    )
    user: so.Mapped[Optional[User]] = so.relationship(back_populates="histories")

    plan: so.Mapped[str] = so.mapped_column(sa.String(128), nullable=False)
    price: so.Mapped[float] = so.mapped_column(sa.Float, nullable=False, default=0.0)
    number: so.Mapped[Optional[str]] = so.mapped_column(sa.String(64))
    used_data: so.Mapped[float] = so.mapped_column(sa.Float, default=0.0)

    def __repr__(self) -> str:
        return f"<PlanHistory {self.plan} for User #{self.user_id}>"

    def to_document(self) -> dict:
        return {
            "_id": str(self.id),
            "user_id": str(self.user_id) if self.user_id is not None else None,
            "plan": self.plan,
            "price": self.price,
            "number": self.number,
            "scheduler_datas": {"used_data": self.used_data or 0.0},
            "created_at": _iso(self.created_at),
        }


# ===========================================
# Variable Model ("variables")
# ===========================================

class Variable(db.Model):
    """Named system value written by the network controller."""
    __tablename__ = "variables"

    id: so.Mapped[int] = so.mapped_column(primary_key=True, autoincrement=True)

    name: so.Mapped[str] = so.mapped_column(
        sa.String(64), unique=True, nullable=False, index=True
    )
    array_data: so.Mapped[Optional[list]] = so.mapped_column(sa.JSON, default=list)

    updated_at: so.Mapped[datetime] = so.mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<Variable {self.name}>"

    def to_document(self) -> dict:
        return {
            "_id": str(self.id),
            "name": self.name,
            "array_data": self.array_data or [],
            "updated_at": _iso(self.updated_at),
        }


# ===========================================
# Helper Functions
# ===========================================

def get_variable(name: str) -> Optional[Variable]:
    return Variable.query.filter_by(name=name).first()


def set_variable(name: str, array_data: list) -> Variable:
    """Create or replace a variable's array payload (caller commits)."""
    variable = get_variable(name)
    if variable is None:
        variable = Variable(name=name)
        db.session.add(variable)
    variable.array_data = list(array_data)
    return variable
