from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z

STAFF_ROLES = ("staff", "manager", "admin")


class Staff(db.Model):
    """
    Employee who can sign in, open tills and ring up sales.

    Transactions and tills denormalize the staff name so historical records
    stay readable after a rename.
    """
    __tablename__ = "staff"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_staff_username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    username = db.Column(db.String(64), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(16), nullable=False, default="staff")

    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True, index=True)
    location_name = db.Column(db.String(128), nullable=True)

    # Payroll details
    account_name = db.Column(db.String(128), nullable=True)
    account_number = db.Column(db.String(32), nullable=True)
    bank_name = db.Column(db.String(128), nullable=True)
    salary_cents = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    location = db.relationship("Location")

    @property
    def is_manager(self) -> bool:
        return self.role in ("manager", "admin")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "role": self.role,
            "location_id": self.location_id,
            "location_name": self.location_name,
            "account_name": self.account_name,
            "account_number": self.account_number,
            "bank_name": self.bank_name,
            "salary_cents": self.salary_cents,
            "is_active": self.is_active,
            "last_login_at": to_utc_z(self.last_login_at) if self.last_login_at else None,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class SessionToken(db.Model):
    """
    Bearer token issued at login.

    Tokens are stored hashed (SHA-256); the plaintext only ever goes to the client.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_staff_active", "staff_id", "is_revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(255), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)

    staff = db.relationship("Staff", backref=db.backref("sessions", lazy=True))
