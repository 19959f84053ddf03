from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z

TILL_OPEN = "OPEN"
TILL_SUSPENDED = "SUSPENDED"
TILL_CLOSED = "CLOSED"
TILL_STATUSES = (TILL_OPEN, TILL_SUSPENDED, TILL_CLOSED)


class Till(db.Model):
    """
    One cash-drawer session for a staff member at a location.

    LIFECYCLE:
    - OPEN: drawer in use, sales can be rung up against it
    - SUSPENDED: paused (e.g. break), no sales, can be resumed
    - CLOSED: counted and final; closing_balance_cents is only meaningful here

    open_slot carries "<location_id>:<staff_id>" while the till is not
    CLOSED and the single-open-till policy is enforced. The unique
    constraint on it is what guarantees one live till per staff/location.
    """
    __tablename__ = "tills"
    __table_args__ = (
        db.UniqueConstraint("open_slot", name="uq_tills_open_slot"),
        db.Index("ix_tills_store_location_status", "store_id", "location_id", "status"),
        db.Index("ix_tills_staff_status", "staff_id", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False)
    staff_name = db.Column(db.String(128), nullable=False)

    status = db.Column(db.String(16), nullable=False, default=TILL_OPEN)

    # Cash amounts in minor units
    opening_balance_cents = db.Column(db.Integer, nullable=False, default=0)
    closing_balance_cents = db.Column(db.Integer, nullable=True)

    opened_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)
    closed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    device = db.Column(db.String(64), nullable=False, default="POS Terminal")
    notes = db.Column(db.Text, nullable=False, default="")

    open_slot = db.Column(db.String(64), nullable=True)

    store = db.relationship("Store")
    location = db.relationship("Location")
    staff = db.relationship("Staff", backref=db.backref("tills", lazy=True))

    @property
    def location_name(self) -> str | None:
        return self.location.name if self.location else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "location_id": self.location_id,
            "location_name": self.location_name,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "status": self.status,
            "opening_balance_cents": self.opening_balance_cents,
            "closing_balance_cents": self.closing_balance_cents,
            "opened_at": to_utc_z(self.opened_at),
            "closed_at": to_utc_z(self.closed_at) if self.closed_at else None,
            "device": self.device,
            "notes": self.notes,
        }
