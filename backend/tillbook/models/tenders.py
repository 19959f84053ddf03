from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z

TENDER_CLASSIFICATIONS = ("Cash", "Card", "Other")
DEFAULT_BUTTON_COLOR = "#FF69B4"


class Tender(db.Model):
    """
    Payment method offered at the till (CASH, bank POS terminals, transfers).

    till_order is the button rank on the till screen; classification "Cash"
    marks tenders for which change is given.
    """
    __tablename__ = "tenders"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_tenders_name"),
        db.Index("ix_tenders_till_order", "till_order"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(255), nullable=False, default="")
    button_color = db.Column(db.String(16), nullable=False, default=DEFAULT_BUTTON_COLOR)
    till_order = db.Column(db.Integer, nullable=False, default=1)
    classification = db.Column(db.String(16), nullable=False, default="Other")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    @property
    def is_cash(self) -> bool:
        return self.classification == "Cash"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "button_color": self.button_color,
            "till_order": self.till_order,
            "classification": self.classification,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class DeviceTenderAssignment(db.Model):
    """
    Which tender buttons a till device shows, and in what order.

    One row per (device, position). Replacing a device's mapping deletes and
    re-inserts its rows inside one transaction.
    """
    __tablename__ = "device_tender_assignments"
    __table_args__ = (
        db.UniqueConstraint("device_id", "position", name="uq_device_tender_position"),
        db.UniqueConstraint("device_id", "tender_rank", name="uq_device_tender_rank"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    device_id = db.Column(db.String(64), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    tender_rank = db.Column(db.Integer, nullable=False)
