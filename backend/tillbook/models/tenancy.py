from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z


class Store(db.Model):
    """
    Retail business owning one or more trading locations.

    Tills are opened against a Store/Location pair; online sales carry the
    literal location "online" instead of a Location reference.
    """
    __tablename__ = "stores"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    currency_code = db.Column(db.String(3), nullable=False, default="NGN")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "currency_code": self.currency_code,
            "created_at": to_utc_z(self.created_at),
        }


class Location(db.Model):
    """Physical shop/branch inside a store."""
    __tablename__ = "locations"
    __table_args__ = (
        db.UniqueConstraint("store_id", "name", name="uq_locations_store_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)
    name = db.Column(db.String(128), nullable=False)
    address = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    store = db.relationship("Store", backref=db.backref("locations", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "store_id": self.store_id,
            "name": self.name,
            "address": self.address,
            "is_active": self.is_active,
        }
