from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z

TXN_HELD = "held"
TXN_COMPLETED = "completed"
TXN_REFUNDED = "refunded"
TXN_STATUSES = (TXN_HELD, TXN_COMPLETED, TXN_REFUNDED)

CHANNEL_POS = "pos"
CHANNEL_ONLINE = "online"
CHANNELS = (CHANNEL_POS, CHANNEL_ONLINE)


class Transaction(db.Model):
    """
    One sale in the unified ledger, rung up at a till or reconciled from an
    online order.

    Online sales have no staff member: staff_id is NULL and channel is
    "online". source_order_id is unique so an order can only ever be
    projected into the ledger once.

    Refund fields are populated only when status is "refunded".
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.UniqueConstraint("source_order_id", name="uq_transactions_source_order"),
        db.Index("ix_transactions_status_created", "status", "created_at"),
        db.Index("ix_transactions_till_status", "till_id", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    channel = db.Column(db.String(16), nullable=False, default=CHANNEL_POS, index=True)

    tender_type = db.Column(db.String(64), nullable=False)
    amount_paid_cents = db.Column(db.Integer, nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False)
    change_cents = db.Column(db.Integer, nullable=False, default=0)
    discount_cents = db.Column(db.Integer, nullable=False, default=0)
    discount_reason = db.Column(db.String(255), nullable=True)

    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=True, index=True)
    staff_name = db.Column(db.String(128), nullable=True)
    till_id = db.Column(db.Integer, db.ForeignKey("tills.id"), nullable=True)

    # Free text: location name for POS sales, "online" for web sales
    location = db.Column(db.String(128), nullable=False)
    device = db.Column(db.String(64), nullable=True)
    table_name = db.Column(db.String(64), nullable=True)
    customer_name = db.Column(db.String(128), nullable=True)

    status = db.Column(db.String(16), nullable=False, default=TXN_COMPLETED)

    refund_reason = db.Column(db.String(255), nullable=True)
    refunded_by_staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=True)
    refunded_at = db.Column(db.DateTime(timezone=True), nullable=True)

    source_order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    staff = db.relationship("Staff", foreign_keys=[staff_id])
    refunded_by = db.relationship("Staff", foreign_keys=[refunded_by_staff_id])
    till = db.relationship("Till", backref=db.backref("transactions", lazy=True))
    items = db.relationship(
        "TransactionItem",
        backref="transaction",
        order_by="TransactionItem.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "channel": self.channel,
            "tender_type": self.tender_type,
            "amount_paid_cents": self.amount_paid_cents,
            "total_cents": self.total_cents,
            "change_cents": self.change_cents,
            "discount_cents": self.discount_cents,
            "discount_reason": self.discount_reason,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "till_id": self.till_id,
            "location": self.location,
            "device": self.device,
            "table_name": self.table_name,
            "customer_name": self.customer_name,
            "status": self.status,
            "refund_reason": self.refund_reason,
            "refunded_by_staff_id": self.refunded_by_staff_id,
            "refunded_at": to_utc_z(self.refunded_at) if self.refunded_at else None,
            "source_order_id": self.source_order_id,
            "created_at": to_utc_z(self.created_at),
            "completed_at": to_utc_z(self.completed_at) if self.completed_at else None,
            "items": [item.to_dict() for item in self.items],
        }


class TransactionItem(db.Model):
    """
    Line item on a transaction.

    Stored once, canonically. The price/salePriceIncTax and quantity/qty
    aliases older clients expect are added by tillbook.legacy at the edge.
    """
    __tablename__ = "transaction_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    transaction_id = db.Column(db.Integer, db.ForeignKey("transactions.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    product_id = db.Column(db.Integer, nullable=True)
    name = db.Column(db.String(255), nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price_cents": self.unit_price_cents,
            "quantity": self.quantity,
            "line_total_cents": self.line_total_cents,
        }
