from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z

PAYMENT_PENDING = "Pending"
PAYMENT_PAID = "Paid"
PAYMENT_FAILED = "Failed"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_FAILED)

ORDER_PENDING = "Pending"
ORDER_PROCESSING = "Processing"
ORDER_SHIPPED = "Shipped"
ORDER_DELIVERED = "Delivered"
ORDER_CANCELLED = "Cancelled"
ORDER_STATUSES = (ORDER_PENDING, ORDER_PROCESSING, ORDER_SHIPPED, ORDER_DELIVERED, ORDER_CANCELLED)


class Order(db.Model):
    """
    Online customer purchase.

    total_cents is computed as subtotal + shipping at checkout. An order is
    projected into the transaction ledger at most once (see
    Transaction.source_order_id).
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)

    # Shipping details (all required)
    shipping_name = db.Column(db.String(128), nullable=False)
    shipping_email = db.Column(db.String(255), nullable=False)
    shipping_phone = db.Column(db.String(32), nullable=False)
    shipping_address = db.Column(db.String(255), nullable=False)
    shipping_city = db.Column(db.String(128), nullable=False)

    subtotal_cents = db.Column(db.Integer, nullable=False)
    shipping_cost_cents = db.Column(db.Integer, nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False)

    payment_reference = db.Column(db.String(128), nullable=True)
    payment_status = db.Column(db.String(16), nullable=False, default=PAYMENT_PENDING)
    status = db.Column(db.String(16), nullable=False, default=ORDER_PENDING)
    paid = db.Column(db.Boolean, nullable=False, default=False)
    delivery_person = db.Column(db.String(128), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    customer = db.relationship("Customer", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem",
        backref="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "shipping_details": {
                "name": self.shipping_name,
                "email": self.shipping_email,
                "phone": self.shipping_phone,
                "address": self.shipping_address,
                "city": self.shipping_city,
            },
            "items": [item.to_dict() for item in self.items],
            "subtotal_cents": self.subtotal_cents,
            "shipping_cost_cents": self.shipping_cost_cents,
            "total_cents": self.total_cents,
            "payment_reference": self.payment_reference,
            "payment_status": self.payment_status,
            "status": self.status,
            "paid": self.paid,
            "delivery_person": self.delivery_person,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class OrderItem(db.Model):
    """Product line on an online order."""
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    product_id = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(128), nullable=True)
    description = db.Column(db.Text, nullable=True)
    # Image URLs, newline separated
    images_text = db.Column(db.Text, nullable=True)

    @property
    def images(self) -> list[str]:
        if not self.images_text:
            return []
        return [url for url in self.images_text.split("\n") if url]

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
            "category": self.category,
            "description": self.description,
            "images": self.images,
        }
