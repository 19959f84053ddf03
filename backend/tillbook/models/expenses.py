from __future__ import annotations

from ..extensions import db
from tillbook.time_utils import to_utc_z


class Expense(db.Model):
    """Money spent by the business (rent, fuel, supplies), by category and location."""
    __tablename__ = "expenses"
    __table_args__ = (
        db.Index("ix_expenses_category_date", "category_name", "expense_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    amount_cents = db.Column(db.Integer, nullable=False)
    category_name = db.Column(db.String(128), nullable=False)
    location_name = db.Column(db.String(128), nullable=True)
    expense_date = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    description = db.Column(db.Text, nullable=True)

    created_by_staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    created_by = db.relationship("Staff")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "amount_cents": self.amount_cents,
            "category_name": self.category_name,
            "location_name": self.location_name,
            "expense_date": to_utc_z(self.expense_date),
            "description": self.description,
            "created_by_staff_id": self.created_by_staff_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
