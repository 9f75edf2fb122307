from datetime import datetime
from sqlalchemy import text
from models.db import db

BOOKING_STATUSES = ("confirmed", "cancelled", "completed", "no_show")
PAYMENT_STATUSES = ("paid", "unpaid", "pending")
PAYMENT_METHODS = ("cash", "card", "bank_transfer", "online")


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("booking_groups.id"), nullable=True, index=True)

    date = db.Column(db.Date, nullable=False, index=True)
    time_slot = db.Column(db.String(5), nullable=False)  # "HH:00"
    court_id = db.Column(db.String(40), nullable=False, default="court_1")

    customer_name = db.Column(db.String(120), nullable=False)
    customer_mobile = db.Column(db.String(30), nullable=False)

    status = db.Column(db.String(20), nullable=False, default="confirmed")
    payment_status = db.Column(db.String(20), nullable=False, default="unpaid")
    payment_method = db.Column(db.String(20), nullable=True)
    price = db.Column(db.Integer, nullable=False, default=0)  # LKR
    notes = db.Column(db.Text, nullable=True)
    cancelled_reason = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    group = db.relationship("BookingGroup", back_populates="bookings")

    __table_args__ = (
        # Only one confirmed booking per hour; cancelled rows don't hold the slot
        db.Index(
            "uq_bookings_confirmed_slot",
            "date",
            "time_slot",
            unique=True,
            sqlite_where=text("status = 'confirmed'"),
            postgresql_where=text("status = 'confirmed'"),
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "group_id": self.group_id,
            "date": self.date.isoformat(),
            "time_slot": self.time_slot,
            "court_id": self.court_id,
            "customer_name": self.customer_name,
            "customer_mobile": self.customer_mobile,
            "status": self.status,
            "payment_status": self.payment_status,
            "payment_method": self.payment_method,
            "price": self.price,
            "notes": self.notes,
            "cancelled_reason": self.cancelled_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
