from datetime import datetime
from models.db import db


class BookingGroup(db.Model):
    """One customer request spanning several hourly rows."""

    __tablename__ = "booking_groups"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=False)
    end_time = db.Column(db.String(5), nullable=False)  # exclusive

    customer_name = db.Column(db.String(120), nullable=False)
    customer_mobile = db.Column(db.String(30), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    bookings = db.relationship(
        "Booking",
        back_populates="group",
        order_by="Booking.time_slot",
    )
