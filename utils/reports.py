import csv
import io

from sqlalchemy import case, func

from models import db
from models.booking import Booking

CSV_HEADERS = [
    "Booking ID",
    "Date",
    "Time",
    "Customer Name",
    "Mobile",
    "Price (LKR)",
    "Status",
    "Payment Status",
    "Payment Method",
    "Notes",
]


def filter_bookings(q, start_date=None, end_date=None, status=None, payment_status=None):
    if start_date:
        q = q.filter(Booking.date >= start_date)
    if end_date:
        q = q.filter(Booking.date <= end_date)
    if status:
        q = q.filter(Booking.status == status)
    if payment_status:
        q = q.filter(Booking.payment_status == payment_status)
    return q


def booking_csv(rows) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for b in rows:
        writer.writerow([
            b.id,
            b.date.isoformat(),
            b.time_slot,
            b.customer_name,
            b.customer_mobile,
            b.price,
            b.status,
            b.payment_status,
            b.payment_method or "",
            b.notes or "",
        ])
    return buf.getvalue()


def booking_stats(start_date=None, end_date=None) -> dict:
    def count_where(cond):
        return func.coalesce(func.sum(case((cond, 1), else_=0)), 0)

    q = db.session.query(
        func.count(Booking.id),
        count_where(Booking.status == "confirmed"),
        count_where(Booking.status == "cancelled"),
        count_where(Booking.status == "completed"),
        count_where(Booking.status == "no_show"),
        count_where(Booking.payment_status == "paid"),
        count_where(Booking.payment_status == "unpaid"),
        func.coalesce(func.sum(case((Booking.payment_status == "paid", Booking.price), else_=0)), 0),
    )
    row = filter_bookings(q, start_date=start_date, end_date=end_date).one()

    keys = (
        "total_bookings",
        "confirmed_bookings",
        "cancelled_bookings",
        "completed_bookings",
        "no_show_bookings",
        "paid_bookings",
        "unpaid_bookings",
        "total_income",
    )
    return {k: int(v or 0) for k, v in zip(keys, row)}
