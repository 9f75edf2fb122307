from flask import current_app, g, jsonify

from models import db
from scheduling.errors import BookingError
from scheduling.store import SqlBookingStore

ERROR_STATUS = {
    "invalid_range": 400,
    "invalid_request": 400,
    "not_found": 404,
    "slot_unavailable": 409,
    "constraint_violation": 409,
    "storage_unavailable": 503,
}


def current_store():
    """Booking store bound to this request's database session."""
    store = g.get("booking_store")
    if store is None:
        store = SqlBookingStore(db.session, court_id=current_app.config.get("COURT_ID", "court_1"))
        g.booking_store = store
    return store


def booking_error_response(exc: BookingError):
    return jsonify(**exc.to_dict()), ERROR_STATUS.get(exc.kind, 400)
