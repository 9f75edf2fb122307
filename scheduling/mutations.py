"""Per-row admin changes to bookings that already exist."""
from scheduling.errors import (
    BookingNotFound,
    ConstraintViolation,
    InvalidBookingRequest,
    SlotUnavailable,
)
from models.booking import BOOKING_STATUSES, PAYMENT_METHODS, PAYMENT_STATUSES

EDITABLE_FIELDS = ("status", "payment_status", "payment_method", "price", "notes", "cancelled_reason")


def _clean_update(fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidBookingRequest(f"Fields not editable: {', '.join(sorted(unknown))}")

    clean = dict(fields)
    if "status" in clean and clean["status"] not in BOOKING_STATUSES:
        raise InvalidBookingRequest(f"status must be one of {', '.join(BOOKING_STATUSES)}")
    if "payment_status" in clean and clean["payment_status"] not in PAYMENT_STATUSES:
        raise InvalidBookingRequest(f"payment_status must be one of {', '.join(PAYMENT_STATUSES)}")
    if clean.get("payment_method") is not None and clean["payment_method"] not in PAYMENT_METHODS:
        raise InvalidBookingRequest(f"payment_method must be one of {', '.join(PAYMENT_METHODS)}")
    if "price" in clean:
        price = clean["price"]
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            raise InvalidBookingRequest("price must be a non-negative integer")
    if clean.get("cancelled_reason") is not None:
        if not isinstance(clean["cancelled_reason"], str):
            raise InvalidBookingRequest("cancelled_reason must be text")
        clean["cancelled_reason"] = clean["cancelled_reason"].strip() or None
    return clean


def _apply_reason_rule(row, clean):
    # only cancelled rows carry a cancellation reason
    status = clean.get("status", row.status)
    if status != "cancelled":
        if clean.get("cancelled_reason"):
            raise InvalidBookingRequest("cancelled_reason can only be set on a cancelled booking")
        clean["cancelled_reason"] = None
    elif not clean.get("cancelled_reason", row.cancelled_reason):
        raise InvalidBookingRequest("A cancellation reason is required")
    return clean


def update_booking(store, booking_id, fields):
    """Apply a partial update to one booking row.

    Re-confirming a row whose slot was booked again in the meantime fails
    with SlotUnavailable.
    """
    if not fields:
        raise InvalidBookingRequest("No fields to update")
    clean = _clean_update(fields)

    row = store.get_booking(booking_id)
    if row is None:
        raise BookingNotFound("Booking", booking_id)
    clean = _apply_reason_rule(row, clean)

    try:
        return store.update_booking(booking_id, clean)
    except ConstraintViolation as exc:
        raise SlotUnavailable(
            [row.time_slot],
            f"Slot {row.time_slot} on {row.date.isoformat()} is already booked",
        ) from exc


def cancel_booking(store, booking_id, reason):
    reason = (reason or "").strip()
    if not reason:
        raise InvalidBookingRequest("A cancellation reason is required")

    row = store.get_booking(booking_id)
    if row is None:
        raise BookingNotFound("Booking", booking_id)
    return store.update_booking(booking_id, {"status": "cancelled", "cancelled_reason": reason})


def cancel_group(store, group_id, reason):
    """Cancel every still-confirmed hour of a multi-hour booking."""
    reason = (reason or "").strip()
    if not reason:
        raise InvalidBookingRequest("A cancellation reason is required")

    rows = store.group_bookings(group_id)
    if rows is None:
        raise BookingNotFound("Booking group", group_id)
    return store.cancel_bookings([r.id for r in rows], reason)


def delete_booking(store, booking_id):
    if not store.delete_booking(booking_id):
        raise BookingNotFound("Booking", booking_id)
