from flask import Blueprint, request, jsonify, current_app

from scheduling import (
    BookingError,
    InvalidRange,
    SlotUnavailable,
    book_range,
    get_available_slots,
    get_slot_board,
    validate_range,
)
from utils.audit import log_event
from utils.auth_context import current_user_id
from utils.dates import parse_day
from utils.store import booking_error_response, current_store

booking_bp = Blueprint("booking", __name__)


def _public_fallback():
    return current_app.config.get("PUBLIC_AVAILABILITY_FALLBACK", "optimistic")


def _day_arg():
    return parse_day(request.args.get("date"))


# ---------- PUBLIC: slot grid for a day ----------
@booking_bp.get("/slots")
def list_slots():
    try:
        day = _day_arg()
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    board, degraded = get_slot_board(current_store(), day, fallback=_public_fallback())
    return jsonify(date=day.isoformat(), slots=board, degraded=degraded), 200


@booking_bp.get("/slots/available")
def available_slots():
    try:
        day = _day_arg()
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    slots = get_available_slots(current_store(), day, fallback=_public_fallback())
    return jsonify(date=day.isoformat(), available=slots), 200


# ---------- PUBLIC: quick range check before submitting ----------
@booking_bp.post("/bookings/check")
def check_range():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    try:
        day = parse_day(data.get("date"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    available = data.get("available")
    if isinstance(available, list):
        available = [s for s in available if isinstance(s, str)]
    else:
        available = get_available_slots(current_store(), day, fallback=_public_fallback())

    try:
        result = validate_range(data.get("start_time"), data.get("end_time"), available)
    except InvalidRange as exc:
        return booking_error_response(exc)

    return jsonify(valid=result.is_valid, slots=result.slots, unavailable=result.unavailable), 200


# ---------- PUBLIC: book a range (one row per hour, all or nothing) ----------
@booking_bp.post("/bookings")
def create_booking():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    try:
        day = parse_day(data.get("date"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    start = data.get("start_time")
    end = data.get("end_time")

    try:
        summary = book_range(
            current_store(),
            day,
            start,
            end,
            data.get("customer_name"),
            data.get("customer_mobile"),
            attach_price=current_app.config.get("ATTACH_PRICE_AT_BOOKING", False),
        )
    except SlotUnavailable as exc:
        log_event(
            "BOOKING_FAIL_SLOT_TAKEN",
            user_id=current_user_id(),
            entity="booking",
            metadata={"date": day.isoformat(), "slots": exc.slots},
        )
        return booking_error_response(exc)
    except BookingError as exc:
        current_app.logger.info("Booking rejected (%s): %s", exc.kind, exc.message)
        return booking_error_response(exc)

    log_event(
        "BOOKING_CREATE",
        user_id=current_user_id(),
        entity="booking_group",
        entity_id=summary.group_id,
        metadata={"date": summary.date, "slots": summary.slots},
    )
    return jsonify(summary.to_dict()), 201
