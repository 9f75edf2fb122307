from flask import Blueprint, Response, current_app, g, jsonify, request

from models import db
from models.booking import Booking, BOOKING_STATUSES, PAYMENT_STATUSES
from models.closure import SlotClosure
from models.pricing import PricingConfig
from models.user import User, Role
from scheduling import (
    BookingError,
    cancel_booking,
    cancel_group,
    delete_booking,
    get_available_slots,
    update_booking,
)
from scheduling.slots import is_slot_id
from security.rbac import ADMIN_ROLES, require_roles
from utils.audit import log_event
from utils.dates import parse_day
from utils.reports import booking_csv, booking_stats, filter_bookings
from utils.store import booking_error_response, current_store

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def _optional_day(name):
    value = request.args.get(name)
    return parse_day(value) if value else None


def _is_price(value):
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


# ---------- availability (pessimistic on database failure) ----------
@admin_bp.get("/available-slots")
@require_roles(*ADMIN_ROLES)
def admin_available_slots():
    try:
        day = parse_day(request.args.get("date"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    fallback = current_app.config.get("ADMIN_AVAILABILITY_FALLBACK", "pessimistic")
    slots = get_available_slots(current_store(), day, fallback=fallback)
    return jsonify(date=day.isoformat(), available=slots), 200


# ---------- bookings ----------
@admin_bp.get("/bookings")
@require_roles(*ADMIN_ROLES)
def list_bookings():
    try:
        start_date = _optional_day("start_date")
        end_date = _optional_day("end_date")
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    status = request.args.get("status")
    payment_status = request.args.get("payment_status")
    if status and status not in BOOKING_STATUSES:
        return jsonify(error="Unknown status"), 400
    if payment_status and payment_status not in PAYMENT_STATUSES:
        return jsonify(error="Unknown payment_status"), 400

    q = filter_bookings(
        Booking.query,
        start_date=start_date,
        end_date=end_date,
        status=status,
        payment_status=payment_status,
    )
    rows = q.order_by(Booking.date.desc(), Booking.time_slot.asc()).limit(500).all()
    return jsonify([b.to_dict() for b in rows]), 200


@admin_bp.get("/bookings/export.csv")
@require_roles(*ADMIN_ROLES)
def export_bookings():
    try:
        start_date = _optional_day("start_date")
        end_date = _optional_day("end_date")
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    q = filter_bookings(
        Booking.query,
        start_date=start_date,
        end_date=end_date,
        status=request.args.get("status"),
        payment_status=request.args.get("payment_status"),
    )
    rows = q.order_by(Booking.date.desc(), Booking.time_slot.asc()).all()

    log_event("BOOKING_EXPORT", user_id=g.user.id, metadata={"rows": len(rows)})
    return Response(
        booking_csv(rows),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=bookings.csv"},
    )


@admin_bp.get("/stats")
@require_roles(*ADMIN_ROLES)
def stats():
    try:
        start_date = _optional_day("start_date")
        end_date = _optional_day("end_date")
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    return jsonify(booking_stats(start_date, end_date)), 200


@admin_bp.patch("/bookings/<int:booking_id>")
@require_roles(*ADMIN_ROLES)
def edit_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    try:
        row = update_booking(current_store(), booking_id, data)
    except BookingError as exc:
        return booking_error_response(exc)

    log_event("BOOKING_UPDATE", user_id=g.user.id, entity="booking", entity_id=booking_id, metadata=data)
    return jsonify(row.to_dict()), 200


@admin_bp.post("/bookings/<int:booking_id>/cancel")
@require_roles(*ADMIN_ROLES)
def admin_cancel_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    reason = data.get("reason")
    try:
        row = cancel_booking(current_store(), booking_id, reason)
    except BookingError as exc:
        return booking_error_response(exc)

    log_event("BOOKING_CANCEL", user_id=g.user.id, entity="booking", entity_id=booking_id, metadata={"reason": reason})
    return jsonify(row.to_dict()), 200


@admin_bp.post("/booking-groups/<int:group_id>/cancel")
@require_roles(*ADMIN_ROLES)
def admin_cancel_group(group_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    reason = data.get("reason")
    try:
        cancelled = cancel_group(current_store(), group_id, reason)
    except BookingError as exc:
        return booking_error_response(exc)

    log_event(
        "BOOKING_GROUP_CANCEL",
        user_id=g.user.id,
        entity="booking_group",
        entity_id=group_id,
        metadata={"reason": reason, "cancelled": cancelled},
    )
    return jsonify(message="Cancelled", cancelled=cancelled), 200


@admin_bp.delete("/bookings/<int:booking_id>")
@require_roles("SUPER_ADMIN")
def admin_delete_booking(booking_id: int):
    try:
        delete_booking(current_store(), booking_id)
    except BookingError as exc:
        return booking_error_response(exc)

    log_event("BOOKING_DELETE", user_id=g.user.id, entity="booking", entity_id=booking_id)
    return jsonify(message="Deleted"), 200


# ---------- closures (soft delete only) ----------
@admin_bp.get("/closures")
@require_roles(*ADMIN_ROLES)
def list_closures():
    try:
        start_date = _optional_day("start_date")
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    q = SlotClosure.query
    if request.args.get("include_inactive", "false").lower() != "true":
        q = q.filter(SlotClosure.is_active.is_(True))
    if start_date:
        q = q.filter(SlotClosure.date >= start_date)

    rows = q.order_by(SlotClosure.date.asc(), SlotClosure.time_slot.asc()).all()
    return jsonify([c.to_dict() for c in rows]), 200


@admin_bp.post("/closures")
@require_roles(*ADMIN_ROLES)
def create_closure():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    try:
        day = parse_day(data.get("date"))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    time_slot = data.get("time_slot") or None
    reason = (data.get("reason") or "").strip()
    if time_slot is not None and not is_slot_id(time_slot):
        return jsonify(error="time_slot must look like HH:00"), 400
    if not reason:
        return jsonify(error="reason is required"), 400

    closure = SlotClosure(
        date=day,
        time_slot=time_slot,
        court_id=current_app.config.get("COURT_ID", "court_1"),
        reason=reason,
        is_active=True,
    )
    db.session.add(closure)
    db.session.commit()

    log_event("CLOSURE_CREATE", user_id=g.user.id, entity="closure", entity_id=closure.id,
              metadata={"date": day.isoformat(), "time_slot": time_slot})
    return jsonify(closure.to_dict()), 201


def _set_closure_active(closure_id: int, active: bool):
    closure = db.session.get(SlotClosure, closure_id)
    if not closure:
        return jsonify(error="Closure not found"), 404

    closure.is_active = active
    db.session.commit()

    action = "CLOSURE_ACTIVATE" if active else "CLOSURE_DEACTIVATE"
    log_event(action, user_id=g.user.id, entity="closure", entity_id=closure_id)
    return jsonify(closure.to_dict()), 200


@admin_bp.post("/closures/<int:closure_id>/deactivate")
@require_roles(*ADMIN_ROLES)
def deactivate_closure(closure_id: int):
    return _set_closure_active(closure_id, False)


@admin_bp.post("/closures/<int:closure_id>/activate")
@require_roles(*ADMIN_ROLES)
def activate_closure(closure_id: int):
    return _set_closure_active(closure_id, True)


# ---------- pricing ----------
@admin_bp.get("/pricing")
@require_roles(*ADMIN_ROLES)
def list_pricing():
    rows = PricingConfig.query.order_by(PricingConfig.time_slot.asc()).all()
    return jsonify([p.to_dict() for p in rows]), 200


@admin_bp.put("/pricing/<time_slot>")
@require_roles(*ADMIN_ROLES)
def update_pricing(time_slot: str):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    price = data.get("price_lkr")
    is_prime = data.get("is_prime_time")

    if not _is_price(price):
        return jsonify(error="price_lkr must be a non-negative integer"), 400
    if is_prime is not None and not isinstance(is_prime, bool):
        return jsonify(error="is_prime_time must be a boolean"), 400

    row = PricingConfig.query.filter_by(time_slot=time_slot).first()
    if not row:
        return jsonify(error="Unknown time slot"), 404

    row.price_lkr = price
    if is_prime is not None:
        row.is_prime_time = is_prime
    db.session.commit()

    log_event("PRICING_UPDATE", user_id=g.user.id, entity="pricing", entity_id=time_slot,
              metadata={"price_lkr": price, "is_prime_time": row.is_prime_time})
    return jsonify(row.to_dict()), 200


@admin_bp.post("/pricing/bulk")
@require_roles(*ADMIN_ROLES)
def bulk_update_pricing():
    """
    Either {"updates": [{"time_slot", "price_lkr", "is_prime_time"}, ...]}
    or {"group": "base"|"peak", "price_lkr": N} to reprice every
    non-prime or prime slot at once.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    rows = {p.time_slot: p for p in PricingConfig.query.all()}

    if "group" in data:
        group = data.get("group")
        price = data.get("price_lkr")
        if group not in ("base", "peak"):
            return jsonify(error="group must be base or peak"), 400
        if not _is_price(price):
            return jsonify(error="price_lkr must be a non-negative integer"), 400
        targets = [p for p in rows.values() if p.is_prime_time == (group == "peak")]
        for p in targets:
            p.price_lkr = price
        changed = sorted(p.time_slot for p in targets)
    else:
        updates = data.get("updates")
        if not isinstance(updates, list) or not updates:
            return jsonify(error="updates must be a non-empty list"), 400
        for item in updates:
            slot = item.get("time_slot") if isinstance(item, dict) else None
            if slot not in rows:
                return jsonify(error="Unknown time slot", time_slot=slot), 400
            if not _is_price(item.get("price_lkr")):
                return jsonify(error="price_lkr must be a non-negative integer", time_slot=slot), 400
        for item in updates:
            p = rows[item["time_slot"]]
            p.price_lkr = item["price_lkr"]
            if isinstance(item.get("is_prime_time"), bool):
                p.is_prime_time = item["is_prime_time"]
        changed = sorted(item["time_slot"] for item in updates)

    db.session.commit()
    log_event("PRICING_BULK_UPDATE", user_id=g.user.id, entity="pricing", metadata={"slots": changed})
    return jsonify(message="Pricing updated", updated=changed), 200


# ---------- users (super admin) ----------
@admin_bp.get("/users")
@require_roles("SUPER_ADMIN")
def list_users():
    users = User.query.order_by(User.created_at.desc()).limit(200).all()
    return jsonify([
        {
            "id": u.id,
            "email": u.email,
            "full_name": u.full_name,
            "roles": u.role_names(),
            "created_at": u.created_at.isoformat(),
        }
        for u in users
    ]), 200


@admin_bp.post("/users/<int:user_id>/roles")
@require_roles("SUPER_ADMIN")
def update_user_roles(user_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify(error="Request body must be a JSON object"), 400
    roles = data.get("roles")
    if not isinstance(roles, list) or not roles:
        return jsonify(error="roles must be a non-empty list"), 400

    role_names = {name.strip().upper() for name in roles if isinstance(name, str) and name.strip()}
    if not role_names:
        return jsonify(error="roles must include valid role names"), 400

    user = db.session.get(User, user_id)
    if not user:
        return jsonify(error="User not found"), 404

    available_roles = Role.query.filter(Role.name.in_(role_names)).all()
    missing = role_names - {r.name for r in available_roles}
    if missing:
        return jsonify(error="Unknown role(s)", missing=sorted(missing)), 400

    if user.id == g.user.id and "SUPER_ADMIN" not in role_names:
        return jsonify(error="Cannot remove your own SUPER_ADMIN role"), 403

    user.roles = available_roles
    db.session.commit()

    log_event("ADMIN_UPDATE_ROLES", user_id=g.user.id, entity="user", entity_id=user.id,
              metadata={"roles": sorted(role_names)})
    return jsonify(message="Roles updated", roles=user.role_names()), 200
