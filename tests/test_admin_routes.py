from unittest import mock

from models import db
from models.audit_log import AuditLog
from models.booking import Booking
from scheduling.errors import StorageUnavailable
from scheduling.store import SqlBookingStore
from tests.conftest import login

DAY = "2026-03-14"


def book(client, start, end, name="Alice"):
    resp = client.post("/bookings", json={
        "date": DAY,
        "start_time": start,
        "end_time": end,
        "customer_name": name,
        "customer_mobile": "0710000000",
    })
    assert resp.status_code == 201
    return resp.get_json()


def test_admin_routes_need_login(client):
    assert client.get("/admin/bookings").status_code == 401


def test_plain_user_is_forbidden(client, make_user):
    make_user("player@example.com", "kick-off-7", ["USER"])
    login(client, "player@example.com", "kick-off-7")
    assert client.get("/admin/bookings").status_code == 403


def test_moderator_manages_bookings_but_cannot_delete(moderator_client):
    summary = book(moderator_client, "10:00", "11:00")
    assert moderator_client.get("/admin/bookings").status_code == 200
    assert moderator_client.delete(f"/admin/bookings/{summary['id']}").status_code == 403


def test_admin_availability_is_pessimistic_on_failure(admin_client):
    with mock.patch.object(SqlBookingStore, "confirmed_slots", side_effect=StorageUnavailable("down")):
        resp = admin_client.get(f"/admin/available-slots?date={DAY}")
    assert resp.status_code == 200
    assert resp.get_json()["available"] == []


def test_closures_soft_delete(admin_client):
    resp = admin_client.post("/admin/closures", json={"date": DAY, "reason": "League final"})
    assert resp.status_code == 201
    closure_id = resp.get_json()["id"]

    assert admin_client.get(f"/admin/available-slots?date={DAY}").get_json()["available"] == []
    failed = admin_client.post("/bookings", json={
        "date": DAY, "start_time": "10:00", "end_time": "11:00",
        "customer_name": "Alice", "customer_mobile": "0710000000",
    })
    assert failed.status_code == 409

    resp = admin_client.post(f"/admin/closures/{closure_id}/deactivate")
    assert resp.status_code == 200
    assert resp.get_json()["is_active"] is False
    assert len(admin_client.get(f"/admin/available-slots?date={DAY}").get_json()["available"]) == 24

    assert admin_client.get("/admin/closures").get_json() == []
    kept = admin_client.get("/admin/closures?include_inactive=true").get_json()
    assert [c["id"] for c in kept] == [closure_id]


def test_closure_validation(admin_client):
    assert admin_client.post("/admin/closures", json={"date": DAY, "reason": ""}).status_code == 400
    assert admin_client.post("/admin/closures", json={"date": DAY, "time_slot": "9am", "reason": "x"}).status_code == 400


def test_edit_cancel_and_delete(admin_client):
    summary = book(admin_client, "18:00", "20:00")

    resp = admin_client.patch(f"/admin/bookings/{summary['id']}", json={
        "payment_status": "paid", "payment_method": "card", "price": 4000,
    })
    assert resp.status_code == 200
    assert resp.get_json()["payment_status"] == "paid"

    assert admin_client.patch(f"/admin/bookings/{summary['id']}", json={"status": "lost"}).status_code == 400
    assert admin_client.post(f"/admin/bookings/{summary['id']}/cancel", json={}).status_code == 400

    resp = admin_client.post(f"/admin/bookings/{summary['id']}/cancel", json={"reason": "Rain"})
    assert resp.get_json()["status"] == "cancelled"

    resp = admin_client.post(f"/admin/booking-groups/{summary['group_id']}/cancel", json={"reason": "Rain"})
    assert resp.status_code == 200
    assert len(resp.get_json()["cancelled"]) == 1

    assert admin_client.delete(f"/admin/bookings/{summary['id']}").status_code == 200
    assert db.session.get(Booking, summary["id"]) is None
    assert admin_client.delete(f"/admin/bookings/{summary['id']}").status_code == 404

    actions = {a.action for a in AuditLog.query.all()}
    assert {"BOOKING_CREATE", "BOOKING_UPDATE", "BOOKING_CANCEL", "BOOKING_DELETE"} <= actions


def test_pricing_updates(admin_client):
    resp = admin_client.put("/admin/pricing/18:00", json={"price_lkr": 5000, "is_prime_time": True})
    assert resp.status_code == 200
    assert admin_client.put("/admin/pricing/18:30", json={"price_lkr": 5000}).status_code == 404
    assert admin_client.put("/admin/pricing/18:00", json={"price_lkr": -5}).status_code == 400

    resp = admin_client.post("/admin/pricing/bulk", json={"group": "base", "price_lkr": 2500})
    assert resp.status_code == 200
    assert len(resp.get_json()["updated"]) == 23

    resp = admin_client.post("/admin/pricing/bulk", json={
        "updates": [{"time_slot": "19:00", "price_lkr": 5500, "is_prime_time": True}],
    })
    assert resp.status_code == 200

    pricing = {p["time_slot"]: p for p in admin_client.get("/admin/pricing").get_json()}
    assert len(pricing) == 24
    assert pricing["18:00"]["price_lkr"] == 5000
    assert pricing["19:00"]["is_prime_time"] is True
    assert pricing["07:00"]["price_lkr"] == 2500

    board = {s["id"]: s for s in admin_client.get(f"/slots?date={DAY}").get_json()["slots"]}
    assert board["19:00"]["price"] == 5500


def test_stats_and_csv(admin_client):
    first = book(admin_client, "10:00", "12:00")
    book(admin_client, "14:00", "15:00", name="Bob")
    admin_client.patch(f"/admin/bookings/{first['id']}", json={"payment_status": "paid", "price": 3000})
    admin_client.post(f"/admin/bookings/{first['id'] + 1}/cancel", json={"reason": "Short match"})

    stats = admin_client.get("/admin/stats").get_json()
    assert stats["total_bookings"] == 3
    assert stats["confirmed_bookings"] == 2
    assert stats["cancelled_bookings"] == 1
    assert stats["paid_bookings"] == 1
    assert stats["total_income"] == 3000
    assert admin_client.get("/admin/stats?start_date=2026-03-15").get_json()["total_bookings"] == 0

    resp = admin_client.get("/admin/bookings/export.csv")
    assert resp.mimetype == "text/csv"
    lines = resp.get_data(as_text=True).strip().split("\n")
    assert lines[0].startswith('"Booking ID","Date","Time"')
    assert len(lines) == 4

    rows = admin_client.get("/admin/bookings?status=cancelled").get_json()
    assert [r["time_slot"] for r in rows] == ["11:00"]


def test_user_role_management(admin_client, make_user):
    user = make_user("staff@example.com", "kick-off-7", ["USER"])

    resp = admin_client.post(f"/admin/users/{user.id}/roles", json={"roles": ["moderator"]})
    assert resp.status_code == 200
    assert resp.get_json()["roles"] == ["MODERATOR"]
    assert admin_client.post(f"/admin/users/{user.id}/roles", json={"roles": ["OWNER"]}).status_code == 400

    emails = [u["email"] for u in admin_client.get("/admin/users").get_json()]
    assert "staff@example.com" in emails


def test_audit_log_listing(admin_client):
    book(admin_client, "07:00", "08:00")
    rows = admin_client.get("/admin/audit-logs?action=BOOKING_CREATE").get_json()
    assert len(rows) == 1
    assert rows[0]["entity"] == "booking_group"
    assert rows[0]["metadata"]["slots"] == ["07:00"]


def test_reason_only_on_cancelled_rows(admin_client):
    summary = book(admin_client, "06:00", "07:00")
    url = f"/admin/bookings/{summary['id']}"

    assert admin_client.patch(url, json={"cancelled_reason": "x"}).status_code == 400

    admin_client.post(f"{url}/cancel", json={"reason": "Rain"})
    resp = admin_client.patch(url, json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.get_json()["cancelled_reason"] is None


def test_non_object_body_is_rejected_by_admin_routes(admin_client):
    summary = book(admin_client, "07:00", "08:00")
    assert admin_client.patch(f"/admin/bookings/{summary['id']}", json=[1]).status_code == 400
    assert admin_client.post("/admin/closures", json=["x"]).status_code == 400
    assert admin_client.put("/admin/pricing/10:00", json=[1]).status_code == 400
