"""
Persistence seam for the booking core.

The scheduling functions only talk to a BookingStore. SqlBookingStore is the
production implementation on top of the Flask-SQLAlchemy session; tests swap
in an in-memory store.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.booking import Booking
from models.booking_group import BookingGroup
from models.closure import SlotClosure
from models.pricing import PricingConfig
from scheduling.errors import BookingNotFound, ConstraintViolation, StorageUnavailable

logger = logging.getLogger(__name__)


class BookingStore:
    """Operations the core needs from a relational backend."""

    def confirmed_slots(self, day):
        """Slot ids holding a confirmed booking on `day`."""
        raise NotImplementedError

    def active_closures(self, day):
        """time_slot of every active closure on `day`; None means whole day."""
        raise NotImplementedError

    def taken_slots(self, day, slots):
        """Subset of `slots` already confirmed on `day`."""
        raise NotImplementedError

    def insert_range(self, day, start, end, slots, customer_name, customer_mobile, prices=None):
        """Insert a group plus one confirmed row per slot, all or nothing.

        Returns (group_id, rows) with rows ordered like `slots`. Raises
        ConstraintViolation if any slot is already confirmed.
        """
        raise NotImplementedError

    def get_booking(self, booking_id):
        raise NotImplementedError

    def update_booking(self, booking_id, fields):
        raise NotImplementedError

    def delete_booking(self, booking_id):
        raise NotImplementedError

    def group_bookings(self, group_id):
        """Rows of a group, or None if the group does not exist."""
        raise NotImplementedError

    def cancel_bookings(self, booking_ids, reason):
        """Cancel the confirmed rows among `booking_ids` in one transaction."""
        raise NotImplementedError

    def slot_prices(self, slots):
        """{slot: (price_lkr, is_prime_time)} for configured slots."""
        raise NotImplementedError


class SqlBookingStore(BookingStore):
    def __init__(self, session=None, court_id="court_1"):
        self.session = session if session is not None else db.session
        self.court_id = court_id

    @contextmanager
    def _guard(self):
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            raise ConstraintViolation(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Booking store error: %s", exc)
            raise StorageUnavailable(str(exc)) from exc

    def confirmed_slots(self, day):
        with self._guard():
            rows = (
                self.session.query(Booking.time_slot)
                .filter(Booking.date == day, Booking.status == "confirmed")
                .all()
            )
        return [r.time_slot for r in rows]

    def active_closures(self, day):
        with self._guard():
            rows = (
                self.session.query(SlotClosure.time_slot)
                .filter(SlotClosure.date == day, SlotClosure.is_active.is_(True))
                .all()
            )
        return [r.time_slot for r in rows]

    def taken_slots(self, day, slots):
        if not slots:
            return []
        with self._guard():
            rows = (
                self.session.query(Booking.time_slot)
                .filter(
                    Booking.date == day,
                    Booking.time_slot.in_(list(slots)),
                    Booking.status == "confirmed",
                )
                .all()
            )
        return sorted(r.time_slot for r in rows)

    def insert_range(self, day, start, end, slots, customer_name, customer_mobile, prices=None):
        prices = prices or {}
        group = BookingGroup(
            date=day,
            start_time=start,
            end_time=end,
            customer_name=customer_name,
            customer_mobile=customer_mobile,
        )
        rows = [
            Booking(
                group=group,
                date=day,
                time_slot=slot,
                court_id=self.court_id,
                customer_name=customer_name,
                customer_mobile=customer_mobile,
                status="confirmed",
                payment_status="unpaid",
                price=prices.get(slot, 0),
            )
            for slot in slots
        ]
        with self._guard():
            self.session.add(group)
            self.session.add_all(rows)
            self.session.commit()
            group_id = group.id
        return group_id, rows

    def get_booking(self, booking_id):
        with self._guard():
            return self.session.get(Booking, booking_id)

    def update_booking(self, booking_id, fields):
        with self._guard():
            row = self.session.get(Booking, booking_id)
            if row is None:
                raise BookingNotFound("Booking", booking_id)
            for key, value in fields.items():
                setattr(row, key, value)
            self.session.commit()
        return row

    def delete_booking(self, booking_id):
        with self._guard():
            row = self.session.get(Booking, booking_id)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
        return True

    def group_bookings(self, group_id):
        with self._guard():
            group = self.session.get(BookingGroup, group_id)
            if group is None:
                return None
            return list(group.bookings)

    def cancel_bookings(self, booking_ids, reason):
        if not booking_ids:
            return []
        with self._guard():
            rows = (
                self.session.query(Booking)
                .filter(Booking.id.in_(list(booking_ids)), Booking.status == "confirmed")
                .all()
            )
            for row in rows:
                row.status = "cancelled"
                row.cancelled_reason = reason
            self.session.commit()
            return [row.id for row in rows]

    def slot_prices(self, slots):
        with self._guard():
            rows = (
                self.session.query(PricingConfig)
                .filter(PricingConfig.time_slot.in_(list(slots)))
                .all()
            )
            return {r.time_slot: (r.price_lkr, r.is_prime_time) for r in rows}
