import logging
from dataclasses import asdict, dataclass, field

from scheduling.errors import (
    ConstraintViolation,
    InvalidBookingRequest,
    SlotUnavailable,
    StorageUnavailable,
)
from scheduling.slots import format_time_12h
from scheduling.validator import expand_range

logger = logging.getLogger(__name__)


@dataclass
class BookingSummary:
    id: int
    group_id: int
    date: str
    start_time: str
    end_time: str
    slots: list = field(default_factory=list)
    customer_name: str = ""
    customer_mobile: str = ""
    status: str = "confirmed"
    payment_status: str = "unpaid"
    total_price: int = 0

    def to_dict(self):
        return asdict(self)


def _times(slots):
    return ", ".join(format_time_12h(s) for s in sorted(slots))


def _closed_slots(store, day, slots):
    closures = store.active_closures(day)
    if any(c is None for c in closures):
        return list(slots)
    closed = set(c for c in closures if c)
    return [s for s in slots if s in closed]


def book_range(store, day, start, end, customer_name, customer_mobile, attach_price=False):
    """Book every hour in [start, end) on `day` for one customer, or nothing.

    The pre-check only rejects early; the store's unique index on confirmed
    (date, time_slot) decides races between concurrent requests.
    """
    customer_name = (customer_name or "").strip()
    customer_mobile = (customer_mobile or "").strip()
    if not customer_name or not customer_mobile:
        raise InvalidBookingRequest("customer_name and customer_mobile are required")

    slots = expand_range(start, end)

    taken = store.taken_slots(day, slots)
    closed = _closed_slots(store, day, slots)
    if taken and closed:
        raise SlotUnavailable(
            set(taken) | set(closed),
            "Some slots in this range are unavailable. Booked: {}. Closed: {}".format(
                _times(taken), _times(closed)),
        )
    if taken:
        raise SlotUnavailable(taken)
    if closed:
        raise SlotUnavailable(closed, f"Some slots in this range are closed: {_times(closed)}")

    prices = None
    if attach_price:
        prices = {slot: price for slot, (price, _) in store.slot_prices(slots).items()}

    try:
        group_id, rows = store.insert_range(
            day, start, end, slots, customer_name, customer_mobile, prices=prices,
        )
    except ConstraintViolation as exc:
        logger.info("Booking race lost on %s %s-%s: %s", day, start, end, exc.detail)
        try:
            taken = store.taken_slots(day, slots)
        except StorageUnavailable:
            taken = []
        raise SlotUnavailable(taken or slots) from exc

    first = rows[0]
    return BookingSummary(
        id=first.id,
        group_id=group_id,
        date=day.isoformat(),
        start_time=start,
        end_time=end,
        slots=list(slots),
        customer_name=customer_name,
        customer_mobile=customer_mobile,
        status=first.status,
        payment_status=first.payment_status,
        total_price=sum(r.price or 0 for r in rows),
    )
