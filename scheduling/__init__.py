from .slots import ALL_SLOTS, DAY_END, slot_range, format_time_12h
from .errors import (
    BookingError,
    InvalidRange,
    InvalidBookingRequest,
    BookingNotFound,
    SlotUnavailable,
    StorageUnavailable,
    ConstraintViolation,
)
from .availability import get_available_slots, get_slot_board, OPTIMISTIC, PESSIMISTIC
from .validator import expand_range, validate_range
from .committer import book_range, BookingSummary
from .mutations import update_booking, cancel_booking, cancel_group, delete_booking
