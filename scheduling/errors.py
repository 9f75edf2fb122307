from scheduling.slots import format_time_12h


class BookingError(Exception):
    """Base for every error the booking core hands back to callers."""

    kind = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"kind": self.kind, "error": self.message}


class InvalidRange(BookingError):
    kind = "invalid_range"


class InvalidBookingRequest(BookingError):
    kind = "invalid_request"


class BookingNotFound(BookingError):
    kind = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class SlotUnavailable(BookingError):
    kind = "slot_unavailable"

    def __init__(self, slots, message: str = None):
        self.slots = sorted(set(slots))
        if message is None:
            taken = ", ".join(format_time_12h(s) for s in self.slots)
            message = f"Some slots in this range are already booked: {taken}"
        super().__init__(message)

    def to_dict(self):
        out = super().to_dict()
        out["slots"] = self.slots
        return out


class StorageUnavailable(BookingError):
    kind = "storage_unavailable"

    def __init__(self, detail: str):
        super().__init__(f"Database error: {detail}")
        self.detail = detail

    def to_dict(self):
        out = super().to_dict()
        out["detail"] = self.detail
        return out


class ConstraintViolation(BookingError):
    """Raised by a store when the confirmed-slot unique index rejects a write.

    Never reaches callers of the core: it is turned into SlotUnavailable.
    """

    kind = "constraint_violation"

    def __init__(self, detail: str):
        super().__init__(f"Uniqueness constraint violated: {detail}")
        self.detail = detail
