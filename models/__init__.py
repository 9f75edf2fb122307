from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import Session
from .booking_group import BookingGroup
from .booking import Booking
from .closure import SlotClosure
from .pricing import PricingConfig
