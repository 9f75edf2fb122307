import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default):
    return os.getenv(name, default).lower() == "true"


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file next to app.py unless DATABASE_URL is set
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "court_booking.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie
    AUTH_COOKIE_NAME = "court_session"
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60
    IDLE_TIMEOUT_SECONDS = 20 * 60
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", "false")

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Single venue
    COURT_ID = os.getenv("COURT_ID", "court_1")

    # What availability reads report when the database is unreachable:
    # customers see everything open, admins see nothing open.
    PUBLIC_AVAILABILITY_FALLBACK = os.getenv("PUBLIC_AVAILABILITY_FALLBACK", "optimistic")
    ADMIN_AVAILABILITY_FALLBACK = os.getenv("ADMIN_AVAILABILITY_FALLBACK", "pessimistic")

    # Prices are assigned by staff after booking unless this is on
    ATTACH_PRICE_AT_BOOKING = _env_bool("ATTACH_PRICE_AT_BOOKING", "false")
    DEFAULT_SLOT_PRICE = int(os.getenv("DEFAULT_SLOT_PRICE", "0"))

    DEBUG = False
