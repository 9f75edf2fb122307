from flask import current_app

from models import db
from models.user import Role
from models.pricing import PricingConfig
from scheduling.slots import ALL_SLOTS

DEFAULT_ROLES = ["USER", "MODERATOR", "SUPER_ADMIN"]


def seed_roles():
    existing = {r.name for r in Role.query.all()}
    for name in DEFAULT_ROLES:
        if name not in existing:
            db.session.add(Role(name=name))
    db.session.commit()


def seed_pricing():
    """Make sure every hourly slot has a pricing row. Existing rows are kept."""
    default_price = current_app.config.get("DEFAULT_SLOT_PRICE", 0)
    existing = {p.time_slot for p in PricingConfig.query.all()}
    created = 0
    for slot in ALL_SLOTS:
        if slot not in existing:
            db.session.add(PricingConfig(time_slot=slot, price_lkr=default_price, is_prime_time=False))
            created += 1
    db.session.commit()
    return created
