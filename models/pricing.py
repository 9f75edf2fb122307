from datetime import datetime
from models.db import db


class PricingConfig(db.Model):
    __tablename__ = "pricing"

    id = db.Column(db.Integer, primary_key=True)
    time_slot = db.Column(db.String(5), unique=True, nullable=False)
    price_lkr = db.Column(db.Integer, nullable=False, default=0)
    is_prime_time = db.Column(db.Boolean, default=False, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "time_slot": self.time_slot,
            "price_lkr": self.price_lkr,
            "is_prime_time": self.is_prime_time,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
