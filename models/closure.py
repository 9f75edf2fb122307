from datetime import datetime
from models.db import db


class SlotClosure(db.Model):
    __tablename__ = "slot_closures"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    time_slot = db.Column(db.String(5), nullable=True)  # NULL closes the whole day
    court_id = db.Column(db.String(40), nullable=False, default="court_1")
    reason = db.Column(db.String(255), nullable=False)

    # closures are never hard-deleted, only deactivated
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "time_slot": self.time_slot,
            "court_id": self.court_id,
            "reason": self.reason,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
