from datetime import datetime
from configs import db


class ClosingPeriod(db.Model):
    __tablename__ = "closing_periods"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    period_name = db.Column(db.String(100), nullable=False)  # e.g. "Desember 2025"
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __str__(self):
        return self.period_name
