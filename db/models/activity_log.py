import uuid
from datetime import datetime
from configs import db


class DeletionLog(db.Model):
    """Snapshot of a weighing session taken right before it was deleted."""

    __tablename__ = "logs_aktivitas"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # no FK: the session row is gone once the log is useful
    deleted_session_id = db.Column(db.String(36), nullable=False)
    nama_penimbang = db.Column(db.String(120), nullable=False, default="")
    pemilik_barang = db.Column(db.String(120), nullable=False, default="")
    total_berat_kg = db.Column(db.Float, nullable=False, default=0)
    deleted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    user_agent = db.Column(db.Text)
