# db/models/weighing.py
import enum
import uuid
from datetime import datetime
from configs import db


class Satuan(enum.Enum):
    SAK = "SAK"
    PRESS = "PRESS"
    BAL = "BAL"
    NONE = ""  # belum dipilih


SATUAN_VALUES = tuple(s.value for s in Satuan)


def _new_id() -> str:
    return str(uuid.uuid4())


class WeighingSession(db.Model):
    __tablename__ = "weighing_sessions"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    transaction_date = db.Column(db.Date, nullable=False, index=True)
    pic_name = db.Column(db.String(120), nullable=False)
    owner_name = db.Column(db.String(120), nullable=False)
    gabungan = db.Column(db.String(255))
    selected_category_ids = db.Column(db.JSON, default=list, nullable=False)

    # only used to display how long the weighing took
    start_time = db.Column(db.DateTime)
    end_time = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    items = db.relationship(
        "WeighingItem",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="WeighingItem.sequence_number",
    )

    @property
    def total_weight(self) -> float:
        return sum(float(it.weight_kg or 0) for it in self.items)

    @property
    def total_items(self) -> int:
        return len(self.items)

    def __str__(self):
        return f"{self.transaction_date} - {self.pic_name} / {self.owner_name}"


class WeighingItem(db.Model):
    __tablename__ = "weighing_items"
    __table_args__ = (
        db.UniqueConstraint("session_id", "sequence_number", name="uq_item_seq"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    session_id = db.Column(
        db.String(36),
        db.ForeignKey("weighing_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("plastic_categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    sequence_number = db.Column(db.Integer, nullable=False)
    weight_kg = db.Column(db.Float, nullable=False, default=0)
    satuan = db.Column(db.String(10), nullable=False, default="")

    session = db.relationship("WeighingSession", back_populates="items")
    category = db.relationship("PlasticCategory")
