from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.closing_period import ClosingPeriod
from dao import weighing as weighing_dao
from reports.periods import parse_date


def list_periods(include_inactive: bool = False) -> List[ClosingPeriod]:
    q = ClosingPeriod.query
    if not include_inactive:
        q = q.filter_by(is_active=True)
    return q.order_by(ClosingPeriod.start_date.desc(), ClosingPeriod.id.desc()).all()


def get_period(period_id: int) -> Optional[ClosingPeriod]:
    return db.session.get(ClosingPeriod, period_id)


def get_active_period(period_id: int) -> Optional[ClosingPeriod]:
    p = get_period(period_id)
    if not p or not p.is_active:
        return None
    return p


def _validate(period_name, start_date, end_date):
    name = (period_name or "").strip()
    if not name:
        raise ValueError("Nama periode harus diisi")
    start, end = parse_date(start_date), parse_date(end_date)
    if start is None or end is None:
        raise ValueError("Tanggal mulai dan tanggal akhir harus diisi")
    if start > end:
        raise ValueError("Tanggal mulai tidak boleh setelah tanggal akhir")
    return name, start, end


def create_period(period_name: str, start_date, end_date) -> ClosingPeriod:
    name, start, end = _validate(period_name, start_date, end_date)
    p = ClosingPeriod(period_name=name, start_date=start, end_date=end, is_active=True)
    db.session.add(p)
    _commit()
    return p


def update_period(period_id: int, **fields) -> Optional[ClosingPeriod]:
    p = get_period(period_id)
    if not p:
        return None
    name, start, end = _validate(
        fields.get("period_name", p.period_name),
        fields.get("start_date", p.start_date),
        fields.get("end_date", p.end_date),
    )
    p.period_name, p.start_date, p.end_date = name, start, end
    if "is_active" in fields:
        p.is_active = bool(fields["is_active"])
    _commit()
    return p


def deactivate_period(period_id: int) -> bool:
    """Soft delete; closing periods are never removed."""
    p = get_period(period_id)
    if not p:
        return False
    p.is_active = False
    _commit()
    return True


def list_available_periods() -> List[dict]:
    """Active periods with the number of sessions each one covers."""
    return [
        {
            "period_id": p.id,
            "period_name": p.period_name,
            "start_date": p.start_date,
            "end_date": p.end_date,
            "session_count": weighing_dao.count_sessions_between(p.start_date, p.end_date),
            "is_active": p.is_active,
        }
        for p in list_periods()
    ]


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
