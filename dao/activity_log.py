# dao/activity_log.py
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.activity_log import DeletionLog

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7


def list_logs(interval=None) -> List[DeletionLog]:
    """Newest first; `interval` limits to entries deleted on those days."""
    q = DeletionLog.query
    if interval is not None:
        start, end = interval.bounds()
        q = q.filter(DeletionLog.deleted_at >= start, DeletionLog.deleted_at <= end)
    return q.order_by(DeletionLog.deleted_at.desc()).all()


def write_deletion_log(summary, user_agent: Optional[str] = None) -> DeletionLog:
    """Append one audit row describing a session about to be deleted."""
    log = DeletionLog(
        deleted_session_id=summary.id,
        nama_penimbang=summary.pic_name or "",
        pemilik_barang=summary.owner_name or "",
        total_berat_kg=float(summary.total_weight or 0),
        deleted_at=datetime.utcnow(),
        user_agent=user_agent,
    )
    db.session.add(log)
    _commit()
    return log


def cleanup_old_logs(
    days: int = DEFAULT_RETENTION_DAYS, now: Optional[datetime] = None
) -> Tuple[int, Optional[datetime]]:
    """Purge entries older than `days`.

    Returns (deleted_count, deleted_at of the oldest entry still kept).
    """
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=days)
    deleted = DeletionLog.query.filter(DeletionLog.deleted_at < cutoff).delete(
        synchronize_session=False
    )
    _commit()

    oldest = (
        db.session.query(DeletionLog.deleted_at)
        .order_by(DeletionLog.deleted_at.asc())
        .limit(1)
        .scalar()
    )
    logger.info("Purged %d deletion logs older than %s", deleted, cutoff)
    return deleted, oldest


def device_from_user_agent(user_agent: Optional[str]) -> str:
    if not user_agent:
        return "-"
    if "Mobile" in user_agent or "Android" in user_agent:
        return "Mobile"
    if "iPad" in user_agent or "Tablet" in user_agent:
        return "Tablet"
    return "Desktop"


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
