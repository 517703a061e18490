# dao/weighing.py
import logging
from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from configs import db
from db.models.weighing import SATUAN_VALUES, WeighingItem, WeighingSession
from dao import activity_log as log_dao
from dao import category as category_dao
from reports.aggregation import SessionSummary
from reports.periods import parse_date

logger = logging.getLogger(__name__)

EPS = 1e-9

_SESSION_FIELDS = (
    "transaction_date",
    "pic_name",
    "owner_name",
    "gabungan",
    "selected_category_ids",
    "start_time",
    "end_time",
)


# ---------- validation ----------
def _to_float(x) -> float:
    try:
        return float(x or 0)
    except (TypeError, ValueError):
        return 0.0


def _to_int(x) -> Optional[int]:
    try:
        return int(x)
    except (TypeError, ValueError):
        return None


def _normalize_satuan(value) -> str:
    s = (value or "").strip().upper()
    if s not in SATUAN_VALUES:
        raise ValueError(f"Satuan tidak valid: {value}")
    return s


def validate_session_input(
    transaction_date,
    pic_name: str,
    owner_name: str,
    selected_category_ids,
    items: List[Dict],
) -> Dict:
    """Check a new session before anything touches the database.

    Returns the cleaned values; raises ValueError with the message shown
    to the operator.
    """
    d = parse_date(transaction_date)
    if d is None:
        raise ValueError("Tanggal harus diisi")
    if not (pic_name or "").strip():
        raise ValueError("Nama penimbang harus diisi")
    if not (owner_name or "").strip():
        raise ValueError("Nama pemilik harus diisi")

    selected = [i for i in (_to_int(x) for x in selected_category_ids or []) if i]
    if not selected:
        raise ValueError("Pilih minimal satu kategori plastik")

    if not items:
        raise ValueError("Tambah minimal satu item penimbangan")

    norm_items = []
    for ln in items:
        category_id = _to_int(ln.get("category_id"))
        if not category_id:
            raise ValueError("Pilih jenis plastik untuk semua item")
        weight = _to_float(ln.get("weight_kg"))
        if weight <= EPS:
            raise ValueError("Berat harus lebih dari 0")
        norm_items.append(
            {
                "category_id": category_id,
                "weight_kg": weight,
                "satuan": _normalize_satuan(ln.get("satuan")),
            }
        )

    return {
        "transaction_date": d,
        "pic_name": pic_name.strip(),
        "owner_name": owner_name.strip(),
        "selected_category_ids": list(dict.fromkeys(selected)),
        "items": norm_items,
    }


# ---------- queries ----------
def _with_items(q):
    return q.options(
        selectinload(WeighingSession.items).joinedload(WeighingItem.category)
    )


def get_session(session_id: str) -> Optional[WeighingSession]:
    if not session_id:
        return None
    return _with_items(WeighingSession.query).filter_by(id=session_id).one_or_none()


def get_session_summary(session_id: str) -> Optional[SessionSummary]:
    s = get_session(session_id)
    return SessionSummary.from_session(s) if s else None


def list_sessions_between(start: date, end: date) -> List[WeighingSession]:
    return (
        _with_items(WeighingSession.query)
        .filter(
            WeighingSession.transaction_date >= start,
            WeighingSession.transaction_date <= end,
        )
        .order_by(WeighingSession.transaction_date.desc())
        .all()
    )


def count_sessions_between(start: date, end: date) -> int:
    return (
        db.session.query(func.count(WeighingSession.id))
        .filter(
            WeighingSession.transaction_date >= start,
            WeighingSession.transaction_date <= end,
        )
        .scalar()
        or 0
    )


def list_session_summaries(
    start_date=None,
    end_date=None,
    pic_name: Optional[str] = None,
    owner_name: Optional[str] = None,
) -> List[SessionSummary]:
    q = _with_items(WeighingSession.query)
    start, end = parse_date(start_date), parse_date(end_date)
    if start:
        q = q.filter(WeighingSession.transaction_date >= start)
    if end:
        q = q.filter(WeighingSession.transaction_date <= end)
    if pic_name and pic_name.strip():
        q = q.filter(WeighingSession.pic_name.ilike(f"%{pic_name.strip()}%"))
    if owner_name and owner_name.strip():
        q = q.filter(WeighingSession.owner_name.ilike(f"%{owner_name.strip()}%"))
    sessions = q.order_by(
        WeighingSession.transaction_date.desc(), WeighingSession.created_at.desc()
    ).all()
    return [SessionSummary.from_session(s) for s in sessions]


# ---------- mutations ----------
def create_session(
    transaction_date,
    pic_name: str,
    owner_name: str,
    selected_category_ids,
    items: List[Dict],
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    gabungan: Optional[str] = None,
) -> WeighingSession:
    data = validate_session_input(
        transaction_date, pic_name, owner_name, selected_category_ids, items
    )

    s = WeighingSession(
        transaction_date=data["transaction_date"],
        pic_name=data["pic_name"],
        owner_name=data["owner_name"],
        gabungan=(gabungan or "").strip() or None,
        selected_category_ids=data["selected_category_ids"],
        start_time=start_time,
        end_time=end_time or datetime.utcnow(),
    )
    db.session.add(s)
    db.session.flush()  # need s.id for the items

    for seq, ln in enumerate(data["items"], 1):
        db.session.add(
            WeighingItem(
                session_id=s.id,
                category_id=ln["category_id"],
                sequence_number=seq,
                weight_kg=ln["weight_kg"],
                satuan=ln["satuan"],
            )
        )
    _commit()
    logger.info("Created weighing session %s with %d items", s.id, len(data["items"]))
    return s


def _clean_session_fields(fields: Dict) -> Dict:
    cleaned = {}
    for k, v in fields.items():
        if k not in _SESSION_FIELDS:
            raise ValueError(f"Kolom tidak dikenal: {k}")
        if k in ("pic_name", "owner_name"):
            v = (v or "").strip()
            if not v:
                raise ValueError(
                    "Nama penimbang harus diisi" if k == "pic_name" else "Nama pemilik harus diisi"
                )
        if k == "transaction_date":
            v = parse_date(v)
            if v is None:
                raise ValueError("Tanggal harus diisi")
        cleaned[k] = v
    return cleaned


def _clean_item_fields(fields: Dict) -> Dict:
    cleaned = {}
    if "weight_kg" in fields:
        weight = _to_float(fields["weight_kg"])
        if weight <= EPS:
            raise ValueError("Berat harus lebih dari 0")
        cleaned["weight_kg"] = weight
    if "satuan" in fields:
        cleaned["satuan"] = _normalize_satuan(fields["satuan"])
    if "category_id" in fields:
        category_id = _to_int(fields["category_id"])
        if not category_id:
            raise ValueError("Pilih jenis plastik untuk semua item")
        if category_dao.get_category(category_id) is None:
            raise ValueError("Jenis plastik tidak ditemukan")
        cleaned["category_id"] = category_id
    return cleaned


def update_session(session_id: str, **fields) -> Optional[WeighingSession]:
    s = db.session.get(WeighingSession, session_id)
    if not s:
        return None
    for k, v in _clean_session_fields(fields).items():
        setattr(s, k, v)
    _commit()
    return s


def update_item(item_id: int, **fields) -> Optional[WeighingItem]:
    it = db.session.get(WeighingItem, item_id)
    if not it:
        return None
    for k, v in _clean_item_fields(fields).items():
        setattr(it, k, v)
    _commit()
    return it


def update_session_with_items(
    session_id: str,
    fields: Dict,
    items: List[Dict] = (),
    new_item: Optional[Dict] = None,
) -> Optional[WeighingSession]:
    """Apply an edit form as one commit.

    Header, item rows and the optional new row are all validated before
    anything is changed. Rows whose id does not belong to the session are
    ignored. A new row without a weight is treated as empty.
    """
    s = get_session(session_id)
    if not s:
        return None

    header = _clean_session_fields(fields)
    own = {it.id: it for it in s.items}
    changes = []
    for ln in items or []:
        it = own.get(_to_int(ln.get("id")))
        if it is None:
            continue
        values = {k: ln[k] for k in ("category_id", "weight_kg", "satuan") if k in ln}
        changes.append((it, _clean_item_fields(values)))

    extra = None
    if new_item and str(new_item.get("weight_kg") or "").strip():
        extra = _clean_item_fields(
            {
                "category_id": new_item.get("category_id"),
                "weight_kg": new_item.get("weight_kg"),
                "satuan": new_item.get("satuan", ""),
            }
        )

    for k, v in header.items():
        setattr(s, k, v)
    for it, values in changes:
        for k, v in values.items():
            setattr(it, k, v)
    if extra:
        last = max((it.sequence_number for it in s.items), default=0)
        s.items.append(WeighingItem(sequence_number=last + 1, **extra))
    _commit()
    logger.info("Updated weighing session %s (%d items changed)", session_id, len(changes))
    return s


def add_item(session_id: str, category_id, weight_kg, satuan: str = "") -> WeighingItem:
    s = db.session.get(WeighingSession, session_id)
    if not s:
        raise ValueError("Sesi penimbangan tidak ditemukan")
    values = _clean_item_fields(
        {"category_id": category_id, "weight_kg": weight_kg, "satuan": satuan}
    )

    last = (
        db.session.query(func.max(WeighingItem.sequence_number))
        .filter(WeighingItem.session_id == session_id)
        .scalar()
    )
    it = WeighingItem(session_id=session_id, sequence_number=(last or 0) + 1, **values)
    db.session.add(it)
    _commit()
    return it


def delete_item(item_id: int) -> bool:
    it = db.session.get(WeighingItem, item_id)
    if not it:
        return False
    db.session.delete(it)
    _commit()
    return True


def delete_session(session_id: str, user_agent: Optional[str] = None) -> bool:
    """Write the audit entry, then delete the session and its items.

    A failing audit write does not stop the deletion.
    """
    s = get_session(session_id)
    if not s:
        return False

    try:
        log_dao.write_deletion_log(SessionSummary.from_session(s), user_agent)
    except SQLAlchemyError:
        logger.exception("Could not write deletion log for session %s", session_id)

    s = db.session.get(WeighingSession, session_id)
    if not s:
        return False
    db.session.delete(s)
    _commit()
    logger.info("Deleted weighing session %s", session_id)
    return True


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
