# reports/aggregation.py
"""Reduce weighing sessions into period summaries.

Everything here works on plain objects: a session needs `id`,
`transaction_date`, `pic_name`, `owner_name` and `items`; an item needs
`weight_kg` and an optional `category` with a `name`. Weights are summed as
floats, rounding is left to whoever displays the numbers.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

UNKNOWN_CATEGORY = "Tidak Diketahui"


@dataclass
class Summary:
    total_sessions: int
    total_weight: float
    total_items: int


@dataclass
class CategoryBreakdown:
    category_name: str
    total_weight: float
    percentage: float
    item_count: int


@dataclass
class SessionDetail:
    id: str
    transaction_date: Optional[date]
    pic_name: str
    owner_name: str
    categories: List[str]
    total_weight: float
    item_count: int


@dataclass
class Aggregate:
    summary: Optional[Summary] = None
    categories: List[CategoryBreakdown] = field(default_factory=list)
    sessions: List[SessionDetail] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.summary is not None


def category_name(item) -> str:
    category = getattr(item, "category", None)
    name = getattr(category, "name", None)
    return name or UNKNOWN_CATEGORY


def _weight(item) -> float:
    return float(getattr(item, "weight_kg", 0) or 0)


def _items(session) -> list:
    return list(getattr(session, "items", None) or [])


def session_total(session) -> float:
    return sum(_weight(it) for it in _items(session))


def percentage(part: float, total: float) -> float:
    return part / total * 100 if total > 0 else 0.0


def in_interval(sessions: Iterable, interval) -> list:
    """Sessions whose transaction_date lies inside `interval` (inclusive)."""
    return [
        s
        for s in sessions
        if s.transaction_date is not None and interval.contains(s.transaction_date)
    ]


def summarize(sessions: Iterable) -> Optional[Summary]:
    sessions = list(sessions)
    if not sessions:
        return None
    items = [it for s in sessions for it in _items(s)]
    return Summary(
        total_sessions=len(sessions),
        total_weight=sum(_weight(it) for it in items),
        total_items=len(items),
    )


def category_breakdown(sessions: Iterable) -> List[CategoryBreakdown]:
    """Weight per category name, heaviest first.

    Equal weights keep the order in which the categories were first seen.
    """
    weights = {}
    counts = {}
    for s in sessions:
        for it in _items(s):
            name = category_name(it)
            weights[name] = weights.get(name, 0.0) + _weight(it)
            counts[name] = counts.get(name, 0) + 1

    total = sum(weights.values())
    rows = [
        CategoryBreakdown(
            category_name=name,
            total_weight=w,
            percentage=percentage(w, total),
            item_count=counts[name],
        )
        for name, w in weights.items()
    ]
    return sorted(rows, key=lambda r: r.total_weight, reverse=True)


def distinct_categories(session) -> List[str]:
    seen = []
    for it in _items(session):
        name = category_name(it)
        if name not in seen:
            seen.append(name)
    return seen


def session_details(sessions: Iterable) -> List[SessionDetail]:
    rows = [
        SessionDetail(
            id=s.id,
            transaction_date=s.transaction_date,
            pic_name=s.pic_name or "",
            owner_name=s.owner_name or "",
            categories=distinct_categories(s),
            total_weight=session_total(s),
            item_count=len(_items(s)),
        )
        for s in sessions
    ]
    return sorted(rows, key=lambda r: r.transaction_date or date.min, reverse=True)


def aggregate(sessions: Iterable, interval=None) -> Aggregate:
    sessions = list(sessions)
    if interval is not None:
        sessions = in_interval(sessions, interval)
    if not sessions:
        return Aggregate()
    return Aggregate(
        summary=summarize(sessions),
        categories=category_breakdown(sessions),
        sessions=session_details(sessions),
    )


@dataclass
class SessionSummary:
    id: str
    transaction_date: Optional[date]
    pic_name: str
    owner_name: str
    items: list
    total_items: int
    total_weight: float
    gabungan: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @classmethod
    def from_session(cls, session) -> "SessionSummary":
        items = sorted(_items(session), key=lambda it: it.sequence_number or 0)
        return cls(
            id=session.id,
            transaction_date=session.transaction_date,
            pic_name=session.pic_name or "",
            owner_name=session.owner_name or "",
            items=items,
            total_items=len(items),
            total_weight=sum(_weight(it) for it in items),
            gabungan=getattr(session, "gabungan", None),
            start_time=getattr(session, "start_time", None),
            end_time=getattr(session, "end_time", None),
        )

    @property
    def elapsed(self) -> Optional[timedelta]:
        if not self.start_time or not self.end_time:
            return None
        return self.end_time - self.start_time


def format_duration(delta: Optional[timedelta]) -> str:
    if delta is None:
        return "-"
    total = max(int(delta.total_seconds()), 0)
    return f"{total // 60} menit {total % 60} detik"
