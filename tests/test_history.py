from datetime import date

from reports.aggregation import SessionSummary
from reports.history import group_sessions
from tests.conftest import make_item, make_session


def _s(sid, d, weight=1.0):
    return SessionSummary.from_session(make_session(sid, d, [make_item("PP KOTOR", weight)]))


def test_groups_are_most_recent_first():
    sessions = [
        _s("a", date(2025, 11, 3)),
        _s("b", date(2025, 12, 1)),
        _s("c", date(2025, 12, 16)),
        _s("d", date(2026, 1, 7)),
        _s("e", date(2025, 12, 17)),
    ]
    years = group_sessions(sessions)

    assert [y.year for y in years] == [2026, 2025]
    dec, nov = years[1].months
    assert dec.label == "Desember 2025"
    assert nov.label == "November 2025"
    assert [w.number for w in dec.weeks] == [3, 1]
    assert [s.id for s in dec.weeks[0].sessions] == ["e", "c"]
    assert dec.weeks[0].label == "Minggu ke-3"


def test_week_total_weight():
    years = group_sessions([_s("a", date(2025, 12, 2), 2.5), _s("b", date(2025, 12, 3), 1.5)])
    week = years[0].months[0].weeks[0]
    assert week.total_weight == 4.0


def test_sessions_without_date_are_skipped():
    years = group_sessions([_s("a", None), _s("b", date(2025, 12, 2))])
    assert len(years) == 1
    assert years[0].months[0].weeks[0].sessions[0].id == "b"


def test_empty():
    assert group_sessions([]) == []
