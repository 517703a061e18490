from datetime import date, datetime, timedelta

import pytest

from reports.aggregation import (
    UNKNOWN_CATEGORY,
    SessionSummary,
    aggregate,
    category_breakdown,
    format_duration,
    percentage,
    session_details,
    summarize,
)
from reports.periods import DateInterval
from tests.conftest import make_item, make_session

DECEMBER = DateInterval(date(2025, 12, 1), date(2025, 12, 31))


def test_december_period_scenario():
    sessions = [
        make_session("a", date(2025, 12, 1), [make_item("PP KOTOR", 3.0)]),
        make_session("b", date(2025, 12, 15), [make_item("PP KOTOR", 2.0)]),
    ]
    agg = aggregate(sessions, DECEMBER)

    assert agg.has_data
    assert agg.summary.total_sessions == 2
    assert agg.summary.total_weight == pytest.approx(5.0)
    assert agg.summary.total_items == 2
    assert len(agg.categories) == 1
    assert agg.categories[0].category_name == "PP KOTOR"
    assert agg.categories[0].total_weight == pytest.approx(5.0)
    assert agg.categories[0].percentage == pytest.approx(100.0)


def test_sessions_outside_interval_are_dropped():
    sessions = [
        make_session("in", date(2025, 12, 31), [make_item("PP KOTOR", 1)]),
        make_session("out", date(2026, 1, 1), [make_item("PP KOTOR", 9)]),
    ]
    agg = aggregate(sessions, DECEMBER)
    assert agg.summary.total_sessions == 1
    assert agg.summary.total_weight == pytest.approx(1)


def test_empty_input_has_no_summary():
    agg = aggregate([], DECEMBER)
    assert not agg.has_data
    assert agg.summary is None
    assert agg.categories == []
    assert agg.sessions == []
    assert summarize([]) is None


def test_unknown_category_label():
    s = make_session("x", date(2025, 12, 5), [make_item(None, 4.0), make_item("METALIS", 1.0, 2)])
    breakdown = category_breakdown([s])
    assert [r.category_name for r in breakdown] == [UNKNOWN_CATEGORY, "METALIS"]
    assert UNKNOWN_CATEGORY == "Tidak Diketahui"

    details = session_details([s])
    assert details[0].categories == [UNKNOWN_CATEGORY, "METALIS"]
    assert details[0].total_weight == pytest.approx(5.0)


def test_percentages_sum_to_hundred(december_sessions):
    breakdown = category_breakdown(december_sessions)
    assert sum(r.percentage for r in breakdown) == pytest.approx(100.0)
    assert sum(r.total_weight for r in breakdown) == pytest.approx(50.0)
    assert [r.category_name for r in breakdown] == ["PP KOTOR", "SLITING", "METALIS"]
    assert breakdown[0].item_count == 2


def test_zero_total_gives_zero_percentage():
    s = make_session("z", date(2025, 12, 5), [make_item("PP KOTOR", 0), make_item("METALIS", 0, 2)])
    breakdown = category_breakdown([s])
    assert all(r.percentage == 0 for r in breakdown)
    assert percentage(5, 0) == 0.0


def test_ties_keep_first_seen_order():
    s = make_session(
        "t",
        date(2025, 12, 5),
        [make_item("SLITING", 2, 1), make_item("METALIS", 2, 2), make_item("PP KOTOR", 2, 3)],
    )
    names = [r.category_name for r in category_breakdown([s])]
    assert names == ["SLITING", "METALIS", "PP KOTOR"]


def test_session_details_newest_first(december_sessions):
    details = session_details(december_sessions)
    assert [d.id for d in details] == ["s2", "s1"]
    assert details[0].categories == ["PP KOTOR", "SLITING"]
    assert details[0].item_count == 2


def test_session_summary_orders_items_by_sequence():
    s = make_session(
        "o",
        date(2025, 12, 5),
        [make_item("METALIS", 1, 2), make_item("PP KOTOR", 2, 1)],
    )
    s.start_time = datetime(2025, 12, 5, 8, 0, 0)
    s.end_time = datetime(2025, 12, 5, 8, 2, 5)
    summary = SessionSummary.from_session(s)
    assert [it.sequence_number for it in summary.items] == [1, 2]
    assert summary.total_items == 2
    assert summary.total_weight == pytest.approx(3)
    assert summary.elapsed == timedelta(minutes=2, seconds=5)


def test_format_duration():
    assert format_duration(timedelta(minutes=2, seconds=5)) == "2 menit 5 detik"
    assert format_duration(None) == "-"
