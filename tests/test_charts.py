import pytest

from reports.aggregation import CategoryBreakdown
from reports.charts import PALETTE, chart_segments


def _row(name, weight):
    return CategoryBreakdown(category_name=name, total_weight=weight, percentage=0, item_count=1)


def test_segments_follow_breakdown_order_and_palette():
    segs = chart_segments([_row("PP KOTOR", 30), _row("METALIS", 10)])
    assert [s.label for s in segs] == ["PP KOTOR", "METALIS"]
    assert segs[0].percentage == pytest.approx(75)
    assert segs[1].color == PALETTE[1]
    assert segs[0].to_dict()["color"] == PALETTE[0]


def test_palette_wraps_around():
    rows = [_row(f"C{i}", 1) for i in range(len(PALETTE) + 2)]
    segs = chart_segments(rows)
    assert segs[len(PALETTE)].color == PALETTE[0]
    assert sum(s.percentage for s in segs) == pytest.approx(100)


def test_no_segments_when_total_is_zero():
    assert chart_segments([_row("PP KOTOR", 0)]) == []
    assert chart_segments([]) == []
