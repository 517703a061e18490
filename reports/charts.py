# reports/charts.py
from dataclasses import asdict, dataclass
from typing import Iterable, List

PALETTE = [
    "#009ce4",  # primary
    "#7eb93e",  # secondary
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
]


@dataclass
class ChartSegment:
    label: str
    value: float
    percentage: float
    color: str

    def to_dict(self) -> dict:
        return asdict(self)


def chart_segments(breakdown: Iterable) -> List[ChartSegment]:
    """Pie segments for an already-sorted category breakdown.

    Percentages are recomputed from the segment values so the pie always
    closes even when the caller passes a filtered list.
    """
    rows = list(breakdown)
    total = sum(float(r.total_weight or 0) for r in rows)
    if total <= 0:
        return []
    return [
        ChartSegment(
            label=r.category_name,
            value=float(r.total_weight or 0),
            percentage=float(r.total_weight or 0) / total * 100,
            color=PALETTE[i % len(PALETTE)],
        )
        for i, r in enumerate(rows)
    ]
