# reports/history.py
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from reports.periods import month_label, parse_date, week_label, week_of_month


@dataclass
class WeekGroup:
    number: int
    sessions: List = field(default_factory=list)

    @property
    def label(self) -> str:
        return week_label(self.number)

    @property
    def total_weight(self) -> float:
        return sum(float(s.total_weight or 0) for s in self.sessions)


@dataclass
class MonthGroup:
    year: int
    month: int
    weeks: List[WeekGroup] = field(default_factory=list)

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)


@dataclass
class YearGroup:
    year: int
    months: List[MonthGroup] = field(default_factory=list)


def group_sessions(summaries: Iterable) -> List[YearGroup]:
    """Year -> month -> week -> sessions, most recent first at every level.

    Sessions without a usable transaction_date are left out.
    """
    tree: Dict[int, Dict[int, Dict[int, list]]] = {}
    for s in summaries:
        d = parse_date(getattr(s, "transaction_date", None))
        if d is None:
            continue
        weeks = tree.setdefault(d.year, {}).setdefault(d.month, {})
        weeks.setdefault(week_of_month(d), []).append((d, s))

    years = []
    for year in sorted(tree, reverse=True):
        months = []
        for month in sorted(tree[year], reverse=True):
            weeks = []
            for number in sorted(tree[year][month], reverse=True):
                rows = sorted(tree[year][month][number], key=lambda r: r[0], reverse=True)
                weeks.append(WeekGroup(number=number, sessions=[s for _, s in rows]))
            months.append(MonthGroup(year=year, month=month, weeks=weeks))
        years.append(YearGroup(year=year, months=months))
    return years
