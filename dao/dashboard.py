# dao/dashboard.py
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from dao import closing_period as period_dao
from dao import weighing as weighing_dao
from reports.aggregation import CategoryBreakdown, SessionDetail, aggregate
from reports.periods import (
    DateInterval,
    closing_period_interval,
    current_week,
    week_label,
    week_of_month,
)


@dataclass
class WeeklyDashboard:
    interval: DateInterval
    week_number: int
    categories: List[CategoryBreakdown] = field(default_factory=list)
    this_week_total: float = 0.0
    this_week_session_count: int = 0

    @property
    def week_label(self) -> str:
        return week_label(self.week_number)


@dataclass
class MonthlyDashboard:
    period_id: int
    period_name: str
    start_date: date
    end_date: date
    total_sessions: int
    total_weight: float
    total_items: int


@dataclass
class PeriodReport:
    period: object
    interval: DateInterval
    summary: Optional[MonthlyDashboard] = None
    categories: List[CategoryBreakdown] = field(default_factory=list)
    sessions: List[SessionDetail] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.summary is not None


def weekly_dashboard(today: Optional[date] = None) -> WeeklyDashboard:
    today = today or date.today()
    week = current_week(today)
    sessions = weighing_dao.list_sessions_between(week.start, week.end)
    agg = aggregate(sessions, week)
    return WeeklyDashboard(
        interval=week,
        week_number=week_of_month(today),
        categories=agg.categories,
        this_week_total=agg.summary.total_weight if agg.summary else 0.0,
        this_week_session_count=agg.summary.total_sessions if agg.summary else 0,
    )


def period_report(period_id: int) -> Optional[PeriodReport]:
    """Aggregate one active closing period; None if it is missing/inactive."""
    period = period_dao.get_active_period(period_id)
    interval = closing_period_interval(period)
    if interval is None:
        return None

    sessions = weighing_dao.list_sessions_between(interval.start, interval.end)
    agg = aggregate(sessions, interval)
    report = PeriodReport(period=period, interval=interval)
    if not agg.has_data:
        return report

    report.summary = MonthlyDashboard(
        period_id=period.id,
        period_name=period.period_name,
        start_date=period.start_date,
        end_date=period.end_date,
        total_sessions=agg.summary.total_sessions,
        total_weight=agg.summary.total_weight,
        total_items=agg.summary.total_items,
    )
    report.categories = agg.categories
    report.sessions = agg.sessions
    return report
