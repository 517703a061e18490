# reports/periods.py
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

MONTH_NAMES = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


@dataclass(frozen=True)
class DateInterval:
    """Inclusive date range [start, end]."""

    start: date
    end: date

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def bounds(self):
        """(start 00:00:00, end 23:59:59.999999) for timestamp filtering."""
        return (
            datetime.combine(self.start, time.min),
            datetime.combine(self.end, time.max),
        )


def current_week(today: Optional[date] = None) -> DateInterval:
    """Monday..Sunday week containing `today`."""
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())  # Sunday -> 6 days back
    return DateInterval(monday, monday + timedelta(days=6))


def closing_period_interval(period) -> Optional[DateInterval]:
    """Interval of a closing period, or None when missing or inactive."""
    if period is None or not getattr(period, "is_active", False):
        return None
    return DateInterval(period.start_date, period.end_date)


def first_monday(year: int, month: int) -> date:
    first = date(year, month, 1)
    anchor = first + timedelta(days=(7 - first.weekday()) % 7)
    if anchor.month != month:
        return first
    return anchor


def week_of_month(d: date) -> int:
    """Week number inside the month, anchored on the first Monday.

    Days before the first Monday belong to week 1.
    """
    anchor = first_monday(d.year, d.month)
    if d < anchor:
        return 1
    return (d - anchor).days // 7 + 1


def week_label(number: int) -> str:
    return f"Minggu ke-{number}"


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_date_id(d: Optional[date]) -> str:
    """17/10/2026 style used on screens and printouts."""
    if not d:
        return "Tidak diketahui"
    return d.strftime("%d/%m/%Y")


def parse_date(value) -> Optional[date]:
    """Best-effort date parsing; returns None for anything unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None
