from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from fiscal.config import get_settings

from .errors import InvalidPeriod

# Fixed-date national holidays (month, day).
NATIONAL_HOLIDAYS: frozenset[tuple[int, int]] = frozenset(
    {
        (1, 1),
        (1, 6),
        (5, 1),
        (8, 15),
        (10, 12),
        (11, 1),
        (12, 6),
        (12, 8),
        (12, 25),
    }
)

QUARTERLY_MODELS = ("303", "130", "111", "115")
ANNUAL_MODELS = ("390", "180", "100")

# Quarter -> (filing month, deadline day). Q4 files in January of year + 1.
_FILING_CALENDAR: dict[int, tuple[int, int]] = {
    1: (4, 20),
    2: (7, 20),
    3: (10, 20),
    4: (1, 20),
}
# Models whose Q4 deadline is extended to January 30.
_EXTENDED_Q4_MODELS = frozenset({"303", "130"})

REMINDER_LEAD_DAYS = 5


def _easter_sunday(year: int) -> date:
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def is_business_day(day: date) -> bool:
    if day.weekday() >= 5:
        return False
    if (day.month, day.day) in NATIONAL_HOLIDAYS:
        return False
    # Good Friday is the only movable national holiday.
    return day != _easter_sunday(day.year) - timedelta(days=2)


def next_business_day(day: date) -> date:
    while not is_business_day(day):
        day += timedelta(days=1)
    return day


def last_business_day(year: int, month: int) -> date:
    day = date(year, month, calendar.monthrange(year, month)[1])
    while day.weekday() >= 5:
        day -= timedelta(days=1)
    return day


def check_year(year: int, *, field: str = "year") -> int:
    settings = get_settings()
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidPeriod(f"{field} must be an integer, got {year!r}", field=field)
    if not settings.supports_year(year):
        raise InvalidPeriod(
            f"{field} {year} outside supported range "
            f"{settings.min_supported_year}-{settings.max_supported_year}",
            field=field,
        )
    return year


def check_quarter(quarter: int, *, field: str = "quarter") -> int:
    if isinstance(quarter, bool) or not isinstance(quarter, int) or not 1 <= quarter <= 4:
        raise InvalidPeriod(f"{field} must be 1-4, got {quarter!r}", field=field)
    return quarter


@dataclass(frozen=True)
class FilingWindow:
    opens: date
    deadline: date

    @property
    def reminder(self) -> date:
        return self.deadline - timedelta(days=REMINDER_LEAD_DAYS)

    def is_open(self, today: date) -> bool:
        return self.opens <= today <= self.deadline


@dataclass(frozen=True)
class FiscalPeriod:
    quarter: int
    year: int

    def __post_init__(self) -> None:
        check_quarter(self.quarter)
        check_year(self.year)

    @property
    def start(self) -> date:
        return date(self.year, (self.quarter - 1) * 3 + 1, 1)

    @property
    def end(self) -> date:
        month = self.quarter * 3
        return date(self.year, month, calendar.monthrange(self.year, month)[1])

    @property
    def year_start(self) -> date:
        return date(self.year, 1, 1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def previous_quarters(self) -> tuple["FiscalPeriod", ...]:
        return tuple(FiscalPeriod(q, self.year) for q in range(1, self.quarter))

    def filing_window(self, model: str = "303") -> FilingWindow:
        if model not in QUARTERLY_MODELS:
            raise InvalidPeriod(f"Model {model} is not filed quarterly", field="model")
        month, day = _FILING_CALENDAR[self.quarter]
        filing_year = self.year + 1 if self.quarter == 4 else self.year
        if self.quarter == 4 and model in _EXTENDED_Q4_MODELS:
            day = 30
        return FilingWindow(
            opens=date(filing_year, month, 1),
            deadline=next_business_day(date(filing_year, month, day)),
        )

    def deadline(self, model: str = "303") -> date:
        return self.filing_window(model).deadline

    def label(self) -> str:
        return f"{self.quarter}T {self.year}"


def quarter_of(day: date) -> int:
    return (day.month - 1) // 3 + 1


def period_of(day: date) -> FiscalPeriod:
    return FiscalPeriod(quarter_of(day), day.year)


def annual_filing_window(year: int, model: str) -> FilingWindow:
    """Filing window for the annual summaries and the personal income-tax return."""
    check_year(year)
    following = year + 1
    if model == "390":
        opens, deadline = date(following, 1, 1), date(following, 1, 30)
    elif model == "180":
        opens, deadline = date(following, 1, 1), date(following, 1, 31)
    elif model == "100":
        opens, deadline = date(following, 4, 11), date(following, 6, 30)
    else:
        raise InvalidPeriod(f"Model {model} is not filed annually", field="model")
    return FilingWindow(opens=opens, deadline=next_business_day(deadline))


__all__ = [
    "NATIONAL_HOLIDAYS",
    "QUARTERLY_MODELS",
    "ANNUAL_MODELS",
    "FilingWindow",
    "FiscalPeriod",
    "annual_filing_window",
    "check_quarter",
    "check_year",
    "is_business_day",
    "last_business_day",
    "next_business_day",
    "period_of",
    "quarter_of",
]
