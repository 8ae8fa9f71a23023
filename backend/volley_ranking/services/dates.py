"""Two-format date parsing for execution tallies.

Precedence: a value containing ``/`` is read as ``DD/MM/YYYY`` (day first),
anything else as ISO-8601. Month-first slash dates are not recognised.
Offset-aware values keep their own wall-clock time, so they compare against
window bounds on the calendar day they were recorded.
"""

from datetime import date, datetime, time, timedelta

from ..core.enums import RankingPeriod
from ..core.errors import DateParseError


def parse_tally_date(value: str | date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _wall_clock(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    text = value.strip()
    if not text:
        raise DateParseError("Empty date value.")
    if "/" in text:
        try:
            return datetime.strptime(text.split()[0], "%d/%m/%Y")
        except ValueError as exc:
            raise DateParseError(f"Invalid DD/MM/YYYY date '{value}'.") from exc
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _wall_clock(datetime.fromisoformat(text))
    except ValueError as exc:
        raise DateParseError(f"Invalid ISO-8601 date '{value}'.") from exc


def window_bounds(date_start: date | None, date_end: date | None) -> tuple[datetime | None, datetime | None]:
    lower = datetime.combine(date_start, time.min) if date_start else None
    upper = datetime.combine(date_end, time.max) if date_end else None
    return lower, upper


def _wall_clock(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.replace(tzinfo=None)


def period_window(period: RankingPeriod, today: date | None = None) -> tuple[date, date]:
    today = today or date.today()
    days = 7 if period == RankingPeriod.LAST_7_DAYS else 30
    return today - timedelta(days=days), today
