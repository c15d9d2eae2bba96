import re
from datetime import date, datetime, timedelta, timezone


# Record dates are free text; these are the shapes the clients produce.
_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y年%m月%d日",
    "%Y年%m月%d日 %H:%M",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
]

_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def parse_record_date(value, tz_name: str | None = None) -> date | None:
    """Parse a record's calendar string into a local `date`.

    Accepts:
      - 'YYYY-MM-DD'
      - ISO date-times ('2025-01-05T09:30:00', '2025-01-05 09:30+09:00', '...Z')
      - 'YYYY年MM月DD日' with optional ' HH:MM'
      - 'YYYY/MM/DD' with optional ' HH:MM'

    Returns None for anything else, including None and empty strings.
    Date-times with an offset are converted to `tz_name` first.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _local_day(value, tz_name)
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if s == "":
        return None

    if _ISO_DATETIME.match(s):
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
        return _local_day(dt, tz_name)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def _local_day(dt: datetime, tz_name: str | None) -> date:
    # Naive date-times are already wall-clock local
    if dt.tzinfo is None:
        return dt.date()
    return to_local_datetime(dt, tz_name).date()


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'Asia/Tokyo'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        try:
            from zoneinfo import ZoneInfo
            return dt.astimezone(ZoneInfo(tz_name))
        except Exception:
            return dt.astimezone()
    return dt.astimezone()


def local_today(tz_name: str | None = None) -> date:
    return to_local_datetime(datetime.now(timezone.utc), tz_name).date()


def monday_of(d: date) -> date:
    # Monday = 0, Sunday = 6
    return d - timedelta(days=d.weekday())


def format_duration(minutes: int) -> str:
    """Format minutes for the AI feedback prompt.

    Hours are always shown: 90 -> '1時間30分', 45 -> '0時間45分'
    """
    return f"{minutes // 60}時間{minutes % 60}分"
