from datetime import date, datetime
from typing import Any, Iterable


def get_date_suffix_for_filename(day: date | None = None) -> str:
    """Returns the date as a YYYY-MM-DD string for filenames."""
    return (day or datetime.now().date()).strftime("%Y-%m-%d")


def new_id(moment: datetime, existing: Iterable[str] = ()) -> str:
    """
    Returns a time-based id (epoch milliseconds) that is not in `existing`.
    Two records created within the same millisecond get consecutive ids.
    """
    taken = set(existing)
    candidate = int(moment.timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def local_time_str(moment: datetime) -> str:
    """Wall-clock time as shown on receipts, e.g. '3:04:05 PM'."""
    return moment.strftime("%I:%M:%S %p").lstrip("0")


def short_date_label(day: date) -> str:
    """'Oct 19' style label used on the daily trend axis."""
    return f"{day:%b} {day.day}"


def shift_month(day: date, months: int) -> tuple[int, int]:
    """Returns (year, month) for the calendar month `months` away from `day`."""
    index = day.year * 12 + (day.month - 1) + months
    return index // 12, index % 12 + 1


def is_blank(value: Any) -> bool:
    """Form fields arrive as None or empty strings when left unfilled."""
    return value is None or (isinstance(value, str) and not value.strip())


def round_money(value: float) -> float:
    return round(float(value), 2)
