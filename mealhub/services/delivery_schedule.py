"""Weekly delivery-day arithmetic for subscription orders."""
from datetime import date, datetime, timedelta
from dateutil import parser

from mealhub.utils.exceptions import InvalidArgument

# 0 = Sunday .. 6 = Saturday
DAY_INDEX = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

DEFAULT_DELIVERY_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


def day_index(value):
    """Return the 0 (Sunday) .. 6 (Saturday) index of a date or day name."""
    if isinstance(value, (date, datetime)):
        return value.isoweekday() % 7
    if not isinstance(value, str) or value.strip().lower() not in DAY_INDEX:
        raise InvalidArgument(
            f"Invalid delivery day: {value}",
            details={"deliveryDay": value, "allowed": list(DAY_INDEX)},
        )
    return DAY_INDEX[value.strip().lower()]


def next_delivery_date(week_start, delivery_day):
    """Return the first date strictly after ``week_start`` falling on ``delivery_day``.

    When ``week_start`` is itself a ``delivery_day`` the result is one full
    week later; the anchor day is never returned. Works for both ``date``
    and ``datetime`` anchors and keeps the anchor's type.
    """
    if week_start is None or not delivery_day:
        raise InvalidArgument("Start date and delivery day are required")

    days_to_add = day_index(delivery_day) - day_index(week_start)
    if days_to_add <= 0:
        days_to_add += 7
    try:
        return week_start + timedelta(days=days_to_add)
    except OverflowError:
        raise InvalidArgument(
            "Delivery date is past the last supported calendar date",
            details={"weekStart": week_start.isoformat(), "deliveryDay": delivery_day},
        )


def parse_calendar_date(value, field="date"):
    """Coerce an ISO-8601 string, ``date`` or ``datetime`` into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidArgument(f"{field} is required", details={"field": field})
    try:
        return parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        raise InvalidArgument(f"{field} must be an ISO-8601 date", details={"field": field, "value": value})
