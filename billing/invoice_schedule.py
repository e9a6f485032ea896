from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Tuple

from billing.exceptions import InvalidDateFormatError, InvalidSubscriptionTypeError

WEEKLY_DAYS = 7
DATE_FORMAT = "%d/%m/%Y"
DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
WEEKDAY_NAMES = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


class SubscriptionType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def validate(cls, value: "SubscriptionType | str") -> "SubscriptionType":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidSubscriptionTypeError(value)
        normalized = _normalize_type(value)
        try:
            return cls(normalized)
        except ValueError as exc:
            raise InvalidSubscriptionTypeError(value) from exc


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: object, field: str) -> date:
    """Parse dd/MM/yyyy text; ``field`` names the date in the error message."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidDateFormatError(field, value)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateFormatError(field, value) from exc


def day_of_subscription(subscription_type: SubscriptionType, start_date: date) -> str:
    if subscription_type is SubscriptionType.WEEKLY:
        return WEEKDAY_NAMES[start_date.weekday()]
    if subscription_type in {SubscriptionType.DAILY, SubscriptionType.MONTHLY}:
        return str(start_date.day)
    return ""


def generate_invoice_dates(
    subscription_type: SubscriptionType,
    start_date: date,
    end_date: date,
) -> Tuple[str, ...]:
    """Expand a validated subscription window into its invoice dates.

    The number of periods is computed up front and the loop steps that many
    times, so the last date only matches ``end_date`` when the end date sits on
    the start date's anchor.
    """
    if subscription_type is SubscriptionType.DAILY:
        return (format_date(start_date),)

    invoice_dates: List[date] = []
    if subscription_type is SubscriptionType.WEEKLY:
        number_of_weeks = (end_date - start_date).days // WEEKLY_DAYS
        for week in range(number_of_weeks + 1):
            invoice_dates.append(start_date + timedelta(days=WEEKLY_DAYS * week))
    elif subscription_type is SubscriptionType.MONTHLY:
        number_of_months = months_between(start_date, end_date)
        for month_offset in range(number_of_months + 1):
            invoice_dates.append(_add_months(start_date, month_offset, start_date.day))
    else:
        raise InvalidSubscriptionTypeError(subscription_type)

    return tuple(format_date(invoice_date) for invoice_date in invoice_dates)


def months_between(start_date: date, end_date: date) -> int:
    """Whole months from ``start_date`` to ``end_date``."""
    months = (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)
    if months > 0 and end_date.day < start_date.day:
        months -= 1
    elif months < 0 and end_date.day > start_date.day:
        months += 1
    return months


def calendar_period(start_date: date, end_date: date) -> tuple[int, int]:
    """Split the span into whole calendar months and the remaining days."""
    if start_date > end_date:
        raise ValueError("start_date must be on or before end_date.")
    total_months = (end_date.year - start_date.year) * 12 + (
        end_date.month - start_date.month
    )
    if total_months > 0 and end_date.day < start_date.day:
        total_months -= 1
    stepped = _add_months(start_date, total_months, start_date.day)
    return total_months, (end_date - stepped).days


def _normalize_type(value: str) -> str:
    return "".join(ch for ch in value.strip().lower() if ch.isalnum())


def _add_months(start_date: date, months: int, anchor_day: int) -> date:
    total_month = start_date.month - 1 + months
    year = start_date.year + total_month // 12
    month = total_month % 12 + 1
    last_day = monthrange(year, month)[1]
    day = min(anchor_day, last_day)
    return date(year, month, day)
