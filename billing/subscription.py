from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from billing.exceptions import (
    AnchorMismatchError,
    DateMismatchError,
    DateOrderError,
    DurationExceededError,
    InvalidAnchorError,
    InvalidChargeError,
    MissingFieldError,
)
from billing.invoice_schedule import (
    WEEKDAY_NAMES,
    SubscriptionType,
    calendar_period,
    day_of_subscription,
    generate_invoice_dates,
    parse_date,
)

ZERO = Decimal("0")
DEFAULT_CHARGE = Decimal("0.00")
MAX_SUBSCRIPTION_MONTHS = 3


@dataclass(frozen=True)
class Subscription:
    """A validated subscription window and its invoice schedule.

    Build instances with ``Subscription.new_builder()`` or
    ``build_subscription``. Direct construction runs the same rules, so an
    instance never exists with a broken window, charge or anchor.
    """

    charge: Decimal
    subscription_type: SubscriptionType
    start_date: date
    end_date: date
    day_of_subscription: str
    invoice_dates: Tuple[str, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "charge", _validate_charge(self.charge))
        object.__setattr__(
            self, "subscription_type", SubscriptionType.validate(self.subscription_type)
        )
        expected = day_of_subscription(self.subscription_type, self.start_date)
        if self.day_of_subscription != expected:
            raise InvalidAnchorError(self.day_of_subscription, expected)
        _validate_window(
            self.subscription_type, self.start_date, self.end_date, expected
        )
        object.__setattr__(
            self,
            "invoice_dates",
            generate_invoice_dates(self.subscription_type, self.start_date, self.end_date),
        )

    @property
    def invoice_count(self) -> int:
        return len(self.invoice_dates)

    @property
    def total_charge(self) -> Decimal:
        return self.charge * self.invoice_count

    @staticmethod
    def new_builder() -> "SubscriptionBuilder":
        return SubscriptionBuilder()

    def to_builder(self) -> "SubscriptionBuilder":
        return SubscriptionBuilder(
            charge=self.charge,
            subscription_type=self.subscription_type,
            start_date=self.start_date,
            end_date=self.end_date,
        )


@dataclass
class SubscriptionBuilder:
    """Mutable staging area for a subscription; not safe to share across threads."""

    charge: Decimal = DEFAULT_CHARGE
    subscription_type: Optional[SubscriptionType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def set_charge(self, charge: Decimal | int | float | str) -> "SubscriptionBuilder":
        self.charge = _validate_charge(charge)
        return self

    def set_subscription_type(
        self, subscription_type: SubscriptionType | str
    ) -> "SubscriptionBuilder":
        self.subscription_type = SubscriptionType.validate(subscription_type)
        return self

    def set_start_date(self, start_date: str) -> "SubscriptionBuilder":
        self.start_date = parse_date(start_date, "start")
        return self

    def set_end_date(self, end_date: str) -> "SubscriptionBuilder":
        self.end_date = parse_date(end_date, "end")
        return self

    def build(self) -> Subscription:
        return build_subscription(
            self.charge,
            self.subscription_type,
            self.start_date,
            self.end_date,
        )


def build_subscription(
    charge: Decimal,
    subscription_type: Optional[SubscriptionType],
    start_date: Optional[date],
    end_date: Optional[date],
) -> Subscription:
    missing = [
        name
        for name, value in (
            ("subscription_type", subscription_type),
            ("start_date", start_date),
            ("end_date", end_date),
        )
        if value is None
    ]
    if missing:
        raise MissingFieldError(missing)

    subscription_type = SubscriptionType.validate(subscription_type)
    anchor = day_of_subscription(subscription_type, start_date)

    return Subscription(
        charge=charge,
        subscription_type=subscription_type,
        start_date=start_date,
        end_date=end_date,
        day_of_subscription=anchor,
    )


def _validate_window(
    subscription_type: SubscriptionType,
    start_date: date,
    end_date: date,
    anchor: str,
) -> None:
    if subscription_type is SubscriptionType.DAILY:
        if start_date != end_date:
            raise DateMismatchError()
    elif subscription_type in {SubscriptionType.WEEKLY, SubscriptionType.MONTHLY}:
        if start_date > end_date:
            raise DateOrderError()
        if subscription_type is SubscriptionType.WEEKLY:
            if WEEKDAY_NAMES[end_date.weekday()] != anchor:
                raise AnchorMismatchError("week", start_date, anchor)
        elif str(end_date.day) != anchor:
            raise AnchorMismatchError("month", start_date, anchor)

    months, days = calendar_period(start_date, end_date)
    if months > MAX_SUBSCRIPTION_MONTHS or (
        months == MAX_SUBSCRIPTION_MONTHS and days > 0
    ):
        raise DurationExceededError(months, days, MAX_SUBSCRIPTION_MONTHS)


def _validate_charge(charge: Decimal | int | float | str) -> Decimal:
    if isinstance(charge, bool):
        raise InvalidChargeError("Charge rate must be a number.")
    try:
        amount = _coerce_amount(charge)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidChargeError("Charge rate must be a number.") from exc
    if not amount.is_finite():
        raise InvalidChargeError("Charge rate must be a number.")
    if amount < ZERO:
        raise InvalidChargeError()
    return amount


def _coerce_amount(amount: Decimal | int | float | str) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))
