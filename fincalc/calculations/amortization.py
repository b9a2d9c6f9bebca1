"""
Loan Amortization Calculations

Builds payment schedules for the two common amortization systems:

- French: constant installment, interest falls while principal rises.
- German: constant principal, installment falls with the interest.

Interest for each period is charged on the balance outstanding at the start
of that period.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterator, List, Tuple, Union

from fincalc.calculations.errors import DivisionByZeroError, DomainError, InvalidFieldError

logger = logging.getLogger(__name__)

# Balances closer to zero than this are treated as fully paid.
BALANCE_TOLERANCE = 0.01

# Longest schedule built in memory (a century of weekly payments).
MAX_INSTALLMENTS = 5200


class ScheduleType(str, enum.Enum):
    """Amortization system."""
    french = "french"
    german = "german"


@dataclass(frozen=True)
class Installment:
    """A single row of the amortization table."""

    index: int
    total_payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float


@dataclass
class AmortizationResult:
    """Full schedule with aggregate totals."""

    schedule_type: ScheduleType
    installments: List[Installment] = field(default_factory=list)
    total_paid: float = 0.0
    total_interest: float = 0.0
    installment_count: int = 0
    period_rate: float = 0.0
    fixed_payment: float = 0.0  # French installment or German principal


def installment_count(years: float, payments_per_year: float) -> int:
    """Number of installments, rounding halves up (2.5 -> 3)."""
    periods = years * payments_per_year
    if not math.isfinite(periods) or periods > MAX_INSTALLMENTS:
        raise DomainError(
            f"A schedule cannot have more than {MAX_INSTALLMENTS} installments",
            field="years",
        )
    return int(math.floor(periods + 0.5))


def calculate_period_rate(annual_rate_percent: float, payments_per_year: float) -> float:
    """Convert an annual percentage rate to a decimal rate per payment period."""
    return (annual_rate_percent / 100) / payments_per_year


def calculate_french_payment(principal: float, period_rate: float, periods: int) -> float:
    """
    Calculate the constant installment of the French system.

    Payment = C × i(1+i)^n / ((1+i)^n - 1)

    Args:
        principal: Loan principal amount
        period_rate: Interest rate per payment period as decimal
        periods: Number of installments

    Returns:
        Installment amount

    Raises:
        DivisionByZeroError: If (1+i)^n - 1 is zero
        DomainError: If the installment is too large to represent
    """
    try:
        factor = (1 + period_rate) ** periods
    except OverflowError:
        raise DomainError(
            "Rate and term are too large to compute a fixed installment",
            field="annual_rate_percent",
        ) from None
    if factor - 1 == 0:
        raise DivisionByZeroError(
            "Rate per period is too small to compute a fixed installment"
        )
    payment = principal * period_rate * factor / (factor - 1)
    if not math.isfinite(payment):
        raise DomainError(
            "Rate and term are too large to compute a fixed installment",
            field="annual_rate_percent",
        )
    return payment


def _snap(balance: float) -> float:
    return 0.0 if abs(balance) < BALANCE_TOLERANCE else balance


def _validate(principal, annual_rate_percent, years, payments_per_year) -> None:
    for name, value in (
        ("principal", principal),
        ("annual_rate_percent", annual_rate_percent),
        ("years", years),
        ("payments_per_year", payments_per_year),
    ):
        if value is None or not math.isfinite(value) or value <= 0:
            raise InvalidFieldError(name, f"{name} must be greater than 0")


def _installment(
    index: int,
    balance: float,
    period_rate: float,
    scheduled_principal: float,
    is_last: bool,
    schedule_type: ScheduleType,
) -> Tuple[Installment, float]:
    """Compute one period from the opening balance; returns the row and new balance."""
    interest = balance * period_rate

    if schedule_type is ScheduleType.french:
        principal_pmt = balance if is_last else scheduled_principal - interest
    else:
        principal_pmt = scheduled_principal

    ending_balance = _snap(balance - principal_pmt)
    if is_last:
        ending_balance = 0.0

    row = Installment(
        index=index,
        total_payment=principal_pmt + interest,
        principal_portion=principal_pmt,
        interest_portion=interest,
        remaining_balance=ending_balance,
    )
    return row, ending_balance


def iter_installments(
    principal: float,
    annual_rate_percent: float,
    years: float,
    payments_per_year: float,
    schedule_type: Union[ScheduleType, str] = ScheduleType.french,
) -> Iterator[Installment]:
    """
    Yield the amortization schedule one installment at a time.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percentage (e.g., 12 for 12%)
        years: Loan term in years
        payments_per_year: Number of installments per year
        schedule_type: french or german

    Raises:
        InvalidFieldError: If any input is not positive
        DivisionByZeroError: If the schedule has no installments or the
            French installment is undefined
    """
    schedule_type, count, period_rate, scheduled = _prepare(
        principal, annual_rate_percent, years, payments_per_year, schedule_type
    )
    return _generate(principal, period_rate, scheduled, count, schedule_type)


def _prepare(principal, annual_rate_percent, years, payments_per_year, schedule_type):
    """Validate inputs and derive count, period rate and the scheduled amount."""
    schedule_type = _coerce_schedule_type(schedule_type)
    _validate(principal, annual_rate_percent, years, payments_per_year)

    count = installment_count(years, payments_per_year)
    if count < 1:
        raise DivisionByZeroError("Loan term rounds to zero installments")

    period_rate = calculate_period_rate(annual_rate_percent, payments_per_year)
    if schedule_type is ScheduleType.french:
        scheduled = calculate_french_payment(principal, period_rate, count)
    else:
        scheduled = principal / count
    return schedule_type, count, period_rate, scheduled


def _generate(principal, period_rate, scheduled, count, schedule_type):
    balance = principal
    for period in range(1, count + 1):
        row, balance = _installment(
            period, balance, period_rate, scheduled, period == count, schedule_type
        )
        yield row


def _coerce_schedule_type(schedule_type: Union[ScheduleType, str]) -> ScheduleType:
    try:
        return ScheduleType(schedule_type)
    except ValueError:
        raise InvalidFieldError(
            "schedule_type", f"Unsupported schedule type: {schedule_type!r}"
        ) from None


def build_schedule(
    principal: float,
    annual_rate_percent: float,
    years: float,
    payments_per_year: float,
    schedule_type: Union[ScheduleType, str] = ScheduleType.french,
) -> AmortizationResult:
    """
    Build the full amortization schedule with totals.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate as percentage (e.g., 12 for 12%)
        years: Loan term in years
        payments_per_year: Number of installments per year
        schedule_type: french or german

    Returns:
        AmortizationResult with every installment, total paid and total interest
    """
    schedule_type, count, period_rate, scheduled = _prepare(
        principal, annual_rate_percent, years, payments_per_year, schedule_type
    )
    installments = list(
        _generate(principal, period_rate, scheduled, count, schedule_type)
    )

    total_paid, total_interest = reduce(
        lambda totals, row: (
            totals[0] + row.total_payment,
            totals[1] + row.interest_portion,
        ),
        installments,
        (0.0, 0.0),
    )
    if not math.isfinite(total_paid):
        raise DomainError(
            "Schedule totals are too large to represent", field="principal"
        )

    logger.debug(
        "Built %s schedule: %d installments, total paid %.2f",
        schedule_type.value,
        len(installments),
        total_paid,
    )

    return AmortizationResult(
        schedule_type=schedule_type,
        installments=installments,
        total_paid=total_paid,
        total_interest=total_interest,
        installment_count=count,
        period_rate=period_rate,
        fixed_payment=scheduled,
    )


build_amortization = build_schedule
