"""
Print an amortization table to the console.

Usage:
    python scripts/print_schedule.py PRINCIPAL RATE YEARS PAYMENTS_PER_YEAR [french|german]
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fincalc.calculations.amortization import build_schedule
from fincalc.calculations.errors import CalculationError


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) not in (4, 5):
        print(__doc__.strip())
        return 2

    try:
        principal, rate, years, payments_per_year = (float(arg) for arg in args[:4])
    except ValueError:
        print("PRINCIPAL, RATE, YEARS and PAYMENTS_PER_YEAR must be numbers")
        return 2
    schedule_type = args[4] if len(args) == 5 else "french"

    try:
        result = build_schedule(principal, rate, years, payments_per_year, schedule_type)
    except CalculationError as e:
        print(f"Error: {e}")
        return 1

    print(f"{'#':>4} {'Installment':>14} {'Principal':>14} {'Interest':>14} {'Balance':>14}")
    for row in result.installments:
        print(
            f"{row.index:>4} {row.total_payment:>14,.2f} {row.principal_portion:>14,.2f}"
            f" {row.interest_portion:>14,.2f} {row.remaining_balance:>14,.2f}"
        )

    print(f"\nInstallments:   {result.installment_count}")
    print(f"Total paid:     {result.total_paid:,.2f}")
    print(f"Total interest: {result.total_interest:,.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
