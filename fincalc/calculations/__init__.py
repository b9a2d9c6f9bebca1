"""
Financial Calculation Engine

Interest equation solver and loan amortization schedules.
All calculations are pure functions of their inputs.
"""

from fincalc.calculations import amortization, errors, interest

__all__ = ["amortization", "errors", "interest"]
