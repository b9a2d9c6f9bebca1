"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
Rejected inputs are returned as 400 responses describing the offending field.
"""

import logging
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fincalc.calculations.amortization import ScheduleType, build_schedule
from fincalc.calculations.errors import CalculationError
from fincalc.calculations.interest import (
    InterestForm,
    InterestMode,
    Variable,
    formula_for,
    solve_interest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(exc: CalculationError) -> HTTPException:
    logger.warning("Rejected calculation input: %s", exc.message)
    return HTTPException(status_code=400, detail=exc.to_dict())


class InterestInput(BaseModel):
    """Input for the interest solver."""

    mode: InterestMode = InterestMode.simple
    unknown: Optional[Variable] = None
    # Rate i is a percentage (5 means 5%)
    values: Dict[Variable, Optional[float]] = {}


class InterestResponse(BaseModel):
    """Solved unknown with its derivation."""

    value: float
    detail: str
    formula: str
    unit: Optional[str] = None


class InterestDefaultsResponse(BaseModel):
    """Default form values for a mode."""

    mode: InterestMode
    unknown: Optional[Variable]
    formula: str
    values: Dict[Variable, Optional[float]]


@router.post("/interest", response_model=InterestResponse)
async def calculate_interest(inputs: InterestInput):
    """Solve the simple or compound interest equation for the unknown."""
    try:
        result = solve_interest(inputs.mode, inputs.values, inputs.unknown)
    except CalculationError as e:
        raise _bad_request(e)

    return InterestResponse(**asdict(result))


@router.get("/interest/formula")
async def get_interest_formula(
    mode: InterestMode = InterestMode.simple, unknown: Optional[Variable] = None
):
    """Formula that will be used for the selected unknown."""
    try:
        return {"formula": formula_for(mode, unknown)}
    except CalculationError as e:
        raise _bad_request(e)


@router.get("/interest/defaults", response_model=InterestDefaultsResponse)
async def get_interest_defaults(mode: InterestMode = InterestMode.simple):
    """Default values and unknown for a mode."""
    form = InterestForm.defaults(mode)
    return InterestDefaultsResponse(
        mode=form.mode,
        unknown=form.unknown,
        formula=form.formula,
        values=form.values,
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float = 50000
    annual_rate_percent: float = 12
    years: float = 2
    payments_per_year: float = 12
    schedule_type: ScheduleType = ScheduleType.french


class InstallmentRow(BaseModel):
    """A single installment."""

    index: int
    total_payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float


class AmortizationResponse(BaseModel):
    """Amortization schedule with totals."""

    schedule_type: ScheduleType
    installments: List[InstallmentRow]
    total_paid: float
    total_interest: float
    installment_count: int
    period_rate: float
    fixed_payment: float


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a French or German amortization schedule."""
    try:
        result = build_schedule(
            principal=inputs.principal,
            annual_rate_percent=inputs.annual_rate_percent,
            years=inputs.years,
            payments_per_year=inputs.payments_per_year,
            schedule_type=inputs.schedule_type,
        )
    except CalculationError as e:
        raise _bad_request(e)

    return AmortizationResponse(
        schedule_type=result.schedule_type,
        installments=[InstallmentRow(**asdict(row)) for row in result.installments],
        total_paid=result.total_paid,
        total_interest=result.total_interest,
        installment_count=result.installment_count,
        period_rate=result.period_rate,
        fixed_payment=result.fixed_payment,
    )
