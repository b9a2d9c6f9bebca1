"""
Simple and Compound Interest Solver

Solves the interest equations for whichever variable is marked unknown:

    Simple:    I = C × i × n            M = C × (1 + i × n)
    Compound:  M = C × (1 + i/m)^(n×m)  I = M - C

Rates are entered as percentages (5 means 5%) and used as decimals inside
the formulas. Rates returned as results are converted back to percentages.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from fincalc.calculations.errors import (
    DivisionByZeroError,
    DomainError,
    InsufficientInputsError,
    InvalidFieldError,
    MissingUnknownError,
)

logger = logging.getLogger(__name__)


class InterestMode(str, enum.Enum):
    """Interest calculation mode."""
    simple = "simple"
    compound = "compound"


class Variable(str, enum.Enum):
    """Variables of the interest equations."""
    C = "C"  # principal
    i = "i"  # annual rate, percent
    n = "n"  # term, years
    m = "m"  # compounding periods per year
    M = "M"  # final amount
    I = "I"  # interest earned


C, i, n, m, M, I = (
    Variable.C,
    Variable.i,
    Variable.n,
    Variable.m,
    Variable.M,
    Variable.I,
)

UNITS = {i: "%", n: "years"}


@dataclass(frozen=True)
class InterestResult:
    """Solved value with its human-readable derivation."""

    value: float
    detail: str
    formula: str
    unit: Optional[str] = None


@dataclass(frozen=True)
class Derivation:
    """A closed-form way to compute an unknown from the inputs it requires."""

    requires: Tuple[Variable, ...]
    solve: Callable[[Dict[Variable, float]], Tuple[float, str]]


def _fmt(value: float) -> str:
    """Format an input number as entered (10000, not 10000.0)."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _rate(v: Dict[Variable, float]) -> float:
    return v[i] / 100


def _growth(v: Dict[Variable, float]) -> float:
    """(1 + i/m)^(n×m)"""
    return (1 + _rate(v) / v[m]) ** (v[n] * v[m])


# Simple interest

def _simple_principal_from_interest(v):
    result = v[I] / (_rate(v) * v[n])
    return result, (
        f"C = I / (i × n) = {_fmt(v[I])} / ({_fmt(v[i])}% × {_fmt(v[n])})"
        f" = {result:.2f}"
    )


def _simple_principal_from_amount(v):
    result = v[M] / (1 + _rate(v) * v[n])
    return result, (
        f"C = M / (1 + i × n) = {_fmt(v[M])} / (1 + {_fmt(v[i])}% × {_fmt(v[n])})"
        f" = {result:.2f}"
    )


def _simple_rate_from_interest(v):
    result = v[I] / (v[C] * v[n]) * 100
    return result, (
        f"i = I / (C × n) = {_fmt(v[I])} / ({_fmt(v[C])} × {_fmt(v[n])}) × 100"
        f" = {result:.2f}%"
    )


def _simple_rate_from_amount(v):
    result = (v[M] / v[C] - 1) / v[n] * 100
    return result, (
        f"i = (M/C - 1) / n = (({_fmt(v[M])}/{_fmt(v[C])}) - 1) / {_fmt(v[n])} × 100"
        f" = {result:.2f}%"
    )


def _simple_periods_from_interest(v):
    result = v[I] / (v[C] * _rate(v))
    return result, (
        f"n = I / (C × i) = {_fmt(v[I])} / ({_fmt(v[C])} × {_fmt(v[i])}%)"
        f" = {result:.2f} years"
    )


def _simple_periods_from_amount(v):
    result = (v[M] / v[C] - 1) / _rate(v)
    return result, (
        f"n = (M/C - 1) / i = (({_fmt(v[M])}/{_fmt(v[C])}) - 1) / {_fmt(v[i])}%"
        f" = {result:.2f} years"
    )


def _simple_interest(v):
    result = v[C] * _rate(v) * v[n]
    return result, (
        f"I = C × i × n = {_fmt(v[C])} × {_fmt(v[i])}% × {_fmt(v[n])}"
        f" = {result:.2f}"
    )


def _simple_amount(v):
    result = v[C] * (1 + _rate(v) * v[n])
    return result, (
        f"M = C × (1 + i × n) = {_fmt(v[C])} × (1 + {_fmt(v[i])}% × {_fmt(v[n])})"
        f" = {result:.2f}"
    )


# Compound interest

def _compound_substitution(v) -> str:
    return f"(1 + {_fmt(v[i])}%/{_fmt(v[m])})^({_fmt(v[n])}×{_fmt(v[m])})"


def _compound_amount(v):
    result = v[C] * _growth(v)
    return result, (
        f"M = C × (1 + i/m)^(n×m) = {_fmt(v[C])} × {_compound_substitution(v)}"
        f" = {result:.2f}"
    )


def _compound_principal(v):
    result = v[M] / _growth(v)
    return result, (
        f"C = M / (1 + i/m)^(n×m) = {_fmt(v[M])} / {_compound_substitution(v)}"
        f" = {result:.2f}"
    )


def _compound_rate(v):
    result = v[m] * ((v[M] / v[C]) ** (1 / (v[n] * v[m])) - 1) * 100
    return result, (
        f"i = m × ((M/C)^(1/(n×m)) - 1) × 100 = {_fmt(v[m])} × "
        f"(({_fmt(v[M])}/{_fmt(v[C])})^(1/({_fmt(v[n])}×{_fmt(v[m])})) - 1) × 100"
        f" = {result:.2f}%"
    )


def _compound_periods(v):
    result = math.log(v[M] / v[C]) / (v[m] * math.log(1 + _rate(v) / v[m]))
    return result, (
        f"n = ln(M/C) / (m × ln(1 + i/m)) = ln({_fmt(v[M])}/{_fmt(v[C])}) / "
        f"({_fmt(v[m])} × ln(1 + {_fmt(v[i])}%/{_fmt(v[m])}))"
        f" = {result:.2f} years"
    )


def _compound_interest(v):
    amount, amount_detail = _compound_amount(v)
    result = amount - v[C]
    return result, (
        f"{amount_detail}\n"
        f"I = M - C = {amount:.2f} - {_fmt(v[C])} = {result:.2f}"
    )


# Candidates are tried in order; the first whose inputs are all known wins.
DERIVATIONS: Dict[InterestMode, Dict[Variable, List[Derivation]]] = {
    InterestMode.simple: {
        C: [
            Derivation((I, i, n), _simple_principal_from_interest),
            Derivation((M, i, n), _simple_principal_from_amount),
        ],
        i: [
            Derivation((I, C, n), _simple_rate_from_interest),
            Derivation((M, C, n), _simple_rate_from_amount),
        ],
        n: [
            Derivation((I, C, i), _simple_periods_from_interest),
            Derivation((M, C, i), _simple_periods_from_amount),
        ],
        I: [Derivation((C, i, n), _simple_interest)],
        M: [Derivation((C, i, n), _simple_amount)],
    },
    InterestMode.compound: {
        M: [Derivation((C, i, n, m), _compound_amount)],
        C: [Derivation((M, i, n, m), _compound_principal)],
        i: [Derivation((M, C, n, m), _compound_rate)],
        n: [Derivation((M, C, i, m), _compound_periods)],
        I: [Derivation((C, i, n, m), _compound_interest)],
    },
}

FORMULAS: Dict[InterestMode, Dict[Variable, str]] = {
    InterestMode.simple: {
        C: "C = I / (i × n)  or  C = M / (1 + i × n)",
        i: "i = I / (C × n)  or  i = (M/C - 1) / n",
        n: "n = I / (C × i)  or  n = (M/C - 1) / i",
        I: "I = C × i × n",
        M: "M = C × (1 + i × n)",
    },
    InterestMode.compound: {
        C: "C = M / (1 + i/m)^(n×m)",
        i: "i = m × ((M/C)^(1/(n×m)) - 1)",
        n: "n = ln(M/C) / (m × ln(1 + i/m))",
        M: "M = C × (1 + i/m)^(n×m)",
        I: "I = M - C,  where  M = C × (1 + i/m)^(n×m)",
    },
}

# Compound inputs counted towards the "4 of 5 known" rule; I is derived.
COMPOUND_COUNTED = (C, i, n, m, M)

DEFAULTS: Dict[InterestMode, Tuple[Dict[Variable, Optional[float]], Variable]] = {
    InterestMode.simple: ({C: 10000, i: 5, n: 3, m: 1, M: None, I: None}, I),
    InterestMode.compound: ({C: 10000, i: 8, n: 2, m: 12, M: None, I: None}, M),
}


def _coerce_mode(mode: Union[InterestMode, str]) -> InterestMode:
    try:
        return InterestMode(mode)
    except ValueError:
        raise InvalidFieldError("mode", f"Unsupported interest mode: {mode!r}") from None


def _coerce_variable(value: Union[Variable, str], name: str) -> Variable:
    try:
        return Variable(value)
    except ValueError:
        raise InvalidFieldError(name, f"Unsupported variable: {value!r}") from None


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _normalize_values(
    values: Mapping[Union[Variable, str], Optional[float]], unknown: Variable
) -> Dict[Variable, Optional[float]]:
    """Key values by Variable and drop whatever was entered for the unknown."""
    known: Dict[Variable, Optional[float]] = {}
    for key, value in values.items():
        var = _coerce_variable(key, str(key))
        if var is unknown:
            continue
        known[var] = None if value is None else float(value)
    return known


def _check_supplied_positive(values, fields) -> None:
    for var in fields:
        value = values.get(var)
        if value is not None and not _is_positive(value):
            raise InvalidFieldError(var.value)


def _check_required_present(values, fields) -> None:
    for var in fields:
        if values.get(var) is None:
            raise InvalidFieldError(var.value)


def _validate_simple(values, unknown: Variable) -> None:
    required = [var for var in (C, i, n) if var is not unknown]
    _check_supplied_positive(values, required)

    if unknown in (I, M):
        missing = [var.value for var in required if values.get(var) is None]
        if missing:
            raise InsufficientInputsError(
                f"C, i and n are required to calculate {unknown.value}", missing
            )
        return

    _check_required_present(values, required)
    if not (_is_positive(values.get(I)) or _is_positive(values.get(M))):
        raise InsufficientInputsError(
            "I or M must be supplied in addition to the other values",
            [I.value, M.value],
        )


def _validate_compound(values, derivations: List[Derivation], unknown: Variable) -> None:
    if unknown is C and not _is_positive(values.get(M)) and _is_positive(values.get(I)):
        raise DomainError(
            "The final amount M is required to calculate C with compound interest",
            field=M.value,
        )

    required = derivations[0].requires
    _check_supplied_positive(values, required)

    counted = [var for var in COMPOUND_COUNTED if var is not unknown]
    supplied = [var for var in counted if _is_positive(values.get(var))]
    if len(supplied) < 4:
        missing = [var.value for var in counted if var not in supplied]
        raise InsufficientInputsError(
            "At least 4 of C, i, n, m and M must be supplied", missing
        )

    _check_required_present(values, required)


def formula_for(
    mode: Union[InterestMode, str], unknown: Optional[Union[Variable, str]]
) -> str:
    """Formula text for the selected unknown, or "" when none is selected."""
    if unknown is None or unknown == "":
        return ""
    mode = _coerce_mode(mode)
    unknown = _coerce_variable(unknown, "unknown")
    formula = FORMULAS[mode].get(unknown)
    if formula is None:
        raise DomainError(
            f"{unknown.value} does not apply to {mode.value} interest",
            field=unknown.value,
        )
    return formula


def solve_interest(
    mode: Union[InterestMode, str],
    values: Mapping[Union[Variable, str], Optional[float]],
    unknown: Optional[Union[Variable, str]],
) -> InterestResult:
    """
    Solve the interest equation of the given mode for the unknown variable.

    Args:
        mode: simple or compound
        values: Known values keyed by variable; None means not supplied.
            The rate i is a percentage.
        unknown: Variable to solve for

    Returns:
        InterestResult with the value and the substituted derivation

    Raises:
        CalculationError: MissingUnknownError, InvalidFieldError,
            InsufficientInputsError, DomainError or DivisionByZeroError
    """
    if unknown is None or unknown == "":
        raise MissingUnknownError()

    formula = formula_for(mode, unknown)
    mode = _coerce_mode(mode)
    unknown = _coerce_variable(unknown, "unknown")
    known = _normalize_values(values, unknown)
    derivations = DERIVATIONS[mode][unknown]

    if mode is InterestMode.simple:
        _validate_simple(known, unknown)
    else:
        _validate_compound(known, derivations, unknown)

    for derivation in derivations:
        if all(_is_positive(known.get(var)) for var in derivation.requires):
            break
    else:
        raise InsufficientInputsError(
            f"Not enough values to calculate {unknown.value}",
            [var.value for var in derivations[0].requires if known.get(var) is None],
        )

    try:
        value, detail = derivation.solve(known)
    except ZeroDivisionError as exc:
        raise DivisionByZeroError(
            f"Calculating {unknown.value} would divide by zero"
        ) from exc
    except OverflowError as exc:
        raise DomainError(
            f"{unknown.value} is too large to represent", field=unknown.value
        ) from exc

    if not math.isfinite(value):
        raise DomainError(
            f"{unknown.value} is too large to represent", field=unknown.value
        )

    logger.debug("Solved %s interest for %s: %s", mode.value, unknown.value, value)
    return InterestResult(
        value=value, detail=detail, formula=formula, unit=UNITS.get(unknown)
    )


@dataclass
class InterestForm:
    """
    Interest calculator state: the mode, the entered values and the unknown.

    The unknown is a single optional Variable, so there is never more than
    one selected at a time.
    """

    mode: InterestMode = InterestMode.simple
    values: Dict[Variable, Optional[float]] = field(default_factory=dict)
    unknown: Optional[Variable] = None

    @classmethod
    def defaults(cls, mode: Union[InterestMode, str] = InterestMode.simple) -> "InterestForm":
        mode = _coerce_mode(mode)
        values, unknown = DEFAULTS[mode]
        return cls(mode=mode, values=dict(values), unknown=unknown)

    @property
    def formula(self) -> str:
        return formula_for(self.mode, self.unknown)

    def select_unknown(self, variable: Union[Variable, str]) -> None:
        self.unknown = _coerce_variable(variable, "unknown")

    def clear_unknown(self) -> None:
        self.unknown = None

    def switch_mode(self, mode: Union[InterestMode, str]) -> None:
        """Change mode, resetting values and unknown to that mode's defaults."""
        reset = InterestForm.defaults(mode)
        self.mode = reset.mode
        self.values = reset.values
        self.unknown = reset.unknown

    def set_value(self, variable: Union[Variable, str], value: Optional[float]) -> None:
        self.values[_coerce_variable(variable, str(variable))] = value

    def solve(self) -> InterestResult:
        return solve_interest(self.mode, self.values, self.unknown)
