"""
Main FastAPI application entry point.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse

from fincalc import __version__
from fincalc.config import get_settings
from fincalc.api import router as api_router
from fincalc.calculations.amortization import ScheduleType, build_schedule
from fincalc.calculations.errors import CalculationError, InvalidFieldError
from fincalc.calculations.interest import InterestForm, InterestMode, Variable

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).parent / "ui"

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Interest solver and loan amortization simulator",
    version=__version__,
    debug=settings.debug,
)

# Mount static files
app.mount("/static", StaticFiles(directory=UI_DIR / "static"), name="static")

# Set up templates
templates = Jinja2Templates(directory=UI_DIR / "templates")

# Include API routes
app.include_router(api_router, prefix="/api")


def parse_number(name: str, raw: Optional[str]) -> Optional[float]:
    """Parse a form field; blank means not supplied."""
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw.strip().replace(",", "."))
    except ValueError:
        raise InvalidFieldError(name, f"Field {name} must be a number") from None


def _interest_form(request: Request) -> InterestForm:
    params = request.query_params
    mode = params.get("mode", InterestMode.simple.value)
    if mode not in InterestMode.__members__:
        mode = InterestMode.simple.value
    form = InterestForm.defaults(mode)

    # Defaults apply until the form is submitted, and again on a mode change
    if "unknown" not in params or params.get("prev_mode", mode) != mode:
        return form

    form.clear_unknown()
    if params["unknown"]:
        form.select_unknown(params["unknown"])
    for var in Variable:
        form.set_value(var, parse_number(var.value, params.get(var.value)))
    return form


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the home page."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.app_name},
    )


@app.get("/interest", response_class=HTMLResponse)
async def interest_view(request: Request):
    """Render the interest calculator, solving when calculate=1."""
    form = InterestForm.defaults()
    result = None
    error = None
    formula = ""

    try:
        form = _interest_form(request)
        formula = form.formula
        if request.query_params.get("calculate"):
            result = form.solve()
    except CalculationError as e:
        logger.info("Interest calculation rejected: %s", e.message)
        error = e.message

    return templates.TemplateResponse(
        request,
        "interest.html",
        {
            "title": settings.app_name,
            "form": form,
            "modes": list(InterestMode),
            "variables": list(Variable),
            "formula": formula,
            "result": result,
            "error": error,
        },
    )


@app.get("/amortization", response_class=HTMLResponse)
async def amortization_view(request: Request):
    """Render the credit simulator, building the schedule when calculate=1."""
    params = request.query_params
    inputs = {
        "principal": params.get("principal", "50000"),
        "rate": params.get("rate", "12"),
        "years": params.get("years", "2"),
        "payments_per_year": params.get("payments_per_year", "12"),
        "schedule_type": params.get("schedule_type", ScheduleType.french.value),
    }
    result = None
    error = None

    if params.get("calculate"):
        try:
            result = build_schedule(
                principal=parse_number("principal", inputs["principal"]),
                annual_rate_percent=parse_number("rate", inputs["rate"]),
                years=parse_number("years", inputs["years"]),
                payments_per_year=parse_number(
                    "payments_per_year", inputs["payments_per_year"]
                ),
                schedule_type=inputs["schedule_type"],
            )
        except CalculationError as e:
            logger.info("Amortization rejected: %s", e.message)
            error = e.message

    return templates.TemplateResponse(
        request,
        "amortization.html",
        {
            "title": settings.app_name,
            "inputs": inputs,
            "schedule_types": list(ScheduleType),
            "currency": settings.currency_symbol,
            "result": result,
            "error": error,
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fincalc.main:app", host=settings.host, port=settings.port)
