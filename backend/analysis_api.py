"""
Seller Analysis API

Endpoints for the seller projection and AI consultation:
- POST /analysis             full report (projection + market evaluation + plan)
- POST /analysis/projection  projection only, no AI calls
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from agents.errors import (
    AIServiceError, RateLimitedError, ServiceUnavailableError,
)
from agents.orchestrator import ConsultationOrchestrator
from assumption_validator import AssumptionValidationError, validate_assumptions
from projection_engine import compute_projection


router = APIRouter(prefix="/analysis", tags=["Seller Analysis"])


# ═══════════════════════════════════════════════════════════════════════════════
# DEPENDENCIES
# ═══════════════════════════════════════════════════════════════════════════════

def get_orchestrator(request: Request) -> ConsultationOrchestrator:
    """Orchestrator created at startup (see main.lifespan)"""
    return request.app.state.orchestrator


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("")
async def run_analysis(
    payload: Any = Body(...),
    orchestrator: ConsultationOrchestrator = Depends(get_orchestrator),
):
    """
    Run the full seller analysis.

    Body is the raw form payload (camelCase fields). Validation happens before
    any AI call is made.
    """
    report = await orchestrator.analyze(payload)
    return report.to_dict()


@router.post("/projection")
def run_projection(payload: Any = Body(...)):
    """Compute the financial projection without consulting the AI flows."""
    assumptions = validate_assumptions(payload)
    return compute_projection(assumptions).to_dict()


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR HANDLING
# ═══════════════════════════════════════════════════════════════════════════════

def status_code_for(error: AIServiceError) -> int:
    if isinstance(error, RateLimitedError):
        return 429
    if isinstance(error, ServiceUnavailableError):
        return 503
    return 502


async def validation_error_handler(request: Request, exc: AssumptionValidationError):
    return JSONResponse(status_code=422, content=exc.to_dict())


async def ai_service_error_handler(request: Request, exc: AIServiceError):
    return JSONResponse(status_code=status_code_for(exc), content=exc.to_dict())


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(AssumptionValidationError, validation_error_handler)
    app.add_exception_handler(AIServiceError, ai_service_error_handler)
