"""
AI Consultation Layer

Fans a seller projection out to two AI flows and joins the answers:
- Market Entry Analysis (is this worth launching?)
- Strategic Recommendations (what to do next)

Deterministic numbers come from the projection engine; the LLM only writes
the commentary.
"""

from .errors import (
    AIServiceError, RateLimitedError, ServiceUnavailableError, UnknownAIServiceError,
)
from .orchestrator import ConsultationOrchestrator

__all__ = [
    'AIServiceError',
    'RateLimitedError',
    'ServiceUnavailableError',
    'UnknownAIServiceError',
    'ConsultationOrchestrator',
]
