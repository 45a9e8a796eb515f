"""
AI Service Errors

Failure taxonomy for consultation flows. Every backend failure reaches the
caller as exactly one of these.
"""

from typing import Any, Dict, Optional


class AIServiceError(Exception):
    """Base class for consultation flow failures"""
    code = "ai_service_error"
    user_message = "The AI analyst had trouble with this request. Try again in a moment."

    def __init__(self, message: str, flow: Optional[str] = None):
        self.message = message
        self.flow = flow
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.user_message,
            "detail": self.message,
            "flow": self.flow,
        }


class RateLimitedError(AIServiceError):
    """Backend signalled quota or throughput exhaustion"""
    code = "rate_limited"
    user_message = "Today's AI quota is used up. Try again later."


class ServiceUnavailableError(AIServiceError):
    """Backend signalled a transient outage or overload"""
    code = "service_unavailable"
    user_message = "The AI service is overloaded right now. Refresh and try again shortly."


class UnknownAIServiceError(AIServiceError):
    """Any other backend failure, including malformed flow output"""
    code = "unknown_ai_error"
