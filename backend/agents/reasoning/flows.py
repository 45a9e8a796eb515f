"""
Consultation Flow Registry

A flow is a named, schema-checked request/response boundary:
invoke(name, input) -> output. Backends look flows up here to find the
input/output models and the prompts to send.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol, Type

from pydantic import BaseModel

from ..errors import UnknownAIServiceError
from ..models.consultation import (
    MarketEntryInput, MarketEntryOutput,
    StrategicRecommendationsInput, StrategicRecommendationsOutput,
)
from .prompts import (
    MARKET_ENTRY_SYSTEM_PROMPT, STRATEGIC_RECOMMENDATIONS_SYSTEM_PROMPT,
    render_market_entry_prompt, render_strategic_recommendations_prompt,
)

MARKET_ENTRY_FLOW = "market-entry-analysis"
STRATEGIC_RECOMMENDATIONS_FLOW = "strategic-recommendations"


class FlowBackend(Protocol):
    """Anything that can run a consultation flow"""

    async def invoke(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class FlowDefinition:
    name: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    system_prompt: str
    render_prompt: Callable[..., str]


FLOWS: Dict[str, FlowDefinition] = {
    MARKET_ENTRY_FLOW: FlowDefinition(
        name=MARKET_ENTRY_FLOW,
        input_model=MarketEntryInput,
        output_model=MarketEntryOutput,
        system_prompt=MARKET_ENTRY_SYSTEM_PROMPT,
        render_prompt=render_market_entry_prompt,
    ),
    STRATEGIC_RECOMMENDATIONS_FLOW: FlowDefinition(
        name=STRATEGIC_RECOMMENDATIONS_FLOW,
        input_model=StrategicRecommendationsInput,
        output_model=StrategicRecommendationsOutput,
        system_prompt=STRATEGIC_RECOMMENDATIONS_SYSTEM_PROMPT,
        render_prompt=render_strategic_recommendations_prompt,
    ),
}


def get_flow(name: str) -> FlowDefinition:
    flow = FLOWS.get(name)
    if flow is None:
        raise UnknownAIServiceError(f"Unknown consultation flow: {name}", flow=name)
    return flow
