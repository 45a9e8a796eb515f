"""
Consultation Models

Request/response contracts for the two consultation flows and the combined
analysis report. Flow payloads travel as camelCase dicts; these models check
their shape (field presence and types) and nothing about their content.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from projection_engine import ProjectionResult


class FlowModel(BaseModel):
    class Config:
        frozen = True
        populate_by_name = True

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# =========================================================================
# MARKET ENTRY ANALYSIS
# =========================================================================

class MarketEntryInput(FlowModel):
    product_name: str = Field(..., alias="productName")
    target_segment: str = Field(..., alias="targetSegment")
    calculated_marketing_budget: float = Field(..., alias="calculatedMarketingBudget")
    financial_forecast_summary: str = Field(..., alias="financialForecastSummary")
    market_condition_summary: str = Field(..., alias="marketConditionSummary")


class MarketEntryOutput(FlowModel):
    evaluation: str = Field(..., description="Headline verdict on market entry")
    key_considerations: str = Field(..., alias="keyConsiderations")


# =========================================================================
# STRATEGIC RECOMMENDATIONS
# =========================================================================

class StrategicRecommendationsInput(FlowModel):
    product_name: str = Field(..., alias="productName")
    target_segmentation: str = Field(..., alias="targetSegmentation")
    selected_marketing_strategies: List[str] = Field(default_factory=list, alias="selectedMarketingStrategies")
    monthly_profit_and_loss_statement: str = Field(..., alias="monthlyProfitAndLossStatement")
    monthly_cash_flow_simulation: str = Field(..., alias="monthlyCashFlowSimulation")
    calculated_marketing_budget: float = Field(..., alias="calculatedMarketingBudget")
    annual_profit_projection: float = Field(..., alias="annualProfitProjection")
    roas: float
    warnings_summary: str = Field(..., alias="warningsSummary")


class StrategicRecommendationsOutput(FlowModel):
    recommendations: List[str]


# =========================================================================
# REPORT
# =========================================================================

@dataclass(frozen=True)
class AnalysisReport:
    """Projection plus both consultation results. Only built when both succeed."""
    projection: ProjectionResult
    market_evaluation: MarketEntryOutput
    strategic_plan: StrategicRecommendationsOutput

    def to_dict(self) -> Dict[str, Any]:
        result = self.projection.to_dict()
        result["marketEvaluation"] = self.market_evaluation.to_payload()
        result["strategicPlan"] = self.strategic_plan.to_payload()
        return result
