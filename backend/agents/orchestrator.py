"""
Consultation Orchestrator

Runs the seller analysis end to end: validate assumptions, compute the
projection, then consult the two AI flows concurrently and assemble the
report. Either flow failing fails the whole analysis.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Type

from pydantic import BaseModel, ValidationError

from assumption_validator import validate_assumptions
from formatting import format_ratio, format_rupiah, format_units
from projection_engine import ProjectionEngine, ProjectionResult
from projection_models import BusinessAssumptions

from .errors import AIServiceError, UnknownAIServiceError
from .models.consultation import (
    AnalysisReport,
    MarketEntryInput, MarketEntryOutput,
    StrategicRecommendationsInput, StrategicRecommendationsOutput,
)
from .reasoning.flows import FlowBackend, MARKET_ENTRY_FLOW, STRATEGIC_RECOMMENDATIONS_FLOW
from .reasoning.prompts import MARKET_CONDITION_SUMMARY, dump_lines

logger = logging.getLogger(__name__)

NO_WARNINGS = "None."


def _log_discarded(task: "asyncio.Task") -> None:
    """Retrieve the outcome of a flow task so a late failure is not reported as unhandled"""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Consultation task {task.get_name()} finished with {type(error).__name__}: {error}")


class ConsultationOrchestrator:
    """
    Coordinates one seller analysis.

    The flow backend is an explicit handle (normally the process-wide
    ConsultationLLMClient); the orchestrator keeps no per-request state.
    """

    def __init__(
        self,
        backend: FlowBackend,
        market_context: str = MARKET_CONDITION_SUMMARY,
        engine: Optional[ProjectionEngine] = None,
    ):
        self.backend = backend
        self.market_context = market_context
        self.engine = engine or ProjectionEngine()

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    async def analyze(self, payload: Any) -> AnalysisReport:
        """
        Validate, project and consult.

        Raises:
            AssumptionValidationError: before any flow is called
            AIServiceError: if either consultation fails
        """
        assumptions = validate_assumptions(payload)
        projection = self.engine.run(assumptions)
        return await self.consult(assumptions, projection)

    async def consult(
        self,
        assumptions: BusinessAssumptions,
        projection: ProjectionResult,
    ) -> AnalysisReport:
        """
        Fan out both flows and join on them.

        The first failure ends the analysis. The sibling flow is left to
        finish on its own and its result is dropped.
        """
        correlation_id = uuid.uuid4().hex[:12]
        started_at = datetime.utcnow()
        logger.info(f"Consultation {correlation_id} started for '{assumptions.product_name}'")

        market_request = self.build_market_entry_request(assumptions, projection)
        strategy_request = self.build_strategic_recommendations_request(assumptions, projection)

        market_task = asyncio.ensure_future(
            self._call_flow(MARKET_ENTRY_FLOW, market_request, MarketEntryOutput)
        )
        strategy_task = asyncio.ensure_future(
            self._call_flow(STRATEGIC_RECOMMENDATIONS_FLOW, strategy_request, StrategicRecommendationsOutput)
        )
        for task, name in ((market_task, MARKET_ENTRY_FLOW), (strategy_task, STRATEGIC_RECOMMENDATIONS_FLOW)):
            task.set_name(f"{correlation_id}:{name}")
            task.add_done_callback(_log_discarded)

        try:
            market_evaluation, strategic_plan = await asyncio.gather(market_task, strategy_task)
        except AIServiceError as e:
            logger.error(f"Consultation {correlation_id} failed in {e.flow or 'unknown flow'}: {e.code}")
            raise

        latency_ms = int((datetime.utcnow() - started_at).total_seconds() * 1000)
        logger.info(f"Consultation {correlation_id} completed in {latency_ms}ms")

        return AnalysisReport(
            projection=projection,
            market_evaluation=market_evaluation,
            strategic_plan=strategic_plan,
        )

    async def _call_flow(
        self,
        name: str,
        request: BaseModel,
        output_model: Type[BaseModel],
    ) -> BaseModel:
        try:
            raw = await self.backend.invoke(name, request.to_payload())
        except AIServiceError as e:
            if e.flow is None:
                e.flow = name
            raise
        except Exception as e:
            raise UnknownAIServiceError(f"{type(e).__name__}: {e}", flow=name) from e

        try:
            return output_model.model_validate(raw)
        except ValidationError as e:
            raise UnknownAIServiceError(f"Malformed output from {name}: {e}", flow=name) from e

    # =========================================================================
    # REQUEST BUILDERS
    # =========================================================================

    def build_market_entry_request(
        self,
        assumptions: BusinessAssumptions,
        projection: ProjectionResult,
    ) -> MarketEntryInput:
        return MarketEntryInput(
            product_name=assumptions.product_name,
            target_segment=assumptions.target_segment,
            calculated_marketing_budget=float(assumptions.total_marketing_budget),
            financial_forecast_summary=self.summarize_forecast(projection),
            market_condition_summary=self.market_context,
        )

    def build_strategic_recommendations_request(
        self,
        assumptions: BusinessAssumptions,
        projection: ProjectionResult,
    ) -> StrategicRecommendationsInput:
        return StrategicRecommendationsInput(
            product_name=assumptions.product_name,
            target_segmentation=assumptions.target_segment,
            selected_marketing_strategies=[c.label for c in assumptions.active_channels],
            monthly_profit_and_loss_statement=self.summarize_pnl(projection),
            monthly_cash_flow_simulation=self.summarize_cashflow(projection),
            calculated_marketing_budget=float(assumptions.total_marketing_budget),
            annual_profit_projection=float(projection.annual_profit),
            roas=float(projection.roas),
            warnings_summary=self.summarize_warnings(projection),
        )

    @staticmethod
    def summarize_forecast(projection: ProjectionResult) -> str:
        return (
            f"Projected annual revenue: {format_rupiah(projection.annual_revenue)}. "
            f"Projected annual profit: {format_rupiah(projection.annual_profit)}. "
            f"ROAS: {format_ratio(projection.roas)}. "
            f"Break-even: {format_units(projection.unit_economics.bep_unit)} per month."
        )

    @staticmethod
    def summarize_pnl(projection: ProjectionResult) -> str:
        return dump_lines(
            f"{row.label}: {format_rupiah(row.value)}" for row in projection.pnl_table
        )

    @staticmethod
    def summarize_cashflow(projection: ProjectionResult) -> str:
        return dump_lines(
            f"Month {row.month}: start {format_rupiah(row.start_cash)}, "
            f"in {format_rupiah(row.cash_in)}, out {format_rupiah(row.cash_out)}, "
            f"end {format_rupiah(row.end_cash)}"
            for row in projection.cashflow_table
        )

    @staticmethod
    def summarize_warnings(projection: ProjectionResult) -> str:
        if not projection.warnings:
            return NO_WARNINGS
        return " ".join(projection.warnings)
