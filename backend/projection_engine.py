"""
Deterministic Seller Projection Engine

Produces unit economics, break-even, a monthly P&L and a 12-month cashflow
simulation from a seller's BusinessAssumptions.
Key invariant: same inputs = same outputs (reproducible). No I/O.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, List, Dict, Any, Tuple
import hashlib
import json

from projection_models import BusinessAssumptions, MarketingChannel

MONTHS_PER_YEAR = 12
PROJECTION_MONTHS = 12

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# =============================================================================
# OUTPUT DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class UnitEconomics:
    """Per-unit margins and break-even volume"""
    gross_profit_per_unit: Decimal
    net_profit_per_unit: Decimal
    net_profit_margin: Decimal  # percent of sell price
    bep_unit: Optional[Decimal]  # None = break-even unreachable at these margins

    @property
    def break_even_reachable(self) -> bool:
        return self.bep_unit is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grossProfitPerUnit": str(self.gross_profit_per_unit),
            "netProfitPerUnit": str(self.net_profit_per_unit),
            "netProfitMargin": str(self.net_profit_margin),
            "bepUnit": str(self.bep_unit) if self.bep_unit is not None else None,
        }


@dataclass(frozen=True)
class PnLRow:
    """
    A single P&L line.

    value is the line amount; cost lines hold the (non-negative) cost and
    subtract from profit, indicated by is_cost.
    """
    key: str
    label: str
    value: Decimal
    is_cost: bool = False

    @property
    def signed_value(self) -> Decimal:
        return -self.value if self.is_cost else self.value

    @property
    def is_negative(self) -> bool:
        return self.signed_value < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "value": str(self.value),
            "isNegative": self.is_negative,
        }


@dataclass(frozen=True)
class CashflowRow:
    """One month of the cash simulation"""
    month: int
    start_cash: Decimal
    cash_in: Decimal
    cash_out: Decimal
    net_cash_flow: Decimal
    end_cash: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "startCash": str(self.start_cash),
            "cashIn": str(self.cash_in),
            "cashOut": str(self.cash_out),
            "netCashFlow": str(self.net_cash_flow),
            "endCash": str(self.end_cash),
        }


@dataclass(frozen=True)
class ChannelAllocation:
    """Share of the marketing budget assigned to one active channel"""
    channel: MarketingChannel
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel": self.channel.value,
            "label": self.channel.label,
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Complete projection output"""
    unit_economics: UnitEconomics
    monthly_revenue: Decimal
    annual_revenue: Decimal
    total_monthly_variable_costs: Decimal
    total_monthly_costs: Decimal
    monthly_profit: Decimal
    annual_profit: Decimal
    roas: Decimal
    pnl_table: Tuple[PnLRow, ...]
    cashflow_table: Tuple[CashflowRow, ...]
    warnings: Tuple[str, ...] = ()
    channel_allocation: Tuple[ChannelAllocation, ...] = ()

    def pnl_row(self, key: str) -> PnLRow:
        for row in self.pnl_table:
            if row.key == key:
                return row
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unitEconomics": self.unit_economics.to_dict(),
            "monthlyRevenue": str(self.monthly_revenue),
            "annualRevenue": str(self.annual_revenue),
            "totalMonthlyVariableCosts": str(self.total_monthly_variable_costs),
            "totalMonthlyCosts": str(self.total_monthly_costs),
            "monthlyProfit": str(self.monthly_profit),
            "annualProfit": str(self.annual_profit),
            "roas": str(self.roas),
            "pnlTable": [row.to_dict() for row in self.pnl_table],
            "cashflowTable": [row.to_dict() for row in self.cashflow_table],
            "warnings": list(self.warnings),
            "channelAllocation": [a.to_dict() for a in self.channel_allocation],
        }

    def fingerprint(self) -> str:
        """SHA-256 of the serialized result, for determinism checks"""
        payload = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(payload.encode()).hexdigest()


# =============================================================================
# COMPUTE ENGINE
# =============================================================================

class ProjectionEngine:
    """
    Deterministic projection engine.

    Stateless; run() is a pure function of the assumptions.
    """

    def run(self, assumptions: BusinessAssumptions) -> ProjectionResult:
        """
        Compute the full projection.

        1. Unit economics and break-even
        2. Monthly and annual figures
        3. P&L table
        4. 12-month cashflow table
        5. Warnings and channel allocation
        """
        unit_economics = self.compute_unit_economics(assumptions)

        monthly_revenue = assumptions.sell_price * assumptions.avg_sales_per_month
        variable_cost_per_unit = (
            assumptions.cost_of_goods
            + assumptions.ad_cost
            + assumptions.other_costs_per_unit
        )
        total_monthly_variable_costs = variable_cost_per_unit * assumptions.avg_sales_per_month
        total_monthly_costs = assumptions.fixed_costs_per_month + total_monthly_variable_costs
        monthly_profit = monthly_revenue - total_monthly_costs

        if assumptions.total_marketing_budget > 0:
            roas = monthly_revenue / assumptions.total_marketing_budget
        else:
            roas = ZERO

        pnl_table = self.compute_pnl(assumptions, monthly_revenue)
        cashflow_table = self.compute_cashflow(
            opening_cash=assumptions.initial_marketing_budget,
            cash_in=monthly_revenue,
            cash_out=total_monthly_costs,
        )

        warnings = self.compute_warnings(
            assumptions, unit_economics, monthly_profit, cashflow_table
        )

        return ProjectionResult(
            unit_economics=unit_economics,
            monthly_revenue=monthly_revenue,
            annual_revenue=monthly_revenue * MONTHS_PER_YEAR,
            total_monthly_variable_costs=total_monthly_variable_costs,
            total_monthly_costs=total_monthly_costs,
            monthly_profit=monthly_profit,
            annual_profit=monthly_profit * MONTHS_PER_YEAR,
            roas=roas,
            pnl_table=pnl_table,
            cashflow_table=cashflow_table,
            warnings=tuple(warnings),
            channel_allocation=self.compute_channel_allocation(assumptions),
        )

    def compute_unit_economics(self, assumptions: BusinessAssumptions) -> UnitEconomics:
        """Margins per unit sold. Marketing budget is not part of the break-even."""
        gross_profit_per_unit = assumptions.sell_price - assumptions.cost_of_goods
        net_profit_per_unit = (
            gross_profit_per_unit
            - assumptions.ad_cost
            - assumptions.other_costs_per_unit
        )

        if assumptions.sell_price > 0:
            net_profit_margin = net_profit_per_unit / assumptions.sell_price * HUNDRED
        else:
            net_profit_margin = ZERO

        bep_unit = None
        if net_profit_per_unit > 0:
            bep_unit = assumptions.fixed_costs_per_month / net_profit_per_unit

        return UnitEconomics(
            gross_profit_per_unit=gross_profit_per_unit,
            net_profit_per_unit=net_profit_per_unit,
            net_profit_margin=net_profit_margin,
            bep_unit=bep_unit,
        )

    def compute_pnl(
        self,
        assumptions: BusinessAssumptions,
        monthly_revenue: Decimal,
    ) -> Tuple[PnLRow, ...]:
        """
        Monthly P&L in fixed order:
        Revenue, COGS, Gross Profit, Other Variable Costs, Fixed Costs, Net Monthly Profit.
        """
        units = assumptions.avg_sales_per_month
        cogs = assumptions.cost_of_goods * units
        gross_profit = monthly_revenue - cogs
        other_variable_costs = (assumptions.ad_cost + assumptions.other_costs_per_unit) * units
        fixed_costs = assumptions.fixed_costs_per_month
        net_profit = gross_profit - other_variable_costs - fixed_costs

        return (
            PnLRow("revenue", "Revenue", monthly_revenue),
            PnLRow("cogs", "COGS", cogs, is_cost=True),
            PnLRow("gross_profit", "Gross Profit", gross_profit),
            PnLRow("other_variable_costs", "Other Variable Costs", other_variable_costs, is_cost=True),
            PnLRow("fixed_costs", "Fixed Costs", fixed_costs, is_cost=True),
            PnLRow("net_monthly_profit", "Net Monthly Profit", net_profit),
        )

    def compute_cashflow(
        self,
        opening_cash: Decimal,
        cash_in: Decimal,
        cash_out: Decimal,
        months: int = PROJECTION_MONTHS,
    ) -> Tuple[CashflowRow, ...]:
        """
        Month-by-month cash simulation with constant inflow and outflow.

        Each month opens at the previous month's close.
        """
        rows: List[CashflowRow] = []
        net_cash_flow = cash_in - cash_out
        start_cash = opening_cash

        for month in range(1, months + 1):
            end_cash = start_cash + net_cash_flow
            rows.append(CashflowRow(
                month=month,
                start_cash=start_cash,
                cash_in=cash_in,
                cash_out=cash_out,
                net_cash_flow=net_cash_flow,
                end_cash=end_cash,
            ))
            start_cash = end_cash

        return tuple(rows)

    def compute_warnings(
        self,
        assumptions: BusinessAssumptions,
        unit_economics: UnitEconomics,
        monthly_profit: Decimal,
        cashflow_table: Tuple[CashflowRow, ...],
    ) -> List[str]:
        """Plain-language warnings about the plan, in fixed order"""
        warnings = []

        if not unit_economics.break_even_reachable:
            warnings.append(
                "Break-even is unreachable: each unit sold loses money after ad and other costs."
            )
        elif unit_economics.bep_unit > assumptions.avg_sales_per_month:
            warnings.append(
                f"BEP > target sales: break-even needs {unit_economics.bep_unit:.0f} units "
                f"per month but only {assumptions.avg_sales_per_month:.0f} are planned."
            )

        if assumptions.total_marketing_budget == 0:
            warnings.append("No marketing budget allocated: ROAS cannot be measured.")

        if monthly_profit < 0:
            warnings.append("The plan loses money every month.")

        first_negative = next((row for row in cashflow_table if row.end_cash < 0), None)
        if first_negative is not None:
            warnings.append(f"Cash runs out in month {first_negative.month}.")

        return warnings

    def compute_channel_allocation(
        self,
        assumptions: BusinessAssumptions,
    ) -> Tuple[ChannelAllocation, ...]:
        """Split the marketing budget evenly over active channels"""
        channels = assumptions.active_channels
        if not channels or assumptions.total_marketing_budget <= 0:
            return ()

        share = assumptions.total_marketing_budget / len(channels)
        return tuple(ChannelAllocation(channel=c, amount=share) for c in channels)


def compute_projection(assumptions: BusinessAssumptions) -> ProjectionResult:
    """Run the projection engine on validated assumptions"""
    return ProjectionEngine().run(assumptions)
