"""
Property-Based Tests using Hypothesis
Generate arbitrary seller assumptions and ensure projection invariants hold.
"""

from decimal import Decimal

import pytest
from hypothesis import given, strategies as st, settings, HealthCheck

from projection_engine import ProjectionEngine, compute_projection, PROJECTION_MONTHS
from projection_models import BusinessAssumptions


pytestmark = pytest.mark.property


def money(max_value=10_000_000):
    return st.decimals(
        min_value=0, max_value=max_value, places=2,
        allow_nan=False, allow_infinity=False,
    )


@st.composite
def assumptions_strategy(draw):
    return BusinessAssumptions(
        product_name="Keripik Pisang",
        target_segment="University students",
        sell_price=draw(money()),
        cost_of_goods=draw(money()),
        ad_cost=draw(money()),
        other_costs_percentage=draw(money(max_value=100)),
        fixed_costs_per_month=draw(money(max_value=1_000_000_000)),
        avg_sales_per_month=draw(st.integers(min_value=0, max_value=100_000).map(Decimal)),
        total_marketing_budget=draw(money(max_value=1_000_000_000)),
        initial_marketing_budget=draw(money(max_value=1_000_000_000)),
        use_social_media_ads=draw(st.booleans()),
        use_kols=draw(st.booleans()),
        use_video_content=draw(st.booleans()),
    )


def close_to(actual, expected, rel=Decimal("1e-12")):
    return abs(actual - expected) <= rel * max(abs(expected), Decimal("1"))


class TestCashflowInvariants:
    """The cash simulation is a strict month-to-month recurrence"""

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_always_twelve_months(self, assumptions):
        table = compute_projection(assumptions).cashflow_table

        assert len(table) == PROJECTION_MONTHS
        assert [row.month for row in table] == list(range(1, PROJECTION_MONTHS + 1))

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_opening_balance_and_recurrence(self, assumptions):
        result = compute_projection(assumptions)
        table = result.cashflow_table

        assert table[0].start_cash == assumptions.initial_marketing_budget
        for row in table:
            assert row.end_cash == row.start_cash + row.cash_in - row.cash_out
        for previous, current in zip(table, table[1:]):
            assert current.start_cash == previous.end_cash

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=50, deadline=5000)
    def test_closing_balance_is_opening_plus_twelve_months_profit(self, assumptions):
        result = compute_projection(assumptions)
        assert result.cashflow_table[-1].end_cash == assumptions.initial_marketing_budget + result.annual_profit

    @given(
        opening=money(),
        cash_in=money(),
        cash_out=money(),
        months=st.integers(min_value=0, max_value=36),
    )
    @settings(max_examples=50, deadline=5000)
    def test_horizon_length(self, opening, cash_in, cash_out, months):
        rows = ProjectionEngine().compute_cashflow(opening, cash_in, cash_out, months=months)
        assert len(rows) == months


class TestAnnualAndRoas:

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_annual_figures_are_twelve_months(self, assumptions):
        result = compute_projection(assumptions)

        assert result.annual_revenue == result.monthly_revenue * 12
        assert result.annual_profit == result.monthly_profit * 12

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_roas_zero_without_budget(self, assumptions):
        result = compute_projection(assumptions)

        if assumptions.total_marketing_budget == 0:
            assert result.roas == 0
        elif result.monthly_revenue > 0:
            assert result.roas > 0
            assert close_to(result.roas * assumptions.total_marketing_budget, result.monthly_revenue)

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_roas_never_negative(self, assumptions):
        assert compute_projection(assumptions).roas >= 0


class TestBreakEven:

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_sentinel_iff_unit_margin_not_positive(self, assumptions):
        ue = compute_projection(assumptions).unit_economics

        if ue.net_profit_per_unit <= 0:
            assert ue.bep_unit is None
        else:
            assert ue.bep_unit is not None
            assert ue.bep_unit >= 0
            assert close_to(ue.bep_unit * ue.net_profit_per_unit, assumptions.fixed_costs_per_month)

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=50, deadline=5000)
    def test_unreachable_break_even_is_warned_first(self, assumptions):
        result = compute_projection(assumptions)

        if result.unit_economics.bep_unit is None:
            assert result.warnings[0].startswith("Break-even is unreachable")


class TestPnLInvariants:

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_identities_hold(self, assumptions):
        result = compute_projection(assumptions)
        rows = {row.key: row.value for row in result.pnl_table}

        assert rows["gross_profit"] == rows["revenue"] - rows["cogs"]
        assert rows["net_monthly_profit"] == (
            rows["gross_profit"] - rows["other_variable_costs"] - rows["fixed_costs"]
        )
        assert rows["net_monthly_profit"] == result.monthly_profit
        assert rows["revenue"] - result.total_monthly_costs == result.monthly_profit

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000)
    def test_cost_rows_flagged_only_when_nonzero(self, assumptions):
        for row in compute_projection(assumptions).pnl_table:
            if row.is_cost:
                assert row.value >= 0
                assert row.is_negative == (row.value > 0)
            else:
                assert row.is_negative == (row.value < 0)


class TestAllocationInvariants:

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=100, deadline=5000, suppress_health_check=[HealthCheck.too_slow])
    def test_allocation_covers_active_channels(self, assumptions):
        allocation = compute_projection(assumptions).channel_allocation

        if assumptions.total_marketing_budget > 0 and assumptions.active_channels:
            assert [a.channel for a in allocation] == assumptions.active_channels
            assert close_to(sum(a.amount for a in allocation), assumptions.total_marketing_budget)
        else:
            assert allocation == ()


class TestDeterminism:

    @given(assumptions=assumptions_strategy())
    @settings(max_examples=30, deadline=5000)
    def test_fingerprint_stable(self, assumptions):
        assert compute_projection(assumptions).fingerprint() == compute_projection(assumptions).fingerprint()
