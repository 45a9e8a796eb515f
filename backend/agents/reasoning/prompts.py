"""
Consultation Prompts

Prompt text for the consultation flows. Pure string formatting over the
validated flow inputs; no business logic lives here.
"""

import json

from ..models.consultation import MarketEntryInput, StrategicRecommendationsInput
from formatting import format_ratio, format_rupiah

DEFAULT_LANGUAGE = "Bahasa Indonesia"

MARKET_CONDITION_SUMMARY = (
    "The Indonesian e-commerce market is highly competitive and dominated by "
    "Shopee and TikTok Shop. Shoppers are price sensitive and respond strongly "
    "to promotions. Growth is driven by digital adoption in tier-two and "
    "tier-three cities."
)


MARKET_ENTRY_SYSTEM_PROMPT = """You are an AI business analyst who knows the Indonesian e-commerce market well.
You talk casually and get to the point, in a way small online sellers understand.
Always answer with a single JSON object."""

MARKET_ENTRY_TEMPLATE = """Evaluate whether this business idea is worth launching.

Product: {product_name}
Target market: {target_segment}
Marketing budget: {budget}
Financial summary: {financial_forecast_summary}
Market conditions: {market_condition_summary}

IMPORTANT: Use ONLY the "Market conditions" above for market context. Do not
make assumptions about the market from the product name.

Reply in {language} with:
1. "evaluation": a bold one-line verdict, e.g. "This has real potential!" or "Careful, this is risky."
2. "keyConsiderations": 1-2 short sentences on why, focused on the single most
   important point in the data (thin margin, segment too broad, ...).

Write it like quick advice to a business friend.

Return JSON: {{"evaluation": "...", "keyConsiderations": "..."}}"""


STRATEGIC_RECOMMENDATIONS_SYSTEM_PROMPT = """You are an AI business strategist who gives practical advice to Indonesian small online sellers.
You are relaxed, motivating and solution oriented.
Always answer with a single JSON object."""

STRATEGIC_RECOMMENDATIONS_TEMPLATE = """Give 3-5 priority action items based on this business simulation.

Business data:
- Product: {product_name}
- Target market: {target_segmentation}
- Selected marketing strategies: {strategies}
- Marketing budget: {budget}

Simulation results and warnings:
- Projected annual profit: {annual_profit}
- ROAS (return on ad spend): {roas}
- Logic warnings: {warnings_summary}
- Monthly profit and loss: {pnl}
- Monthly cash flow: {cashflow}

Instructions:
- If there are logic warnings, the FIRST recommendation must address them.
- If the marketing budget is 0, explain why the results may be inaccurate and suggest allocating a budget.
- If annual profit is negative, focus on turning the business around (cost efficiency, pricing, strategy).
- If annual profit is positive, focus on scaling up (gradual ad budget increases, new channels, conversion).
- Mention the product name and the target market where relevant.
- Every item is a concrete tactical step that starts with a verb.
- Write in {language}.

Return JSON: {{"recommendations": ["...", "..."]}}"""


def render_market_entry_prompt(data: MarketEntryInput, language: str = DEFAULT_LANGUAGE) -> str:
    return MARKET_ENTRY_TEMPLATE.format(
        product_name=data.product_name,
        target_segment=data.target_segment,
        budget=format_rupiah(data.calculated_marketing_budget),
        financial_forecast_summary=data.financial_forecast_summary,
        market_condition_summary=data.market_condition_summary,
        language=language,
    )


def render_strategic_recommendations_prompt(
    data: StrategicRecommendationsInput,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    strategies = ", ".join(data.selected_marketing_strategies) or "none selected"
    return STRATEGIC_RECOMMENDATIONS_TEMPLATE.format(
        product_name=data.product_name,
        target_segmentation=data.target_segmentation,
        strategies=strategies,
        budget=format_rupiah(data.calculated_marketing_budget),
        annual_profit=format_rupiah(data.annual_profit_projection),
        roas=format_ratio(data.roas),
        warnings_summary=data.warnings_summary,
        pnl=data.monthly_profit_and_loss_statement,
        cashflow=data.monthly_cash_flow_simulation,
        language=language,
    )


def dump_lines(lines) -> str:
    """Serialize summary lines as a JSON array string"""
    return json.dumps(list(lines), ensure_ascii=False)
