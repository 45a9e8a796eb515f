"""
Seller Projection Models

Input record for the projection engine and the marketing channels a seller
can switch on. A BusinessAssumptions instance is built once per request from
validated form data and never changes afterwards.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class MarketingChannel(str, Enum):
    """Marketing channels a seller can activate"""
    SOCIAL_MEDIA_ADS = "social_media_ads"
    KOL = "kol"
    VIDEO_CONTENT = "video_content"

    @property
    def label(self) -> str:
        return CHANNEL_LABELS[self]


CHANNEL_LABELS = {
    MarketingChannel.SOCIAL_MEDIA_ADS: "Social Media Ads",
    MarketingChannel.KOL: "KOL & Affiliates",
    MarketingChannel.VIDEO_CONTENT: "Video Content",
}


# Rupiah amounts and monthly unit volumes above these are not plausible plans
MAX_AMOUNT = Decimal("1e15")
MAX_UNITS_PER_MONTH = Decimal("1e9")
# Finer amounts are rounded half-up to this many decimal places
AMOUNT_PLACES = 6


class BusinessAssumptions(BaseModel):
    """
    Pricing, cost and marketing assumptions for one product.

    All money is in Rupiah. Field names on the wire are camelCase
    (productName, sellPrice, ...); Python code uses the snake_case names.
    """
    product_name: str = Field(..., alias="productName", min_length=1)
    target_segment: str = Field(..., alias="targetSegment", min_length=1)

    sell_price: Decimal = Field(Decimal("0"), alias="sellPrice", ge=0, le=MAX_AMOUNT)
    cost_of_goods: Decimal = Field(Decimal("0"), alias="costOfGoods", ge=0, le=MAX_AMOUNT)
    ad_cost: Decimal = Field(Decimal("0"), alias="adCost", ge=0, le=MAX_AMOUNT)
    other_costs_percentage: Decimal = Field(Decimal("0"), alias="otherCostsPercentage", ge=0, le=100)
    fixed_costs_per_month: Decimal = Field(Decimal("0"), alias="fixedCostsPerMonth", ge=0, le=MAX_AMOUNT)
    avg_sales_per_month: Decimal = Field(Decimal("0"), alias="avgSalesPerMonth", ge=0, le=MAX_UNITS_PER_MONTH)
    total_marketing_budget: Decimal = Field(Decimal("0"), alias="totalMarketingBudget", ge=0, le=MAX_AMOUNT)
    initial_marketing_budget: Decimal = Field(Decimal("0"), alias="initialMarketingBudget", ge=0, le=MAX_AMOUNT)

    use_social_media_ads: bool = Field(False, alias="useSocialMediaAds")
    use_kols: bool = Field(False, alias="useKOLs")
    use_video_content: bool = Field(False, alias="useVideoContent")

    class Config:
        frozen = True
        populate_by_name = True
        str_strip_whitespace = True

    @field_validator(
        "sell_price", "cost_of_goods", "ad_cost", "other_costs_percentage",
        "fixed_costs_per_month", "avg_sales_per_month",
        "total_marketing_budget", "initial_marketing_budget",
    )
    @classmethod
    def normalize_amount(cls, value: Decimal) -> Decimal:
        """Drop the sign of -0 and cap the number of decimal places"""
        if value.as_tuple().exponent < -AMOUNT_PLACES:
            value = value.quantize(Decimal(1).scaleb(-AMOUNT_PLACES), rounding=ROUND_HALF_UP)
        return abs(value)

    @property
    def active_channels(self) -> List[MarketingChannel]:
        """Channels switched on, in declaration order"""
        flags = [
            (MarketingChannel.SOCIAL_MEDIA_ADS, self.use_social_media_ads),
            (MarketingChannel.KOL, self.use_kols),
            (MarketingChannel.VIDEO_CONTENT, self.use_video_content),
        ]
        return [channel for channel, active in flags if active]

    @property
    def other_costs_per_unit(self) -> Decimal:
        return self.sell_price * self.other_costs_percentage / 100


def wire_name(field_name: str) -> str:
    """camelCase name of a BusinessAssumptions field"""
    field = BusinessAssumptions.model_fields.get(field_name)
    if field is None or field.alias is None:
        return field_name
    return field.alias
