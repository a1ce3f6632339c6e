# wealth_api/schemas/recommendation.py
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AggregateSummary(CamelModel):
    total_assets: float = 0.0
    total_income: float = 0.0
    total_liabilities: float = 0.0
    net_worth: float = 0.0
    debt_to_asset_ratio: float = 0.0
    savings_rate: float = 0.0
    total_record_count: int = 0


class FinancialSummary(CamelModel):
    """Public subset of AggregateSummary returned with recommendations."""
    total_assets: float
    total_income: float
    total_liabilities: float
    net_worth: float
    debt_to_asset_ratio: float
    savings_rate: float

    @classmethod
    def from_aggregate(cls, summary: AggregateSummary) -> "FinancialSummary":
        return cls(**summary.model_dump(exclude={"total_record_count"}))


class CategoryTotals(CamelModel):
    total: float = 0.0
    count: int = 0


# Label -> totals, in the order categories were first seen
CategoryBreakdown = Dict[str, CategoryTotals]


class RecordGroupBreakdown(CamelModel):
    total: float = 0.0
    count: int = 0
    categories: CategoryBreakdown = Field(default_factory=dict)


class LiabilityBreakdown(RecordGroupBreakdown):
    average_interest_rate: float = 0.0


class FinancialBreakdown(CamelModel):
    assets: RecordGroupBreakdown
    income: RecordGroupBreakdown
    liabilities: LiabilityBreakdown


class RecommendationData(CamelModel):
    recommendations: List[str] = Field(..., min_length=1)
    financial_summary: FinancialSummary
    breakdown: FinancialBreakdown
    timestamp: datetime


class RecommendationResponse(CamelModel):
    success: bool = True
    data: RecommendationData


class ConnectionTestResponse(CamelModel):
    success: bool
    message: str
    model: str | None = None
    response: str | None = None
    error: str | None = None
