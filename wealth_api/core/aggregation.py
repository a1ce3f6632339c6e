# wealth_api/core/aggregation.py
"""
Reduces raw asset, income and liability records into the totals, ratios and
per-category breakdowns the recommendation prompt is built from.

Every function here is pure: records are read, never mutated, and nothing is
cached between calls.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Sequence

from wealth_api.schemas.recommendation import (
    AggregateSummary,
    CategoryBreakdown,
    CategoryTotals,
    FinancialBreakdown,
    LiabilityBreakdown,
    RecordGroupBreakdown,
)

UNCATEGORIZED = "Uncategorized"


class FinancialRecord(Protocol):
    amount: Optional[float]
    category: Optional[str]


class LiabilityRecord(FinancialRecord, Protocol):
    interest_rate: Optional[float]


@dataclass(frozen=True)
class FinancialSnapshot:
    summary: AggregateSummary
    breakdown: FinancialBreakdown


def sum_amounts(records: Iterable[FinancialRecord]) -> float:
    return sum((record.amount or 0 for record in records), 0.0)


def _category_label(record: FinancialRecord) -> str:
    category = record.category
    if category is None or not str(category).strip():
        return UNCATEGORIZED
    return category


def categorize(records: Iterable[FinancialRecord]) -> CategoryBreakdown:
    """Group records by category label, accumulating total and count per label."""
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for record in records:
        label = _category_label(record)
        totals[label] = totals.get(label, 0.0) + (record.amount or 0)
        counts[label] = counts.get(label, 0) + 1
    return {label: CategoryTotals(total=totals[label], count=counts[label]) for label in totals}


def average_interest_rate(liabilities: Sequence[LiabilityRecord]) -> float:
    if not liabilities:
        return 0.0
    total_rate = sum((liability.interest_rate or 0 for liability in liabilities), 0.0)
    return total_rate / len(liabilities)


def _percentage(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return round((numerator / denominator) * 100, 2)


def summarize(
    assets: Sequence[FinancialRecord],
    incomes: Sequence[FinancialRecord],
    liabilities: Sequence[LiabilityRecord],
) -> AggregateSummary:
    total_assets = sum_amounts(assets)
    total_income = sum_amounts(incomes)
    total_liabilities = sum_amounts(liabilities)

    # Savings rate subtracts liabilities, not expenses, from income
    return AggregateSummary(
        total_assets=total_assets,
        total_income=total_income,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        debt_to_asset_ratio=_percentage(total_liabilities, total_assets),
        savings_rate=_percentage(total_income - total_liabilities, total_income),
        total_record_count=len(assets) + len(incomes) + len(liabilities),
    )


def build_breakdown(
    assets: Sequence[FinancialRecord],
    incomes: Sequence[FinancialRecord],
    liabilities: Sequence[LiabilityRecord],
) -> FinancialBreakdown:
    return FinancialBreakdown(
        assets=RecordGroupBreakdown(
            total=sum_amounts(assets),
            count=len(assets),
            categories=categorize(assets),
        ),
        income=RecordGroupBreakdown(
            total=sum_amounts(incomes),
            count=len(incomes),
            categories=categorize(incomes),
        ),
        liabilities=LiabilityBreakdown(
            total=sum_amounts(liabilities),
            count=len(liabilities),
            categories=categorize(liabilities),
            average_interest_rate=round(average_interest_rate(liabilities), 2),
        ),
    )


def aggregate(
    assets: Sequence[FinancialRecord],
    incomes: Sequence[FinancialRecord],
    liabilities: Sequence[LiabilityRecord],
) -> FinancialSnapshot:
    return FinancialSnapshot(
        summary=summarize(assets, incomes, liabilities),
        breakdown=build_breakdown(assets, incomes, liabilities),
    )
