# wealth_api/core/prompts.py
"""
Renders aggregated financial data into the text prompt sent to the model.

The output is deterministic for a given summary and breakdown. The instruction
template is versioned: any edit to its wording changes model behaviour and
must bump PROMPT_TEMPLATE_VERSION.
"""
from wealth_api.schemas.recommendation import (
    AggregateSummary,
    CategoryBreakdown,
    FinancialBreakdown,
)

PROMPT_TEMPLATE_VERSION = "2024-06-02"

RECOMMENDATION_PROMPT_TEMPLATE = """You are a professional financial advisor. Based on the following aggregated financial data from multiple users, provide 5-7 general financial recommendations that would benefit most people.

{financial_data}

Key Metrics:
- Net Worth: {net_worth}
- Debt-to-Asset Ratio: {debt_to_asset_ratio}%
- Savings Rate: {savings_rate}%

Please provide practical, actionable financial advice covering:
1. Emergency fund and savings
2. Debt management
3. Investment strategies
4. Risk management
5. Long-term financial planning

Format your response as a simple numbered list of recommendations. Each recommendation should be 1-2 sentences, clear, and actionable."""

CONNECTION_TEST_PROMPT = "Say 'Connection successful' if you can read this."


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}"


def _category_lines(categories: CategoryBreakdown, unit: str) -> list[str]:
    return [
        f"  - {label}: {format_money(totals.total)} ({totals.count} {unit})"
        for label, totals in categories.items()
    ]


def format_financial_data(summary: AggregateSummary, breakdown: FinancialBreakdown) -> str:
    lines = [
        "Financial Data Summary:",
        "",
        f"Total Assets: {format_money(summary.total_assets)}",
        f"Total Income: {format_money(summary.total_income)}",
        f"Total Liabilities: {format_money(summary.total_liabilities)}",
        f"Net Worth: {format_money(summary.net_worth)}",
        f"Debt-to-Asset Ratio: {format_percent(summary.debt_to_asset_ratio)}%",
        f"Savings Rate: {format_percent(summary.savings_rate)}%",
        "",
        "Asset Categories:",
        *_category_lines(breakdown.assets.categories, "items"),
        "",
        "Income Sources:",
        *_category_lines(breakdown.income.categories, "sources"),
        "",
        "Liabilities:",
        *_category_lines(breakdown.liabilities.categories, "items"),
        f"Average Interest Rate: {format_percent(breakdown.liabilities.average_interest_rate)}%",
    ]
    return "\n".join(lines) + "\n"


def build_recommendation_prompt(summary: AggregateSummary, breakdown: FinancialBreakdown) -> str:
    return RECOMMENDATION_PROMPT_TEMPLATE.format(
        financial_data=format_financial_data(summary, breakdown),
        net_worth=format_money(summary.net_worth),
        debt_to_asset_ratio=format_percent(summary.debt_to_asset_ratio),
        savings_rate=format_percent(summary.savings_rate),
    )
