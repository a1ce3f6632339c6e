# wealth_api/core/fallback.py
from typing import List

FALLBACK_VERSION = "1"

# One entry per advice domain; order is part of the contract
FALLBACK_RECOMMENDATIONS = (
    "Build an emergency fund covering 3-6 months of expenses to protect against unexpected financial setbacks.",
    "Pay off high-interest debt first, such as credit cards, to reduce interest payments and improve financial health.",
    "Diversify your investment portfolio across different asset classes to minimize risk and maximize returns.",
    "Contribute regularly to retirement accounts to take advantage of compound growth and tax benefits.",
    "Review and optimize your budget monthly to identify areas where you can reduce expenses and increase savings.",
    "Consider increasing your income through side hustles, career advancement, or skill development.",
    "Protect your assets with appropriate insurance coverage including health, life, and property insurance.",
)


def get_fallback_recommendations() -> List[str]:
    """Return a fresh copy so callers can't alter the shared constant."""
    return list(FALLBACK_RECOMMENDATIONS)
