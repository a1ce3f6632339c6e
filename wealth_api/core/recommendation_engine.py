# wealth_api/core/recommendation_engine.py
from datetime import datetime, timezone
from typing import Callable, List
import logging

from wealth_api.core.aggregation import aggregate
from wealth_api.core.fallback import get_fallback_recommendations
from wealth_api.core.inference import InferenceClient, InferenceFailure, InferenceOutcome
from wealth_api.core.prompts import build_recommendation_prompt
from wealth_api.core.recommendation_parser import parse_recommendations
from wealth_api.core.record_store import RecordKind, RecordStore
from wealth_api.schemas.recommendation import FinancialSummary, RecommendationData

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_recommendations(outcome: InferenceOutcome) -> List[str]:
    """Turn an inference outcome into a non-empty recommendation list."""
    if isinstance(outcome, InferenceFailure):
        logger.warning(f"Using fallback recommendations: {outcome.reason}")
        return get_fallback_recommendations()

    recommendations = parse_recommendations(outcome.text)
    if not any(item.strip() for item in recommendations):
        logger.warning("Model reply parsed to nothing usable, using fallback recommendations")
        return get_fallback_recommendations()
    return recommendations


class RecommendationPipeline:
    """fetch -> aggregate -> format -> infer -> parse, one request at a time."""

    def __init__(
        self,
        store: RecordStore,
        inference: InferenceClient,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.inference = inference
        self.clock = clock

    async def infer(self, prompt: str) -> List[str]:
        outcome = await self.inference.generate(prompt)
        return resolve_recommendations(outcome)

    async def run(self) -> RecommendationData:
        logger.info("Fetching financial data from record store...")
        # Store errors propagate: nothing to recommend from
        assets = await self.store.fetch_all(RecordKind.ASSET)
        incomes = await self.store.fetch_all(RecordKind.INCOME)
        liabilities = await self.store.fetch_all(RecordKind.LIABILITY)

        snapshot = aggregate(assets, incomes, liabilities)
        summary = snapshot.summary
        logger.info(
            f"Aggregated {summary.total_record_count} records - "
            f"Assets: {summary.total_assets}, Income: {summary.total_income}, "
            f"Liabilities: {summary.total_liabilities}"
        )

        prompt = build_recommendation_prompt(summary, snapshot.breakdown)
        recommendations = await self.infer(prompt)
        logger.info(f"Generated {len(recommendations)} recommendations")

        return RecommendationData(
            recommendations=recommendations,
            financial_summary=FinancialSummary.from_aggregate(summary),
            breakdown=snapshot.breakdown,
            timestamp=self.clock(),
        )
