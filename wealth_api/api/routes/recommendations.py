# wealth_api/api/routes/recommendations.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from wealth_api.api.deps import get_inference_client, get_record_store
from wealth_api.core.fallback import FALLBACK_VERSION
from wealth_api.core.inference import InferenceClient, InferenceError
from wealth_api.core.prompts import PROMPT_TEMPLATE_VERSION
from wealth_api.core.recommendation_engine import RecommendationPipeline
from wealth_api.core.record_store import RecordStore
from wealth_api.schemas.recommendation import ConnectionTestResponse, RecommendationResponse

router = APIRouter(prefix="/api/recommendations", tags=["Recommendations"])
logger = logging.getLogger(__name__)


@router.get("")
async def get_recommendations(
    store: RecordStore = Depends(get_record_store),
    inference: InferenceClient = Depends(get_inference_client),
):
    """AI-generated recommendations over every user's records. Public."""
    logger.info("Generating AI-powered financial recommendations...")
    try:
        data = await RecommendationPipeline(store, inference).run()
    except Exception as e:
        logger.error(f"Error generating recommendations: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to generate recommendations",
                "error": str(e),
            },
        )

    return RecommendationResponse(data=data).model_dump(mode="json", by_alias=True)


@router.get("/test", response_model=ConnectionTestResponse, response_model_exclude_none=True)
async def test_model_connection(inference: InferenceClient = Depends(get_inference_client)):
    """Raw connectivity check; failures are reported, never masked."""
    logger.info(f"Testing {inference.config.provider_label} connection...")
    try:
        return await inference.test_connection()
    except InferenceError as e:
        logger.warning(f"Connection test failed: {e}")
        return {
            "success": False,
            "message": f"{inference.config.provider_label} connection failed",
            "error": str(e),
        }
    except Exception as e:
        logger.error(f"Error testing model connection: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Connection test failed",
                "error": str(e),
            },
        )


@router.get("/health")
async def get_health_status(inference: InferenceClient = Depends(get_inference_client)):
    config = inference.config
    return {
        "success": True,
        "service": "Financial Recommendation System",
        "status": "operational",
        "model": config.model_id,
        "provider": config.provider_label,
        "region": config.region,
        "promptVersion": PROMPT_TEMPLATE_VERSION,
        "fallbackVersion": FALLBACK_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "recommendations": "/api/recommendations",
            "test": "/api/recommendations/test",
            "health": "/api/recommendations/health",
        },
    }
