from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from wealth_api.api.routes import recommendations, user_routes
from wealth_api.api.routes.records import asset_router, income_router, liability_router
from wealth_api.config import settings
from wealth_api.core.inference import InferenceClient, InferenceConfig
from wealth_api.db.session import init_db
import uvicorn
import logging
import time
import os
from contextlib import asynccontextmanager


# Configure logging first
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# -------------------- Lifespan Manager --------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Wealth Management API...")
    init_db()
    config = InferenceConfig.from_settings(settings)
    app.state.inference_client = InferenceClient(config)
    logger.info(f"Inference provider: {config.provider_label} ({config.model_id}, {config.region})")
    yield
    # Shutdown
    logger.info("🛑 Shutting down Wealth Management API...")

# -------------------- App Initialization --------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Asset, income and liability tracking with AI-generated financial recommendations.",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan
)

# -------------------- CORS Setup --------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"]
)

# -------------------- Request Logging Middleware --------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    logger.info(f"➡️  {request.method} {request.url} - Client: {request.client.host if request.client else 'Unknown'}")

    try:
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        logger.info(f"⬅️  {response.status_code} for {request.method} {request.url} - {process_time:.2f}ms")

        response.headers["X-Process-Time"] = f"{process_time:.2f}ms"
        return response

    except Exception as exc:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"❌ Error processing {request.method} {request.url} - {process_time:.2f}ms: {str(exc)}")
        raise

# -------------------- Security Headers Middleware --------------------
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    if "server" in response.headers:
        del response.headers["server"]

    return response

# -------------------- Routers --------------------
app.include_router(user_routes.router)
app.include_router(asset_router)
app.include_router(income_router)
app.include_router(liability_router)
app.include_router(recommendations.router)

# -------------------- Basic Routes --------------------
@app.get("/")
async def root():
    return {
        "message": "Welcome to Wealth Management API",
        "version": settings.VERSION,
        "status": "operational"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }

@app.get("/info")
async def api_info():
    """API information endpoint"""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "description": "Asset, income and liability tracking with AI-generated financial recommendations",
        "environment": settings.ENVIRONMENT,
        "docs": "/docs" if settings.ENVIRONMENT != "production" else "Disabled in production"
    }

# -------------------- Error Handling --------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.method} {request.url}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "details": jsonable_encoder(exc.errors()),
        },
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        # Unknown route, not a missing record
        logger.info(f"404 Not Found: {request.method} {request.url}")
        return JSONResponse(
            status_code=404,
            content={"error": "Resource not found", "path": str(request.url)},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled error for {request.method} {request.url}: {str(exc)}", exc_info=True)

    # Don't expose internal errors in production
    if settings.ENVIRONMENT == 'production':
        detail = "Internal server error"
    else:
        detail = str(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": detail,
        },
    )

# -------------------- Run (for local dev) --------------------
if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))

    uvicorn.run(
        "wealth_api.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
        access_log=True
    )
