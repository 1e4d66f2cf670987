from pathlib import Path

from dotenv import load_dotenv

# Load .env BEFORE any module imports so API keys are available at import time
backend_dir = Path(__file__).resolve().parent.parent
load_dotenv(backend_dir / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from product_compare.core.async_helpers import shutdown_executor
from product_compare.core.config import get_settings
from product_compare.core.llm_factory import get_current_provider_info
from product_compare.core.logging_config import configure_logging
from product_compare.routes.compare import router as compare_router
from product_compare.routes.extract import router as extract_router
from product_compare.routes.firecrawl import router as firecrawl_router
from product_compare.routes.llm import router as llm_router

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
)

app = FastAPI(
    title="Product Compare - Backend",
    version=settings.app_version,
    description="Scrape two product pages, extract structured product data with an LLM and score their similarity",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware — restrict to known frontend origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(compare_router, prefix="/api")
app.include_router(extract_router, prefix="/api")
app.include_router(firecrawl_router, prefix="/api")
app.include_router(llm_router, prefix="/api")


@app.on_event("shutdown")
async def shutdown_event():
    shutdown_executor()


@app.get("/api/health")
async def health():
    """Detailed health check endpoint."""
    provider = get_current_provider_info()
    return {
        "status": "ok",
        "version": settings.app_version,
        "llm_provider": provider["current_provider"],
        "llm_model": provider["current_model"],
        "embedding_model": settings.embedding_model,
        "similarity_strategy": settings.similarity_strategy,
        "openai_configured": bool(settings.openai_api_key),
        "firecrawl_configured": bool(settings.firecrawl_api_key),
    }
