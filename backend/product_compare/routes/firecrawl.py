"""
Firecrawl passthrough route
POST /api/firecrawl — scrape, crawl or map a website.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from product_compare.core.async_helpers import run_blocking
from product_compare.modules import scraper
from product_compare.modules.scraper import ScrapeError
from product_compare.utils.validators import validate_url

logger = logging.getLogger(__name__)

router = APIRouter()

OPERATIONS = ("scrape", "crawl", "crawl-async", "crawl-status", "crawl-cancel", "map")


class FirecrawlRequest(BaseModel):
    url: Optional[str] = None
    operation: str = "scrape"
    crawl_id: Optional[str] = None
    options: Dict[str, Any] = {}


@router.post("/firecrawl")
async def firecrawl_endpoint(req: FirecrawlRequest):
    if req.operation not in OPERATIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid operation. Use one of: {', '.join(OPERATIONS)}.",
        )

    try:
        if req.operation in ("crawl-status", "crawl-cancel"):
            if not req.crawl_id:
                raise HTTPException(status_code=400, detail="crawl_id is required")
            if req.operation == "crawl-status":
                return await run_blocking(scraper.check_crawl_status, req.crawl_id)
            return await run_blocking(scraper.cancel_crawl, req.crawl_id)

        if not req.url:
            raise HTTPException(status_code=400, detail="URL is required")
        try:
            url = validate_url(req.url)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if req.operation == "scrape":
            return await run_blocking(scraper.scrape_url, url, options=req.options)
        if req.operation == "crawl":
            return await run_blocking(scraper.crawl_website, url, options=req.options)
        if req.operation == "crawl-async":
            return await run_blocking(scraper.start_async_crawl, url, options=req.options)
        return await run_blocking(scraper.map_website, url, options=req.options)

    except ScrapeError as e:
        logger.error("Firecrawl %s failed: %s", req.operation, e)
        raise HTTPException(status_code=502, detail=str(e))
