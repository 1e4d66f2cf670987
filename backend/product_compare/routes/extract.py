import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from product_compare.core.async_helpers import run_blocking
from product_compare.modules.product_extractor import ExtractionError, extract_product_info
from product_compare.modules.scraper import ScrapeError, scrape_markdown
from product_compare.utils.validators import validate_url

logger = logging.getLogger(__name__)

router = APIRouter()


class ExtractRequest(BaseModel):
    markdown: Optional[str] = None
    url: Optional[str] = None


@router.post("/extract-product")
async def extract_product(req: ExtractRequest):
    """Extract product info from a URL (scraped with Firecrawl) or from raw markdown."""
    if not req.url and not (req.markdown and req.markdown.strip()):
        raise HTTPException(status_code=400, detail="Either 'markdown' or 'url' must be provided")

    url = None
    if req.url:
        try:
            url = validate_url(req.url)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        try:
            markdown = await run_blocking(scrape_markdown, url)
        except ScrapeError as e:
            logger.error("Scraping %s failed: %s", url, e)
            raise HTTPException(status_code=502, detail=str(e))
    else:
        markdown = req.markdown

    try:
        product = await extract_product_info(markdown)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=str(e))

    payload = {
        "success": True,
        "data": product.model_dump(by_alias=True, exclude_none=True),
        "source": "url" if url else "markdown",
    }
    if url:
        payload["url"] = url
        payload["rawMarkdown"] = markdown
    return payload
