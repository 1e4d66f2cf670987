"""
Firecrawl client.
Scrapes product pages to markdown via the Firecrawl REST API (scrape, crawl, map).
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from product_compare.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ["markdown"]


class ScrapeError(Exception):
    """Firecrawl could not produce content for a URL."""


def _headers() -> Dict[str, str]:
    api_key = get_settings().firecrawl_api_key
    if not api_key:
        raise ScrapeError(
            "Firecrawl API key is required. Set the FIRECRAWL_API_KEY environment variable."
        )
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _endpoint(path: str) -> str:
    return get_settings().firecrawl_base_url.rstrip("/") + path


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
        return str(body.get("error") or body)[:200]
    except ValueError:
        return response.text[:200]


def _request(method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Call Firecrawl with retry on timeouts. Returns the decoded JSON body."""
    settings = get_settings()
    headers = _headers()
    url = _endpoint(path)
    max_retries = settings.scraper_max_retries

    last_error = None
    for attempt in range(max_retries + 1):
        try:
            response = requests.request(
                method, url, headers=headers, json=payload, timeout=settings.scraper_timeout
            )
            if response.status_code >= 400:
                raise ScrapeError(
                    f"Firecrawl {method} {path} failed with HTTP {response.status_code}: "
                    f"{_error_message(response)}"
                )
            body = response.json()
            if body.get("success") is False:
                raise ScrapeError(f"Firecrawl {method} {path} failed: {body.get('error', 'unknown error')}")
            return body

        except requests.exceptions.Timeout as e:
            last_error = e
            logger.warning(
                "Timeout calling Firecrawl %s %s (attempt %d/%d)", method, path, attempt + 1, max_retries + 1
            )
        except requests.exceptions.ConnectionError as e:
            last_error = e
            logger.warning("Connection error calling Firecrawl %s: %s", path, e)
            break  # Don't retry connection errors
        except ValueError as e:
            # JSON decoding errors
            last_error = e
            logger.error("Malformed Firecrawl response for %s: %s", path, e)
            break

    raise ScrapeError(f"Unable to reach Firecrawl: {str(last_error)[:200]}")


def scrape_url(
    url: str, formats: Optional[List[str]] = None, options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Scrape a single URL.
    Extra Firecrawl options are merged into the request body; they never replace the url.

    Returns:
        The Firecrawl document (markdown, metadata, ... depending on formats)
    """
    payload = {"formats": formats or DEFAULT_FORMATS, **(options or {}), "url": url}
    logger.info("Scraping %s (formats=%s)", url, payload["formats"])
    body = _request("POST", "/scrape", payload)
    return body.get("data") or {}


def scrape_markdown(url: str) -> str:
    """Scrape a URL and return its markdown; raises ScrapeError if there is none."""
    document = scrape_url(url, formats=["markdown"])
    markdown = document.get("markdown") or ""
    if not markdown.strip():
        raise ScrapeError(f"Failed to extract markdown from {url}")
    return markdown


def start_async_crawl(url: str, limit: int = 100, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Start a crawl job and return immediately with its id."""
    payload = {
        "limit": limit,
        "scrapeOptions": {"formats": DEFAULT_FORMATS},
        **(options or {}),
        "url": url,
    }
    body = _request("POST", "/crawl", payload)
    logger.info("Started crawl %s for %s", body.get("id"), url)
    return body


def check_crawl_status(crawl_id: str) -> Dict[str, Any]:
    return _request("GET", f"/crawl/{crawl_id}")


def cancel_crawl(crawl_id: str) -> Dict[str, Any]:
    logger.info("Cancelling crawl %s", crawl_id)
    return _request("DELETE", f"/crawl/{crawl_id}")


def crawl_website(url: str, limit: int = 100, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Crawl a website and wait for the job to finish.

    Polls the crawl status until it is completed or failed, bounded by
    FIRECRAWL_CRAWL_TIMEOUT seconds.
    """
    settings = get_settings()
    job = start_async_crawl(url, limit=limit, options=options)
    crawl_id = job.get("id")
    if not crawl_id:
        raise ScrapeError(f"Firecrawl did not return a crawl id for {url}")

    deadline = time.monotonic() + settings.firecrawl_crawl_timeout
    while True:
        status = check_crawl_status(crawl_id)
        state = status.get("status")
        if state == "completed":
            logger.info("Crawl %s completed: %s pages", crawl_id, status.get("completed"))
            return status
        if state in ("failed", "cancelled"):
            raise ScrapeError(f"Crawl {crawl_id} {state}: {status.get('error', 'no details')}")
        if time.monotonic() >= deadline:
            raise ScrapeError(f"Crawl {crawl_id} did not finish within {settings.firecrawl_crawl_timeout}s")
        time.sleep(settings.firecrawl_poll_interval)


def map_website(url: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """List the URLs of a website."""
    return _request("POST", "/map", {**(options or {}), "url": url})
