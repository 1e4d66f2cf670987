"""
URL validation utilities with SSRF prevention.
"""

import ipaddress
import re
from urllib.parse import urlparse


# Allowed URL schemes
_ALLOWED_SCHEMES = {"http", "https"}

# Regex for basic URL format validation
_URL_PATTERN = re.compile(
    r"^https?://"
    r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|"
    r"localhost|"
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"
    r"(?::\d+)?"
    r"(?:/?|[/?]\S+)$",
    re.IGNORECASE,
)


def _is_blocked_ip(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        # Not an IP literal — a domain name
        return False
    return ip.is_private or ip.is_reserved or ip.is_loopback or ip.is_link_local


def validate_url(url: str, field: str = "URL") -> str:
    """
    Validates a product page URL before it is handed to the scraper.

    Args:
        url: The URL string to validate.
        field: Name used in error messages (e.g. "Source URL").

    Returns:
        The validated URL string (stripped).

    Raises:
        ValueError: If the URL is invalid or points to a private/reserved address.
    """
    if not url or not isinstance(url, str):
        raise ValueError(f"{field} is required and must be a non-empty string.")

    url = url.strip()

    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise ValueError(
            f"{field} must be a valid URL: scheme '{parsed.scheme}' is not allowed, use HTTP or HTTPS."
        )

    hostname = parsed.hostname
    if not hostname:
        raise ValueError(f"{field} must contain a valid hostname.")

    if hostname.lower() == "localhost" or _is_blocked_ip(hostname):
        raise ValueError(f"{field} points to a private or reserved address: {hostname}")

    if not _URL_PATTERN.match(url):
        raise ValueError(f"{field} must be a valid URL: {url}")

    return url
