"""
HTML page fetching with browser headers.

The podcast site rejects obvious bot traffic, so requests carry the
headers of a desktop browser.
"""

import logging

import requests

from podbrief.errors import UpstreamFetchError


logger = logging.getLogger("ingestion")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
}


def fetch_page(url: str, timeout: int = 30) -> str:
    """
    Download an HTML page.

    Args:
        url: Page URL
        timeout: Request timeout in seconds

    Returns:
        The decoded response body

    Raises:
        UpstreamFetchError: On transport errors or a non-success status
    """
    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamFetchError(f"Failed to fetch {url}: {e}") from e

    if not response.ok:
        raise UpstreamFetchError(
            f"Failed to fetch {url}: {response.status_code}",
            status=response.status_code,
        )

    # Pages are UTF-8 but do not always say so in Content-Type
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = "utf-8"
    return response.text
