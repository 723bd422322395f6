"""Two-tier orchestration: direct fetch first, browser rendering as fallback."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional
from urllib.parse import urlparse

from .browser import capture_screenshot, render_listing_image
from .config import FetchConfig
from .images import fetch_direct
from .models import ErrorKind, FetchOutcome, ImageRequest

logger = logging.getLogger("boat_image")


def validate_request(request: ImageRequest, config: FetchConfig) -> Optional[str]:
    """Return an error message when the request URL is not on the target domain."""
    url = request.source_url
    if not url or not isinstance(url, str):
        return "Missing or invalid \"url\""
    try:
        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
    except ValueError:
        return "Missing or invalid \"url\""
    domain = config.target_domain
    if parsed.scheme not in ("http", "https") or not (
        hostname == domain or hostname.endswith("." + domain)
    ):
        return f"Missing or invalid \"url\" (must be {domain})"
    return None


async def _render(request: ImageRequest, config: FetchConfig) -> FetchOutcome:
    if config.screenshot_mode:
        return await capture_screenshot(request.source_url, config)
    return await render_listing_image(request.source_url, config)


async def acquire_image(
    request: ImageRequest, config: Optional[FetchConfig] = None
) -> FetchOutcome:
    """Return the best available image for a listing URL; never raises."""
    config = config or FetchConfig()
    problem = validate_request(request, config)
    if problem:
        return FetchOutcome.failed(ErrorKind.INVALID_REQUEST, problem)

    start = time.perf_counter()
    try:
        outcome = await asyncio.to_thread(fetch_direct, request.source_url, config)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected error fetching %s", request.source_url)
        outcome = FetchOutcome.failed(ErrorKind.HTTP_ERROR, str(exc) or repr(exc))
    if outcome.success:
        logger.info(
            "Direct fetch of %s succeeded (%d bytes, %.2fs)",
            request.source_url,
            outcome.size,
            time.perf_counter() - start,
        )
        return outcome
    if not config.enable_rendering_fallback:
        return outcome

    logger.info("Falling back to browser rendering for %s", request.source_url)
    try:
        outcome = await _render(request, config)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected error rendering %s", request.source_url)
        return FetchOutcome.failed(ErrorKind.BROWSER_ERROR, str(exc) or repr(exc))

    if outcome.success:
        logger.info(
            "Rendering fetch of %s succeeded (%d bytes, %.2fs)",
            request.source_url,
            outcome.size,
            time.perf_counter() - start,
        )
    return outcome
