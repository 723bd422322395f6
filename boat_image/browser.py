"""Headless browser rendering tier: listing render + image fetch, or screenshot capture."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import urlsplit, urlunsplit

from playwright.async_api import (
    BrowserContext,
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import BrowserProfile, FetchConfig
from .images import check_image, infer_content_type
from .listing import build_listing_url, extract_listing_id, resolve_listing_image
from .models import AcquisitionError, ErrorKind, FetchOutcome

logger = logging.getLogger("boat_image")


@asynccontextmanager
async def launch_browser(profile: BrowserProfile) -> AsyncIterator[BrowserContext]:
    """Start an isolated browser with the anti-detection profile applied.

    The browser is closed on every exit path, including timeouts and errors
    raised by the caller while the context is in use.
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=profile.headless, args=list(profile.launch_args)
        )
        try:
            context = await browser.new_context(
                user_agent=profile.user_agent,
                viewport=profile.viewport,
                locale=profile.locale,
            )
            await context.add_init_script(profile.init_script)
            yield context
        finally:
            await browser.close()


async def _new_page(context: BrowserContext, config: FetchConfig) -> Page:
    page = await context.new_page()
    page.set_default_navigation_timeout(config.navigation_timeout * 1000)
    return page


def strip_query(url: str) -> str:
    """Drop the query string and fragment from a URL."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


async def render_listing_image(source_url: str, config: FetchConfig) -> FetchOutcome:
    """Render the canonical listing page and fetch its largest image in-browser."""
    try:
        listing_url = build_listing_url(extract_listing_id(source_url), config)
        async with launch_browser(config.browser) as context:
            page = await _new_page(context, config)
            image_url = await resolve_listing_image(page, listing_url, config)
            logger.info("Fetching listing image %s", image_url)
            response = await page.goto(image_url, wait_until="networkidle")
            if response is None:
                raise AcquisitionError(ErrorKind.HTTP_ERROR, "No response for image")
            if not response.ok:
                raise AcquisitionError(ErrorKind.HTTP_ERROR, f"HTTP {response.status}")
            data = await response.body()
            content_type = response.headers.get("content-type")
    except AcquisitionError as exc:
        logger.warning("Rendering fetch of %s failed: %s", source_url, exc)
        return FetchOutcome.from_error(exc)
    except PlaywrightTimeoutError as exc:
        logger.error("Timeout while rendering %s: %s", source_url, exc)
        return FetchOutcome.failed(ErrorKind.TIMEOUT, f"Navigation timed out: {exc}")
    except PlaywrightError as exc:
        logger.error("Browser error while rendering %s: %s", source_url, exc)
        return FetchOutcome.failed(ErrorKind.BROWSER_ERROR, str(exc))

    try:
        check_image(data, config)
    except AcquisitionError as exc:
        logger.warning("Rendered image from %s rejected: %s", source_url, exc)
        return FetchOutcome.from_error(exc)
    return FetchOutcome.succeeded(data, infer_content_type(data, content_type))


async def capture_screenshot(source_url: str, config: FetchConfig) -> FetchOutcome:
    """Open the image URL directly and capture the rendered page as a JPEG."""
    target = strip_query(source_url)
    try:
        async with launch_browser(config.browser) as context:
            page = await _new_page(context, config)
            logger.info("Capturing screenshot of %s", target)
            await page.goto(target, wait_until="networkidle")
            data = await page.screenshot(
                full_page=True, type="jpeg", quality=config.screenshot_quality
            )
    except PlaywrightTimeoutError as exc:
        logger.error("Timeout while capturing %s: %s", target, exc)
        return FetchOutcome.failed(ErrorKind.TIMEOUT, f"Navigation timed out: {exc}")
    except PlaywrightError as exc:
        logger.error("Browser error while capturing %s: %s", target, exc)
        return FetchOutcome.failed(ErrorKind.BROWSER_ERROR, str(exc))

    try:
        check_image(data, config)
    except AcquisitionError as exc:
        logger.warning("Screenshot of %s rejected: %s", target, exc)
        return FetchOutcome.from_error(exc)
    return FetchOutcome.succeeded(data, "image/jpeg")
