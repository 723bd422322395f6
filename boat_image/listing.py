"""Listing URL parsing and largest-image discovery on rendered listing pages."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List
from urllib.parse import urlparse

from playwright.async_api import Page

from .config import FetchConfig
from .models import AcquisitionError, CandidateImage, ErrorKind

logger = logging.getLogger("boat_image")

LISTING_PATH_PATTERN = re.compile(r"/(\d+)/([^/]+)$")

# Only images that have finished loading report a usable natural size.
_SCAN_IMAGES_JS = """
() => Array.from(document.querySelectorAll('img'))
    .filter((img) => img.complete && img.naturalWidth > 0)
    .map((img) => ({
        url: img.currentSrc || img.src,
        width: img.naturalWidth,
        height: img.naturalHeight,
    }))
"""


def _listing_path(url: str) -> str:
    return urlparse(url).path.rstrip("/")


def extract_listing_id(url: str) -> str:
    """Return the numeric listing id from a `/<digits>/<slug>` URL path."""
    match = LISTING_PATH_PATTERN.search(_listing_path(url))
    if not match:
        raise AcquisitionError(
            ErrorKind.MALFORMED_URL, f"Invalid {url!r}: no listing id in URL path"
        )
    return match.group(1)


def extract_listing_slug(url: str) -> str:
    match = LISTING_PATH_PATTERN.search(_listing_path(url))
    return match.group(2) if match else ""


def build_listing_url(listing_id: str, config: FetchConfig) -> str:
    return config.listing_url_template.format(listing_id=listing_id)


def _on_image_host(url: str, host: str) -> bool:
    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False
    return hostname == host or hostname.endswith("." + host)


def qualifying_candidates(
    candidates: Iterable[CandidateImage], config: FetchConfig
) -> List[CandidateImage]:
    """Drop icons, thumbnails and off-host images."""
    return [
        candidate
        for candidate in candidates
        if candidate.width > config.min_candidate_width
        and _on_image_host(candidate.url, config.image_host)
    ]


def select_largest_candidate(candidates: Iterable[CandidateImage]) -> CandidateImage:
    """Pick the candidate with the largest pixel area; ties keep page order."""
    ranked = sorted(candidates, key=lambda candidate: candidate.area, reverse=True)
    if not ranked:
        raise AcquisitionError(ErrorKind.NO_IMAGE_FOUND, "No valid image found on listing")
    return ranked[0]


async def scan_candidates(page: Page) -> List[CandidateImage]:
    """Collect loaded image elements from the rendered page."""
    raw = await page.evaluate(_SCAN_IMAGES_JS)
    return [
        CandidateImage(url=item["url"], width=int(item["width"]), height=int(item["height"]))
        for item in raw
        if item.get("url")
    ]


async def resolve_listing_image(page: Page, listing_url: str, config: FetchConfig) -> str:
    """Render the listing page and return the URL of its largest qualifying image."""
    logger.info("Loading listing %s", listing_url)
    await page.goto(listing_url, wait_until="networkidle")
    candidates = qualifying_candidates(await scan_candidates(page), config)
    logger.debug("Found %d qualifying images on %s", len(candidates), listing_url)
    return select_largest_candidate(candidates).url
