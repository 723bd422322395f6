"""Tests for tier sequencing in the acquisition orchestrator."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from boat_image.acquire import acquire_image, validate_request
from boat_image.config import FetchConfig
from boat_image.models import ErrorKind, FetchOutcome, ImageRequest

from .helpers import JPEG_BYTES, LISTING_URL, PNG_BYTES

DIRECT_OK = FetchOutcome.succeeded(JPEG_BYTES, "image/jpeg")
DIRECT_403 = FetchOutcome.failed(ErrorKind.HTTP_ERROR, "HTTP 403")
RENDER_OK = FetchOutcome.succeeded(PNG_BYTES, "image/png")


class TestValidateRequest:
    @pytest.mark.parametrize(
        "url",
        [
            "",
            "https://example.com/12345/boat",
            "https://boats.com.evil.net/12345/boat",
            "ftp://www.boats.com/12345/boat",
            "www.boats.com/12345/boat",
            "https://[www.boats.com/12345/boat",
        ],
    )
    def test_rejected(self, url, config):
        assert validate_request(ImageRequest(url), config)

    @pytest.mark.parametrize(
        "url",
        [LISTING_URL, "https://boats.com/a/1/b", "https://images.boats.com/resize/1/2.jpg"],
    )
    def test_accepted(self, url, config):
        assert validate_request(ImageRequest(url), config) is None

    def test_non_string(self, config):
        assert validate_request(ImageRequest(12345), config)


class TestAcquireImage:
    """Direct tier first, rendering tier only on direct failure."""

    @pytest.mark.asyncio
    async def test_invalid_request_touches_no_tier(self):
        with patch("boat_image.acquire.fetch_direct") as direct, patch(
            "boat_image.acquire.render_listing_image", new_callable=AsyncMock
        ) as render:
            outcome = await acquire_image(ImageRequest("https://example.com/1/boat"))
        assert outcome.error_kind is ErrorKind.INVALID_REQUEST
        assert "boats.com" in outcome.error
        direct.assert_not_called()
        render.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_direct_success_short_circuits(self, config):
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_OK) as direct, patch(
            "boat_image.acquire.render_listing_image", new_callable=AsyncMock
        ) as render, patch(
            "boat_image.acquire.capture_screenshot", new_callable=AsyncMock
        ) as screenshot:
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert outcome is DIRECT_OK
        direct.assert_called_once_with(LISTING_URL, config)
        assert render.await_count == 0
        assert screenshot.await_count == 0

    @pytest.mark.asyncio
    async def test_falls_back_to_rendering(self, config):
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_403), patch(
            "boat_image.acquire.render_listing_image",
            new_callable=AsyncMock,
            return_value=RENDER_OK,
        ) as render:
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert outcome is RENDER_OK
        render.assert_awaited_once_with(LISTING_URL, config)

    @pytest.mark.asyncio
    async def test_rendering_failure_is_terminal(self, config):
        render_failed = FetchOutcome.failed(ErrorKind.NO_IMAGE_FOUND, "No valid image found on listing")
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_403) as direct, patch(
            "boat_image.acquire.render_listing_image",
            new_callable=AsyncMock,
            return_value=render_failed,
        ) as render:
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert outcome is render_failed
        assert direct.call_count == 1
        assert render.await_count == 1

    @pytest.mark.asyncio
    async def test_fallback_disabled_returns_direct_failure(self):
        config = FetchConfig(enable_rendering_fallback=False)
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_403), patch(
            "boat_image.acquire.render_listing_image", new_callable=AsyncMock
        ) as render:
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert outcome is DIRECT_403
        render.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_screenshot_mode_uses_capture(self):
        config = FetchConfig(screenshot_mode=True)
        shot = FetchOutcome.succeeded(JPEG_BYTES, "image/jpeg")
        image_url = "https://images.boats.com/resize/1/2/3.jpg?w=800"
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_403), patch(
            "boat_image.acquire.render_listing_image", new_callable=AsyncMock
        ) as render, patch(
            "boat_image.acquire.capture_screenshot", new_callable=AsyncMock, return_value=shot
        ) as screenshot:
            outcome = await acquire_image(ImageRequest(image_url), config)

        assert outcome is shot
        screenshot.assert_awaited_once_with(image_url, config)
        render.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_rendering_error_is_captured(self, config):
        with patch("boat_image.acquire.fetch_direct", return_value=DIRECT_403), patch(
            "boat_image.acquire.render_listing_image",
            new_callable=AsyncMock,
            side_effect=OSError("Executable doesn't exist"),
        ):
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert not outcome.success
        assert outcome.error_kind is ErrorKind.BROWSER_ERROR
        assert "Executable" in outcome.error

    @pytest.mark.asyncio
    async def test_unparseable_url_is_invalid_request(self):
        with patch("boat_image.acquire.fetch_direct") as direct:
            outcome = await acquire_image(ImageRequest("https://[www.boats.com/12345/boat"))
        assert not outcome.success
        assert outcome.error_kind is ErrorKind.INVALID_REQUEST
        assert outcome.error == "Missing or invalid \"url\""
        direct.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_direct_error_falls_back(self, config):
        with patch("boat_image.acquire.fetch_direct", side_effect=ValueError("bad header")), patch(
            "boat_image.acquire.render_listing_image",
            new_callable=AsyncMock,
            return_value=RENDER_OK,
        ) as render:
            outcome = await acquire_image(ImageRequest(LISTING_URL), config)

        assert outcome is RENDER_OK
        render.assert_awaited_once_with(LISTING_URL, config)
