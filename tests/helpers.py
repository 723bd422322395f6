"""Sample payloads and Playwright stand-ins shared by the tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, Mock

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
LISTING_URL = "https://www.boats.com/power-boats/2019-sea-ray-sundancer-320/12345/some-boat-name"


def make_fake_browser(page):
    """Return a stand-in for launch_browser that yields a context serving ``page``."""
    context = Mock()
    context.new_page = AsyncMock(return_value=page)
    launches = []

    @asynccontextmanager
    async def fake_launch(profile):
        launches.append(profile)
        yield context

    fake_launch.launches = launches
    return fake_launch
