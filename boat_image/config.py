"""Configuration objects and constants for image acquisition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

TARGET_DOMAIN = "boats.com"
LISTING_URL_TEMPLATE = "https://www.boats.com/boats-for-sale/?boat={listing_id}"
MAX_IMAGE_BYTES = 5 * 1024 * 1024

DIRECT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

STEALTH_INIT_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = { runtime: {} };
"""


@dataclass(frozen=True)
class BrowserProfile:
    """Anti-detection settings applied to every browser instance at launch."""

    headless: bool = True
    launch_args: Tuple[str, ...] = (
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-blink-features=AutomationControlled",
    )
    user_agent: str = BROWSER_USER_AGENT
    viewport: Dict[str, int] = field(
        default_factory=lambda: {"width": 1920, "height": 1080}
    )
    locale: str = "en-US"
    init_script: str = STEALTH_INIT_SCRIPT


@dataclass
class FetchConfig:
    """Top-level settings that control both acquisition tiers."""

    target_domain: str = TARGET_DOMAIN
    image_host: str = TARGET_DOMAIN
    listing_url_template: str = LISTING_URL_TEMPLATE
    direct_timeout: float = 20.0
    navigation_timeout: float = 30.0
    max_image_bytes: int = MAX_IMAGE_BYTES
    min_candidate_width: int = 300
    enable_rendering_fallback: bool = True
    screenshot_mode: bool = False
    screenshot_quality: int = 92
    direct_user_agent: str = DIRECT_USER_AGENT
    browser: BrowserProfile = field(default_factory=BrowserProfile)

    @property
    def referer(self) -> str:
        return f"https://www.{self.target_domain}/"
