"""MCP server exposing the listing image fetch as a tool."""

from __future__ import annotations

import logging
from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from .acquire import acquire_image
from .config import FetchConfig
from .payload import build_response, parse_request

logger = logging.getLogger("boat_image.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="boat-image")


@mcp.tool()
async def fetch_listing_image(url: str) -> Dict[str, Any]:
    """Fetch a boats.com listing image and return it as a base64 data URL."""
    outcome = await acquire_image(parse_request({"url": url}), FetchConfig())
    _, body = build_response(outcome)
    return body


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
