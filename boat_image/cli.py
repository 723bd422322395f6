"""Command-line entry point for fetching a boat listing image."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .acquire import acquire_image
from .config import FetchConfig
from .listing import extract_listing_slug
from .models import ErrorKind, ImageRequest
from .payload import build_response
from .utils import image_filename

logger = logging.getLogger("boat_image.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch the representative image for a boats.com listing.",
    )
    parser.add_argument("url", help="Listing or image URL on the target domain")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write the image to (default: <listing-slug>.<ext>)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the JSON response body to STDOUT instead of writing a file",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Only try the direct HTTP fetch",
    )
    parser.add_argument(
        "--screenshot",
        action="store_true",
        help="Fall back to a JPEG screenshot of the URL instead of rendering the listing",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Browser navigation timeout in seconds",
    )
    parser.add_argument(
        "--direct-timeout",
        type=float,
        default=20.0,
        help="Timeout for the direct HTTP fetch in seconds",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.json and not args.verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = FetchConfig(
        direct_timeout=args.direct_timeout,
        navigation_timeout=args.timeout,
        enable_rendering_fallback=not args.no_fallback,
        screenshot_mode=args.screenshot,
    )

    start = time.perf_counter()
    outcome = asyncio.run(acquire_image(ImageRequest(args.url), config))
    logger.debug("Acquisition finished in %.2fs", time.perf_counter() - start)

    if args.json:
        _, body = build_response(outcome)
        sys.stdout.write(json.dumps(body) + "\n")
        sys.stdout.flush()

    if not outcome.success:
        logger.error("Failed to fetch image for %s: %s", args.url, outcome.error)
        if outcome.error_kind is ErrorKind.INVALID_REQUEST:
            return EXIT_INVALID
        return EXIT_FAILED

    if not args.json:
        output: Optional[Path] = args.output
        if output is None:
            output = Path(image_filename(extract_listing_slug(args.url), outcome.content_type))
        try:
            output.write_bytes(outcome.data)
        except OSError as exc:
            logger.error("Failed to write image %s: %s", output, exc)
            return EXIT_FAILED
        logger.info("Saved %d bytes (%s) to %s", outcome.size, outcome.content_type, output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
