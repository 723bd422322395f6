"""Image signature validation and the direct HTTP fetch tier."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import requests
from filetype import guess

from .config import FetchConfig
from .models import AcquisitionError, ErrorKind, FetchOutcome, ImageSignature

logger = logging.getLogger("boat_image")

MIN_SIGNATURE_BYTES = 8
DEFAULT_CONTENT_TYPE = "image/jpeg"
READ_CHUNK_BYTES = 64 * 1024

# RIFF only proves a RIFF container, not WEBP specifically.
IMAGE_SIGNATURES: Tuple[ImageSignature, ...] = (
    ImageSignature("png", b"\x89PNG\r\n\x1a\n"),
    ImageSignature("jpeg", b"\xff\xd8\xff"),
    ImageSignature("gif", b"GIF"),
    ImageSignature("webp", b"RIFF"),
)


def detect_signature(data: bytes) -> Optional[ImageSignature]:
    """Return the signature matching the leading bytes, if any."""
    if len(data) < MIN_SIGNATURE_BYTES:
        return None
    for signature in IMAGE_SIGNATURES:
        if data.startswith(signature.magic):
            return signature
    return None


def is_valid_image(data: bytes) -> bool:
    return detect_signature(data) is not None


def infer_content_type(data: bytes, header: Optional[str] = None) -> str:
    """Guess an image MIME type from the file signature or HTTP metadata."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        return kind.mime
    if header:
        mime = header.split(";")[0].strip().lower()
        if mime.startswith("image/"):
            return mime
    return DEFAULT_CONTENT_TYPE


def check_image(data: bytes, config: FetchConfig) -> None:
    """Raise unless the body is a non-empty known image under the size ceiling."""
    if len(data) > config.max_image_bytes:
        raise AcquisitionError(
            ErrorKind.TOO_LARGE,
            f"Image too large (exceeds {config.max_image_bytes} bytes)",
        )
    if not is_valid_image(data):
        raise AcquisitionError(ErrorKind.INVALID_FORMAT, "Invalid image format")


def _read_capped(resp: requests.Response, limit: int) -> bytes:
    """Read at most ``limit + 1`` bytes so oversized bodies are never buffered whole."""
    buffer = bytearray()
    for chunk in resp.iter_content(chunk_size=READ_CHUNK_BYTES):
        buffer.extend(chunk)
        if len(buffer) > limit:
            break
    return bytes(buffer[: limit + 1])


def fetch_direct(url: str, config: FetchConfig) -> FetchOutcome:
    """Fetch the URL once with browser-like headers and validate the body."""
    headers = {
        "User-Agent": config.direct_user_agent,
        "Referer": config.referer,
    }
    try:
        resp = requests.get(
            url, headers=headers, timeout=config.direct_timeout, stream=True
        )
    except requests.Timeout as exc:
        logger.warning("Direct fetch of %s timed out: %s", url, exc)
        return FetchOutcome.failed(ErrorKind.TIMEOUT, f"Direct fetch timed out: {exc}")
    except requests.RequestException as exc:
        logger.warning("Direct fetch of %s failed: %s", url, exc)
        return FetchOutcome.failed(ErrorKind.HTTP_ERROR, str(exc))

    try:
        if not 200 <= resp.status_code < 300:
            logger.warning("Direct fetch of %s returned HTTP %s", url, resp.status_code)
            return FetchOutcome.failed(ErrorKind.HTTP_ERROR, f"HTTP {resp.status_code}")
        data = _read_capped(resp, config.max_image_bytes)
    except requests.Timeout as exc:
        logger.warning("Direct fetch of %s timed out reading body: %s", url, exc)
        return FetchOutcome.failed(ErrorKind.TIMEOUT, f"Direct fetch timed out: {exc}")
    except requests.RequestException as exc:
        logger.warning("Direct fetch of %s failed reading body: %s", url, exc)
        return FetchOutcome.failed(ErrorKind.HTTP_ERROR, str(exc))
    finally:
        resp.close()

    try:
        check_image(data, config)
    except AcquisitionError as exc:
        logger.warning("Direct fetch of %s rejected: %s", url, exc)
        return FetchOutcome.from_error(exc)

    content_type = infer_content_type(data, resp.headers.get("Content-Type"))
    return FetchOutcome.succeeded(data, content_type)
