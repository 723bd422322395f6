"""Data models shared by every acquisition stage."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class ErrorKind(str, enum.Enum):
    INVALID_REQUEST = "InvalidRequest"
    MALFORMED_URL = "MalformedUrl"
    NO_IMAGE_FOUND = "NoImageFound"
    HTTP_ERROR = "HttpError"
    TOO_LARGE = "TooLarge"
    INVALID_FORMAT = "InvalidFormat"
    TIMEOUT = "Timeout"
    BROWSER_ERROR = "BrowserError"


class AcquisitionError(Exception):
    """Failure raised inside a stage and converted to an outcome at its boundary."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class ImageSignature:
    """Leading bytes identifying an image container format."""

    format: str
    magic: bytes


@dataclass(frozen=True)
class ImageRequest:
    source_url: str


@dataclass(frozen=True)
class CandidateImage:
    """Loaded image element found on a rendered listing page."""

    url: str
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class FetchOutcome:
    """Uniform success/failure result returned by every stage."""

    success: bool
    data: Optional[bytes] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def succeeded(cls, data: bytes, content_type: str) -> "FetchOutcome":
        return cls(success=True, data=data, content_type=content_type, size=len(data))

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "FetchOutcome":
        return cls(success=False, error=message, error_kind=kind)

    @classmethod
    def from_error(cls, exc: AcquisitionError) -> "FetchOutcome":
        return cls.failed(exc.kind, str(exc))
