"""Exceptions raised by the OneKP Manager."""

from typing import Optional


class OneKpError(Exception):
    """Base class for all OneKP Manager errors."""


class ParseError(OneKpError):
    """The catalog table is malformed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class InvalidKeyError(OneKpError, ValueError):
    """A filter or show key does not name a record field."""

    def __init__(self, key: str, valid_keys):
        super().__init__(
            f"Invalid key {key!r}. Valid keys: {', '.join(valid_keys)}"
        )
        self.key = key


class FetchError(OneKpError):
    """A single URL could not be downloaded."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class NetworkError(FetchError):
    """Transport-level failure (DNS, connection, timeout)."""


class HttpStatusError(FetchError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int, reason: str = ""):
        message = f"HTTP {status_code}"
        if reason:
            message = f"{message} {reason}"
        super().__init__(url, message)
        self.status_code = status_code


class WriteError(FetchError):
    """The downloaded body could not be written to the destination."""
