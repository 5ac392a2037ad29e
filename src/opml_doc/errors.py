# ABOUTME: Exception hierarchy for OPML parsing and serialization.
# ABOUTME: Covers malformed XML, unsupported versions, empty bodies, and I/O failures.


class OPMLError(Exception):
    """Base exception for OPML document errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MalformedInputError(OPMLError):
    """Input is not well-formed XML or does not fit the OPML element layout."""


class UnsupportedVersionError(OPMLError):
    """The opml version attribute is not one of the supported versions."""

    def __init__(self, version: str):
        super().__init__(f"Unsupported OPML version: {version!r}")
        self.version = version


class BodyHasNoOutlinesError(OPMLError):
    """The body element contains no outline elements."""

    def __init__(self):
        super().__init__("OPML body has no <outline> elements")


class IoFailureError(OPMLError):
    """Reading from or writing to a stream or file failed."""
