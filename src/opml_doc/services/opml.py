# ABOUTME: OPML parse, validate and serialize entry points.
# ABOUTME: Binds XML to Document models and enforces the version and non-empty body rules.

import io
import re
from pathlib import Path
from typing import IO

import structlog

from opml_doc.config import get_settings
from opml_doc.errors import BodyHasNoOutlinesError, IoFailureError, UnsupportedVersionError
from opml_doc.models import Document
from opml_doc.services.binding import fromstring, read_record, tostring, write_record

log = structlog.get_logger()

VERSION_PATTERN = re.compile(r"^\d+\.\d+$")
SUPPORTED_VERSIONS = frozenset({"1.0", "1.1", "2.0"})


def _is_text_stream(stream: IO) -> bool:
    """Whether `stream` takes str; binary files, temp files and unknown writers take bytes."""
    if isinstance(stream, io.TextIOBase):
        return True
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return False
    mode = getattr(stream, "mode", None)
    return isinstance(mode, str) and "b" not in mode


def validate(document: Document) -> Document:
    """Check the version whitelist and that the body has at least one outline."""
    version = document.version
    if not VERSION_PATTERN.match(version) or version not in SUPPORTED_VERSIONS:
        log.error("opml_unsupported_version", version=version)
        raise UnsupportedVersionError(version)

    if not document.body.outlines:
        log.error("opml_body_empty")
        raise BodyHasNoOutlinesError()

    return document


def parse(content: str | bytes) -> Document:
    """Parse an OPML document from XML text.

    Raises MalformedInputError, UnsupportedVersionError or BodyHasNoOutlinesError.
    """
    document = read_record(Document, fromstring(content))
    validate(document)
    log.debug("opml_parsed", version=document.version, outlines=len(document.body.outlines))
    return document


def parse_from_stream(stream: IO) -> Document:
    """Read a text or binary stream to completion and parse it."""
    try:
        content = stream.read()
    except (OSError, UnicodeDecodeError) as e:
        log.error("opml_read_error", error=str(e))
        raise IoFailureError(f"Failed to read OPML stream: {e}") from e
    return parse(content)


def parse_file(path: str | Path) -> Document:
    """Parse an OPML file from disk."""
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        log.error("opml_read_error", path=str(path), error=str(e))
        raise IoFailureError(f"Failed to read OPML file {path}: {e}") from e
    log.info("opml_file_read", path=str(path), size=len(content))
    return parse(content)


def serialize(document: Document, xml_declaration: bool | None = None) -> str:
    """Render a Document as XML text. No validation is performed."""
    if xml_declaration is None:
        xml_declaration = get_settings().xml_declaration
    return tostring(write_record(document), xml_declaration=xml_declaration)


def serialize_to_stream(
    document: Document, stream: IO, xml_declaration: bool | None = None
) -> None:
    """Serialize a Document and write it to a text or binary stream."""
    xml = serialize(document, xml_declaration=xml_declaration)
    try:
        if _is_text_stream(stream):
            stream.write(xml)
        else:
            stream.write(xml.encode("utf-8"))
    except OSError as e:
        log.error("opml_write_error", error=str(e))
        raise IoFailureError(f"Failed to write OPML stream: {e}") from e


def write_file(document: Document, path: str | Path, xml_declaration: bool | None = None) -> None:
    """Serialize a Document to a file on disk."""
    path = Path(path)
    xml = serialize(document, xml_declaration=xml_declaration)
    try:
        path.write_bytes(xml.encode("utf-8"))
    except OSError as e:
        log.error("opml_write_error", path=str(path), error=str(e))
        raise IoFailureError(f"Failed to write OPML file {path}: {e}") from e
    log.info("opml_file_written", path=str(path), size=len(xml))
