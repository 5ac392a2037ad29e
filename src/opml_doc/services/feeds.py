# ABOUTME: Outline tree helpers for feed consumers.
# ABOUTME: Pre-order flattening, feed extraction, and JSON projection of documents.

from collections.abc import Callable, Iterable, Iterator

import structlog

from opml_doc.models import Document, Outline

log = structlog.get_logger()


def iter_outlines(outlines: Iterable[Outline]) -> Iterator[Outline]:
    """Yield every outline in pre-order: a parent, then its whole subtree, then the next sibling."""
    # Explicit stack so deeply nested documents don't hit the recursion limit
    stack = list(reversed(list(outlines)))
    while stack:
        outline = stack.pop()
        yield outline
        stack.extend(reversed(outline.outlines))


def flatten_outlines(outlines: Iterable[Outline]) -> list[Outline]:
    """Return every outline of the tree as one pre-order list."""
    return list(iter_outlines(outlines))


def iter_feeds(
    document: Document, on_skip: Callable[[Outline], None] | None = None
) -> Iterator[tuple[str, str]]:
    """Yield (text, xml_url) for every outline with an xmlUrl, at any depth, in pre-order.

    Outlines without an xmlUrl are passed to `on_skip` at their place in the traversal.
    """
    for outline in iter_outlines(document.body.outlines):
        if outline.xml_url is None:
            log.debug("outline_skipped", text=outline.text)
            if on_skip is not None:
                on_skip(outline)
            continue
        yield outline.text, outline.xml_url


def extract_feeds(
    document: Document, on_skip: Callable[[Outline], None] | None = None
) -> list[tuple[str, str]]:
    """Collect every (text, xml_url) feed pair of the document."""
    feeds = list(iter_feeds(document, on_skip))
    log.info("feeds_extracted", count=len(feeds))
    return feeds


def to_json(document: Document, indent: int | None = None) -> str:
    """Project a Document onto JSON, field for field."""
    return document.model_dump_json(indent=indent)


def from_json(content: str | bytes) -> Document:
    """Rebuild a Document from its JSON projection."""
    return Document.model_validate_json(content)
