# ABOUTME: Pydantic models for OPML documents: Document, Head, Body and Outline.
# ABOUTME: Each model declares its XML tag and ordered attribute/child bindings.

from typing import ClassVar, Self

from pydantic import BaseModel, Field

from opml_doc.services.binding import Attr, Binding, Child, Children, TextChild

DEFAULT_VERSION = "2.0"


class Head(BaseModel):
    """Document metadata. Every field is optional and None means "not in the source"."""

    xml_tag: ClassVar[str] = "head"
    xml_bindings: ClassVar[tuple[Binding, ...]] = (
        TextChild("title", "title"),
        TextChild("date_created", "dateCreated"),
        TextChild("date_modified", "dateModified"),
        TextChild("owner_name", "ownerName"),
        TextChild("owner_email", "ownerEmail"),
        TextChild("owner_id", "ownerId"),
        TextChild("docs", "docs"),
        TextChild("expansion_state", "expansionState"),
        TextChild("vert_scroll_state", "vertScrollState", int),
        TextChild("window_top", "windowTop", int),
        TextChild("window_left", "windowLeft", int),
        TextChild("window_bottom", "windowBottom", int),
        TextChild("window_right", "windowRight", int),
    )

    title: str | None = None
    # RFC 822 date-times, kept as opaque strings
    date_created: str | None = None
    date_modified: str | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_id: str | None = None
    docs: str | None = None
    # Comma-separated line numbers of expanded headlines
    expansion_state: str | None = None
    vert_scroll_state: int | None = None
    window_top: int | None = None
    window_left: int | None = None
    window_bottom: int | None = None
    window_right: int | None = None


class Outline(BaseModel):
    """A node of the outline tree: a feed, a folder, or arbitrary content."""

    xml_tag: ClassVar[str] = "outline"
    xml_bindings: ClassVar[tuple[Binding, ...]] = (
        # OPML 1.0 documents may omit text
        Attr("text", "text", default=""),
        Attr("type", "type"),
        Attr("is_comment", "isComment", bool),
        Attr("is_breakpoint", "isBreakpoint", bool),
        Attr("created", "created"),
        Attr("category", "category"),
        Attr("xml_url", "xmlUrl"),
        Attr("description", "description"),
        Attr("html_url", "htmlUrl"),
        Attr("language", "language"),
        Attr("title", "title"),
        Attr("version", "version"),
        Attr("url", "url"),
        Children("outlines", "outline"),
    )

    text: str = ""
    type: str | None = None
    is_comment: bool | None = None
    is_breakpoint: bool | None = None
    created: str | None = None
    category: str | None = None
    xml_url: str | None = None
    description: str | None = None
    html_url: str | None = None
    language: str | None = None
    title: str | None = None
    version: str | None = None
    url: str | None = None
    outlines: list["Outline"] = Field(default_factory=list)

    def add_feed(self, text: str, url: str) -> Self:
        """Append a child feed outline and return self for chaining."""
        self.outlines.append(Outline(text=text, xml_url=url))
        return self


class Body(BaseModel):
    """Container of the top-level outlines."""

    xml_tag: ClassVar[str] = "body"
    xml_bindings: ClassVar[tuple[Binding, ...]] = (Children("outlines", "outline", Outline),)

    outlines: list[Outline] = Field(default_factory=list)


class Document(BaseModel):
    """An OPML document.

    A fresh Document is version 2.0 with an empty head and an empty body.
    Construction never validates; `parse` is where the version and
    non-empty body rules are enforced.
    """

    xml_tag: ClassVar[str] = "opml"
    xml_bindings: ClassVar[tuple[Binding, ...]] = (
        Attr("version", "version", required=True),
        Child("head", "head", Head),
        Child("body", "body", Body, required=True),
    )

    version: str = DEFAULT_VERSION
    head: Head | None = Field(default_factory=Head)
    body: Body = Field(default_factory=Body)

    def add_feed(self, text: str, url: str) -> Self:
        """Append a top-level feed outline and return self for chaining."""
        self.body.outlines.append(Outline(text=text, xml_url=url))
        return self
