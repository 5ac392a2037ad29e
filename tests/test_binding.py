# ABOUTME: Tests for the generic XML binding layer.
# ABOUTME: Verifies attribute/child extraction rules and declared-order emission.

from xml.etree import ElementTree

import pytest

from opml_doc.errors import MalformedInputError
from opml_doc.models import Body, Document, Head, Outline
from opml_doc.services.binding import fromstring, read_record, tostring, write_record


def test_fromstring_rejects_malformed_xml():
    """Non-XML input raises MalformedInputError."""
    with pytest.raises(MalformedInputError):
        fromstring("{not xml")


def test_missing_text_attribute_defaults_to_empty():
    """An outline without text gets the empty string, not None."""
    outline = read_record(Outline, fromstring("<outline/>"))
    assert outline.text == ""
    assert outline.title is None


def test_empty_attribute_is_present():
    """An attribute with an empty value is present, not absent."""
    outline = read_record(Outline, fromstring('<outline text="x" title=""/>'))
    assert outline.title == ""


def test_boolean_attributes():
    """Boolean attributes accept only the lowercase literals."""
    outline = read_record(Outline, fromstring('<outline isComment="true" isBreakpoint="false"/>'))
    assert outline.is_comment is True
    assert outline.is_breakpoint is False


@pytest.mark.parametrize("value", ["True", "1", "yes", ""])
def test_boolean_attribute_rejects_other_values(value):
    """Anything but "true"/"false" in a boolean attribute is malformed."""
    with pytest.raises(MalformedInputError):
        read_record(Outline, fromstring(f'<outline isComment="{value}"/>'))


def test_integer_text_child():
    """Integer head fields are parsed from element text."""
    head = read_record(Head, fromstring("<head><windowTop> 12 </windowTop></head>"))
    assert head.window_top == 12


@pytest.mark.parametrize("text", ["-5", "+7", "2147483647", "-2147483648"])
def test_integer_text_child_accepts_32_bit_range(text):
    """Signed ASCII integers within 32 bits are accepted."""
    head = read_record(Head, fromstring(f"<head><windowLeft>{text}</windowLeft></head>"))
    assert head.window_left == int(text)


@pytest.mark.parametrize("text", ["1_000", "99999999999", "2147483648", "\u0661\u0662", "1.5", ""])
def test_integer_text_child_rejects_non_integers(text):
    """Underscores, out-of-range values, non-ASCII digits and decimals are malformed."""
    with pytest.raises(MalformedInputError):
        read_record(Head, fromstring(f"<head><windowLeft>{text}</windowLeft></head>"))


def test_integer_text_child_rejects_text():
    """Non-numeric text in an integer field is malformed."""
    with pytest.raises(MalformedInputError):
        read_record(Head, fromstring("<head><windowTop>top</windowTop></head>"))


def test_empty_vs_absent_text_child():
    """An empty element is "" while a missing element is None."""
    head = read_record(Head, fromstring("<head><docs></docs><title/></head>"))
    assert head.docs == ""
    assert head.title == ""
    assert head.owner_name is None


def test_repeated_children_keep_document_order():
    """Repeated children are collected in document order, ignoring whitespace."""
    body = read_record(
        Body,
        fromstring(
            "<body>\n"
            '  <outline text="a"/>\n  <outline text="b"/>\n  <outline text="c"/>\n'
            "</body>"
        ),
    )
    assert [o.text for o in body.outlines] == ["a", "b", "c"]


def test_no_children_is_empty_list():
    """Zero matching children yields an empty list, never None."""
    assert read_record(Body, fromstring("<body/>")).outlines == []


def test_unknown_attributes_and_elements_ignored():
    """Extension attributes and elements are skipped silently."""
    xml = '<outline text="a" custom="x"><note>hi</note><outline text="b"/></outline>'
    outline = read_record(Outline, fromstring(xml))
    assert outline.text == "a"
    assert [o.text for o in outline.outlines] == ["b"]


def test_first_singular_child_wins():
    """With duplicate singular children the first one is used."""
    head = read_record(Head, fromstring("<head><title>one</title><title>two</title></head>"))
    assert head.title == "one"


def test_wrong_root_tag():
    """A record bound to the wrong element is malformed."""
    with pytest.raises(MalformedInputError):
        read_record(Document, fromstring('<rss version="2.0"/>'))


def test_missing_required_attribute():
    """The opml version attribute is required."""
    with pytest.raises(MalformedInputError):
        read_record(Document, fromstring("<opml><body/></opml>"))


def test_missing_required_child():
    """The body element is required."""
    with pytest.raises(MalformedInputError):
        read_record(Document, fromstring('<opml version="2.0"><head/></opml>'))


def test_absent_head_is_none():
    """A document without a head element has head None."""
    document = read_record(Document, fromstring('<opml version="2.0"><body/></opml>'))
    assert document.head is None


def test_attributes_emitted_in_declared_order():
    """Attributes follow the binding table, not the caller's keyword order."""
    outline = Outline(url="u", xml_url="x", text="t", is_comment=False, type="rss")
    element = write_record(outline)
    assert list(element.attrib) == ["text", "type", "isComment", "xmlUrl", "url"]
    assert element.get("isComment") == "false"


def test_absent_fields_are_omitted():
    """None fields produce no attribute or element."""
    element = write_record(Head(title="T", window_top=0))
    assert [child.tag for child in element] == ["title", "windowTop"]
    assert element.find("windowTop").text == "0"


def test_tostring_escapes_attribute_values():
    """Special characters in attributes are escaped."""
    xml = tostring(write_record(Outline(text='A & "B" <C>')))
    parsed = ElementTree.fromstring(xml)
    assert parsed.get("text") == 'A & "B" <C>'
    assert "&amp;" in xml


def test_tostring_declaration():
    """The XML declaration is only added on request."""
    element = write_record(Body())
    assert not tostring(element).startswith("<?xml")
    assert tostring(element, xml_declaration=True).startswith('<?xml version="1.0"')
