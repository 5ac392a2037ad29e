# ABOUTME: Generic XML binding between ElementTree elements and pydantic records.
# ABOUTME: One ordered binding table per record drives both parsing and serialization.

import io
import re
from dataclasses import dataclass
from typing import Any
from xml.etree import ElementTree
from xml.sax.saxutils import XMLGenerator

import structlog
from pydantic import BaseModel, ValidationError

from opml_doc.errors import MalformedInputError

log = structlog.get_logger()

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

_BOOL_VALUES = {"true": True, "false": False}

# Head integers are 32-bit signed values
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class Attr:
    """An attribute on the record's own element.

    `default` makes a missing attribute fall back to a value instead of None.
    `kind` is str or bool; booleans only accept the literals "true" and "false".
    """

    field: str
    name: str
    kind: type = str
    default: Any = None
    required: bool = False


@dataclass(frozen=True)
class TextChild:
    """A child element whose flattened text is the field value (str or int)."""

    field: str
    tag: str
    kind: type = str


@dataclass(frozen=True)
class Child:
    """A single optional (or required) child element bound to another record."""

    field: str
    tag: str
    model: type
    required: bool = False


@dataclass(frozen=True)
class Children:
    """Every same-tag child element, in document order.

    `model=None` binds the children to the declaring record itself.
    """

    field: str
    tag: str
    model: type | None = None


Binding = Attr | TextChild | Child | Children


def fromstring(content: str | bytes) -> ElementTree.Element:
    """Parse raw XML text into an element tree."""
    try:
        return ElementTree.fromstring(content)  # noqa: S314
    except ElementTree.ParseError as e:
        log.error("xml_parse_error", error=str(e))
        raise MalformedInputError(f"XML parsing error: {e}") from e


def tostring(element: ElementTree.Element, xml_declaration: bool = False) -> str:
    """Render an element tree as a single XML document string.

    Walks the tree with an explicit stack, so nesting depth is not limited
    by the interpreter's recursion limit.
    """
    out = io.StringIO()
    if xml_declaration:
        out.write(XML_DECLARATION)
    writer = XMLGenerator(out, encoding="utf-8", short_empty_elements=True)

    stack: list[tuple[ElementTree.Element, bool]] = [(element, False)]
    while stack:
        node, closing = stack.pop()
        if closing:
            writer.endElement(node.tag)
            continue
        writer.startElement(node.tag, dict(node.attrib))
        if node.text:
            writer.characters(node.text)
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node))

    return out.getvalue()


def _convert(raw: str, kind: type, where: str) -> Any:
    if kind is bool:
        if raw not in _BOOL_VALUES:
            raise MalformedInputError(f"{where}: expected 'true' or 'false', got {raw!r}")
        return _BOOL_VALUES[raw]
    if kind is int:
        text = raw.strip()
        if not _INT_PATTERN.fullmatch(text) or not _INT_MIN <= int(text) <= _INT_MAX:
            raise MalformedInputError(f"{where}: expected a 32-bit integer, got {raw!r}")
        return int(text)
    return raw


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class _Pending:
    """A record whose child records are still being built."""

    model: type[BaseModel]
    element: ElementTree.Element
    values: dict[str, Any]
    parent: int | None
    slot: tuple[str, int | None] | None


def _read_fields(pending: _Pending, index: int, stack: list[_Pending]) -> None:
    model, element, values = pending.model, pending.element, pending.values
    if element.tag != model.xml_tag:
        raise MalformedInputError(f"expected <{model.xml_tag}> element, got <{element.tag}>")

    for binding in model.xml_bindings:
        match binding:
            case Attr(field=field, name=name, kind=kind, default=default, required=required):
                raw = element.get(name)
                if raw is None:
                    if required:
                        raise MalformedInputError(
                            f"missing required attribute {name!r} on <{element.tag}>"
                        )
                    values[field] = default
                else:
                    values[field] = _convert(raw, kind, f"<{element.tag} {name}>")
            case TextChild(field=field, tag=tag, kind=kind):
                child = element.find(tag)
                if child is None:
                    values[field] = None
                else:
                    values[field] = _convert("".join(child.itertext()), kind, f"<{tag}>")
            case Child(field=field, tag=tag, model=child_model, required=required):
                values[field] = None
                child = element.find(tag)
                if child is None:
                    if required:
                        raise MalformedInputError(
                            f"missing required <{tag}> element in <{element.tag}>"
                        )
                else:
                    stack.append(_Pending(child_model, child, {}, index, (field, None)))
            case Children(field=field, tag=tag, model=child_model):
                found = element.findall(tag)
                values[field] = [None] * len(found)
                for position, child in enumerate(found):
                    stack.append(
                        _Pending(child_model or model, child, {}, index, (field, position))
                    )


def read_record(model: type[BaseModel], element: ElementTree.Element) -> BaseModel:
    """Build a record of type `model` from `element` using its binding table.

    Elements are visited with an explicit stack and records are built
    children first, so deeply nested outlines don't recurse.
    """
    visited: list[_Pending] = []
    stack = [_Pending(model, element, {}, None, None)]
    while stack:
        pending = stack.pop()
        _read_fields(pending, len(visited), stack)
        visited.append(pending)

    # Every child is visited after its parent, so walking backwards builds children first
    record = None
    for pending in reversed(visited):
        try:
            record = pending.model(**pending.values)
        except ValidationError as e:
            raise MalformedInputError(f"invalid <{pending.element.tag}> element: {e}") from e
        if pending.parent is not None:
            field, position = pending.slot
            parent_values = visited[pending.parent].values
            if position is None:
                parent_values[field] = record
            else:
                parent_values[field][position] = record
    return record


def write_record(record: BaseModel) -> ElementTree.Element:
    """Build an element tree from a record, emitting bindings in declared order."""
    root = ElementTree.Element(record.xml_tag)
    stack: list[tuple[BaseModel, ElementTree.Element]] = [(record, root)]

    while stack:
        node, element = stack.pop()
        for binding in node.xml_bindings:
            value = getattr(node, binding.field)
            match binding:
                case Attr(name=name):
                    if value is not None:
                        element.set(name, _format(value))
                case TextChild(tag=tag):
                    if value is not None:
                        ElementTree.SubElement(element, tag).text = _format(value)
                case Child():
                    if value is not None:
                        stack.append((value, ElementTree.SubElement(element, value.xml_tag)))
                case Children():
                    for item in value:
                        stack.append((item, ElementTree.SubElement(element, item.xml_tag)))

    return root
