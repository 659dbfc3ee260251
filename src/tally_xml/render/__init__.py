"""Render nested documents as Tally import XML.

Walks a ``Document`` depth-first in insertion order and builds an lxml tree:

  - scalar      -> ``<NAME>text</NAME>``, skipped when None or ""
  - Document    -> ``<NAME>...</NAME>`` (``<NAME/>`` when it has no children)
  - Repeated    -> one ``<NAME>...</NAME>`` per item, no wrapper element

Element names are the document keys with the ``.LIST`` suffix removed and
every character outside ``[A-Za-z0-9._-]`` dropped. A name that ends up empty
or starting with anything but a letter or underscore is rejected with
``StructuralSerializationError`` before any element is created.

Character references already present in text (``&#4;``, ``&#x1F;``) are kept
as entity nodes so Tally still sees them; the five predefined entities are
decoded and re-escaped by lxml. Serialization only starts once the whole
tree has been built, so a failure never yields partial markup.
"""
from __future__ import annotations

import re
from decimal import Decimal

from lxml import etree

from tally_xml.common.errors import StructuralSerializationError
from tally_xml.common.utils import clean, number_text
from tally_xml.document import LIST_SUFFIX, Document, Repeated, is_repeatable_key

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

DEFAULT_REQUEST_TYPE = "Import"
DEFAULT_REPORT_NAME = "All Masters"

# libxml2 pretty-prints with two spaces per level.
_LIBXML_INDENT = 2

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9\-_.]")
_NAME_START = re.compile(r"[A-Za-z_]")
_REFERENCE = re.compile(r"&(#[0-9]+|#x[0-9A-Fa-f]+|amp|lt|gt|quot|apos);")
_PREDEFINED = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}
_LEADING_INDENT = re.compile(r"^((?:  )+)", re.MULTILINE)


def normalize_name(key: str) -> str:
    name = key[: -len(LIST_SUFFIX)] if is_repeatable_key(key) else key
    name = _INVALID_NAME_CHARS.sub("", name)
    if not name:
        raise StructuralSerializationError(key, "name is empty after normalization")
    if not _NAME_START.match(name):
        raise StructuralSerializationError(key, f"{name!r} does not start with a letter or underscore")
    return name


def scalar_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float, Decimal)):
        return number_text(value)
    return clean(str(value))


def _place(element: etree._Element, node: etree._Element | None, literal: str) -> None:
    if node is None:
        element.text = literal or None
    else:
        node.tail = literal or None


def _set_text(element: etree._Element, text: str) -> None:
    """Fill ``element`` with ``text``; character references become entity nodes."""
    chunks = _REFERENCE.split(text)
    node = None
    literal = chunks[0]
    for ref, following in zip(chunks[1::2], chunks[2::2]):
        if ref in _PREDEFINED:
            literal += _PREDEFINED[ref] + following
            continue
        _place(element, node, literal)
        node = etree.Entity(ref)
        element.append(node)
        literal = following
    _place(element, node, literal)


def _build(parent: etree._Element, document: Document) -> None:
    for key, value in document.items():
        name = normalize_name(key)
        if isinstance(value, Repeated):
            for item in value:
                _build(etree.SubElement(parent, name), item)
        elif isinstance(value, Document):
            _build(etree.SubElement(parent, name), value)
        else:
            text = scalar_text(value)
            if text == "":
                continue
            _set_text(etree.SubElement(parent, name), text)


def _reindent(markup: str, indent: int) -> str:
    if indent == _LIBXML_INDENT:
        return markup
    return _LEADING_INDENT.sub(lambda m: " " * (len(m.group(1)) // _LIBXML_INDENT * indent), markup)


def _serialize(element: etree._Element, indent: int) -> str:
    markup = etree.tostring(element, encoding="unicode", pretty_print=True, with_tail=False)
    return _reindent(markup.rstrip("\n"), indent)


def render_elements(document: Document, *, indent: int = 2) -> str:
    """Render ``document`` as a bare element sequence (no declaration, no envelope)."""
    holder = etree.Element("_")
    _build(holder, document)
    return "\n".join(_serialize(child, indent) for child in holder)


def envelope(
    request_data: Document,
    *,
    request_type: str = DEFAULT_REQUEST_TYPE,
    report_name: str = DEFAULT_REPORT_NAME,
) -> Document:
    return Document(
        {
            "ENVELOPE": {
                "HEADER": {"TALLYREQUEST": request_type},
                "BODY": {
                    "IMPORTDATA": {
                        "REQUESTDESC": {"REPORTNAME": report_name},
                        "REQUESTDATA": request_data,
                    }
                },
            }
        }
    )


def render(
    root: Document,
    *,
    request_type: str = DEFAULT_REQUEST_TYPE,
    report_name: str = DEFAULT_REPORT_NAME,
    indent: int = 2,
) -> str:
    """Render ``root`` as the REQUESTDATA of a complete Tally import document."""
    body = render_elements(
        envelope(root, request_type=request_type, report_name=report_name), indent=indent
    )
    return f"{XML_DECLARATION}\n{body}\n"
