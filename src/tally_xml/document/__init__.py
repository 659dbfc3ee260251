"""Nested documents: the language-neutral tree rendered to Tally XML.

A ``Document`` is an ordered, immutable mapping. Each value is one of:

  - a scalar (str, int, float, Decimal, bool) or ``None`` for "absent",
  - a nested ``Document`` (rendered as a container element),
  - a ``Repeated`` group of documents (rendered as sibling elements that
    share the key's name, without a wrapper).

Raw nested dicts/lists are accepted wherever a value is expected and are
converted on the way in, so ``Document({"ADDRESS.LIST": [{...}, {...}]})``
builds the same tree as ``Document({"ADDRESS": Repeated([...])})``.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

LIST_SUFFIX = ".LIST"

Scalar = Union[str, int, float, Decimal, bool, None]
SCALAR_TYPES = (str, int, float, Decimal, bool)


class Document(Mapping):
    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping | Iterable[tuple[str, object]] = ()):
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        data: dict[str, Value] = {}
        for key, value in pairs:
            if not isinstance(key, str) or not key:
                raise ValueError(f"document keys must be non-empty strings, got {key!r}")
            if key in data:
                raise ValueError(f"duplicate document key: {key!r}")
            data[key] = _coerce(key, value)
        self._entries = data

    def __getitem__(self, key: str) -> Value:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Document({self._entries!r})"

    def to_dict(self) -> dict[str, object]:
        """Plain nested dicts/lists, handy for JSON dumps and assertions."""
        out: dict[str, object] = {}
        for key, value in self._entries.items():
            if isinstance(value, Document):
                out[key] = value.to_dict()
            elif isinstance(value, Repeated):
                out[key] = [item.to_dict() for item in value]
            else:
                out[key] = value
        return out


@dataclass(frozen=True)
class Repeated:
    """A repeatable group: each item renders as its own element."""

    items: tuple[Document, ...]

    def __init__(self, items: Iterable[Document | Mapping] = ()):
        object.__setattr__(self, "items", tuple(_as_document(item) for item in items))

    def __iter__(self) -> Iterator[Document]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Document:
        return self.items[index]


Value = Union[Scalar, Document, Repeated]


def _as_document(item: object) -> Document:
    if isinstance(item, Document):
        return item
    if isinstance(item, Mapping):
        return Document(item)
    raise TypeError(f"repeated group items must be mappings, got {type(item).__name__}")


def _coerce(key: str, value: object) -> Value:
    if value is None or isinstance(value, (Document, Repeated)):
        return value
    if isinstance(value, SCALAR_TYPES):
        return value
    if isinstance(value, Mapping):
        return Document(value)
    if isinstance(value, (list, tuple)):
        return Repeated(value)
    raise TypeError(f"unsupported value for {key!r}: {type(value).__name__}")


def is_repeatable_key(key: str) -> bool:
    return key.endswith(LIST_SUFFIX)


def _absent(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value
    return isinstance(value, Repeated) and not value


def compact(entries: Mapping[str, object]) -> Document:
    """Build a Document, leaving out None, "" and empty repeated groups."""
    return Document((key, value) for key, value in entries.items() if not _absent(value))
