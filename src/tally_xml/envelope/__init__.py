"""Combine assembled entity documents into one REQUESTDATA document."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tally_xml.document import Document, Repeated

COMPANY_NAME_KEY = "_COMPANY_NAME"
MASTERS_COLLECTION = "MASTERS"
DATA_COLLECTION = "DATA"


@dataclass(frozen=True)
class EnvelopeMeta:
    company_name: str | None = ""
    collection: str = MASTERS_COLLECTION


def aggregate(meta: EnvelopeMeta, documents: Iterable[Document]) -> Document:
    """Wrap ``documents`` as TALLYMESSAGE entries, in the order given.

    The company name always occupies the first key; ``None`` becomes "".
    """
    return Document(
        {
            COMPANY_NAME_KEY: meta.company_name or "",
            meta.collection: Document({"TALLYMESSAGE": Repeated(documents)}),
        }
    )
