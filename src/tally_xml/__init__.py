"""JSON to Tally XML import documents."""
from __future__ import annotations

from tally_xml.common.errors import InputValidationError, StructuralSerializationError, TallyXmlError
from tally_xml.common.types import EntryRole, VoucherType
from tally_xml.document import Document, Repeated
from tally_xml.envelope import EnvelopeMeta, aggregate
from tally_xml.flows import (
    build_master_document,
    build_voucher_document,
    convert_mapping,
    convert_master,
    convert_voucher,
)
from tally_xml.render import render, render_elements
from tally_xml.rules import adjust_amount, resolve_polarity, sign_rule

__all__ = [
    "Document",
    "EntryRole",
    "EnvelopeMeta",
    "InputValidationError",
    "Repeated",
    "StructuralSerializationError",
    "TallyXmlError",
    "VoucherType",
    "adjust_amount",
    "aggregate",
    "build_master_document",
    "build_voucher_document",
    "convert_mapping",
    "convert_master",
    "convert_voucher",
    "render",
    "render_elements",
    "resolve_polarity",
    "sign_rule",
]
