"""Voucher import flow.

A voucher payload may carry the masters it depends on. They are emitted
ahead of the voucher (units, then ledgers, then stock items) so Tally
creates them before posting the voucher that references them.
"""
from __future__ import annotations

from typing import Any

from tally_xml.assemblers import assemble_ledger, assemble_stock_item, assemble_unit, assemble_voucher
from tally_xml.common.logging import get_logger
from tally_xml.common.settings import Settings, get_settings
from tally_xml.document import Document
from tally_xml.envelope import DATA_COLLECTION, EnvelopeMeta, aggregate
from tally_xml.render import render
from tally_xml.validation import parse_voucher

log = get_logger("tally_xml.flows.voucher_import")


def build_voucher_document(payload: Any, settings: Settings | None = None) -> Document:
    settings = settings or get_settings()
    data = parse_voucher(payload)
    since = settings.effective_applicable_from()

    documents: list[Document] = []
    documents += [assemble_unit(unit, since) for unit in data.units]
    documents += [assemble_ledger(ledger, since) for ledger in data.ledgers]
    documents += [assemble_stock_item(item, since) for item in data.stock_item]
    documents.append(assemble_voucher(data.voucher))
    return aggregate(EnvelopeMeta(data.company_name, DATA_COLLECTION), documents)


def convert_voucher(payload: Any, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    root = build_voucher_document(payload, settings)
    xml = render(
        root,
        request_type=settings.request_type,
        report_name=settings.report_name,
        indent=settings.xml_indent,
    )
    voucher = root[DATA_COLLECTION]["TALLYMESSAGE"][-1]["VOUCHER"]
    log.info(
        "voucher_converted",
        voucher_type=voucher["VOUCHERTYPENAME"],
        voucher_number=voucher["VOUCHERNUMBER"],
        messages=len(root[DATA_COLLECTION]["TALLYMESSAGE"]),
        xml_bytes=len(xml.encode("utf-8")),
    )
    return xml
