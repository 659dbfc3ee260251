"""Master import flow: company ledgers JSON -> Tally XML.

Ledgers land in the MASTERS collection of REQUESTDATA, one TALLYMESSAGE
per ledger, in input order.
"""
from __future__ import annotations

from typing import Any

from tally_xml.assemblers import assemble_ledger
from tally_xml.common.logging import get_logger
from tally_xml.common.settings import Settings, get_settings
from tally_xml.document import Document
from tally_xml.envelope import MASTERS_COLLECTION, EnvelopeMeta, aggregate
from tally_xml.render import render
from tally_xml.validation import parse_master

log = get_logger("tally_xml.flows.master_import")


def build_master_document(payload: Any, settings: Settings | None = None) -> Document:
    settings = settings or get_settings()
    master = parse_master(payload)
    since = settings.effective_applicable_from()
    ledgers = [assemble_ledger(ledger, since) for ledger in master.ledger]
    return aggregate(EnvelopeMeta(master.company_name, MASTERS_COLLECTION), ledgers)


def convert_master(payload: Any, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    root = build_master_document(payload, settings)
    xml = render(
        root,
        request_type=settings.request_type,
        report_name=settings.report_name,
        indent=settings.xml_indent,
    )
    log.info(
        "master_converted",
        ledgers=len(root[MASTERS_COLLECTION]["TALLYMESSAGE"]),
        xml_bytes=len(xml.encode("utf-8")),
    )
    return xml
