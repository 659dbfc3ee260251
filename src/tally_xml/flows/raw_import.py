"""Render a caller-built nested mapping without any validation.

Keys may use the ``.LIST`` suffix for repeated groups, e.g.::

    {"_COMPANY_NAME": "Acme", "MASTERS": {"TALLYMESSAGE.LIST": [{"LEDGER": {...}}]}}
"""
from __future__ import annotations

from collections.abc import Mapping

from tally_xml.common.logging import get_logger
from tally_xml.common.settings import Settings, get_settings
from tally_xml.document import Document
from tally_xml.render import render

log = get_logger("tally_xml.flows.raw_import")


def convert_mapping(
    data: Mapping,
    request_type: str | None = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    xml = render(
        Document(data),
        request_type=request_type or settings.request_type,
        report_name=settings.report_name,
        indent=settings.xml_indent,
    )
    log.info("mapping_converted", top_level_keys=len(data), xml_bytes=len(xml.encode("utf-8")))
    return xml
