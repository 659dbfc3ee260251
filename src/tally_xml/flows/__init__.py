from __future__ import annotations

from tally_xml.flows.master_import import build_master_document, convert_master
from tally_xml.flows.raw_import import convert_mapping
from tally_xml.flows.voucher_import import build_voucher_document, convert_voucher

__all__ = [
    "build_master_document",
    "build_voucher_document",
    "convert_mapping",
    "convert_master",
    "convert_voucher",
]
