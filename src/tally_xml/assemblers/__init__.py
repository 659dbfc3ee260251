"""Turn validated input records into Tally record documents.

Each ``assemble_*`` function returns a single-key ``Document`` (``UNIT``,
``LEDGER``, ``STOCKITEM`` or ``VOUCHER``) ready to be wrapped as one
TALLYMESSAGE by ``tally_xml.envelope.aggregate``.
"""
from __future__ import annotations

from tally_xml.assemblers.ledger import BILLWISE_PARENTS, assemble_ledger
from tally_xml.assemblers.stock_item import DEFAULT_UNIT, assemble_stock_item, rate_details
from tally_xml.assemblers.unit import assemble_unit
from tally_xml.assemblers.voucher import (
    add_party_amount,
    additional_charge_entry,
    assemble_voucher,
    entry_mode,
    inventory_entry,
    ledger_entry,
    party_entry,
    round_off_entry,
    tax_entry,
)

__all__ = [
    "BILLWISE_PARENTS",
    "DEFAULT_UNIT",
    "add_party_amount",
    "additional_charge_entry",
    "assemble_ledger",
    "assemble_stock_item",
    "assemble_unit",
    "assemble_voucher",
    "entry_mode",
    "inventory_entry",
    "ledger_entry",
    "party_entry",
    "rate_details",
    "round_off_entry",
    "tax_entry",
]
