"""Voucher records and their ledger/inventory lines.

Every monetary line goes through ``tally_xml.rules`` so that ISDEEMEDPOSITIVE
and the sign of AMOUNT always agree with the voucher kind.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from tally_xml.assemblers.ledger import address_lines
from tally_xml.assemblers.stock_item import DEFAULT_UNIT
from tally_xml.common.models import VoucherIn
from tally_xml.common.types import EntryRole, VoucherType
from tally_xml.common.utils import (
    clean,
    format_amount,
    format_date,
    format_quantity,
    format_rate,
    round_half_up,
    to_decimal,
)
from tally_xml.document import Document, Repeated, compact
from tally_xml.rules import adjust_amount, resolve_polarity, yes_no

INVOICE_VIEW = "Invoice Voucher View"
ACCOUNTING_VIEW = "Accounting Voucher View"
ITEM_INVOICE_MODE = "Item Invoice"
AS_VOUCHER_MODE = "As Voucher"

# Voucher header fields that all carry the party name.
PARTY_NAME_KEYS = (
    "PARTYNAME",
    "PARTYLEDGERNAME",
    "PARTYMAILINGNAME",
    "CONSIGNEEMAILINGNAME",
    "BASICBASEPARTYNAME",
    "BASICBUYERNAME",
)


def entry_mode(kind: VoucherType | str) -> dict[str, str]:
    kind = VoucherType(kind)
    if kind.is_invoice:
        return {"PERSISTEDVIEW": INVOICE_VIEW, "VCHENTRYMODE": ITEM_INVOICE_MODE}
    if kind in (VoucherType.PAYMENT, VoucherType.RECEIPT):
        return {"PERSISTEDVIEW": ACCOUNTING_VIEW}
    return {"PERSISTEDVIEW": ACCOUNTING_VIEW, "VCHENTRYMODE": AS_VOUCHER_MODE}


def _deemed(kind: VoucherType | str, role: EntryRole) -> str:
    return yes_no(resolve_polarity(kind, role))


# ---------------------------------------------------------------------------
# Entry helpers
# ---------------------------------------------------------------------------


def inventory_entry(
    kind: VoucherType | str,
    ledger_name: str,
    stock_item_name: str,
    unit: str | None,
    rate: Any,
    qty: Any,
    discount: Any = None,
) -> Document:
    unit = clean(unit) or DEFAULT_UNIT
    amount = format_amount(
        adjust_amount(round_half_up(to_decimal(rate) * to_decimal(qty)), kind, EntryRole.INVENTORY_ITEM)
    )
    deemed = _deemed(kind, EntryRole.INVENTORY_ITEM)
    quantity = format_quantity(qty, unit)
    entry: dict[str, Any] = {
        "STOCKITEMNAME": clean(stock_item_name),
        "ISDEEMEDPOSITIVE": deemed,
        "ISLASTDEEMEDPOSITIVE": deemed,
        "ISAUTONEGATE": "No",
        "ISCUSTOMSCLEARANCE": "No",
        "ISTRACKCOMPONENT": "No",
        "ISTRACKPRODUCTION": "No",
        "ISPRIMARYITEM": "No",
        "ISSCRAP": "No",
        "RATE": format_rate(rate, unit),
        "AMOUNT": amount,
        "ACTUALQTY": quantity,
        "BILLEDQTY": quantity,
    }
    if discount is not None and to_decimal(discount) != 0:
        entry["DISCOUNT"] = format_amount(discount)
    entry["BATCHALLOCATIONS"] = Repeated(
        [
            {
                "BATCHNAME": "Primary Batch",
                "DYNAMICCSTISCLEARED": "No",
                "AMOUNT": amount,
                "ACTUALQTY": quantity,
                "BILLEDQTY": quantity,
            }
        ]
    )
    entry["ACCOUNTINGALLOCATIONS"] = Repeated(
        [
            {
                "LEDGERNAME": clean(ledger_name),
                "ISDEEMEDPOSITIVE": deemed,
                "ISLASTDEEMEDPOSITIVE": deemed,
                "LEDGERFROMITEM": "No",
                "REMOVEZEROENTRIES": "No",
                "ISPARTYLEDGER": "No",
                "ISCAPVATTAXALTERED": "No",
                "ISCAPVATNOTCLAIMED": "No",
                "AMOUNT": amount,
            }
        ]
    )
    return compact(entry)


def _allocation_entry(kind: VoucherType | str, role: EntryRole, ledger_name: str, amount: Any) -> Document:
    adjusted = format_amount(adjust_amount(amount, kind, role))
    deemed = _deemed(kind, role)
    return compact(
        {
            "LEDGERNAME": clean(ledger_name),
            "ISDEEMEDPOSITIVE": deemed,
            "ISLASTDEEMEDPOSITIVE": deemed,
            "LEDGERFROMITEM": "No",
            "REMOVEZEROENTRIES": "No",
            "ISPARTYLEDGER": yes_no(role is EntryRole.PARTY),
            "ISCAPVATTAXALTERED": "No",
            "ISCAPVATNOTCLAIMED": "No",
            "AMOUNT": adjusted,
            "VATEXPAMOUNT": adjusted,
        }
    )


def tax_entry(kind: VoucherType | str, ledger_name: str, amount: Any) -> Document:
    return _allocation_entry(kind, EntryRole.TAX, ledger_name, amount)


def party_entry(kind: VoucherType | str, ledger_name: str, total: Any) -> Document:
    return _allocation_entry(kind, EntryRole.PARTY, ledger_name, total)


def additional_charge_entry(kind: VoucherType | str, ledger_name: str, amount: Any) -> Document:
    """Freight, packing and similar non-tax charges."""
    deemed = _deemed(kind, EntryRole.ADDITIONAL_LEDGER)
    return compact(
        {
            "LEDGERNAME": clean(ledger_name),
            "ISDEEMEDPOSITIVE": deemed,
            "ISLASTDEEMEDPOSITIVE": deemed,
            "REMOVEZEROENTRIES": "No",
            "ISPARTYLEDGER": "No",
            "AMOUNT": format_amount(adjust_amount(amount, kind, EntryRole.ADDITIONAL_LEDGER)),
        }
    )


def round_off_entry(kind: VoucherType | str, ledger_name: str, amount: Any) -> Document:
    # The caller signs the amount; it is emitted as given.
    return compact(
        {
            "LEDGERNAME": clean(ledger_name),
            "ISDEEMEDPOSITIVE": yes_no(resolve_polarity(kind, EntryRole.ROUND_OFF, amount)),
            "REMOVEZEROENTRIES": "No",
            "ISPARTYLEDGER": "No",
            "AMOUNT": format_amount(amount),
        }
    )


def ledger_entry(ledger_name: str, amount: Any, is_debit: bool = True) -> Document:
    return compact(
        {
            "LEDGERNAME": clean(ledger_name),
            "ISDEEMEDPOSITIVE": yes_no(is_debit),
            "AMOUNT": format_amount(amount),
        }
    )


def add_party_amount(
    entries: Iterable[Document], kind: VoucherType | str, ledger_name: str, total: Any
) -> list[Document]:
    """Return ``entries`` with the party line for ``total`` in front."""
    return [party_entry(kind, ledger_name, total), *entries]


# ---------------------------------------------------------------------------
# Voucher record
# ---------------------------------------------------------------------------


def _ledger_entries(voucher: VoucherIn) -> list[Document]:
    kind = voucher.voucher_type
    entries = [tax_entry(kind, tax.name, tax.amount) for tax in voucher.tax_details]
    entries += [additional_charge_entry(kind, c.name, c.amount) for c in voucher.additional_charges]
    entries += [ledger_entry(e.name, e.amount, e.is_debit) for e in voucher.ledger_entries]
    if voucher.round_off is not None and voucher.round_off.amount:
        entries.append(round_off_entry(kind, voucher.round_off.name, voucher.round_off.amount))

    party = clean(voucher.ledger_name)
    if voucher.total is not None and party:
        entries = add_party_amount(entries, kind, party, voucher.total)
    return entries


def assemble_voucher(voucher: VoucherIn) -> Document:
    kind = voucher.voucher_type
    date = format_date(voucher.voucher_date)
    number = clean(voucher.voucher_number)
    party = clean(voucher.ledger_name)
    state = clean(voucher.state)
    country = clean(voucher.country)

    fields: dict[str, Any] = {
        "ACTION": "Alter",
        "TAGNAME": "Voucher Number",
        "TAGVALUE": number,
        "VOUCHERTYPENAME": kind.value,
        "DATE": date,
        "EFFECTIVEDATE": date,
        "REFERENCEDATE": format_date(voucher.reference_date) if voucher.reference_date else date,
        "VOUCHERNUMBER": number,
        "REFERENCE": clean(voucher.reference) or number,
    }
    fields.update(entry_mode(kind))
    for key in PARTY_NAME_KEYS:
        fields[key] = party
    fields.update(
        {
            "STATENAME": state,
            "CONSIGNEESTATENAME": state,
            "COUNTRYNAME": country,
            "COUNTRYOFRESIDENCE": country,
            "PINCODE": clean(voucher.pincode),
            "GSTREGISTRATIONTYPE": clean(voucher.gst_registration_type),
            "PARTYGSTIN": clean(voucher.gst_in),
            "PLACEOFSUPPLY": clean(voucher.place_of_supply),
            "NARRATION": clean(voucher.narration),
            "ADDRESS": address_lines([voucher.address_line_1, voucher.address_line_2]),
            "ALLINVENTORYENTRIES": Repeated(
                inventory_entry(kind, i.ledger_name, i.stock_item_name, i.unit, i.price, i.qty, i.discount)
                for i in voucher.voucher_items or ()
            ),
            "LEDGERENTRIES": Repeated(_ledger_entries(voucher)),
        }
    )
    return Document({"VOUCHER": compact(fields)})
