"""Domain enums for Tally imports.

All enums inherit from ``str`` so their values serialize as plain text.
"""
from __future__ import annotations

from enum import Enum


class VoucherType(str, Enum):
    """Tally voucher categories (the transaction kind of a voucher)."""

    SALE = "Sale"
    PURCHASE = "Purchase"
    SALE_RETURN = "Sale Return"
    PURCHASE_RETURN = "Purchase Return"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    CONTRA = "Contra"
    JOURNAL = "Journal"
    CREDIT_NOTE = "Credit Note"
    DEBIT_NOTE = "Debit Note"
    DELIVERY_NOTE = "Delivery Note"
    RECEIPT_NOTE = "Receipt Note"
    STOCK_JOURNAL = "Stock Journal"
    PHYSICAL_STOCK = "Physical Stock"
    MEMORANDUM = "Memorandum"
    REVERSING_JOURNAL = "Reversing Journal"

    @classmethod
    def _missing_(cls, value: object) -> VoucherType | None:
        if not isinstance(value, str):
            return None
        text = " ".join(value.split()).lower()
        if text == "sales":
            return cls.SALE
        for member in cls:
            if member.value.lower() == text:
                return member
        return None

    @property
    def is_invoice(self) -> bool:
        return self in INVOICE_VOUCHER_TYPES


# Vouchers carrying inventory lines ("Item Invoice" entry mode).
INVOICE_VOUCHER_TYPES = frozenset(
    {VoucherType.SALE, VoucherType.PURCHASE, VoucherType.SALE_RETURN, VoucherType.PURCHASE_RETURN}
)

# Kinds accepted by the JSON voucher import.
IMPORTABLE_VOUCHER_TYPES: tuple[VoucherType, ...] = (
    VoucherType.SALE,
    VoucherType.PURCHASE,
    VoucherType.SALE_RETURN,
    VoucherType.PURCHASE_RETURN,
    VoucherType.PAYMENT,
    VoucherType.RECEIPT,
    VoucherType.JOURNAL,
)


class EntryRole(str, Enum):
    """Role of a voucher line; selects a sign rule and nothing else."""

    PARTY = "party"
    INVENTORY_ITEM = "item"
    TAX = "tax"
    ADDITIONAL_LEDGER = "ledger"
    ROUND_OFF = "round_off"


class GstDutyHead(str, Enum):
    """GST duty heads, declared in the canonical rate-row order."""

    CGST = "CGST"
    SGST = "SGST/UTGST"
    IGST = "IGST"
    CESS = "Cess"
    STATE_CESS = "State Cess"


class GstRegistrationType(str, Enum):
    REGULAR = "Regular"
    UNREGISTERED_CONSUMER = "Unregistered/Consumer"
    COMPOSITION = "Composition"
    CONSUMER = "Consumer"
    UNREGISTERED = "Unregistered"
