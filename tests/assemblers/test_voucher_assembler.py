"""Voucher records: header, entry modes, inventory lines and ledger-entry ordering."""
from __future__ import annotations

from typing import Any

import pytest

from tally_xml.assemblers import (
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
from tally_xml.common.models import VoucherIn
from tally_xml.common.types import VoucherType


def _voucher(**overrides: Any) -> VoucherIn:
    data: dict[str, Any] = {
        "voucher_type": "Sale",
        "voucher_number": "INV-1",
        "voucher_date": "2024-04-01",
        "ledger_name": "Acme",
        "voucher_items": [
            {"ledger_name": "Sales", "stock_item_name": "Widget", "unit": "Nos", "rate": 100, "qty": 2}
        ],
        "total": 200,
    }
    data.update(overrides)
    return VoucherIn.model_validate(data)


class TestEntryMode:
    @pytest.mark.parametrize("kind", ["Sale", "Purchase", "Sale Return", "Purchase Return"])
    def test_invoice_kinds(self, kind):
        assert entry_mode(kind) == {"PERSISTEDVIEW": "Invoice Voucher View", "VCHENTRYMODE": "Item Invoice"}

    @pytest.mark.parametrize("kind", ["Payment", "Receipt"])
    def test_payment_and_receipt_have_no_entry_mode(self, kind):
        assert entry_mode(kind) == {"PERSISTEDVIEW": "Accounting Voucher View"}

    @pytest.mark.parametrize("kind", ["Journal", "Contra", "Credit Note", "Debit Note"])
    def test_other_kinds_are_as_voucher(self, kind):
        assert entry_mode(kind) == {"PERSISTEDVIEW": "Accounting Voucher View", "VCHENTRYMODE": "As Voucher"}


class TestInventoryEntry:
    def test_sale_line(self):
        entry = inventory_entry(VoucherType.SALE, "Sales", "Widget", "Nos", 100, 2)
        assert entry["STOCKITEMNAME"] == "Widget"
        assert entry["ISDEEMEDPOSITIVE"] == "No"
        assert entry["ISLASTDEEMEDPOSITIVE"] == "No"
        assert entry["RATE"] == "100/Nos"
        assert entry["AMOUNT"] == "200.00"
        assert entry["ACTUALQTY"] == " 2 Nos"
        assert entry["BILLEDQTY"] == " 2 Nos"
        assert "DISCOUNT" not in entry

    def test_purchase_line_is_negated_debit(self):
        entry = inventory_entry(VoucherType.PURCHASE, "Purchase", "Widget", "Nos", 100, 2)
        assert entry["ISDEEMEDPOSITIVE"] == "Yes"
        assert entry["AMOUNT"] == "-200.00"
        assert entry["ACCOUNTINGALLOCATIONS"][0]["AMOUNT"] == "-200.00"
        assert entry["BATCHALLOCATIONS"][0]["AMOUNT"] == "-200.00"

    def test_amount_rounds_half_up(self):
        assert inventory_entry("Sale", "Sales", "Nut", "Nos", "10.005", 1)["AMOUNT"] == "10.01"
        assert inventory_entry("Purchase", "Purchase", "Nut", "Nos", "0.125", 1)["AMOUNT"] == "-0.13"

    def test_sub_allocations(self):
        entry = inventory_entry("Sale", "Sales", "Widget", "Nos", 100, 2)
        assert entry["BATCHALLOCATIONS"][0].to_dict() == {
            "BATCHNAME": "Primary Batch",
            "DYNAMICCSTISCLEARED": "No",
            "AMOUNT": "200.00",
            "ACTUALQTY": " 2 Nos",
            "BILLEDQTY": " 2 Nos",
        }
        allocation = entry["ACCOUNTINGALLOCATIONS"][0]
        assert allocation["LEDGERNAME"] == "Sales"
        assert allocation["ISDEEMEDPOSITIVE"] == "No"
        assert allocation["ISPARTYLEDGER"] == "No"

    def test_discount_only_when_non_zero(self):
        assert "DISCOUNT" not in inventory_entry("Sale", "Sales", "Widget", "Nos", 100, 2, discount=0)
        assert inventory_entry("Sale", "Sales", "Widget", "Nos", 100, 2, discount=5)["DISCOUNT"] == "5.00"

    def test_blank_unit_defaults_to_nos(self):
        entry = inventory_entry("Sale", "Sales", "Widget", "", "2.5", "1.5")
        assert entry["RATE"] == "2.5/Nos"
        assert entry["ACTUALQTY"] == " 1.5 Nos"
        assert entry["AMOUNT"] == "3.75"


class TestLedgerLines:
    def test_tax_on_sale(self):
        entry = tax_entry("Sale", "Output CGST", 18)
        assert entry.to_dict() == {
            "LEDGERNAME": "Output CGST",
            "ISDEEMEDPOSITIVE": "No",
            "ISLASTDEEMEDPOSITIVE": "No",
            "LEDGERFROMITEM": "No",
            "REMOVEZEROENTRIES": "No",
            "ISPARTYLEDGER": "No",
            "ISCAPVATTAXALTERED": "No",
            "ISCAPVATNOTCLAIMED": "No",
            "AMOUNT": "18.00",
            "VATEXPAMOUNT": "18.00",
        }

    def test_tax_on_purchase(self):
        entry = tax_entry("Purchase", "Input IGST", 36)
        assert entry["ISDEEMEDPOSITIVE"] == "Yes"
        assert entry["AMOUNT"] == "-36.00"

    def test_additional_charge_on_receipt(self):
        entry = additional_charge_entry("Receipt", "Bank Charges", 50)
        assert list(entry) == [
            "LEDGERNAME",
            "ISDEEMEDPOSITIVE",
            "ISLASTDEEMEDPOSITIVE",
            "REMOVEZEROENTRIES",
            "ISPARTYLEDGER",
            "AMOUNT",
        ]
        assert entry["ISDEEMEDPOSITIVE"] == "Yes"
        assert entry["AMOUNT"] == "-50.00"

    def test_round_off_keeps_caller_sign(self):
        negative = round_off_entry("Sale", "Round Off", "-0.4")
        assert negative["ISDEEMEDPOSITIVE"] == "Yes"
        assert negative["AMOUNT"] == "-0.40"
        positive = round_off_entry("Purchase", "Round Off", "0.4")
        assert positive["ISDEEMEDPOSITIVE"] == "No"
        assert positive["AMOUNT"] == "0.40"

    def test_generic_ledger_entry(self):
        assert ledger_entry("Cash", 100, is_debit=False).to_dict() == {
            "LEDGERNAME": "Cash",
            "ISDEEMEDPOSITIVE": "No",
            "AMOUNT": "100.00",
        }
        assert ledger_entry("Rent", 100)["ISDEEMEDPOSITIVE"] == "Yes"

    def test_party_entry_on_sale(self):
        entry = party_entry("Sale", "Acme", 200)
        assert entry["ISPARTYLEDGER"] == "Yes"
        assert entry["ISDEEMEDPOSITIVE"] == "Yes"
        assert entry["AMOUNT"] == "-200.00"
        assert entry["VATEXPAMOUNT"] == "-200.00"

    def test_party_entry_on_purchase(self):
        entry = party_entry("Purchase", "Supplier", 200)
        assert entry["ISDEEMEDPOSITIVE"] == "No"
        assert entry["AMOUNT"] == "200.00"


class TestAddPartyAmount:
    def test_party_goes_first(self):
        entries = [
            tax_entry("Sale", "Output CGST", 9),
            additional_charge_entry("Sale", "Freight", 10),
            round_off_entry("Sale", "Round Off", "-0.40"),
        ]
        result = add_party_amount(entries, "Sale", "Acme", 218.6)
        assert [e["LEDGERNAME"] for e in result] == ["Acme", "Output CGST", "Freight", "Round Off"]
        assert result[0]["ISPARTYLEDGER"] == "Yes"
        assert result[1:] == entries

    def test_input_is_not_mutated(self):
        entries = [tax_entry("Sale", "Output CGST", 9)]
        add_party_amount(entries, "Sale", "Acme", 9)
        assert len(entries) == 1

    def test_empty_entries(self):
        result = add_party_amount([], "Payment", "Landlord", 1000)
        assert [e["LEDGERNAME"] for e in result] == ["Landlord"]


class TestAssembleVoucher:
    def test_header_fields_in_order(self):
        voucher = assemble_voucher(_voucher())["VOUCHER"]
        assert list(voucher)[:11] == [
            "ACTION",
            "TAGNAME",
            "TAGVALUE",
            "VOUCHERTYPENAME",
            "DATE",
            "EFFECTIVEDATE",
            "REFERENCEDATE",
            "VOUCHERNUMBER",
            "REFERENCE",
            "PERSISTEDVIEW",
            "VCHENTRYMODE",
        ]
        assert voucher["TAGNAME"] == "Voucher Number"
        assert voucher["TAGVALUE"] == "INV-1"
        assert voucher["VOUCHERTYPENAME"] == "Sale"
        assert voucher["DATE"] == voucher["EFFECTIVEDATE"] == voucher["REFERENCEDATE"] == "20240401"
        assert voucher["REFERENCE"] == "INV-1"

    def test_sales_alias_uses_canonical_type_name(self):
        assert assemble_voucher(_voucher(voucher_type="sales"))["VOUCHER"]["VOUCHERTYPENAME"] == "Sale"

    def test_reference_overrides(self):
        voucher = assemble_voucher(_voucher(reference="PO-77", reference_date="2024-03-28"))["VOUCHER"]
        assert voucher["REFERENCE"] == "PO-77"
        assert voucher["REFERENCEDATE"] == "20240328"
        assert voucher["VOUCHERNUMBER"] == "INV-1"

    def test_party_fields(self):
        voucher = assemble_voucher(
            _voucher(
                address_line_1="12 MG Road",
                address_line_2="Bengaluru",
                state="Karnataka",
                country="India",
                pincode="560001",
                gst_registration_type="Regular",
                gst_in="29ABCDE1234F1Z5",
                place_of_supply="Karnataka",
                narration="May bill",
            )
        )["VOUCHER"]
        for key in (
            "PARTYNAME",
            "PARTYLEDGERNAME",
            "PARTYMAILINGNAME",
            "CONSIGNEEMAILINGNAME",
            "BASICBASEPARTYNAME",
            "BASICBUYERNAME",
        ):
            assert voucher[key] == "Acme"
        assert voucher["STATENAME"] == voucher["CONSIGNEESTATENAME"] == "Karnataka"
        assert voucher["COUNTRYNAME"] == voucher["COUNTRYOFRESIDENCE"] == "India"
        assert voucher["PARTYGSTIN"] == "29ABCDE1234F1Z5"
        assert voucher["PLACEOFSUPPLY"] == "Karnataka"
        assert voucher["NARRATION"] == "May bill"
        assert [a["ADDRESS"] for a in voucher["ADDRESS"]] == ["12 MG Road", "Bengaluru"]
        keys = list(voucher)
        assert keys.index("NARRATION") < keys.index("ADDRESS") < keys.index("ALLINVENTORYENTRIES")
        assert keys[-1] == "LEDGERENTRIES"

    def test_ledger_entries_order(self):
        voucher = assemble_voucher(
            _voucher(
                tax_details=[{"name": "Output CGST", "amount": 18}, {"name": "Output SGST", "amount": 18}],
                additional_charges=[{"name": "Freight", "amount": 25}],
                ledger_entries=[{"name": "Discount Allowed", "amount": 5, "is_debit": True}],
                round_off={"name": "Round Off", "amount": -0.5},
                total=255.5,
            )
        )["VOUCHER"]
        names = [e["LEDGERNAME"] for e in voucher["LEDGERENTRIES"]]
        assert names == ["Acme", "Output CGST", "Output SGST", "Freight", "Discount Allowed", "Round Off"]

    def test_zero_round_off_is_dropped(self):
        voucher = assemble_voucher(_voucher(round_off={"amount": 0}))["VOUCHER"]
        assert [e["LEDGERNAME"] for e in voucher["LEDGERENTRIES"]] == ["Acme"]

    def test_no_party_line_without_total(self):
        voucher = assemble_voucher(_voucher(total=None))["VOUCHER"]
        assert "LEDGERENTRIES" not in voucher
        assert voucher["PARTYNAME"] == "Acme"

    def test_no_party_line_without_party(self):
        voucher = assemble_voucher(_voucher(ledger_name=None, tax_details=[{"name": "Tax", "amount": 1}]))
        entries = voucher["VOUCHER"]["LEDGERENTRIES"]
        assert [e["ISPARTYLEDGER"] for e in entries] == ["No"]
        assert "PARTYNAME" not in voucher["VOUCHER"]

    def test_journal_voucher(self):
        voucher = assemble_voucher(
            _voucher(
                voucher_type="Journal",
                ledger_name=None,
                voucher_items=None,
                total=None,
                ledger_entries=[
                    {"name": "Depreciation", "amount": 1000, "is_debit": True},
                    {"name": "Accumulated Depreciation", "amount": 1000, "is_debit": False},
                ],
            )
        )["VOUCHER"]
        assert voucher["VCHENTRYMODE"] == "As Voucher"
        assert "ALLINVENTORYENTRIES" not in voucher
        assert [e["ISDEEMEDPOSITIVE"] for e in voucher["LEDGERENTRIES"]] == ["Yes", "No"]

    def test_payment_voucher_has_no_entry_mode(self):
        voucher = assemble_voucher(_voucher(voucher_type="Payment", voucher_items=None, total=500))["VOUCHER"]
        assert "VCHENTRYMODE" not in voucher
        party = voucher["LEDGERENTRIES"][0]
        assert party["AMOUNT"] == "-500.00"
        assert party["ISDEEMEDPOSITIVE"] == "Yes"
