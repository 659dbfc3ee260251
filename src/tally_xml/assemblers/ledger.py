from __future__ import annotations

from typing import Any

from tally_xml.common.models import LedgerIn
from tally_xml.common.utils import clean
from tally_xml.document import Document, Repeated, compact

# Parents whose ledgers track outstanding bills.
BILLWISE_PARENTS = frozenset({"Sundry Debtors", "Sundry Creditors"})


def address_lines(lines: list[str | None]) -> Repeated:
    return Repeated({"ADDRESS": text} for text in (clean(line) for line in lines) if text)


def assemble_ledger(ledger: LedgerIn, applicable_from: str) -> Document:
    """Ledger master record.

    GST registration and mailing sub-records are added only when every field
    they carry is known.
    """
    name = clean(ledger.name)
    parent = clean(ledger.parent)
    state = clean(ledger.state)
    country = clean(ledger.country)
    pincode = clean(ledger.pincode)
    registration_type = clean(ledger.gst_registration_type)
    gstin = clean(ledger.gst_in)

    fields: dict[str, Any] = {
        "ACTION": "Alter",
        "NAME": {"NAME": name},
        "PARENT": parent,
        "BILLWISEDETAILS": "Yes" if parent in BILLWISE_PARENTS else None,
        "PRIORSTATENAME": state,
        "LEDSTATENAME": state,
        "COUNTRYNAME": country,
        "COUNTRYOFRESIDENCE": country,
        "PINCODE": pincode,
        "GSTREGISTRATIONTYPE": registration_type,
        "PARTYGSTIN": gstin,
    }
    if ledger.gst_duty_head:
        fields["TAXTYPE"] = "GST"
        fields["GSTDUTYHEAD"] = clean(ledger.gst_duty_head)
    if ledger.gst_percentage:
        fields["RATEOFTAXCALCULATION"] = ledger.gst_percentage
    if state and registration_type and gstin:
        fields["LEDGSTREGDETAILS"] = {
            "APPLICABLEFROM": applicable_from,
            "GSTREGISTRATIONTYPE": registration_type,
            "PLACEOFSUPPLY": state,
            "GSTIN": gstin,
        }
    if state and country and pincode:
        fields["LEDMAILINGDETAILS"] = {
            "APPLICABLEFROM": applicable_from,
            "PINCODE": pincode,
            "MAILINGNAME": name,
            "STATE": state,
            "COUNTRY": country,
        }
    fields["ADDRESS"] = address_lines(ledger.address)
    return Document({"LEDGER": compact(fields)})
