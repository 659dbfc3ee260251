from __future__ import annotations

from decimal import Decimal
from typing import Any

from tally_xml.common.models import StockItemIn
from tally_xml.common.types import GstDutyHead
from tally_xml.common.utils import clean, format_rate, tally_special_char, to_decimal
from tally_xml.document import Document, Repeated, compact

DEFAULT_UNIT = "Nos"
SPECIFY_DETAILS = "Specify Details Here"

# Share of the item's GST percentage charged under each duty head.
_RATE_SHARE = {
    GstDutyHead.CGST: Decimal("0.5"),
    GstDutyHead.SGST: Decimal("0.5"),
    GstDutyHead.IGST: Decimal(1),
}


def rate_details(percentage: Any) -> Repeated:
    """One RATEDETAILS row per duty head, always in ``GstDutyHead`` order."""
    percentage = to_decimal(percentage)
    rows = []
    for head in GstDutyHead:
        if head is GstDutyHead.CESS:
            valuation = f"{tally_special_char()} Not Applicable"
        else:
            valuation = "Based on Value"
        share = _RATE_SHARE.get(head)
        rows.append(
            compact(
                {
                    "GSTRATEDUTYHEAD": head.value,
                    "GSTRATEVALUATIONTYPE": valuation,
                    "GSTRATE": percentage * share if share is not None else None,
                }
            )
        )
    return Repeated(rows)


def gst_details(hsn: str, percentage: Any, unit: str, applicable_from: str, opening_rate: Any = None) -> Document:
    return compact(
        {
            "CALCULATIONTYPE": "On Value",
            "HSNCODE": clean(hsn),
            "TAXABILITY": "Taxable",
            "SRCOFGSTDETAILS": SPECIFY_DETAILS,
            "GSTCALCSLABONMRP": "No",
            "APPLICABLEFROM": applicable_from,
            "OPENINGRATE": format_rate(opening_rate, unit) if opening_rate is not None else None,
            "STATEWISEDETAILS": Repeated(
                [{"STATENAME": f"{tally_special_char()} Any", "RATEDETAILS": rate_details(percentage)}]
            ),
        }
    )


def hsn_details(hsn: str, applicable_from: str) -> Repeated:
    return Repeated(
        [{"HSNCODE": clean(hsn), "SRCOFHSNDETAILS": SPECIFY_DETAILS, "APPLICABLEFROM": applicable_from}]
    )


def assemble_stock_item(item: StockItemIn, applicable_from: str) -> Document:
    unit = clean(item.unit) or DEFAULT_UNIT
    fields: dict[str, Any] = {
        "ACTION": "Alter",
        "NAME": {"NAME": clean(item.name)},
        "BASEUNITS": unit,
    }
    if item.gst_applicable is not None:
        status = "Applicable" if item.gst_applicable else "Not Applicable"
        fields["GSTAPPLICABLE"] = f"{tally_special_char()} {status}"
    fields["GSTTYPEOFSUPPLY"] = clean(item.gst_supply_type)
    if item.hsn and item.gst_percentage is not None:
        fields["GSTDETAILS"] = Repeated(
            [gst_details(item.hsn, item.gst_percentage, unit, applicable_from, item.price)]
        )
        fields["HSNDETAILS"] = hsn_details(item.hsn, applicable_from)
    return Document({"STOCKITEM": compact(fields)})
