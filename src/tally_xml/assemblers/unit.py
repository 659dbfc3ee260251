from __future__ import annotations

from tally_xml.common.models import UnitIn
from tally_xml.common.utils import clean
from tally_xml.document import Document, compact


def assemble_unit(unit: UnitIn, applicable_from: str) -> Document:
    uqc = clean(unit.uqc_name)
    return Document(
        {
            "UNIT": compact(
                {
                    "ACTION": "Alter",
                    "NAME": clean(unit.name),
                    "GSTREPUOM": uqc,
                    "ISSIMPLEUNIT": "Yes",
                    "FORPAYROLL": "No",
                    "REPORTINGUQCDETAILS": compact(
                        {"APPLICABLEFROM": applicable_from, "REPORTINGUQCNAME": uqc}
                    ),
                    "DECIMALPLACES": unit.decimal_point,
                }
            )
        }
    )
