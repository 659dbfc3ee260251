"""Typed input records for master and voucher imports.

Field names follow the JSON accepted by the importer. Models are frozen;
assemblers read them and never mutate them.
"""
from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from tally_xml.common.types import IMPORTABLE_VOUCHER_TYPES, GstRegistrationType, VoucherType
from tally_xml.common.utils import parse_date

GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")

DEFAULT_LEDGER_PARENT = "Sundry Debtors"


def is_valid_gstin(value: str) -> bool:
    return GSTIN_PATTERN.fullmatch(value) is not None


def _require_text(value: str, info: ValidationInfo) -> str:
    if not value.strip():
        raise ValueError(f"Missing required field '{info.field_name}'")
    return value


def _check_gstin(value: str | None) -> str | None:
    if not value:
        return None
    if not is_valid_gstin(value):
        raise ValueError("Invalid GSTIN format")
    return value


def _canonical_registration_type(value: Any) -> Any:
    if isinstance(value, str):
        for member in GstRegistrationType:
            if member.value.lower() == value.strip().lower():
                return member.value
    return value


def _parse_date_field(value: Any, field_name: str, required: bool) -> Any:
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str) and not value.strip():
        if not required:
            return None
        raise ValueError(f"Missing required field '{field_name}'")
    try:
        return parse_date(value)
    except ValueError:
        raise ValueError(f"Invalid date format for '{field_name}'. Use YYYY-MM-DD format") from None


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


class _InputModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True, coerce_numbers_to_str=True)


# ---------------------------------------------------------------------------
# Masters
# ---------------------------------------------------------------------------


class UnitIn(_InputModel):
    name: str
    uqc_name: str
    decimal_point: int | None = None


class LedgerIn(_InputModel):
    name: str
    parent: str = DEFAULT_LEDGER_PARENT
    address: list[str] = Field(default_factory=list)
    state: str | None = None
    country: str | None = None
    pincode: str | None = None
    gst_registration_type: str | None = None
    gst_in: str | None = None
    gst_duty_head: str | None = None
    gst_percentage: Decimal | None = None

    @field_validator("parent", mode="before")
    @classmethod
    def _default_parent(cls, value: Any) -> Any:
        return value or DEFAULT_LEDGER_PARENT

    @field_validator("address", mode="before")
    @classmethod
    def _address_lines(cls, value: Any) -> Any:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("gst_registration_type", mode="before")
    @classmethod
    def _registration_type(cls, value: Any) -> Any:
        return _canonical_registration_type(value)

    @field_validator("gst_in")
    @classmethod
    def _gstin(cls, value: str | None) -> str | None:
        return _check_gstin(value)


class StockItemIn(_InputModel):
    name: str
    unit: str
    gst_applicable: bool | None = None
    gst_supply_type: str | None = None
    hsn: str | None = None
    gst_percentage: Decimal | None = None
    price: Decimal | None = None

    @model_validator(mode="after")
    def _gst_details_present(self) -> StockItemIn:
        if self.gst_applicable is True:
            missing = [f"'{name}'" for name in ("gst_percentage", "hsn") if getattr(self, name) in (None, "")]
            if missing:
                raise ValueError(f"GST applicable but {' and '.join(missing)} missing")
        return self


# ---------------------------------------------------------------------------
# Vouchers
# ---------------------------------------------------------------------------


class VoucherItemIn(_InputModel):
    ledger_name: str
    stock_item_name: str
    unit: str
    price: Decimal = Field(validation_alias=AliasChoices("price", "rate"))
    qty: Decimal
    discount: Decimal | None = None


class TaxDetailIn(_InputModel):
    name: str
    amount: Decimal


class ChargeIn(_InputModel):
    name: str
    amount: Decimal


class LedgerEntryIn(_InputModel):
    """A line whose debit/credit side is chosen by the caller (journals)."""

    name: str
    amount: Decimal
    is_debit: bool = True


class RoundOffIn(_InputModel):
    name: str = "Round Off"
    amount: Decimal = Decimal("0")


class VoucherIn(_InputModel):
    voucher_type: VoucherType
    voucher_number: str
    voucher_date: date
    ledger_name: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    state: str | None = None
    country: str | None = None
    pincode: str | None = None
    gst_registration_type: str | None = None
    gst_in: str | None = None
    place_of_supply: str | None = None
    narration: str | None = None
    reference: str | None = None
    reference_date: date | None = None
    voucher_items: list[VoucherItemIn] | None = None
    tax_details: list[TaxDetailIn] = Field(default_factory=list)
    additional_charges: list[ChargeIn] = Field(default_factory=list)
    ledger_entries: list[LedgerEntryIn] = Field(default_factory=list)
    round_off: RoundOffIn | None = None
    total: Decimal | None = None

    @field_validator("voucher_type", mode="before")
    @classmethod
    def _importable_type(cls, value: Any) -> VoucherType:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("Missing required field 'voucher_type'")
        try:
            kind = VoucherType(value)
        except ValueError:
            kind = None
        if kind not in IMPORTABLE_VOUCHER_TYPES:
            allowed = ", ".join(k.value for k in IMPORTABLE_VOUCHER_TYPES)
            raise ValueError(f"Invalid voucher_type {value!r}. Must be one of: {allowed}")
        return kind

    @field_validator("voucher_number")
    @classmethod
    def _voucher_number(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info)

    @field_validator("voucher_date", "reference_date", mode="before")
    @classmethod
    def _dates(cls, value: Any, info: ValidationInfo) -> Any:
        return _parse_date_field(value, info.field_name, required=info.field_name == "voucher_date")

    @field_validator("gst_in")
    @classmethod
    def _gstin(cls, value: str | None) -> str | None:
        return _check_gstin(value)

    @field_validator("gst_registration_type", mode="before")
    @classmethod
    def _registration_type(cls, value: Any) -> Any:
        return _canonical_registration_type(value)

    @field_validator("voucher_items")
    @classmethod
    def _items_not_empty(cls, value: list[VoucherItemIn] | None) -> list[VoucherItemIn] | None:
        if value is not None and not value:
            raise ValueError("'voucher_items' array is empty")
        return value

    @field_validator("tax_details", "additional_charges", "ledger_entries", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _none_as_empty(value)


# ---------------------------------------------------------------------------
# Import payloads
# ---------------------------------------------------------------------------


class MasterImport(_InputModel):
    company_name: str
    ledger: list[LedgerIn] = Field(validation_alias=AliasChoices("ledger", "ledgers"))

    @field_validator("company_name")
    @classmethod
    def _company_name(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info)


class VoucherImport(_InputModel):
    company_name: str
    units: list[UnitIn] = Field(default_factory=list)
    ledgers: list[LedgerIn] = Field(default_factory=list)
    stock_item: list[StockItemIn] = Field(
        default_factory=list, validation_alias=AliasChoices("stock_item", "stock_items")
    )
    voucher: VoucherIn

    @field_validator("company_name")
    @classmethod
    def _company_name(cls, value: str, info: ValidationInfo) -> str:
        return _require_text(value, info)

    @field_validator("units", "ledgers", "stock_item", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _none_as_empty(value)
