"""Shape validation for import payloads.

pydantic does the parsing; this module only turns its error list into the
flat ``"path: message"`` lines carried by ``InputValidationError`` so that a
caller sees every problem in one pass.
"""
from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tally_xml.common.errors import InputValidationError
from tally_xml.common.models import GSTIN_PATTERN, MasterImport, VoucherImport, is_valid_gstin

log = logging.getLogger("tally_xml.validation")

M = TypeVar("M", bound=BaseModel)

__all__ = ["GSTIN_PATTERN", "is_valid_gstin", "format_errors", "parse_master", "parse_voucher"]


def _message(error: dict[str, Any]) -> str:
    if error["type"] == "missing":
        return "Missing required field"
    if error["type"] == "value_error":
        cause = (error.get("ctx") or {}).get("error")
        if cause is not None:
            return str(cause)
    return error["msg"]


def format_errors(exc: ValidationError) -> list[str]:
    lines = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "payload"
        lines.append(f"{path}: {_message(error)}")
    return lines


def _parse(model: type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = format_errors(e)
        log.debug("%s rejected with %d error(s)", model.__name__, len(errors))
        raise InputValidationError(errors) from e


def parse_master(payload: Any) -> MasterImport:
    return _parse(MasterImport, payload)


def parse_voucher(payload: Any) -> VoucherImport:
    return _parse(VoucherImport, payload)
