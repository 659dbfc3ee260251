"""Debit/credit sign rules for voucher lines.

Tally encodes the debit/credit side of a line twice: ISDEEMEDPOSITIVE
(Yes = debit) and the sign of AMOUNT (negative = debit). Which side a line
lands on depends on the voucher kind and on the line's role:

  - Outflow kinds (Sale, Purchase Return, Payment): the party is debited.
  - Inflow kinds (Purchase, Sale Return, Receipt): the party is credited.
  - Goods move opposite to money, so inventory lines follow their own set
    (Purchase, Sale Return bring stock in).
  - Round-off lines carry a caller-signed amount; only its sign matters.

Every function here is a constant-time lookup with no state.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tally_xml.common.types import EntryRole, VoucherType
from tally_xml.common.utils import to_decimal

# ---------------------------------------------------------------------------
# Kind sets
# ---------------------------------------------------------------------------

OUTFLOW_KINDS = frozenset({VoucherType.SALE, VoucherType.PURCHASE_RETURN, VoucherType.PAYMENT})
INFLOW_KINDS = frozenset({VoucherType.PURCHASE, VoucherType.SALE_RETURN, VoucherType.RECEIPT})
GOODS_IN_KINDS = frozenset({VoucherType.PURCHASE, VoucherType.SALE_RETURN})

# role -> (kinds where the line is NOT deemed positive, kinds where the amount is negated)
# For every role but PARTY a line is deemed positive exactly when it is negated.
_PARTY_RULE = (INFLOW_KINDS, OUTFLOW_KINDS)
_SAME_SET_ROLES: dict[EntryRole, frozenset[VoucherType]] = {
    EntryRole.INVENTORY_ITEM: GOODS_IN_KINDS,
    EntryRole.TAX: INFLOW_KINDS,
    EntryRole.ADDITIONAL_LEDGER: INFLOW_KINDS,
}


@dataclass(frozen=True)
class SignRule:
    deemed_positive: bool
    negate: bool


def sign_rule(kind: VoucherType | str, role: EntryRole | str, amount: Any = None) -> SignRule:
    """Resolve the sign rule for one line.

    ``amount`` is only consulted for round-off lines, whose polarity follows
    the sign of the raw amount.
    """
    kind = VoucherType(kind)
    role = EntryRole(role)

    if role is EntryRole.PARTY:
        not_positive, negated = _PARTY_RULE
        return SignRule(deemed_positive=kind not in not_positive, negate=kind in negated)

    if role is EntryRole.ROUND_OFF:
        negative = amount is not None and to_decimal(amount) < 0
        return SignRule(deemed_positive=negative, negate=False)

    flipped = kind in _SAME_SET_ROLES[role]
    return SignRule(deemed_positive=flipped, negate=flipped)


def resolve_polarity(kind: VoucherType | str, role: EntryRole | str, amount: Any = None) -> bool:
    return sign_rule(kind, role, amount).deemed_positive


def adjust_amount(amount: Any, kind: VoucherType | str, role: EntryRole | str) -> Decimal:
    """Return ``amount`` with the sign Tally expects for this kind and role.

    Zero is returned unchanged; callers drop zero-valued optional lines
    themselves.
    """
    value = to_decimal(amount)
    if not value:
        return value
    if sign_rule(kind, role, value).negate:
        return value.copy_negate()
    return value


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"
