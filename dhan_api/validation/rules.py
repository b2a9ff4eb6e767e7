"""
Per-endpoint rule sets.

A rule inspects a few fields of a request and appends human-readable
violations to a shared list. Rule order is message order, so each list below
is kept in the order callers see the messages.
"""

from __future__ import annotations

from typing import Any, Callable, List, Tuple

from . import fields
from .schemas import (
    CHART_EXCHANGE_SEGMENT_ENUM,
    EXCHANGE_SEGMENT_ENUM,
    EXPIRY_REQUIRED_INSTRUMENTS,
    INSTRUMENT_ENUM,
    INTRADAY_INTERVAL_ENUM,
    MAX_HISTORICAL_DAYS,
    POSITION_CONVERSION_PATHS,
    POSITION_TYPE_ENUM,
    PRODUCT_TYPE_ENUM,
    TRANSACTION_TYPE_ENUM,
    TRIGGER_REQUIRED_PRODUCT_TYPES,
)

Rule = Callable[[Any, List[str]], None]


def require(attr: str, label: str) -> Rule:
    def rule(request: Any, violations: List[str]) -> None:
        if not fields.is_present(getattr(request, attr)):
            violations.append(f"{label} is required")

    return rule


def one_of(attr: str, label: str, allowed: Tuple[str, ...], optional: bool = False) -> Rule:
    """Enum membership; an optional field is only checked when populated."""

    def rule(request: Any, violations: List[str]) -> None:
        value = getattr(request, attr)
        if optional and not fields.is_present(value):
            return
        message = fields.enum_violation(label, value, allowed)
        if message:
            violations.append(message)

    return rule


# ---------------------------------------------------------------------------
# Margin calculator
# ---------------------------------------------------------------------------

def _transaction_type(request: Any, violations: List[str]) -> None:
    if not fields.is_member(request.transaction_type, TRANSACTION_TYPE_ENUM):
        violations.append("Invalid transactionType. Must be either BUY or SELL")


def _quantity(request: Any, violations: List[str]) -> None:
    if not fields.is_positive_number(request.quantity):
        violations.append("Quantity must be a positive number")


def _price(request: Any, violations: List[str]) -> None:
    if not fields.is_positive_number(request.price):
        violations.append("Price must be a positive number")


def _trigger_price(request: Any, violations: List[str]) -> None:
    if request.trigger_price is not None and not fields.is_non_negative_number(request.trigger_price):
        violations.append("Trigger price must be a non-negative number")


def _product_type_compatibility(request: Any, violations: List[str]) -> None:
    product_type = request.product_type
    if not fields.is_present(product_type):
        return
    if product_type in TRIGGER_REQUIRED_PRODUCT_TYPES and request.trigger_price is None:
        violations.append("Trigger price is required for CO and BO orders")
    segment = request.exchange_segment if isinstance(request.exchange_segment, str) else ""
    if product_type == "CNC" and "EQ" not in segment:
        violations.append("CNC product type is only valid for equity segments")


MARGIN_RULES: Tuple[Rule, ...] = (
    require("dhan_client_id", "dhanClientId"),
    one_of("exchange_segment", "exchangeSegment", EXCHANGE_SEGMENT_ENUM),
    _transaction_type,
    _quantity,
    one_of("product_type", "productType", PRODUCT_TYPE_ENUM, optional=True),
    require("security_id", "securityId"),
    _price,
    _trigger_price,
    _product_type_compatibility,
)


# ---------------------------------------------------------------------------
# Charts (historical + intraday)
# ---------------------------------------------------------------------------

def _date_format(attr: str, label: str) -> Rule:
    def rule(request: Any, violations: List[str]) -> None:
        if not fields.is_valid_date(getattr(request, attr)):
            violations.append(f"Invalid {label} format. Use yyyy-MM-dd")

    return rule


def _historical_date_range(request: Any, violations: List[str]) -> None:
    if not (fields.is_present(request.from_date) and fields.is_present(request.to_date)):
        return
    message = fields.date_range_violation(request.from_date, request.to_date, MAX_HISTORICAL_DAYS)
    if message:
        violations.append(message)


def _intraday_date_range(request: Any, violations: List[str]) -> None:
    if not (fields.is_present(request.from_date) and fields.is_present(request.to_date)):
        return
    if not fields.is_date_range_within(request.from_date, request.to_date, MAX_HISTORICAL_DAYS):
        violations.append("Invalid date range. Ensure fromDate is before toDate and within 1 year")


def _index_segment(request: Any, violations: List[str]) -> None:
    if request.instrument == "INDEX" and request.exchange_segment != "IDX_I":
        violations.append("INDEX instrument type is only valid with IDX_I exchange segment")


def _expiry_code(request: Any, violations: List[str]) -> None:
    if request.instrument in EXPIRY_REQUIRED_INSTRUMENTS and not fields.is_number(request.expiry_code):
        violations.append("expiryCode is required for futures and options instruments")


HISTORICAL_RULES: Tuple[Rule, ...] = (
    require("security_id", "securityId"),
    one_of("exchange_segment", "exchangeSegment", CHART_EXCHANGE_SEGMENT_ENUM),
    one_of("instrument", "instrument", INSTRUMENT_ENUM),
    _date_format("from_date", "fromDate"),
    _date_format("to_date", "toDate"),
    _historical_date_range,
    _index_segment,
    _expiry_code,
)


INTRADAY_RULES: Tuple[Rule, ...] = (
    require("security_id", "securityId"),
    one_of("exchange_segment", "exchangeSegment", CHART_EXCHANGE_SEGMENT_ENUM),
    one_of("instrument", "instrument", INSTRUMENT_ENUM),
    one_of("interval", "interval", INTRADAY_INTERVAL_ENUM),
    _date_format("from_date", "fromDate"),
    _date_format("to_date", "toDate"),
    _intraday_date_range,
    _index_segment,
)


# ---------------------------------------------------------------------------
# Position conversion
# ---------------------------------------------------------------------------

def _known(attr: str, label: str, allowed: Tuple[str, ...]) -> Rule:
    def rule(request: Any, violations: List[str]) -> None:
        if not fields.is_member(getattr(request, attr), allowed):
            violations.append(f"Invalid or missing {label}")

    return rule


def _security_id_present(request: Any, violations: List[str]) -> None:
    if not fields.is_present(request.security_id):
        violations.append("Missing securityId")


def _convert_qty(request: Any, violations: List[str]) -> None:
    if not fields.is_positive_integer(request.convert_qty):
        violations.append("convertQty must be a positive integer")


def _distinct_product_types(request: Any, violations: List[str]) -> None:
    if request.from_product_type == request.to_product_type:
        violations.append("fromProductType and toProductType cannot be the same")


def _conversion_path(request: Any, violations: List[str]) -> None:
    from_type = request.from_product_type
    allowed = POSITION_CONVERSION_PATHS.get(from_type, ()) if isinstance(from_type, str) else ()
    if request.to_product_type not in allowed:
        violations.append("Invalid product type conversion combination")


POSITION_CONVERSION_RULES: Tuple[Rule, ...] = (
    _known("from_product_type", "fromProductType", PRODUCT_TYPE_ENUM),
    _known("to_product_type", "toProductType", PRODUCT_TYPE_ENUM),
    _known("exchange_segment", "exchangeSegment", EXCHANGE_SEGMENT_ENUM),
    _known("position_type", "positionType", POSITION_TYPE_ENUM),
    _security_id_present,
    _convert_qty,
    _distinct_product_types,
    _conversion_path,
)
