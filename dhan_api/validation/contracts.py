"""
Endpoint contracts: map each endpoint family to the rules its request must satisfy
and the shape its raw response must have.

This is the single place that decides which rules guard which endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .guard import ValidationResult, run_rules
from .rules import (
    HISTORICAL_RULES,
    INTRADAY_RULES,
    MARGIN_RULES,
    POSITION_CONVERSION_RULES,
    Rule,
)
from .schemas import (
    MarginResponseSchema,
    OHLCVResponseSchema,
    TradeListSchema,
    TradeRecordSchema,
)

MARGIN = "margin"
HISTORICAL = "historical"
INTRADAY = "intraday"
POSITION_CONVERSION = "position_conversion"
TRADE_LIST = "trade_list"
TRADE_DETAILS = "trade_details"


@dataclass(frozen=True)
class EndpointContract:
    method: str
    path: str
    rules: Tuple[Rule, ...] = ()
    response_schema: Any = None
    send_json: bool = True


ENDPOINT_CONTRACTS: Dict[str, EndpointContract] = {
    MARGIN: EndpointContract("POST", "/margincalculator", MARGIN_RULES, MarginResponseSchema),
    HISTORICAL: EndpointContract("POST", "/charts/historical", HISTORICAL_RULES, OHLCVResponseSchema),
    INTRADAY: EndpointContract("POST", "/charts/intraday", INTRADAY_RULES, OHLCVResponseSchema),
    POSITION_CONVERSION: EndpointContract("POST", "/positions/convert", POSITION_CONVERSION_RULES),
    TRADE_LIST: EndpointContract("GET", "/trades", response_schema=TradeListSchema, send_json=False),
    TRADE_DETAILS: EndpointContract(
        "GET", "/trades/{order_id}", response_schema=TradeRecordSchema, send_json=False
    ),
}


def get_contract(family: str) -> EndpointContract:
    try:
        return ENDPOINT_CONTRACTS[family]
    except KeyError:
        raise KeyError(
            f"Unknown endpoint family: {family}. Available: {', '.join(ENDPOINT_CONTRACTS)}"
        ) from None


def validate_request(family: str, request: Any) -> ValidationResult:
    return run_rules(request, get_contract(family).rules)
