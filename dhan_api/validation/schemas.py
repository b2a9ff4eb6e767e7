"""
Canonical enumerations and raw-response JSON Schemas.

These are intentionally strict and are shared across every endpoint family.
Do NOT duplicate per-service value lists; services reference these.
"""

from __future__ import annotations

from typing import Tuple

DATE_YYYY_MM_DD_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

MAX_HISTORICAL_DAYS = 365

# Order / margin / trade / position endpoints do not accept the index segment.
EXCHANGE_SEGMENT_ENUM: Tuple[str, ...] = (
    "NSE_EQ",
    "NSE_FNO",
    "BSE_EQ",
    "BSE_FNO",
    "MCX_COMM",
)

# Chart endpoints additionally accept IDX_I for indices (NIFTY, SENSEX, ...).
CHART_EXCHANGE_SEGMENT_ENUM: Tuple[str, ...] = EXCHANGE_SEGMENT_ENUM + ("IDX_I",)

INSTRUMENT_ENUM: Tuple[str, ...] = (
    "INDEX",
    "FUTIDX",
    "OPTIDX",
    "EQUITY",
    "FUTSTK",
    "OPTSTK",
    "FUTCOM",
    "OPTFUT",
)

EXPIRY_REQUIRED_INSTRUMENTS: Tuple[str, ...] = (
    "FUTIDX",
    "OPTIDX",
    "FUTSTK",
    "OPTSTK",
    "FUTCOM",
    "OPTFUT",
)

INTRADAY_INTERVAL_ENUM: Tuple[str, ...] = ("1", "5", "15", "25", "60")

TRANSACTION_TYPE_ENUM: Tuple[str, ...] = ("BUY", "SELL")

PRODUCT_TYPE_ENUM: Tuple[str, ...] = ("CNC", "INTRADAY", "MARGIN", "MTF", "CO", "BO")

ORDER_TYPE_ENUM: Tuple[str, ...] = ("LIMIT", "MARKET", "STOP_LOSS", "STOP_LOSS_MARKET")

OPTION_TYPE_ENUM: Tuple[str, ...] = ("CALL", "PUT", "NA")

POSITION_TYPE_ENUM: Tuple[str, ...] = ("LONG", "SHORT", "CLOSED")

# Product types that need a trigger price (cover and bracket orders).
TRIGGER_REQUIRED_PRODUCT_TYPES: Tuple[str, ...] = ("CO", "BO")

# from_product_type -> product types a position may be converted into.
POSITION_CONVERSION_PATHS = {
    "INTRADAY": ("CNC", "MARGIN"),
    "CNC": ("INTRADAY", "MTF"),
    "MARGIN": ("INTRADAY",),
    "MTF": ("CNC",),
    "CO": ("INTRADAY",),
    "BO": ("INTRADAY",),
}


# ---------------------------------------------------------------------------
# Raw response shapes (checked before any transformation happens)
# ---------------------------------------------------------------------------

TradeRecordSchema: dict = {
    "type": "object",
    "additionalProperties": True,
}


# Rows are filtered one by one; a bad row never fails the whole list.
TradeListSchema: dict = {
    "type": "array",
    "items": {},
}


MarginResponseSchema: dict = {
    "type": "object",
    "properties": {
        "totalMargin": {"type": ["number", "string", "null"]},
        "spanMargin": {"type": ["number", "string", "null"]},
        "exposureMargin": {"type": ["number", "string", "null"]},
        "availableBalance": {"type": ["number", "string", "null"]},
        "variableMargin": {"type": ["number", "string", "null"]},
        "insufficientBalance": {"type": ["number", "string", "null"]},
        "brokerage": {"type": ["number", "string", "null"]},
        "leverage": {"type": ["number", "string", "null"]},
    },
    "additionalProperties": True,
}


_NUMERIC_ARRAY = {"type": "array", "items": {"type": ["number", "string", "null"]}}

# Dhan returns chart data column-wise: one array per field, aligned by index.
OHLCVColumnsSchema: dict = {
    "type": "object",
    "properties": {
        "open": _NUMERIC_ARRAY,
        "high": _NUMERIC_ARRAY,
        "low": _NUMERIC_ARRAY,
        "close": _NUMERIC_ARRAY,
        "volume": _NUMERIC_ARRAY,
        "timestamp": _NUMERIC_ARRAY,
        "open_interest": _NUMERIC_ARRAY,
    },
    "required": ["open", "high", "low", "close", "timestamp"],
    "additionalProperties": True,
}


OHLCVPointsSchema: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "timestamp": {"type": ["number", "string"]},
            "open": {"type": ["number", "string"]},
            "high": {"type": ["number", "string"]},
            "low": {"type": ["number", "string"]},
            "close": {"type": ["number", "string"]},
            "volume": {"type": ["number", "string", "null"]},
        },
        "required": ["timestamp", "open", "high", "low", "close"],
        "additionalProperties": True,
    },
}


OHLCVResponseSchema: dict = {"oneOf": [OHLCVColumnsSchema, OHLCVPointsSchema]}
