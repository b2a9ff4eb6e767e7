"""
Response normalizers: raw Dhan JSON -> canonical records.

Shapes are checked first (JSON Schema, see validation/schemas.py) so that
transformation never has to guess what it was given.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as RecordValidationError

from .exceptions import NormalizationError
from .models import MarginCalculation, OHLCVPoint, TradeRecord
from .validation.guard import check_shape
from .validation.schemas import (
    EXCHANGE_SEGMENT_ENUM,
    MarginResponseSchema,
    OHLCVResponseSchema,
    OPTION_TYPE_ENUM,
    ORDER_TYPE_ENUM,
    PRODUCT_TYPE_ENUM,
    TRANSACTION_TYPE_ENUM,
    TradeListSchema,
    TradeRecordSchema,
)

logger = logging.getLogger(__name__)

TRADE_REQUIRED_FIELDS = (
    "orderId",
    "exchangeOrderId",
    "exchangeTradeId",
    "tradingSymbol",
    "securityId",
    "tradedQuantity",
    "tradedPrice",
)

TRADE_ENUM_FIELDS = {
    "transactionType": TRANSACTION_TYPE_ENUM,
    "exchangeSegment": EXCHANGE_SEGMENT_ENUM,
    "productType": PRODUCT_TYPE_ENUM,
    "orderType": ORDER_TYPE_ENUM,
    "drvOptionType": OPTION_TYPE_ENUM,
}

# Dhan uses "NA" for "not applicable" in date and option fields.
_NOT_APPLICABLE = "NA"

# Epoch values below this are seconds, anything above is milliseconds.
_EPOCH_MS_THRESHOLD = 100_000_000_000


def _require_shape(schema: dict, payload: Any, what: str) -> None:
    errors = check_shape(schema, payload)
    if errors:
        raise NormalizationError(
            f"Invalid response format: Expected {what}",
            details={"schema_errors": errors[:10]},
        )


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def _to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise NormalizationError(f"{field} is not a number: {value!r}")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        raise NormalizationError(f"{field} is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise NormalizationError(f"{field} is not a finite number: {value!r}")
    return number


def _to_int(value: Any, field: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # "12.0" and 12.7 both become 12, the way a leading-integer parse reads them.
    return int(_to_float(value, field))


def _optional_float(value: Any, field: str) -> Optional[float]:
    if value is None or value == "" or value == _NOT_APPLICABLE:
        return None
    return _to_float(value, field)


def _from_epoch(value: float) -> Optional[datetime]:
    seconds = value / 1000.0 if abs(value) >= _EPOCH_MS_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_time(value: Any, field: str = "time") -> Optional[datetime]:
    """Dhan timestamps ("2021-03-10 11:20:06", ISO strings, epochs) -> datetime or None."""
    if not value or value == _NOT_APPLICABLE:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = _from_epoch(float(value))
        except OverflowError:
            parsed = None
        if parsed is None:
            logger.warning("[normalize] out-of-range %s %r; leaving it empty", field, value)
        return parsed
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.warning("[normalize] unreadable %s %r; leaving it empty", field, value)
            return None
    logger.warning("[normalize] unexpected %s type %s; leaving it empty", field, type(value).__name__)
    return None


def to_epoch_ms(value: Any) -> int:
    """Epoch seconds, epoch milliseconds or a date string -> epoch milliseconds."""
    if isinstance(value, bool):
        raise NormalizationError(f"timestamp is not a time: {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            parsed = parse_time(value, "timestamp")
            if parsed is None:
                raise NormalizationError(f"timestamp is not a time: {value!r}") from None
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return int(parsed.timestamp() * 1000)
    else:
        raise NormalizationError(f"timestamp is not a time: {value!r}")
    if not math.isfinite(number):
        raise NormalizationError(f"timestamp is not a time: {value!r}")
    if abs(number) >= _EPOCH_MS_THRESHOLD:
        return int(number)
    return int(round(number * 1000))


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

def is_valid_trade(trade: Any) -> bool:
    if not trade or not isinstance(trade, dict):
        return False
    if not all(trade.get(f) for f in TRADE_REQUIRED_FIELDS):
        return False
    for f, allowed in TRADE_ENUM_FIELDS.items():
        value = trade.get(f)
        if value and value not in allowed:
            return False
    return True


def normalize_trade(trade: Dict[str, Any]) -> TradeRecord:
    """Transform one already-validated raw trade."""
    try:
        return _build_trade(trade)
    except RecordValidationError as e:
        raise NormalizationError(
            f"Trade {trade.get('orderId')} does not fit the trade record",
            details={"errors": e.errors(include_url=False)},
        ) from e


def _build_trade(trade: Dict[str, Any]) -> TradeRecord:
    return TradeRecord(
        order_id=str(trade["orderId"]),
        exchange_order_id=str(trade["exchangeOrderId"]),
        exchange_trade_id=str(trade["exchangeTradeId"]),
        transaction_type=trade.get("transactionType") or None,
        exchange_segment=trade.get("exchangeSegment") or None,
        product_type=trade.get("productType") or None,
        order_type=trade.get("orderType") or None,
        trading_symbol=str(trade["tradingSymbol"]),
        custom_symbol=trade.get("customSymbol") or None,
        security_id=str(trade["securityId"]),
        traded_quantity=_to_int(trade["tradedQuantity"], "tradedQuantity"),
        traded_price=_to_float(trade["tradedPrice"], "tradedPrice"),
        create_time=parse_time(trade.get("createTime"), "createTime"),
        update_time=parse_time(trade.get("updateTime"), "updateTime"),
        exchange_time=parse_time(trade.get("exchangeTime"), "exchangeTime"),
        drv_expiry_date=parse_time(trade.get("drvExpiryDate"), "drvExpiryDate"),
        drv_option_type=trade.get("drvOptionType") or None,
        drv_strike_price=_optional_float(trade.get("drvStrikePrice"), "drvStrikePrice") or None,
    )


def normalize_trades(payload: Any) -> List[TradeRecord]:
    """List fetch: malformed trades are dropped, never raised."""
    _require_shape(TradeListSchema, payload, "array of trades")
    records: List[TradeRecord] = []
    dropped = 0
    for trade in payload:
        if not is_valid_trade(trade):
            dropped += 1
            continue
        try:
            records.append(normalize_trade(trade))
        except NormalizationError as e:
            dropped += 1
            logger.warning("[normalize_trades] dropping trade %s: %s", trade.get("orderId"), e.message)
    if dropped:
        logger.info("[normalize_trades] kept %d trade(s), dropped %d malformed", len(records), dropped)
    return records


def normalize_trade_details(payload: Any) -> TradeRecord:
    """Single fetch: a malformed trade is an error."""
    _require_shape(TradeRecordSchema, payload, "trade object")
    if not is_valid_trade(payload):
        raise NormalizationError("Invalid trade data received")
    return normalize_trade(payload)


# ---------------------------------------------------------------------------
# OHLCV
# ---------------------------------------------------------------------------

def _columns_to_points(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Zip Dhan's column-wise arrays into one dict per candle."""
    opens = data.get("open", [])
    highs = data.get("high", [])
    lows = data.get("low", [])
    closes = data.get("close", [])
    timestamps = data.get("timestamp", [])
    volumes = data.get("volume") or []
    oi = data.get("open_interest") or []

    length = len(opens)
    if not all(len(col) == length for col in (highs, lows, closes, timestamps)):
        raise NormalizationError("Invalid response format: OHLC columns have different lengths")

    points = []
    for i in range(length):
        points.append({
            "timestamp": timestamps[i],
            "open": opens[i],
            "high": highs[i],
            "low": lows[i],
            "close": closes[i],
            "volume": volumes[i] if i < len(volumes) else 0,
            "open_interest": oi[i] if i < len(oi) else None,
        })
    return points


def normalize_ohlcv_point(item: Dict[str, Any]) -> OHLCVPoint:
    volume = item.get("volume")
    return OHLCVPoint(
        timestamp=to_epoch_ms(item["timestamp"]),
        open=_to_float(item["open"], "open"),
        high=_to_float(item["high"], "high"),
        low=_to_float(item["low"], "low"),
        close=_to_float(item["close"], "close"),
        volume=_to_int(volume, "volume") if volume not in (None, "") else 0,
        open_interest=_optional_float(item.get("open_interest"), "open_interest"),
    )


def normalize_ohlcv(payload: Any) -> List[OHLCVPoint]:
    _require_shape(OHLCVResponseSchema, payload, "OHLCV columns or an array of OHLCV points")
    points = _columns_to_points(payload) if isinstance(payload, dict) else payload
    return [normalize_ohlcv_point(p) for p in points]


# ---------------------------------------------------------------------------
# Margin
# ---------------------------------------------------------------------------

_MARGIN_NUMERIC_FIELDS = (
    "totalMargin",
    "spanMargin",
    "exposureMargin",
    "availableBalance",
    "variableMargin",
    "insufficientBalance",
    "brokerage",
    "leverage",
)


def normalize_margin(payload: Any) -> MarginCalculation:
    _require_shape(MarginResponseSchema, payload, "margin object")
    values = dict(payload)
    for f in _MARGIN_NUMERIC_FIELDS:
        if f in values:
            values[f] = _optional_float(values[f], f)
    return MarginCalculation(**values)
