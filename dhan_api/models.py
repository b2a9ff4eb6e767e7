"""
Request descriptors sent to Dhan and the canonical records built from its responses.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Number = Union[int, float]

R = TypeVar("R", bound="RequestDescriptor")


def _alias(name: str) -> Dict[str, str]:
    return {"alias": name}


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Base for per-endpoint request types.

    Fields carry their wire name in ``metadata["alias"]`` so a request can be
    built from a camelCase parameter mapping and serialized back to the JSON
    body Dhan expects.
    """

    @classmethod
    def from_params(cls: type[R], params: Mapping[str, Any]) -> R:
        """
        Build from caller params keyed by wire name (``securityId``) or
        attribute name (``security_id``). Missing keys become None so the
        rule engine can report them, instead of failing at construction.
        """
        kwargs = {}
        for f in fields(cls):
            alias = f.metadata.get("alias", f.name)
            if alias in params:
                kwargs[f.name] = params[alias]
            else:
                kwargs[f.name] = params.get(f.name)
        return cls(**kwargs)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            payload[f.metadata.get("alias", f.name)] = value
        return payload


@dataclass(frozen=True)
class MarginRequest(RequestDescriptor):
    dhan_client_id: str = field(metadata=_alias("dhanClientId"))
    exchange_segment: str = field(metadata=_alias("exchangeSegment"))
    transaction_type: str = field(metadata=_alias("transactionType"))
    quantity: Number = field(metadata=_alias("quantity"))
    security_id: str = field(metadata=_alias("securityId"))
    price: Number = field(metadata=_alias("price"))
    product_type: Optional[str] = field(default=None, metadata=_alias("productType"))
    trigger_price: Optional[Number] = field(default=None, metadata=_alias("triggerPrice"))


@dataclass(frozen=True)
class HistoricalBarsRequest(RequestDescriptor):
    security_id: str = field(metadata=_alias("securityId"))
    exchange_segment: str = field(metadata=_alias("exchangeSegment"))
    instrument: str = field(metadata=_alias("instrument"))
    from_date: str = field(metadata=_alias("fromDate"))
    to_date: str = field(metadata=_alias("toDate"))
    expiry_code: Optional[int] = field(default=None, metadata=_alias("expiryCode"))
    oi: Optional[bool] = field(default=None, metadata=_alias("oi"))


@dataclass(frozen=True)
class IntradayBarsRequest(RequestDescriptor):
    security_id: str = field(metadata=_alias("securityId"))
    exchange_segment: str = field(metadata=_alias("exchangeSegment"))
    instrument: str = field(metadata=_alias("instrument"))
    interval: str = field(metadata=_alias("interval"))
    from_date: str = field(metadata=_alias("fromDate"))
    to_date: str = field(metadata=_alias("toDate"))
    oi: Optional[bool] = field(default=None, metadata=_alias("oi"))


@dataclass(frozen=True)
class PositionConversionRequest(RequestDescriptor):
    from_product_type: str = field(metadata=_alias("fromProductType"))
    to_product_type: str = field(metadata=_alias("toProductType"))
    exchange_segment: str = field(metadata=_alias("exchangeSegment"))
    position_type: str = field(metadata=_alias("positionType"))
    security_id: str = field(metadata=_alias("securityId"))
    convert_qty: int = field(metadata=_alias("convertQty"))
    dhan_client_id: Optional[str] = field(default=None, metadata=_alias("dhanClientId"))
    trading_symbol: Optional[str] = field(default=None, metadata=_alias("tradingSymbol"))


# ---------------------------------------------------------------------------
# Canonical output records
# ---------------------------------------------------------------------------

class CanonicalRecord(BaseModel):
    """Immutable record; ``model_dump(by_alias=True)`` gives the camelCase shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class TradeRecord(CanonicalRecord):
    order_id: str
    exchange_order_id: str
    exchange_trade_id: str
    transaction_type: Optional[str] = None
    exchange_segment: Optional[str] = None
    product_type: Optional[str] = None
    order_type: Optional[str] = None
    trading_symbol: str
    custom_symbol: Optional[str] = None
    security_id: str
    traded_quantity: int
    traded_price: float
    create_time: Optional[datetime] = None
    update_time: Optional[datetime] = None
    exchange_time: Optional[datetime] = None
    drv_expiry_date: Optional[datetime] = None
    drv_option_type: Optional[str] = None
    drv_strike_price: Optional[float] = None


class OHLCVPoint(CanonicalRecord):
    timestamp: int  # epoch milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: int
    open_interest: Optional[float] = None


class MarginCalculation(CanonicalRecord):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel, extra="allow"
    )

    total_margin: Optional[float] = None
    span_margin: Optional[float] = None
    exposure_margin: Optional[float] = None
    available_balance: Optional[float] = None
    variable_margin: Optional[float] = None
    insufficient_balance: Optional[float] = None
    brokerage: Optional[float] = None
    leverage: Optional[float] = None
