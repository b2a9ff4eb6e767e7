"""
Trade book service (GET /trades, GET /trades/{order_id}).
"""
from __future__ import annotations

from typing import List
from urllib.parse import quote

from ..exceptions import ValidationError
from ..models import TradeRecord
from ..normalizers import normalize_trade_details, normalize_trades
from ..validation import fields
from ..validation.contracts import TRADE_DETAILS, TRADE_LIST
from .base import EndpointService


class TradesService(EndpointService):
    """Trades executed today"""

    async def get_all_trades(self) -> List[TradeRecord]:
        raw = await self.call(TRADE_LIST, None, "Failed to fetch trades")
        return normalize_trades(raw)

    async def get_trade_details(self, order_id: str) -> TradeRecord:
        if not fields.is_present(order_id):
            raise ValidationError(["Order ID is required"])
        raw = await self.call(TRADE_DETAILS, None, "Failed to fetch trade details", order_id=quote(str(order_id), safe=""))
        return normalize_trade_details(raw)
