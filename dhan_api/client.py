"""
DhanClient: one object wiring read-only settings, the transport and every
endpoint service. Construct it once and pass it to whoever needs it.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from .config import Settings
from .models import MarginCalculation, OHLCVPoint, TradeRecord
from .services import (
    ChartDataService,
    MarginCalculatorService,
    PositionConverterService,
    TradesService,
)
from .services.base import Params
from .transport import DhanTransport


class DhanClient:
    """Facade over the Dhan REST endpoints"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self.transport = DhanTransport(settings, transport=transport)
        self.margin = MarginCalculatorService(self.transport)
        self.charts = ChartDataService(self.transport)
        self.trades = TradesService(self.transport)
        self.positions = PositionConverterService(self.transport)

    @classmethod
    def from_env(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "DhanClient":
        return cls(Settings.from_env(), transport=transport)

    async def calculate_margin(self, params: Params) -> MarginCalculation:
        return await self.margin.calculate_margin(params)

    async def get_historical_data(self, params: Params) -> List[OHLCVPoint]:
        return await self.charts.get_historical_data(params)

    async def get_intraday_data(self, params: Params) -> List[OHLCVPoint]:
        return await self.charts.get_intraday_data(params)

    async def get_all_trades(self) -> List[TradeRecord]:
        return await self.trades.get_all_trades()

    async def get_trade_details(self, order_id: str) -> TradeRecord:
        return await self.trades.get_trade_details(order_id)

    async def convert_position(self, params: Params) -> Dict[str, Any]:
        return await self.positions.convert_position(params)
