"""
Chart data service: daily candles (POST /charts/historical) and
minute candles (POST /charts/intraday).
"""
from __future__ import annotations

from typing import List, Optional

from ..models import HistoricalBarsRequest, IntradayBarsRequest, OHLCVPoint
from ..normalizers import normalize_ohlcv
from ..validation import ValidationResult
from ..validation.contracts import HISTORICAL, INTRADAY
from .base import EndpointService, Params

DEFAULT_INTRADAY_INTERVAL = "5"


class ChartDataService(EndpointService):
    """OHLCV bars for equities, indices, futures and commodities"""

    def validate_historical_params(self, params: Params) -> ValidationResult:
        return self.check(HISTORICAL, self.as_request(HistoricalBarsRequest, params))

    def validate_intraday_params(self, params: Params) -> ValidationResult:
        return self.check(INTRADAY, self.as_request(IntradayBarsRequest, params))

    async def get_historical_data(self, params: Params) -> List[OHLCVPoint]:
        request = self.as_request(HistoricalBarsRequest, params)
        raw = await self.call(HISTORICAL, request, "Failed to fetch historical data")
        return normalize_ohlcv(raw)

    async def get_intraday_data(self, params: Params) -> List[OHLCVPoint]:
        request = self.as_request(IntradayBarsRequest, params)
        raw = await self.call(INTRADAY, request, "Failed to fetch intraday data")
        return normalize_ohlcv(raw)

    # Historical presets

    async def get_equity_historical_data(self, security_id: str, from_date: str, to_date: str) -> List[OHLCVPoint]:
        return await self.get_historical_data(HistoricalBarsRequest(
            security_id=security_id,
            exchange_segment="NSE_EQ",
            instrument="EQUITY",
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_index_historical_data(self, index_id: str, from_date: str, to_date: str) -> List[OHLCVPoint]:
        return await self.get_historical_data(HistoricalBarsRequest(
            security_id=index_id,
            exchange_segment="IDX_I",
            instrument="INDEX",
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_futures_historical_data(
        self, security_id: str, expiry_code: Optional[int], from_date: str, to_date: str
    ) -> List[OHLCVPoint]:
        return await self.get_historical_data(HistoricalBarsRequest(
            security_id=security_id,
            exchange_segment="NSE_FNO",
            instrument="FUTSTK",
            expiry_code=expiry_code,
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_commodity_historical_data(
        self, security_id: str, expiry_code: Optional[int], from_date: str, to_date: str
    ) -> List[OHLCVPoint]:
        return await self.get_historical_data(HistoricalBarsRequest(
            security_id=security_id,
            exchange_segment="MCX_COMM",
            instrument="FUTCOM",
            expiry_code=expiry_code,
            from_date=from_date,
            to_date=to_date,
        ))

    # Intraday presets

    async def get_equity_intraday_data(
        self, security_id: str, from_date: str, to_date: str, interval: str = DEFAULT_INTRADAY_INTERVAL
    ) -> List[OHLCVPoint]:
        return await self.get_intraday_data(IntradayBarsRequest(
            security_id=security_id,
            exchange_segment="NSE_EQ",
            instrument="EQUITY",
            interval=interval,
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_index_intraday_data(
        self, index_id: str, from_date: str, to_date: str, interval: str = DEFAULT_INTRADAY_INTERVAL
    ) -> List[OHLCVPoint]:
        return await self.get_intraday_data(IntradayBarsRequest(
            security_id=index_id,
            exchange_segment="IDX_I",
            instrument="INDEX",
            interval=interval,
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_futures_intraday_data(
        self, security_id: str, from_date: str, to_date: str, interval: str = DEFAULT_INTRADAY_INTERVAL
    ) -> List[OHLCVPoint]:
        return await self.get_intraday_data(IntradayBarsRequest(
            security_id=security_id,
            exchange_segment="NSE_FNO",
            instrument="FUTSTK",
            interval=interval,
            from_date=from_date,
            to_date=to_date,
        ))

    async def get_commodity_intraday_data(
        self, security_id: str, from_date: str, to_date: str, interval: str = DEFAULT_INTRADAY_INTERVAL
    ) -> List[OHLCVPoint]:
        return await self.get_intraday_data(IntradayBarsRequest(
            security_id=security_id,
            exchange_segment="MCX_COMM",
            instrument="FUTCOM",
            interval=interval,
            from_date=from_date,
            to_date=to_date,
        ))
