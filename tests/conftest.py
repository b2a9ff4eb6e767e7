import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from dhan_api import DhanClient, Settings


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, status_code: int = 200, body: Any = None, handler: Optional[Callable] = None):
        self.requests: List[httpx.Request] = []
        self._status_code = status_code
        self._body = body
        self._custom = handler
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._custom is not None:
            return self._custom(request)
        if self._body is None:
            return httpx.Response(self._status_code)
        return httpx.Response(self._status_code, json=self._body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        access_token="test-token",
        base_url="https://api.dhan.co/v2",
        client_id="1000000001",
    )


@pytest.fixture
def make_client(settings):
    def _make(status_code: int = 200, body: Any = None, handler: Optional[Callable] = None):
        transport = RecordingTransport(status_code=status_code, body=body, handler=handler)
        return DhanClient(settings, transport=transport), transport

    return _make


@pytest.fixture
def raw_trade() -> dict:
    return {
        "dhanClientId": "1000000001",
        "orderId": "112111182198",
        "exchangeOrderId": "15112111182198",
        "exchangeTradeId": "15112111182198",
        "transactionType": "BUY",
        "exchangeSegment": "NSE_EQ",
        "productType": "INTRADAY",
        "orderType": "LIMIT",
        "tradingSymbol": "TCS",
        "customSymbol": "Tata Consultancy Services",
        "securityId": "11536",
        "tradedQuantity": "40",
        "tradedPrice": "3345.8",
        "createTime": "2021-03-10 11:20:06",
        "updateTime": "2021-11-25 17:35:12",
        "exchangeTime": "2021-11-25 17:35:12",
        "drvExpiryDate": None,
        "drvOptionType": None,
        "drvStrikePrice": 0.0,
    }
