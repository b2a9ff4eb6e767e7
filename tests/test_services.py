import asyncio

import httpx
import pytest

from dhan_api import (
    MarginCalculation,
    MarginRequest,
    NormalizationError,
    OHLCVPoint,
    TransportError,
    ValidationError,
)

MARGIN_PARAMS = {
    "dhanClientId": "1000000001",
    "exchangeSegment": "NSE_EQ",
    "transactionType": "BUY",
    "quantity": 10,
    "securityId": "1333",
    "price": 1650.5,
}

MARGIN_BODY = {
    "totalMargin": 4126.25,
    "spanMargin": 0,
    "exposureMargin": 0,
    "availableBalance": 100000,
    "variableMargin": 4126.25,
    "insufficientBalance": 0,
    "brokerage": 20,
    "leverage": "4.00",
}

CANDLES = {
    "open": [1650.0, 1652.5],
    "high": [1655.0, 1656.0],
    "low": [1648.0, 1651.0],
    "close": [1652.5, 1654.0],
    "volume": [12000, 8000],
    "timestamp": [1704426300, 1704426600],
}


# ---------------------------------------------------------------------------
# Margin
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_calculate_margin_posts_camel_case_payload(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    margin = await client.calculate_margin(MARGIN_PARAMS)

    assert isinstance(margin, MarginCalculation)
    assert margin.total_margin == pytest.approx(4126.25)
    assert margin.leverage == 4.0
    assert transport.calls == 1
    assert transport.requests[0].url.path == "/v2/margincalculator"
    assert transport.last_json() == MARGIN_PARAMS


@pytest.mark.asyncio
async def test_calculate_margin_accepts_request_object(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    await client.calculate_margin(MarginRequest.from_params(MARGIN_PARAMS))

    assert transport.last_json()["securityId"] == "1333"


@pytest.mark.asyncio
async def test_invalid_margin_request_never_reaches_network(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    with pytest.raises(ValidationError) as excinfo:
        await client.calculate_margin(dict(MARGIN_PARAMS, quantity=0, price=-5))

    assert transport.calls == 0
    assert excinfo.value.violations == (
        "Quantity must be a positive number",
        "Price must be a positive number",
    )
    assert str(excinfo.value) == "Validation failed: Quantity must be a positive number, Price must be a positive number"


@pytest.mark.asyncio
async def test_equity_wrapper_prefills_segment_and_product(make_client):
    client, transport = make_client(body=MARGIN_BODY)
    params = dict(MARGIN_PARAMS, exchangeSegment="NSE_FNO")

    await client.margin.calculate_equity_margin(params)

    body = transport.last_json()
    assert body["exchangeSegment"] == "NSE_EQ"
    assert body["productType"] == "CNC"


@pytest.mark.asyncio
async def test_fno_wrapper_prefills_segment_and_product(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    await client.margin.calculate_fno_margin(MARGIN_PARAMS)

    body = transport.last_json()
    assert body["exchangeSegment"] == "NSE_FNO"
    assert body["productType"] == "MARGIN"


@pytest.mark.asyncio
async def test_cover_order_wrapper_still_needs_trigger_price(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    with pytest.raises(ValidationError) as excinfo:
        await client.margin.calculate_cover_order_margin(MARGIN_PARAMS)
    assert excinfo.value.violations == ("Trigger price is required for CO and BO orders",)
    assert transport.calls == 0

    await client.margin.calculate_bracket_order_margin(dict(MARGIN_PARAMS, triggerPrice=1640))
    assert transport.last_json()["productType"] == "BO"
    assert transport.last_json()["triggerPrice"] == 1640


def test_validate_margin_params_reports_without_raising(make_client):
    client, transport = make_client()

    result = client.margin.validate_margin_params({})

    assert not result.ok
    assert result.violations[0] == "dhanClientId is required"
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_margin_upstream_error_is_surfaced(make_client):
    client, _ = make_client(status_code=400, body={"errorCode": "DH-905", "message": "Invalid securityId"})

    with pytest.raises(TransportError) as excinfo:
        await client.calculate_margin(MARGIN_PARAMS)

    assert str(excinfo.value) == "Margin calculation failed: Invalid securityId"
    assert excinfo.value.status_code == 400


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_historical_data_returns_points(make_client):
    client, transport = make_client(body=CANDLES)

    points = await client.charts.get_equity_historical_data("1333", "2024-01-01", "2024-02-01")

    assert [type(p) for p in points] == [OHLCVPoint, OHLCVPoint]
    assert points[0].timestamp == 1704426300000
    assert points[1].close == 1654.0
    assert transport.requests[0].url.path == "/v2/charts/historical"
    assert transport.last_json() == {
        "securityId": "1333",
        "exchangeSegment": "NSE_EQ",
        "instrument": "EQUITY",
        "fromDate": "2024-01-01",
        "toDate": "2024-02-01",
    }


@pytest.mark.asyncio
async def test_futures_historical_without_expiry_is_rejected(make_client):
    client, transport = make_client(body=CANDLES)

    with pytest.raises(ValidationError) as excinfo:
        await client.charts.get_futures_historical_data("52175", None, "2024-01-01", "2024-02-01")

    assert excinfo.value.violations == ("expiryCode is required for futures and options instruments",)
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_index_historical_wrapper(make_client):
    client, transport = make_client(body=CANDLES)

    await client.charts.get_index_historical_data("13", "2024-01-01", "2024-02-01")

    body = transport.last_json()
    assert body["exchangeSegment"] == "IDX_I"
    assert body["instrument"] == "INDEX"


@pytest.mark.asyncio
async def test_intraday_data_uses_default_interval(make_client):
    client, transport = make_client(body=CANDLES)

    points = await client.charts.get_futures_intraday_data("52175", "2024-01-05", "2024-01-05")

    assert len(points) == 2
    assert transport.requests[0].url.path == "/v2/charts/intraday"
    body = transport.last_json()
    assert body["interval"] == "5"
    assert body["instrument"] == "FUTSTK"
    assert "expiryCode" not in body


@pytest.mark.asyncio
async def test_intraday_rejects_unsupported_interval(make_client):
    client, transport = make_client(body=CANDLES)

    with pytest.raises(ValidationError) as excinfo:
        await client.charts.get_equity_intraday_data("1333", "2024-01-05", "2024-01-05", interval="30")

    assert excinfo.value.violations == ("Invalid interval. Must be one of: 1, 5, 15, 25, 60",)
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_unexpected_chart_shape_raises(make_client):
    client, _ = make_client(body={"data": "nope"})

    with pytest.raises(NormalizationError):
        await client.get_historical_data({
            "securityId": "1333",
            "exchangeSegment": "NSE_EQ",
            "instrument": "EQUITY",
            "fromDate": "2024-01-01",
            "toDate": "2024-02-01",
        })


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_all_trades_drops_malformed_entries(make_client, raw_trade):
    broken = dict(raw_trade, orderId="", tradingSymbol="INFY")
    client, transport = make_client(body=[raw_trade, broken])

    trades = await client.get_all_trades()

    assert [t.trading_symbol for t in trades] == ["TCS"]
    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v2/trades"


@pytest.mark.asyncio
async def test_get_all_trades_empty_book(make_client):
    client, _ = make_client(body=[])
    assert await client.get_all_trades() == []


@pytest.mark.asyncio
async def test_get_trade_details_builds_path(make_client, raw_trade):
    client, transport = make_client(body=raw_trade)

    trade = await client.get_trade_details("112111182198")

    assert trade.order_id == "112111182198"
    assert trade.traded_quantity == 40
    assert transport.requests[0].url.path == "/v2/trades/112111182198"


@pytest.mark.asyncio
@pytest.mark.parametrize("order_id", ["", None, "   "])
async def test_get_trade_details_requires_order_id(make_client, order_id):
    client, transport = make_client(body={})

    with pytest.raises(ValidationError) as excinfo:
        await client.get_trade_details(order_id)

    assert excinfo.value.violations == ("Order ID is required",)
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_get_trade_details_invalid_record(make_client, raw_trade):
    client, _ = make_client(body=dict(raw_trade, transactionType="HOLD"))

    with pytest.raises(NormalizationError, match="Invalid trade data received"):
        await client.get_trade_details("112111182198")


@pytest.mark.asyncio
async def test_trades_network_failure(make_client):
    def boom(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = make_client(handler=boom)

    with pytest.raises(TransportError, match="Failed to fetch trades: timed out"):
        await client.get_all_trades()


# ---------------------------------------------------------------------------
# Position conversion
# ---------------------------------------------------------------------------

CONVERSION_PARAMS = {
    "exchangeSegment": "NSE_EQ",
    "positionType": "LONG",
    "securityId": "11536",
    "tradingSymbol": "TCS",
    "convertQty": 40,
}


@pytest.mark.asyncio
async def test_conversion_fills_client_id_and_accepts_empty_ack(make_client):
    client, transport = make_client(status_code=202)

    result = await client.positions.convert_intraday_to_cnc(CONVERSION_PARAMS)

    assert result == {}
    assert transport.requests[0].url.path == "/v2/positions/convert"
    body = transport.last_json()
    assert body["dhanClientId"] == "1000000001"
    assert body["fromProductType"] == "INTRADAY"
    assert body["toProductType"] == "CNC"


@pytest.mark.asyncio
async def test_conversion_rejects_unsupported_path(make_client):
    client, transport = make_client(status_code=202)

    with pytest.raises(ValidationError) as excinfo:
        await client.convert_position(dict(CONVERSION_PARAMS, fromProductType="MTF", toProductType="INTRADAY"))

    assert excinfo.value.violations == ("Invalid product type conversion combination",)
    assert transport.calls == 0


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_one_client_serves_concurrent_callers(make_client):
    client, transport = make_client(body=MARGIN_BODY)

    results = await asyncio.gather(*[
        client.calculate_margin(dict(MARGIN_PARAMS, quantity=q)) for q in range(1, 6)
    ])

    assert len(results) == 5
    assert transport.calls == 5
    assert sorted(r.url.path for r in transport.requests) == ["/v2/margincalculator"] * 5
