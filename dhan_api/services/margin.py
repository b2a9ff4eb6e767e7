"""
Margin calculator service (POST /margincalculator).
"""
from __future__ import annotations

from ..models import MarginCalculation, MarginRequest
from ..normalizers import normalize_margin
from ..validation import ValidationResult
from ..validation.contracts import MARGIN
from .base import EndpointService, Params


class MarginCalculatorService(EndpointService):
    """Margin requirements for a prospective order"""

    def validate_margin_params(self, params: Params) -> ValidationResult:
        return self.check(MARGIN, self.as_request(MarginRequest, params))

    async def calculate_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        raw = await self.call(MARGIN, request, "Margin calculation failed")
        return normalize_margin(raw)

    # Convenience wrappers: pre-fill fixed fields, no rules of their own.

    async def calculate_equity_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        return await self.calculate_margin(
            self.with_fields(request, exchange_segment="NSE_EQ", product_type="CNC")
        )

    async def calculate_intraday_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        return await self.calculate_margin(self.with_fields(request, product_type="INTRADAY"))

    async def calculate_fno_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        return await self.calculate_margin(
            self.with_fields(request, exchange_segment="NSE_FNO", product_type="MARGIN")
        )

    async def calculate_cover_order_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        return await self.calculate_margin(self.with_fields(request, product_type="CO"))

    async def calculate_bracket_order_margin(self, params: Params) -> MarginCalculation:
        request = self.as_request(MarginRequest, params)
        return await self.calculate_margin(self.with_fields(request, product_type="BO"))
