"""
Position conversion service (POST /positions/convert).

Converts an open position between product types, e.g. an intraday position
carried forward as delivery (INTRADAY -> CNC).
"""
from __future__ import annotations

from typing import Any, Dict

from ..models import PositionConversionRequest
from ..validation import ValidationResult
from ..validation.contracts import POSITION_CONVERSION
from .base import EndpointService, Params


class PositionConverterService(EndpointService):

    def _prepare(self, params: Params) -> PositionConversionRequest:
        request = self.as_request(PositionConversionRequest, params)
        if request.dhan_client_id is None and self._transport.settings.client_id:
            request = self.with_fields(request, dhan_client_id=self._transport.settings.client_id)
        return request

    def validate_conversion_params(self, params: Params) -> ValidationResult:
        return self.check(POSITION_CONVERSION, self._prepare(params))

    async def convert_position(self, params: Params) -> Dict[str, Any]:
        request = self._prepare(params)
        raw = await self.call(POSITION_CONVERSION, request, "Position conversion failed")
        # Dhan acknowledges with 202 and an empty body.
        return raw if isinstance(raw, dict) else {}

    async def _convert(self, params: Params, from_type: str, to_type: str) -> Dict[str, Any]:
        request = self.as_request(PositionConversionRequest, params)
        return await self.convert_position(
            self.with_fields(request, from_product_type=from_type, to_product_type=to_type)
        )

    async def convert_intraday_to_cnc(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "INTRADAY", "CNC")

    async def convert_intraday_to_margin(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "INTRADAY", "MARGIN")

    async def convert_cnc_to_mtf(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "CNC", "MTF")

    async def convert_mtf_to_cnc(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "MTF", "CNC")

    async def convert_co_to_intraday(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "CO", "INTRADAY")

    async def convert_bo_to_intraday(self, params: Params) -> Dict[str, Any]:
        return await self._convert(params, "BO", "INTRADAY")
