"""
Request-shaping client for the Dhan v2 REST API.

Validates parameters before any network call, sends one request, and
normalizes the response into canonical records.
"""

from .client import DhanClient
from .config import Settings
from .exceptions import (
    ConfigurationError,
    DhanAPIError,
    NormalizationError,
    TransportError,
    ValidationError,
)
from .models import (
    HistoricalBarsRequest,
    IntradayBarsRequest,
    MarginCalculation,
    MarginRequest,
    OHLCVPoint,
    PositionConversionRequest,
    TradeRecord,
)
from .validation import ValidationResult

__all__ = [
    "ConfigurationError",
    "DhanAPIError",
    "DhanClient",
    "HistoricalBarsRequest",
    "IntradayBarsRequest",
    "MarginCalculation",
    "MarginRequest",
    "NormalizationError",
    "OHLCVPoint",
    "PositionConversionRequest",
    "Settings",
    "TradeRecord",
    "TransportError",
    "ValidationError",
    "ValidationResult",
]
