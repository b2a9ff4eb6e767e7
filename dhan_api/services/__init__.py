from .base import EndpointService
from .charts import ChartDataService
from .margin import MarginCalculatorService
from .positions import PositionConverterService
from .trades import TradesService

__all__ = [
    "ChartDataService",
    "EndpointService",
    "MarginCalculatorService",
    "PositionConverterService",
    "TradesService",
]
