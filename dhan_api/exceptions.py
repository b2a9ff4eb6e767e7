"""Exceptions raised at the public boundary of the Dhan client"""
from typing import Any, Dict, Iterable, Optional


class DhanAPIError(Exception):
    """Base exception for the Dhan client"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(DhanAPIError):
    """Missing or invalid client configuration"""
    pass


class ValidationError(DhanAPIError):
    """Request rejected before any network call; carries every violation"""
    def __init__(self, violations: Iterable[str]):
        self.violations = tuple(violations)
        super().__init__(
            message=f"Validation failed: {', '.join(self.violations)}",
            details={"violations": list(self.violations)},
        )


class TransportError(DhanAPIError):
    """The outbound call failed (network error or non-2xx response)"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        upstream_message: Optional[str] = None,
    ):
        self.status_code = status_code
        self.upstream_message = upstream_message
        super().__init__(
            message=message,
            details={"status_code": status_code, "upstream_message": upstream_message},
        )


class NormalizationError(DhanAPIError):
    """A response could not be turned into canonical records"""
    pass
