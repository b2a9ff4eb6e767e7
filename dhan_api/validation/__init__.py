"""
Validation contracts for the Dhan REST endpoints.

This package is the single source of truth for:
- Enumerations and raw-response JSON Schemas
- Rules that block a request with missing/invalid parameters before any network call
"""

from .contracts import ENDPOINT_CONTRACTS, EndpointContract, get_contract, validate_request
from .guard import ValidationResult, check_shape, run_rules

__all__ = [
    "ENDPOINT_CONTRACTS",
    "EndpointContract",
    "ValidationResult",
    "check_shape",
    "get_contract",
    "run_rules",
    "validate_request",
]
