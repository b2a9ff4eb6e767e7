"""
Base class for endpoint services.

Every public operation runs the same cycle:
    VALIDATING -> REJECTED                       (ValidationError, no network call)
    VALIDATING -> CALLING -> FAILED              (TransportError)
    VALIDATING -> CALLING -> NORMALIZING -> DONE (canonical records)

Services hold only the shared transport (and through it, read-only settings),
so one instance can serve any number of concurrent callers.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from ..exceptions import ValidationError
from ..models import RequestDescriptor
from ..transport import DhanTransport
from ..validation import ValidationResult, get_contract, run_rules

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=RequestDescriptor)

Params = Union[RequestDescriptor, Mapping[str, Any]]


class EndpointService:
    """Validate, call, hand back the raw body; subclasses normalize it."""

    def __init__(self, transport: DhanTransport) -> None:
        self._transport = transport

    @staticmethod
    def as_request(request_type: Type[R], params: Params) -> R:
        if isinstance(params, request_type):
            return params
        if isinstance(params, Mapping):
            return request_type.from_params(params)
        raise TypeError(
            f"Expected {request_type.__name__} or a parameter mapping, got {type(params).__name__}"
        )

    @staticmethod
    def with_fields(request: R, **overrides: Any) -> R:
        """Copy of ``request`` with fixed fields pre-filled (used by convenience wrappers)."""
        return dataclasses.replace(request, **overrides)

    @staticmethod
    def check(family: str, request: Any) -> ValidationResult:
        return run_rules(request, get_contract(family).rules)

    async def call(
        self,
        family: str,
        request: Optional[RequestDescriptor],
        error_context: str,
        **path_params: Any,
    ) -> Any:
        contract = get_contract(family)

        if request is not None:
            result = self.check(family, request)
            if not result.ok:
                logger.info("[%s] rejected with %d violation(s): %s", family, len(result.violations), result.message)
                raise ValidationError(result.violations)

        path = contract.path.format(**path_params) if path_params else contract.path
        body = request.to_payload() if (request is not None and contract.send_json) else None
        return await self._transport.request(
            contract.method,
            path,
            json_body=body,
            send_json=contract.send_json,
            error_context=error_context,
        )
