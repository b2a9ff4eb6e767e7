"""
Guard layer: rule evaluation + JSON Schema shape checks.

This runs BEFORE any network call (request rules) and BEFORE any
transformation (response shapes). Nothing here raises; callers get an
explicit result and decide how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from jsonschema import Draft7Validator

from .rules import Rule


@dataclass(frozen=True)
class ValidationResult:
    """Ordered violation messages; empty means the request may proceed."""

    violations: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def message(self) -> str:
        return ", ".join(self.violations)


def run_rules(request: Any, rules: Sequence[Rule]) -> ValidationResult:
    """Evaluate every rule in order; no rule stops another."""
    violations: List[str] = []
    for rule in rules:
        rule(request, violations)
    return ValidationResult(tuple(violations))


def check_shape(schema: dict, payload: Any) -> List[str]:
    """
    Returns the schema errors for ``payload`` (empty when it conforms).
    Messages are stable and prefixed with the offending path when there is one.
    """
    validator = Draft7Validator(schema)
    errors = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        path = ".".join([str(p) for p in err.path]) if err.path else None
        if path:
            errors.append(f"{path}: {err.message}")
        else:
            errors.append(err.message)
    return errors
