"""Declarative request validation rules.

A rule targets one field of the request (a path parameter or a body key)
and runs a chain of checks against its raw value. Every check of the chain
runs, so a single field can produce several findings. Rules are pure: they
return a tuple of :class:`Finding` and never touch the request.

    PRICE_IS_POSITIVE = (
        body("price")
        .check(is_numeric, "Value is not valid")
        .check(is_present, "Price cannot be empty")
        .check(is_positive, "Price is not valid")
    )
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

Location = Literal["params", "body"]
Check = Callable[[Any], bool]

_INT = re.compile(r"^[-+]?[0-9]+$")
_NUMERIC = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
_BOOLEAN = frozenset({"true", "false", "1", "0"})


class Finding(BaseModel):
    """A single validation failure, serialized as-is in 400 responses."""

    model_config = ConfigDict(frozen=True)

    type: Literal["field"] = "field"
    value: Any = None
    msg: str
    param: str
    location: Location


@dataclass(frozen=True)
class RequestInput:
    """Raw path parameters and JSON body of an inbound request."""

    params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)

    def source(self, location: Location) -> Mapping[str, Any]:
        return self.params if location == "params" else self.body


def as_text(value: Any) -> str | None:
    """Render a JSON scalar the way it appears on the wire.

    ``None`` (missing or null) becomes the empty string; containers have no
    text form and return ``None``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float | str):
        return str(value)
    return None


def is_int(value: Any) -> bool:
    text = as_text(value)
    return text is not None and _INT.fullmatch(text) is not None


def _as_float(value: Any) -> float | None:
    """Parse a price the way the entity model will store it.

    JSON numbers are taken as they are; strings must be plain decimals.
    Anything that would not survive as a finite float returns ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = value
    elif isinstance(value, str) and _NUMERIC.fullmatch(value):
        number = value
    else:
        return None
    try:
        result = float(number)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


def is_numeric(value: Any) -> bool:
    return _as_float(value) is not None


def is_present(value: Any) -> bool:
    return as_text(value) != ""


def is_positive(value: Any) -> bool:
    number = _as_float(value)
    return number is not None and number > 0


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def is_boolean(value: Any) -> bool:
    return as_text(value) in _BOOLEAN


@dataclass(frozen=True)
class FieldRule:
    """Chain of checks against one field of the request."""

    location: Location
    name: str
    checks: tuple[tuple[Check, str], ...] = ()

    def check(self, predicate: Check, message: str) -> FieldRule:
        """Return a new rule with ``predicate`` appended to the chain."""
        return FieldRule(self.location, self.name, (*self.checks, (predicate, message)))

    def __call__(self, request: RequestInput) -> tuple[Finding, ...]:
        value = request.source(self.location).get(self.name)
        return tuple(
            Finding(value=value, msg=message, param=self.name, location=self.location)
            for predicate, message in self.checks
            if not predicate(value)
        )


Rule = Callable[[RequestInput], tuple[Finding, ...]]


def param(name: str) -> FieldRule:
    return FieldRule("params", name)


def body(name: str) -> FieldRule:
    return FieldRule("body", name)


def evaluate_rules(rules: Iterable[Rule], request: RequestInput) -> tuple[Finding, ...]:
    """Run every rule in order and concatenate their findings."""
    findings: tuple[Finding, ...] = ()
    for rule in rules:
        findings += rule(request)
    return findings


ID_IS_INT = param("id").check(is_int, "Id not valid")

NAME_NOT_EMPTY = body("name").check(is_non_empty_string, "This name cant be empty")

PRICE_IS_POSITIVE = (
    body("price")
    .check(is_numeric, "Value is not valid")
    .check(is_present, "Price cannot be empty")
    .check(is_positive, "Price is not valid")
)

AVAILABILITY_IS_BOOLEAN = body("availability").check(
    is_boolean, "Value for availability not valid"
)
