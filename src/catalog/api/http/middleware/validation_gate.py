"""Validation gate sitting between a route's rules and its handler."""

import json
from collections.abc import Mapping
from typing import Any

from fastapi import Request
from loguru import logger

from src.catalog.api.http.validation.rules import (
    Finding,
    RequestInput,
    Rule,
    evaluate_rules,
)
from src.catalog.core.exceptions import RequestValidationFailed


def validation_gate(findings: tuple[Finding, ...]) -> None:
    """Halt the request when any finding was recorded.

    Raises:
        RequestValidationFailed: carrying the findings in rule order.
    """
    if findings:
        raise RequestValidationFailed(findings)


async def read_json_body(request: Request) -> Mapping[str, Any]:
    """Decode the request body as a JSON object, or ``{}`` when it is not one."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return {}
    return decoded if isinstance(decoded, dict) else {}


class ValidateRequest:
    """FastAPI dependency running ``rules`` and then the gate.

    The body is only read when one of the rules targets it. Handlers receive
    the validated :class:`RequestInput`.
    """

    def __init__(self, *rules: Rule) -> None:
        self.rules = rules
        self.reads_body = any(getattr(rule, "location", None) == "body" for rule in rules)

    async def __call__(self, request: Request) -> RequestInput:
        body = await read_json_body(request) if self.reads_body else {}
        request_input = RequestInput(params=dict(request.path_params), body=body)

        findings = evaluate_rules(self.rules, request_input)
        if findings:
            logger.bind(findings=len(findings)).info("request.rejected")
        validation_gate(findings)
        return request_input
