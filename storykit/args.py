"""
storykit — Argument descriptor factories.

Each factory returns an ArgumentDescriptor whose `extract` reads one named
field from the request's query parameters.

Extraction is lenient by contract: a missing or malformed value never raises.
Booleans are true only for the literal "true", numbers fall back to zero, and
objects fall back to their default. Numeric bounds are passed to the UI
control and are never enforced here.

See https://storybook.js.org/docs/essentials/controls
"""

from __future__ import annotations

import copy
import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from storykit.types import ArgKind, ArgumentDescriptor, ArgValue, NumberControl, QueryParams

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def text_arg(name: str, default: str) -> ArgumentDescriptor:
    def extract(query: QueryParams) -> ArgValue:
        return ArgValue(ArgKind.TEXT, query.get(name, ""))

    return ArgumentDescriptor(name=name, default=default, control="text", kind=ArgKind.TEXT, extract=extract)


def boolean_arg(name: str, default: bool) -> ArgumentDescriptor:
    def extract(query: QueryParams) -> ArgValue:
        return ArgValue(ArgKind.BOOLEAN, query.get(name) == "true")

    return ArgumentDescriptor(name=name, default=default, control="boolean", kind=ArgKind.BOOLEAN, extract=extract)


def integer_arg(
    name: str,
    default: int,
    *,
    min: int | None = None,
    max: int | None = None,
    step: int | None = None,
) -> ArgumentDescriptor:
    """Integer argument; bounds are optional and omitted from the control when unset."""

    def extract(query: QueryParams) -> ArgValue:
        return ArgValue(ArgKind.INTEGER, parse_int(query.get(name, "")))

    return ArgumentDescriptor(
        name=name,
        default=default,
        control=NumberControl(min=min, max=max, step=step),
        kind=ArgKind.INTEGER,
        extract=extract,
    )


def float_arg(name: str, default: float, min: float, max: float, step: float) -> ArgumentDescriptor:
    def extract(query: QueryParams) -> ArgValue:
        return ArgValue(ArgKind.FLOAT, parse_float(query.get(name, "")))

    return ArgumentDescriptor(
        name=name,
        default=default,
        control=NumberControl(min=min, max=max, step=step),
        kind=ArgKind.FLOAT,
        extract=extract,
    )


def object_arg(name: str, default: Any) -> ArgumentDescriptor:
    """
    JSON object argument decoded into the shape of `default`.

    - dict default: decoded keys are laid over a copy of the default
    - pydantic model default: the model is re-validated with decoded fields applied
    - anything else: a decoded value of the same type replaces the default

    Decode or validation failures echo the default back.
    """

    def extract(query: QueryParams) -> ArgValue:
        return ArgValue(ArgKind.OBJECT, decode_object(query.get(name, ""), default))

    return ArgumentDescriptor(name=name, default=default, control="object", kind=ArgKind.OBJECT, extract=extract)


# ---------------------------------------------------------------------------
# Lenient parsers
# ---------------------------------------------------------------------------


def parse_int(raw: str) -> int:
    """Base-10 signed integer; anything else is 0."""
    if not _INT_PATTERN.fullmatch(raw):
        return 0
    try:
        return int(raw)
    except ValueError:
        # Over the interpreter's integer string length limit
        return 0


def parse_float(raw: str) -> float:
    """Base-10 float; surrounding whitespace and digit separators are rejected, failures are 0.0."""
    if not raw or raw != raw.strip() or "_" in raw:
        return 0.0
    try:
        return float(raw)
    except ValueError:
        return 0.0


def decode_object(raw: str, default: Any) -> Any:
    try:
        decoded = json.loads(raw)
    except (ValueError, RecursionError):
        return default

    if isinstance(default, BaseModel):
        if not isinstance(decoded, dict):
            return default
        try:
            return type(default).model_validate({**default.model_dump(), **decoded})
        except ValidationError as e:
            logger.debug("args: object value rejected by %s: %s", type(default).__name__, e)
            return default

    if isinstance(default, dict):
        if not isinstance(decoded, dict):
            return default
        merged = copy.deepcopy(default)
        merged.update(decoded)
        return merged

    if default is None or isinstance(decoded, type(default)):
        return decoded
    return default
