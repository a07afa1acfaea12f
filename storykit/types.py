"""
storykit — Shared Types

Data classes that bind argument descriptors, the dispatcher, and the story
configuration together.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Argument kinds
# ---------------------------------------------------------------------------


class ArgKind(str, Enum):
    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    OBJECT = "object"


@dataclass(frozen=True)
class ArgValue:
    """A single extracted argument: its kind plus the decoded payload."""

    kind: ArgKind
    payload: Any


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------


class NumberControl(BaseModel):
    """Storybook number control. Bounds are advisory and only shown in the UI."""

    model_config = {"frozen": True}

    type: str = "number"
    min: int | float | None = None
    max: int | float | None = None
    step: int | float | None = None


# "text", "boolean", "object", or a NumberControl
ControlSpec = str | NumberControl

QueryParams = Mapping[str, str]


# ---------------------------------------------------------------------------
# ArgumentDescriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentDescriptor:
    """
    One bindable constructor parameter.

    `name` is both the query-string key and the key used in the story JSON,
    so it must be unique within a component.
    """

    name: str
    default: Any
    control: ControlSpec
    kind: ArgKind
    extract: Callable[[QueryParams], ArgValue]

    def arg_type(self) -> dict[str, Any]:
        """The argTypes entry for this argument."""
        return {"control": self.control}
