"""
storykit — Dynamic dispatcher.

Component constructors are arbitrary callables with different signatures.
Their shape is captured once, at registration, as a ComponentSignature; each
request then calls `invoke` with the extracted argument values.

Contract:
- the number of values must equal the constructor's positional arity
  (ArityMismatch otherwise)
- values are unboxed from ArgValue and coerced to the annotated parameter
  type; a mismatch is a registration bug and raises TypeError
- the constructor must return exactly one Renderable
  (InvalidComponentSignature otherwise)
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from storykit.components import Renderable
from storykit.errors import ArityMismatch, InvalidComponentSignature
from storykit.types import ArgValue

_SCALAR_TYPES = (bool, int, float, str)


@dataclass(frozen=True)
class ComponentSignature:
    component: str
    function: str
    constructor: Callable[..., Any]
    param_types: tuple[Any, ...]

    @property
    def arity(self) -> int:
        return len(self.param_types)

    @classmethod
    def inspect(cls, component: str, constructor: Any) -> ComponentSignature:
        """
        Capture the positional parameters of `constructor`.

        Raises:
            InvalidComponentSignature: not callable, variadic, or requires
                keyword-only arguments that cannot be bound positionally
        """
        if not callable(constructor):
            raise InvalidComponentSignature(component, repr(constructor), "is not callable")
        function = getattr(constructor, "__qualname__", None) or repr(constructor)

        try:
            sig = inspect.signature(constructor)
        except (TypeError, ValueError) as e:
            raise InvalidComponentSignature(component, function, "has no inspectable signature") from e

        hints = _type_hints(constructor)
        param_types = []
        for param in sig.parameters.values():
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                raise InvalidComponentSignature(
                    component, function, "must declare a fixed number of positional parameters"
                )
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                continue
            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                if param.default is inspect.Parameter.empty:
                    raise InvalidComponentSignature(
                        component, function, f"has required keyword-only parameter {param.name!r}"
                    )
                continue
            param_types.append(hints.get(param.name, inspect.Parameter.empty))

        return cls(component=component, function=function, constructor=constructor, param_types=tuple(param_types))


def _type_hints(constructor: Any) -> dict[str, Any]:
    target = constructor.__init__ if isinstance(constructor, type) else constructor
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError, AttributeError):
        # Unresolvable annotations: bind without coercion.
        return {}


def invoke(
    component: str,
    constructor: ComponentSignature | Callable[..., Any],
    values: Sequence[ArgValue | Any],
) -> Renderable:
    """Call the component constructor with positional `values` and return its renderable."""
    if isinstance(constructor, ComponentSignature):
        signature = constructor
    else:
        signature = ComponentSignature.inspect(component, constructor)

    if len(values) != signature.arity:
        raise ArityMismatch(component, signature.arity, len(values))

    argv = [_coerce(signature, i, _unbox(v)) for i, v in enumerate(values)]
    result = signature.constructor(*argv)

    if result is None:
        raise InvalidComponentSignature(
            component, signature.function, "returned no value, it must return a renderable component"
        )
    if isinstance(result, tuple):
        raise InvalidComponentSignature(
            component,
            signature.function,
            f"must return a single renderable component, but returned {len(result)} values",
        )
    if not isinstance(result, Renderable):
        raise InvalidComponentSignature(
            component, signature.function, f"result of type {type(result).__name__} is not a renderable component"
        )
    return result


def _unbox(value: ArgValue | Any) -> Any:
    return value.payload if isinstance(value, ArgValue) else value


def _coerce(signature: ComponentSignature, position: int, value: Any) -> Any:
    declared = signature.param_types[position]
    if declared not in _SCALAR_TYPES:
        return value
    if declared is float and type(value) is int:
        return float(value)
    if type(value) is declared:
        return value
    raise TypeError(
        f"storybook: component {signature.component} parameter {position} is declared as "
        f"{declared.__name__}, but the registered argument produces {type(value).__name__}"
    )
