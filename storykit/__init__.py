"""storykit — component registration primitives for Storybook server previews."""

from storykit.args import boolean_arg, float_arg, integer_arg, object_arg, text_arg
from storykit.components import HTML, Mustache, Renderable
from storykit.dispatch import ComponentSignature, invoke
from storykit.errors import (
    ArityMismatch,
    BuildError,
    ConfigurationError,
    DispatchError,
    InvalidComponentSignature,
    StorybookError,
)
from storykit.ordered_map import OrderedMap
from storykit.stories import StoryConfiguration, StoryVariant
from storykit.types import ArgKind, ArgumentDescriptor, ArgValue, NumberControl

__all__ = [
    "HTML",
    "ArgKind",
    "ArgValue",
    "ArgumentDescriptor",
    "ArityMismatch",
    "BuildError",
    "ComponentSignature",
    "ConfigurationError",
    "DispatchError",
    "InvalidComponentSignature",
    "Mustache",
    "NumberControl",
    "OrderedMap",
    "Renderable",
    "StoryConfiguration",
    "StoryVariant",
    "StorybookError",
    "boolean_arg",
    "float_arg",
    "integer_arg",
    "invoke",
    "object_arg",
    "text_arg",
]
