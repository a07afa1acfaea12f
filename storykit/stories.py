"""
storykit — Story configuration.

A StoryConfiguration is the `*.stories.json` document consumed by
@storybook/server. Its serialized form is:

    {
      "title": "button",
      "parameters": {"server": {"id": "button"}},
      "args": {...},        # declaration order
      "argTypes": {...},    # declaration order
      "stories": [{"name": "Default", "args": {...}}]
    }

Storybook treats the first declared arg as the first control, so args and
argTypes are OrderedMaps rather than dicts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from storykit.ordered_map import OrderedMap, encode_json
from storykit.types import ArgumentDescriptor

DEFAULT_STORY = "Default"


@dataclass
class StoryVariant:
    name: str
    args: OrderedMap = field(default_factory=OrderedMap)

    def serialize(self) -> str:
        return f'{{"name":{json.dumps(self.name, ensure_ascii=False)},"args":{self.args.serialize()}}}'


@dataclass
class StoryConfiguration:
    title: str
    parameters: dict[str, Any]
    args: OrderedMap = field(default_factory=OrderedMap)
    arg_types: OrderedMap = field(default_factory=OrderedMap)
    stories: list[StoryVariant] = field(default_factory=list)

    @classmethod
    def build(cls, title: str, *descriptors: ArgumentDescriptor) -> StoryConfiguration:
        """Configuration for a newly registered component, with a single Default story."""
        conf = cls(title=title, parameters={"server": {"id": title}})
        for descriptor in descriptors:
            conf.args.add(descriptor.name, descriptor.default)
            conf.arg_types.add(descriptor.name, descriptor.arg_type())
        conf.add_story(DEFAULT_STORY)
        return conf

    def add_story(self, name: str, *descriptors: ArgumentDescriptor) -> StoryVariant:
        """Append a variant whose args override the component defaults."""
        variant = StoryVariant(name=name)
        for descriptor in descriptors:
            variant.args.add(descriptor.name, descriptor.default)
        self.stories.append(variant)
        return variant

    def story_names(self) -> list[str]:
        return [s.name for s in self.stories]

    def serialize(self) -> str:
        stories = ",".join(s.serialize() for s in self.stories)
        return (
            "{"
            f'"title":{json.dumps(self.title, ensure_ascii=False)},'
            f'"parameters":{encode_json(self.parameters)},'
            f'"args":{self.args.serialize()},'
            f'"argTypes":{self.arg_types.serialize()},'
            f'"stories":[{stories}]'
            "}"
        )
