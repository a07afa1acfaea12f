#!/usr/bin/env python3
"""
Demo Storybook with a few mustache components.

Usage:
    storyhost serve scripts.demo_storybook:storybook
    storyhost list scripts.demo_storybook:storybook

Requires Node.js (npx and npm on PATH) for the install and build stages.
"""

from pydantic import BaseModel

from storyhost import Storybook
from storykit import Mustache, boolean_arg, float_arg, integer_arg, object_arg, text_arg


class Person(BaseModel):
    name: str = "Ada"
    role: str = "Engineer"


def button(text: str, primary: bool) -> Mustache:
    return Mustache(
        '<button class="{{#primary}}btn-primary{{/primary}}{{^primary}}btn{{/primary}}">{{text}}</button>',
        {"text": text, "primary": primary},
    )


def rating(stars: int, opacity: float) -> Mustache:
    return Mustache(
        '<div style="opacity: {{opacity}}">{{#stars}}&#9733;{{/stars}}</div>',
        {"stars": [True] * max(stars, 0), "opacity": opacity},
    )


def person_card(person: Person) -> Mustache:
    return Mustache("<article><h2>{{name}}</h2><p>{{role}}</p></article>", person.model_dump())


storybook = Storybook()
storybook.add_component("button", button, text_arg("text", "Click me"), boolean_arg("primary", True))
storybook.add_story("button", "Secondary", text_arg("text", "Cancel"), boolean_arg("primary", False))
storybook.add_component(
    "rating",
    rating,
    integer_arg("stars", 3, min=0, max=5, step=1),
    float_arg("opacity", 1.0, 0.0, 1.0, 0.1),
)
storybook.add_component("person_card", person_card, object_arg("person", Person()))
