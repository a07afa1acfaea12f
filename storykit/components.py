"""
storykit — Renderable components.

A renderable component is anything with `render(out)` that writes its markup
as bytes to a binary stream. storykit never produces markup itself; the two
adapters below only hand over markup the caller already has, or delegate to
chevron for mustache templates.
"""

from __future__ import annotations

from typing import IO, Any, Protocol, runtime_checkable

import chevron


@runtime_checkable
class Renderable(Protocol):
    def render(self, out: IO[bytes]) -> None: ...


class HTML:
    """Pre-rendered markup."""

    def __init__(self, markup: str):
        self.markup = markup

    def render(self, out: IO[bytes]) -> None:
        out.write(self.markup.encode("utf-8"))

    def __repr__(self) -> str:
        return f"HTML({self.markup[:40]!r})"


class Mustache:
    """A mustache template rendered with chevron against a context dict."""

    def __init__(self, template: str, context: dict[str, Any] | None = None, partials: dict[str, str] | None = None):
        self.template = template
        self.context = context or {}
        self.partials = partials or {}

    def render(self, out: IO[bytes]) -> None:
        rendered = chevron.render(self.template, self.context, partials_dict=self.partials)
        out.write(rendered.encode("utf-8"))
