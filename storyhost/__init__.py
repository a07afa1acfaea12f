"""
storyhost — serves Storybook previews of Python-rendered components.

  registry   — Storybook facade: register components, build, serve
  main       — FastAPI app (CORS, preview routes, static Storybook build)
  services   — build pipeline and process runner
"""

from storyhost.registry import Storybook

__all__ = ["Storybook"]
