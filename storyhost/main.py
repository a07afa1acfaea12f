"""
storyhost FastAPI application.

Every request passes through a permissive CORS policy. Preview routes render
components; everything else under the route prefix is served from the
Storybook static build.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storyhost.routes import preview as preview_routes

if TYPE_CHECKING:
    from storyhost.registry import Storybook


def create_app(storybook: Storybook) -> FastAPI:
    app = FastAPI(
        title="storyhost",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "HEAD"],
        allow_headers=["*"],
    )

    app.include_router(preview_routes.create_router(storybook))

    # Serve the Storybook build — must be after the preview routes
    static_app = storybook.static_app or StaticFiles(directory=str(storybook.static_dir), html=True, check_dir=False)
    app.mount(storybook.route_prefix or "/", static_app, name="static")

    return app
