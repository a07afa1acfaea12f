"""Component previews — GET {prefix}/storybook_preview/{name} renders one component."""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.datastructures import QueryParams

from storykit.dispatch import ComponentSignature, invoke
from storykit.errors import DispatchError
from storykit.types import ArgumentDescriptor

if TYPE_CHECKING:
    from storyhost.registry import Storybook

logger = logging.getLogger(__name__)

PREVIEW_PATH = "/storybook_preview"

# One path segment; an empty name is rejected separately.
_NAME_PATTERN = re.compile(r"(?P<name>[^/]*)")


class PreviewHandler:
    """Binds query parameters to one component's constructor and renders the result."""

    def __init__(self, name: str, signature: ComponentSignature, descriptors: Sequence[ArgumentDescriptor]):
        self.name = name
        self.signature = signature
        self.descriptors = tuple(descriptors)

    def __call__(self, query: Mapping[str, str]) -> Response:
        argv = [d.extract(query) for d in self.descriptors]
        try:
            component = invoke(self.name, self.signature, argv)
        except DispatchError as e:
            logger.warning("preview: %s", e)
            return PlainTextResponse(str(e), status_code=500)

        buf = io.BytesIO()
        component.render(buf)
        return Response(content=buf.getvalue(), media_type="text/html; charset=utf-8")


def first_values(query: QueryParams) -> dict[str, str]:
    """First value of each query parameter, matching url.Values.Get semantics."""
    return {key: query.getlist(key)[0] for key in query.keys()}


def _not_found() -> Response:
    return PlainTextResponse("404 page not found", status_code=404)


def create_router(storybook: Storybook) -> APIRouter:
    router = APIRouter(prefix=storybook.route_prefix, tags=["preview"])

    @router.get(PREVIEW_PATH + "/{rest:path}", include_in_schema=False)
    def serve_preview(rest: str, request: Request) -> Response:
        """
        Render a registered component from query-string arguments.

        404 when the path is not a single component segment or the component
        is unknown; 500 with the error text when the constructor cannot be
        invoked as registered.
        """
        match = _NAME_PATTERN.fullmatch(rest)
        if match is None:
            logger.info("preview: URL not matched: %s", request.url)
            return _not_found()

        name = match.group("name")
        if not name:
            logger.info("preview: URL does not contain component name: %s", request.url)
            return _not_found()

        handler = storybook.handler(name)
        if handler is None:
            logger.info("preview: component name not found: %s (url=%s)", name, request.url)
            return _not_found()

        return handler(first_values(request.query_params))

    return router
