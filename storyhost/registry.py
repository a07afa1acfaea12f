"""
Storybook registry — the facade a project uses to register components and
run the preview server.

Usage:
    storybook = Storybook()
    storybook.add_component("button", button, text_arg("text", "Click me"))
    storybook.add_story("button", "Long label", text_arg("text", "A much longer label"))
    storybook.listen_and_serve(stop_event)
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI
from starlette.types import ASGIApp

from storyhost.config import settings
from storyhost.routes.preview import PreviewHandler
from storyhost.services.builder import BuildContext, BuildPipeline, BuildReport
from storyhost.services.process import ProcessRunner, SubprocessRunner
from storykit.dispatch import ComponentSignature
from storykit.stories import StoryConfiguration, StoryVariant
from storykit.types import ArgumentDescriptor

logger = logging.getLogger(__name__)


def normalize_prefix(prefix: str) -> str:
    """'' or '/prod' style: leading slash, no trailing slash."""
    prefix = prefix.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


class Storybook:
    """
    Owns the component configurations and preview handlers.

    Both maps are written during registration and read by every request, so
    they share a single lock. Registering a name twice replaces the earlier
    entry.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        route_prefix: str | None = None,
        host: str | None = None,
        port: int | None = None,
        static_app: ASGIApp | None = None,
        runner: ProcessRunner | None = None,
        init_command: str | None = None,
        build_command: str | None = None,
    ):
        self.path = Path(path if path is not None else settings.STORYBOOK_PATH)
        self.route_prefix = normalize_prefix(route_prefix if route_prefix is not None else settings.ROUTE_PREFIX)
        self.host = host or settings.HOST
        self.port = port if port is not None else settings.PORT
        # Defaults to StaticFiles over <path>/storybook-static
        self.static_app = static_app
        self.runner = runner or SubprocessRunner()
        self.init_command = init_command or settings.INIT_COMMAND
        self.build_command = build_command or settings.BUILD_COMMAND

        self._lock = threading.RLock()
        self._components: dict[str, StoryConfiguration] = {}
        self._handlers: dict[str, PreviewHandler] = {}

    @property
    def static_dir(self) -> Path:
        return self.path / "storybook-static"

    # ── registration ────────────────────────────────────────────────────

    def add_component(self, name: str, constructor: Any, *args: ArgumentDescriptor) -> StoryConfiguration:
        """
        Register a component constructor under `name`.

        `args` are bound positionally, in order, to the constructor's
        parameters. A count mismatch is logged here and reported as a 500 by
        every preview request; a constructor that is not callable with a
        fixed positional signature raises InvalidComponentSignature now.
        """
        signature = ComponentSignature.inspect(name, constructor)
        if signature.arity != len(args):
            logger.warning(
                "storybook: component %s expects %d argument(s), but %d were registered",
                name,
                signature.arity,
                len(args),
            )
        names = [arg.name for arg in args]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            logger.warning(
                "storybook: component %s has duplicate argument name(s): %s",
                name,
                ", ".join(duplicates),
            )

        conf = StoryConfiguration.build(name, *args)
        handler = PreviewHandler(name, signature, args)
        with self._lock:
            if name in self._components:
                logger.info("storybook: replacing component %s", name)
            self._components[name] = conf
            self._handlers[name] = handler
        return conf

    def add_story(self, component: str, story_name: str, *args: ArgumentDescriptor) -> StoryVariant:
        """
        Add a named story to a registered component.

        Raises:
            KeyError: if the component has not been registered
        """
        with self._lock:
            conf = self._components.get(component)
            if conf is None:
                raise KeyError(f"storybook: component {component} is not registered")
            return conf.add_story(story_name, *args)

    # ── lookup ──────────────────────────────────────────────────────────

    def handler(self, name: str) -> PreviewHandler | None:
        with self._lock:
            return self._handlers.get(name)

    def config(self, name: str) -> StoryConfiguration | None:
        with self._lock:
            return self._components.get(name)

    def configs(self) -> list[StoryConfiguration]:
        with self._lock:
            return list(self._components.values())

    def component_names(self) -> list[str]:
        with self._lock:
            return list(self._components)

    # ── lifecycle ───────────────────────────────────────────────────────

    def build(self, cancel: threading.Event | None = None, force_rebuild: bool = False) -> BuildReport:
        """Install, configure and (if needed) build the Storybook workspace."""
        ctx = BuildContext(
            workdir=self.path,
            configs=self.configs(),
            runner=self.runner,
            route_prefix=self.route_prefix,
            init_command=self.init_command,
            build_command=self.build_command,
            force_rebuild=force_rebuild,
        )
        return BuildPipeline().run(ctx, cancel=cancel)

    def create_app(self) -> FastAPI:
        from storyhost.main import create_app

        return create_app(self)

    def listen_and_serve(self, stop: threading.Event, force_rebuild: bool = False) -> None:
        """
        Build, then serve until `stop` is set.

        The server runs on a worker thread. Setting `stop` asks it to exit;
        an exception raised by the server (including a failed bind) is
        re-raised here.
        """
        report = self.build(cancel=stop, force_rebuild=force_rebuild)
        if report.cancelled:
            return

        server = uvicorn.Server(uvicorn.Config(self.create_app(), host=self.host, port=self.port, log_config=None))
        errors: list[BaseException] = []

        def serve() -> None:
            try:
                server.run()
            except (Exception, SystemExit) as e:
                errors.append(e)

        thread = threading.Thread(target=serve, name="storyhost-server", daemon=True)
        logger.info("storybook: starting server on %s:%d", self.host, self.port)
        thread.start()

        while thread.is_alive() and not stop.wait(timeout=0.25):
            pass

        server.should_exit = True
        thread.join()
        logger.info("storybook: server stopped")
        if errors:
            raise errors[0]
