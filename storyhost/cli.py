"""
storyhost command-line driver.

Usage:
    storyhost serve myproject.stories:storybook [--port 60606] [--route-prefix /prod]
    storyhost build myproject.stories:storybook [--force-rebuild]
    storyhost list  myproject.stories:storybook

TARGET is "module:attribute" naming a Storybook instance whose components
have been registered at import time. The current directory is importable.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import signal
import sys
import threading
from collections.abc import Sequence
from pathlib import Path

from storyhost.config import settings
from storyhost.registry import Storybook, normalize_prefix
from storykit.errors import ConfigurationError, StorybookError

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT, datefmt=_DATE_FORMAT)


def load_storybook(target: str) -> Storybook:
    """Import "module:attribute" and return the Storybook it names."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ValueError(f'target must look like "module:attribute", got {target!r}')

    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    module = importlib.import_module(module_name)

    try:
        storybook = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"module {module_name} has no attribute {attr!r}") from e
    if not isinstance(storybook, Storybook):
        raise ValueError(f"{target} is a {type(storybook).__name__}, not a Storybook")
    return storybook


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storyhost", description="Serve Storybook previews of registered components.")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_target(p: argparse.ArgumentParser) -> None:
        p.add_argument("target", help='Storybook instance as "module:attribute"')
        p.add_argument("--path", help="Storybook working directory")

    serve = sub.add_parser("serve", help="Build Storybook, then serve previews and static files")
    add_target(serve)
    serve.add_argument("--host", help="Host to bind to")
    serve.add_argument("--port", type=int, help="Port to bind to")
    serve.add_argument("--route-prefix", help="Prefix of all HTTP routes, e.g. /prod")
    serve.add_argument("--force-rebuild", action="store_true", help="Rebuild Storybook even if stories are unchanged")

    build = sub.add_parser("build", help="Install, configure and build Storybook without serving")
    add_target(build)
    build.add_argument("--route-prefix", help="Prefix used by the generated preview.js")
    build.add_argument("--force-rebuild", action="store_true", help="Rebuild Storybook even if stories are unchanged")

    list_cmd = sub.add_parser("list", help="List registered components and their stories")
    add_target(list_cmd)

    return parser


def apply_overrides(storybook: Storybook, args: argparse.Namespace) -> None:
    if getattr(args, "path", None):
        storybook.path = Path(args.path)
    if getattr(args, "route_prefix", None) is not None:
        storybook.route_prefix = normalize_prefix(args.route_prefix)
    if getattr(args, "host", None):
        storybook.host = args.host
    if getattr(args, "port", None):
        storybook.port = args.port


def _install_stop_handlers(stop: threading.Event) -> None:
    def handle(signum, frame):
        logger.info("storyhost: received signal %d, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        storybook = load_storybook(args.target)
    except (ImportError, ValueError) as e:
        logger.error("storyhost: %s", e)
        return 2
    apply_overrides(storybook, args)

    if args.command == "list":
        for name in storybook.component_names():
            conf = storybook.config(name)
            stories = ", ".join(conf.story_names()) if conf else ""
            print(f"{name}: {stories}")
        return 0

    stop = threading.Event()
    _install_stop_handlers(stop)
    try:
        if args.command == "build":
            report = storybook.build(cancel=stop, force_rebuild=args.force_rebuild)
            for result in report.stages:
                print(f"{result.stage}: {result.status} {result.detail}".rstrip())
        else:
            storybook.listen_and_serve(stop, force_rebuild=args.force_rebuild)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2
    except StorybookError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
