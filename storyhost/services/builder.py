"""
Build pipeline — installs, configures and builds the Storybook workspace.

Stages run in order against one BuildContext:

    install    npx sb init -t server   (skipped when the workdir exists)
    configure  regenerate stories/*.stories.json and .storybook/preview.js,
               comparing a hash of stories/ and the old preview.js
    build      npm run build-storybook (skipped unless configure saw a change)

Every stage is idempotent. The cancel event is checked between stages; a
command that has already been launched always runs to completion.

Usage:
    ctx = BuildContext(workdir=Path("./storybook-server"), configs=[...])
    report = BuildPipeline().run(ctx, cancel=stop_event)
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import Literal, Protocol

from storyhost.config import settings
from storyhost.services.process import ProcessRunner, SubprocessRunner, resolve_command
from storyhost.utils.dir_hash import hash_dir
from storykit.errors import BuildError
from storykit.stories import StoryConfiguration

logger = logging.getLogger(__name__)

STORIES_DIR = "stories"
PREVIEW_JS_PATH = ".storybook/preview.js"

# Storybook fetches previews from parameters.server.url by default, which is
# absolute. The preview iframe shares an origin with this server only through
# relative paths, so fetch is replaced with a same-origin request.
_PREVIEW_JS = Template("""
// Customise fetch so that it uses a relative URL.
const fetchStoryHtml = async (url, path, params, context) => {
  const qs = new URLSearchParams(params);
  const response = await fetch("$prefix/storybook_preview/" + path + "?" + qs.toString());
  return response.text();
};

export const parameters = {
  server: {
    url: "http://localhost$prefix/storybook_preview", // Ignored by fetchStoryHtml.
    fetchStoryHtml,
  },
};
""")


def preview_js(route_prefix: str = "") -> str:
    return _PREVIEW_JS.substitute(prefix=route_prefix.rstrip("/"))


def story_filename(title: str) -> str:
    """File name for a component's story config; path separators in the title become dashes."""
    return title.replace("/", "-").replace("\\", "-") + ".stories.json"


# ---------------------------------------------------------------------------
# Context and results
# ---------------------------------------------------------------------------


@dataclass
class BuildContext:
    workdir: Path
    configs: list[StoryConfiguration]
    runner: ProcessRunner = field(default_factory=SubprocessRunner)
    route_prefix: str = ""
    init_command: str = settings.INIT_COMMAND
    build_command: str = settings.BUILD_COMMAND
    force_rebuild: bool = False
    # Set by the configure stage
    changed: bool = False

    @property
    def stories_dir(self) -> Path:
        return self.workdir / STORIES_DIR


@dataclass
class StageResult:
    stage: str
    status: Literal["ran", "skipped"]
    detail: str = ""


@dataclass
class BuildReport:
    stages: list[StageResult] = field(default_factory=list)
    changed: bool = False
    cancelled: bool = False

    def status_of(self, stage: str) -> str | None:
        for result in self.stages:
            if result.stage == stage:
                return result.status
        return None


class Stage(Protocol):
    name: str

    def run(self, ctx: BuildContext) -> StageResult: ...


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


class InstallStage:
    name = "install"

    def run(self, ctx: BuildContext) -> StageResult:
        if ctx.workdir.exists():
            logger.info("build: Storybook already installed at %s, skipping installation", ctx.workdir)
            return StageResult(self.name, "skipped", "already installed")

        argv = resolve_command(ctx.runner, ctx.init_command, "install storybook")
        try:
            ctx.workdir.mkdir(parents=True)
        except OSError as e:
            raise BuildError(self.name, f"error creating {ctx.workdir}: {e}") from e

        try:
            ctx.runner.run(argv, ctx.workdir)
        except (subprocess.CalledProcessError, OSError) as e:
            # Leave no half-initialised workdir behind, or the next start would skip install.
            shutil.rmtree(ctx.workdir, ignore_errors=True)
            raise BuildError(self.name, f"{shlex.join(argv)} failed: {e}") from e
        return StageResult(self.name, "ran", shlex.join(argv))


class ConfigureStage:
    name = "configure"

    def run(self, ctx: BuildContext) -> StageResult:
        stories_dir = ctx.stories_dir
        try:
            before = hash_dir(stories_dir, STORIES_DIR)
            if stories_dir.exists():
                shutil.rmtree(stories_dir)
            stories_dir.mkdir(parents=True)

            for conf in ctx.configs:
                path = stories_dir / story_filename(conf.title)
                path.write_text(conf.serialize() + "\n", encoding="utf-8")

            after = hash_dir(stories_dir, STORIES_DIR)

            preview_path = ctx.workdir / PREVIEW_JS_PATH
            preview = preview_js(ctx.route_prefix)
            preview_changed = not preview_path.is_file() or preview_path.read_text(encoding="utf-8") != preview
            if preview_changed:
                preview_path.parent.mkdir(parents=True, exist_ok=True)
                preview_path.write_text(preview, encoding="utf-8")
        except OSError as e:
            raise BuildError(self.name, f"failed to write story configuration to {stories_dir}: {e}") from e

        ctx.changed = before != after or preview_changed
        logger.info(
            "build: wrote %d story file(s) to %s (changed=%s)",
            len(ctx.configs),
            stories_dir,
            ctx.changed,
        )
        return StageResult(self.name, "ran", "changed" if ctx.changed else "unchanged")


class BuildStage:
    name = "build"

    def run(self, ctx: BuildContext) -> StageResult:
        if not ctx.changed and not ctx.force_rebuild:
            logger.info("build: Storybook is up-to-date, skipping build step")
            return StageResult(self.name, "skipped", "up-to-date")

        logger.info("build: config not present or has changed, rebuilding Storybook")
        argv = resolve_command(ctx.runner, ctx.build_command, "build storybook")
        try:
            ctx.runner.run(argv, ctx.workdir)
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildError(self.name, f"{shlex.join(argv)} failed: {e}") from e
        return StageResult(self.name, "ran", shlex.join(argv))


def default_stages() -> list[Stage]:
    return [InstallStage(), ConfigureStage(), BuildStage()]


class BuildPipeline:
    """Runs stages in order; the first error aborts the rest."""

    def __init__(self, stages: list[Stage] | None = None):
        self.stages = stages if stages is not None else default_stages()

    def run(self, ctx: BuildContext, cancel: threading.Event | None = None) -> BuildReport:
        report = BuildReport()
        for stage in self.stages:
            if cancel is not None and cancel.is_set():
                logger.info("build: cancelled before %s stage", stage.name)
                report.cancelled = True
                break
            logger.info("build: %s stage starting", stage.name)
            report.stages.append(stage.run(ctx))
        report.changed = ctx.changed
        return report
