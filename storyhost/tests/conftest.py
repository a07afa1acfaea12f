"""
Pytest configuration and fixtures for storyhost tests.

No test launches a real process: FakeRunner stands in for npx/npm and records
every command it is asked to run.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from storyhost.registry import Storybook
from storyhost.tests.fakes import FakeRunner
from storykit.args import text_arg
from storykit.components import Mustache


def button(text: str) -> Mustache:
    return Mustache("<button>{{text}}</button>", {"text": text})


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    return tmp_path / "storybook-server"


@pytest.fixture
def storybook(workdir: Path, runner: FakeRunner) -> Storybook:
    """A Storybook with one `button(text)` component and a static build on disk."""
    sb = Storybook(path=workdir, route_prefix="", runner=runner)
    sb.add_component("button", button, text_arg("text", "Click me"))

    static_dir = workdir / "storybook-static"
    static_dir.mkdir(parents=True)
    (static_dir / "index.html").write_text('<html><body><div id="storybook-root"></div></body></html>')
    (static_dir / "main.js").write_text("console.log('storybook');")
    return sb


@pytest_asyncio.fixture
async def client(storybook: Storybook):
    """Async HTTP client against the storybook app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=storybook.create_app()),
        base_url="http://test",
    ) as client:
        yield client
