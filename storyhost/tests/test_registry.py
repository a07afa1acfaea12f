"""
Tests for storyhost/registry.py — registration and lifecycle.
"""

from __future__ import annotations

import json
import socket
import threading
import time
from pathlib import Path

import httpx
import pytest

from storyhost.config import settings
from storyhost.registry import Storybook, normalize_prefix
from storyhost.tests.fakes import FakeRunner
from storykit.args import boolean_arg, integer_arg, text_arg
from storykit.components import HTML
from storykit.errors import InvalidComponentSignature


def label(text: str) -> HTML:
    return HTML(text)


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def wait_for(url: str, attempts: int = 100) -> httpx.Response:
    """GET `url` once the server accepts connections."""
    for _ in range(attempts):
        try:
            return httpx.get(url, timeout=1.0)
        except httpx.TransportError:
            time.sleep(0.05)
    raise AssertionError(f"server never answered {url}")


class TestRegistration:
    def test_add_component_builds_config_and_handler(self, storybook: Storybook):
        conf = storybook.config("button")
        assert conf is not None
        assert conf.title == "button"
        assert conf.story_names() == ["Default"]
        assert storybook.handler("button") is not None

    def test_component_names_in_registration_order(self, storybook: Storybook):
        storybook.add_component("label", label, text_arg("text", ""))
        assert storybook.component_names() == ["button", "label"]

    def test_reregistration_replaces(self, storybook: Storybook):
        storybook.add_component("button", label, text_arg("caption", "new"))
        conf = storybook.config("button")
        assert json.loads(conf.serialize())["args"] == {"caption": "new"}
        assert storybook.handler("button").descriptors[0].name == "caption"
        assert storybook.component_names() == ["button"]

    def test_unknown_lookups_are_none(self, storybook: Storybook):
        assert storybook.handler("nope") is None
        assert storybook.config("nope") is None

    def test_non_callable_rejected(self, storybook: Storybook):
        with pytest.raises(InvalidComponentSignature):
            storybook.add_component("bad", "not a function")
        assert storybook.config("bad") is None

    def test_arity_mismatch_is_logged_and_still_registered(self, storybook: Storybook, caplog):
        with caplog.at_level("WARNING", logger="storyhost.registry"):
            storybook.add_component("label", label, text_arg("text", ""), integer_arg("size", 1))
        assert "expects 1 argument(s), but 2 were registered" in caplog.text
        assert storybook.handler("label") is not None

    def test_duplicate_argument_names_are_logged(self, storybook: Storybook, caplog):
        with caplog.at_level("WARNING", logger="storyhost.registry"):
            storybook.add_component("pair", lambda a, b: HTML(a + b), text_arg("text", "a"), text_arg("text", "b"))
        assert "component pair has duplicate argument name(s): text" in caplog.text
        assert storybook.handler("pair") is not None

    def test_unique_argument_names_are_not_logged(self, storybook: Storybook, caplog):
        with caplog.at_level("WARNING", logger="storyhost.registry"):
            storybook.add_component("label", label, text_arg("text", ""))
        assert "duplicate" not in caplog.text


class TestStories:
    def test_add_story(self, storybook: Storybook):
        storybook.add_story("button", "Long", text_arg("text", "A much longer label"))
        data = json.loads(storybook.config("button").serialize())
        assert [s["name"] for s in data["stories"]] == ["Default", "Long"]
        assert data["stories"][1]["args"] == {"text": "A much longer label"}

    def test_add_story_unknown_component(self, storybook: Storybook):
        with pytest.raises(KeyError):
            storybook.add_story("ghost", "Default", boolean_arg("on", True))


class TestLifecycle:
    def test_build_writes_every_component(self, storybook: Storybook, workdir: Path, runner: FakeRunner):
        storybook.add_component("label", label, text_arg("text", "hello"))
        report = storybook.build()
        # The fixture created storybook-static, so the workdir already exists
        assert report.status_of("install") == "skipped"
        assert report.status_of("build") == "ran"
        assert sorted(p.name for p in (workdir / "stories").iterdir()) == [
            "button.stories.json",
            "label.stories.json",
        ]
        assert runner.commands() == [["/usr/local/bin/npm", "run", "build-storybook"]]

    def test_second_build_is_skipped(self, storybook: Storybook, runner: FakeRunner):
        storybook.build()
        runner.calls.clear()
        report = storybook.build()
        assert report.changed is False
        assert runner.calls == []

    def test_force_rebuild(self, storybook: Storybook, runner: FakeRunner):
        storybook.build()
        runner.calls.clear()
        storybook.build(force_rebuild=True)
        assert runner.commands() == [["/usr/local/bin/npm", "run", "build-storybook"]]

    def test_listen_and_serve_returns_when_cancelled_during_build(self, storybook: Storybook, runner: FakeRunner):
        stop = threading.Event()
        stop.set()
        storybook.listen_and_serve(stop)
        assert runner.calls == []

    def test_serves_until_stopped(self, storybook: Storybook):
        storybook.host = "127.0.0.1"
        storybook.port = free_port()
        stop = threading.Event()
        thread = threading.Thread(target=storybook.listen_and_serve, args=(stop,))
        thread.start()
        try:
            response = wait_for(f"http://127.0.0.1:{storybook.port}/storybook_preview/button?text=Hi")
            assert response.status_code == 200
            assert response.text == "<button>Hi</button>"
        finally:
            stop.set()
            thread.join(timeout=10)
        assert not thread.is_alive()

    def test_failed_bind_is_reraised(self, storybook: Storybook):
        with socket.socket() as occupied:
            occupied.bind(("127.0.0.1", 0))
            occupied.listen()
            storybook.host = "127.0.0.1"
            storybook.port = occupied.getsockname()[1]
            with pytest.raises(SystemExit):
                storybook.listen_and_serve(threading.Event())

    def test_port_zero_is_kept(self, tmp_path: Path):
        assert Storybook(path=tmp_path, port=0, runner=FakeRunner()).port == 0

    def test_defaults_from_settings(self, tmp_path: Path):
        sb = Storybook(path=tmp_path, runner=FakeRunner())
        assert sb.static_dir == tmp_path / "storybook-static"
        assert sb.port == settings.PORT
        assert sb.init_command == settings.INIT_COMMAND
        assert sb.build_command == settings.BUILD_COMMAND


class TestNormalizePrefix:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("", ""), ("/", ""), ("/prod", "/prod"), ("/prod/", "/prod"), ("prod", "/prod")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_prefix(raw) == expected
