"""Tests for the reelscout command-line entrypoint."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from reelscout.application.use_cases import CascadeOutcome, SearchRun
from reelscout.domain.entities.catalog import (
    CascadeState,
    Query,
    SearchSession,
    Title,
)
from reelscout.interfaces.cli import cli


@pytest.fixture()
def patched(monkeypatch: pytest.MonkeyPatch) -> dict[str, MagicMock]:
    """Replace config loading, logging and server start with mocks."""
    mocks = {
        "load_config": MagicMock(return_value=MagicMock(name="config")),
        "configure_logging": MagicMock(return_value={"version": 1}),
        "create_app": MagicMock(return_value="app"),
        "run": MagicMock(),
    }
    monkeypatch.setattr(cli, "load_config", mocks["load_config"])
    monkeypatch.setattr(cli, "configure_logging", mocks["configure_logging"])
    monkeypatch.setattr(cli, "create_app", mocks["create_app"])
    monkeypatch.setattr(cli.uvicorn, "run", mocks["run"])
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    return mocks


class TestParseArgs:
    def test_defaults(self) -> None:
        args = cli._parse_args([])
        assert args.command is None
        assert args.host is None
        assert args.port is None
        assert args.provider_dir is None

    def test_search_subcommand(self) -> None:
        args = cli._parse_args(
            ["--log-level", "DEBUG", "search", "Inception", "--master-title", "Inception", "--resolve"]
        )
        assert args.command == "search"
        assert args.query == "Inception"
        assert args.master_title == "Inception"
        assert args.resolve is True
        assert args.log_level == "DEBUG"

    def test_invalid_log_format(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["--log-format", "xml"])


class TestStart:
    def test_serve_defaults(self, patched: dict[str, MagicMock]) -> None:
        assert cli.start([]) == 0

        patched["run"].assert_called_once()
        _, kwargs = patched["run"].call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 7878
        assert kwargs["log_config"] == {"version": 1}

    def test_cli_overrides_forwarded(self, patched: dict[str, MagicMock]) -> None:
        cli.start(["--provider-dir", "/tmp/providers", "--log-format", "json", "--port", "9000"])

        overrides = patched["load_config"].call_args.kwargs["cli_overrides"]
        assert overrides == {"provider_dir": "/tmp/providers", "log_format": "json"}
        assert patched["run"].call_args.kwargs["port"] == 9000

    def test_search_prints_json(
        self,
        patched: dict[str, MagicMock],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        seen: dict[str, Any] = {}

        async def _fake_run(config: Any, query: str, **kwargs: Any) -> list[dict[str, Any]]:
            seen.update(query=query, **kwargs)
            return [{"title": "Inception", "links": []}]

        monkeypatch.setattr(cli, "_run_search", _fake_run)

        code = cli.start(["search", "Inception", "--resolve"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == [{"title": "Inception", "links": []}]
        assert seen == {"query": "Inception", "master_title": None, "resolve": True}
        patched["run"].assert_not_called()

    def test_search_without_results(
        self, patched: dict[str, MagicMock], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def _fake_run(config: Any, query: str, **kwargs: Any) -> list[dict[str, Any]]:
            return []

        monkeypatch.setattr(cli, "_run_search", _fake_run)
        assert cli.start(["search", "zzzz"]) == 1

    def test_blank_search(self, patched: dict[str, MagicMock]) -> None:
        assert cli.start(["search", "   "]) == 2


class _FakeAggregate:
    async def run(
        self, text: str, *, master_title: str | None, session: SearchSession
    ) -> SearchRun:
        query = Query(text=text, master_title="Inception", master_year=2010)
        titles = [Title(title=text, year=2010)]
        session.begin(query)
        session.publish(query.token, titles)
        return SearchRun(query=query, titles=titles)


class _FakeResolve:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def execute(self, title: Title, **kwargs: Any) -> CascadeOutcome:
        self.calls.append(kwargs)
        return CascadeOutcome(title=title, state=CascadeState.EXHAUSTED)


class TestRunSearch:
    @pytest.mark.asyncio
    async def test_resolved_master_title_forwarded_to_cascade(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        resolve = _FakeResolve()

        async def _open(state: Any) -> None:
            state.aggregate_uc = _FakeAggregate()
            state.resolve_uc = resolve

        async def _close(state: Any) -> None:
            return None

        monkeypatch.setattr(cli, "open_resources", _open)
        monkeypatch.setattr(cli, "close_resources", _close)

        titles = await cli._run_search(
            MagicMock(name="config"), "تلقین", master_title=None, resolve=True
        )

        assert [t["title"] for t in titles] == ["تلقین"]
        assert len(resolve.calls) == 1
        call = resolve.calls[0]
        assert call["master_title"] == "Inception"
        assert call["token"] == call["session"].token
