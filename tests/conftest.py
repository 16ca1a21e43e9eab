"""Shared test fixtures for clearcase-mcp."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from clearcase_mcp.config.schema import ClearCaseMcpConfig
from clearcase_mcp.tools.operations import build_registry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from clearcase_mcp.tools.registry import OperationRegistry


class FakeRunner:
    """Stands in for CleartoolRunner; records every argument vector.

    By default each command succeeds with ``out:<args>``. Pass a
    ``respond`` callable to return other output or raise.
    """

    def __init__(self, respond: Callable[[list[str]], str] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.respond = respond or (lambda args: "out:" + " ".join(args))
        self.killed = 0

    async def run(self, args: Sequence[str]) -> str:
        argv = list(args)
        self.calls.append(argv)
        return self.respond(argv)

    def kill_all(self) -> int:
        self.killed += 1
        return 0


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path_factory, monkeypatch):
    """Keep the developer's own config files and env out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("CLEARCASE_MCP_CONFIG", raising=False)
    monkeypatch.delenv("CLEARTOOL_PATH", raising=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def registry(fake_runner: FakeRunner) -> OperationRegistry:
    """Registry with every tool, backed by the fake runner."""
    return build_registry(ClearCaseMcpConfig(), runner=fake_runner)  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging so caplog sees records in every test."""
    yield
    logger = logging.getLogger("clearcase_mcp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
