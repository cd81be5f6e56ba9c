"""Tests for command-line parsing."""

from __future__ import annotations

import pytest

from pricefeed.main import build_parser, env_flag, parse_sources
from pricefeed.src.fetchers import get_available_fetchers

AVAILABLE = get_available_fetchers()


class TestParseSources:
    """Test parse_sources."""

    def test_empty_selects_all(self) -> None:
        assert parse_sources(None, AVAILABLE) == AVAILABLE
        assert parse_sources("", AVAILABLE) == AVAILABLE

    def test_normalizes_and_dedupes(self) -> None:
        assert parse_sources(" Kraken, coinbase,,kraken ", AVAILABLE) == ["kraken", "coinbase"]


class TestEnvFlag:
    """Test env_flag."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_true(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("SEQUENTIAL_FETCH", value)
        assert env_flag("SEQUENTIAL_FETCH") is True

    @pytest.mark.parametrize("value", ["", "0", "false", "nope"])
    def test_false(self, monkeypatch, value: str) -> None:
        monkeypatch.setenv("SEQUENTIAL_FETCH", value)
        assert env_flag("SEQUENTIAL_FETCH") is False

    def test_unset(self, monkeypatch) -> None:
        monkeypatch.delenv("SEQUENTIAL_FETCH", raising=False)
        assert env_flag("SEQUENTIAL_FETCH") is False


class TestBuildParser:
    """Test CLI defaults and environment fallbacks."""

    ENV_VARS = ["SOURCES", "CYCLE_INTERVAL", "FETCH_TIMEOUT", "SEQUENTIAL_FETCH", "HOST", "PORT"]

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch) -> None:
        for name in self.ENV_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self) -> None:
        args = build_parser(AVAILABLE).parse_args([])

        assert args.sources is None
        assert args.interval == 120.0
        assert args.fetch_timeout == 10.0
        assert args.sequential is False
        assert args.host == "0.0.0.0"
        assert args.port == 8080
        assert args.verbose is False

    def test_env_fallbacks(self, monkeypatch) -> None:
        monkeypatch.setenv("SOURCES", "coinbase,kraken")
        monkeypatch.setenv("CYCLE_INTERVAL", "30")
        monkeypatch.setenv("FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("SEQUENTIAL_FETCH", "true")
        monkeypatch.setenv("PORT", "9000")

        args = build_parser(AVAILABLE).parse_args([])

        assert args.sources == "coinbase,kraken"
        assert args.interval == 30.0
        assert args.fetch_timeout == 2.5
        assert args.sequential is True
        assert args.port == 9000

    def test_cli_overrides_env(self, monkeypatch) -> None:
        monkeypatch.setenv("CYCLE_INTERVAL", "30")

        args = build_parser(AVAILABLE).parse_args(["--interval", "5", "--sources", "okx"])

        assert args.interval == 5.0
        assert args.sources == "okx"
