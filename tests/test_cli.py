"""Tests for settings validation and the command-line entry point."""

from pathlib import Path

import pytest

from image_cache_proxy import cli
from image_cache_proxy.config import Settings, get_settings


@pytest.mark.parametrize(
    "overrides",
    [
        {"port": 0},
        {"port": 70000},
        {"origin_timeout": 0},
        {"max_body_bytes": -1},
        {"origin_base_url": "ftp://origin"},
    ],
)
def test_invalid_settings_rejected(overrides: dict) -> None:
    with pytest.raises(ValueError):
        Settings(**overrides)


def test_parser_requires_all_options() -> None:
    """host, port and cache directory are all required."""
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["-h", "127.0.0.1", "-p", "8080"])


def test_load_settings_overlays_cli_options(tmp_path: Path) -> None:
    args = cli.build_parser().parse_args(["-h", "0.0.0.0", "-p", "9000", "-c", str(tmp_path / "c")])

    settings = cli.load_settings(args)

    assert settings.host == "0.0.0.0"
    assert settings.port == 9000
    assert settings.cache_dir == tmp_path / "c"


def test_main_creates_cache_dir_and_runs_server(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))
    cache_dir = tmp_path / "nested" / "cache"

    status = cli.main(["--host", "127.0.0.1", "--port", "8123", "--cache", str(cache_dir)])

    assert status == 0
    assert cache_dir.is_dir()
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["port"] == 8123


def test_main_fails_fast_when_cache_dir_cannot_be_created(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    blocker = tmp_path / "cache"
    blocker.write_text("not a directory")
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: pytest.fail("server must not start"))

    assert cli.main(["-h", "127.0.0.1", "-p", "8123", "-c", str(blocker)]) == 1


def test_main_rejects_invalid_port(tmp_path: Path) -> None:
    assert cli.main(["-h", "127.0.0.1", "-p", "0", "-c", str(tmp_path)]) == 1


@pytest.fixture
def fresh_settings():
    """Drop the cached Settings so the environment is read again."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_non_numeric_env_raises_value_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ORIGIN_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="ORIGIN_TIMEOUT"):
        Settings()


def test_main_rejects_non_numeric_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fresh_settings) -> None:
    monkeypatch.setenv("API_PORT", "abc")
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: pytest.fail("server must not start"))

    assert cli.main(["-h", "127.0.0.1", "-p", "8123", "-c", str(tmp_path)]) == 1
