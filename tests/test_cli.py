# File: tests/test_cli.py
"""Tests for the CLI (`help_view/cli.py`) using click.testing.CliRunner.
Cover `show`, `config`, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import help_view.cli as cli_module
from help_view.cli import cli, to_url

SUMMARY = {
    "requested": "http://example.com/",
    "url": "http://example.com/",
    "size": 13,
    "text": "Hello help",
    "resources": [{"url": "http://example.com/logo.png", "kind": "image", "loaded": True}],
    "status": ["Downloading http://example.com/", "Downloaded http://example.com/"],
    "failures": [],
}


@pytest.fixture(autouse=True)
def patch_load_page(monkeypatch):
    """Replace load_page with a stub that does no networking."""
    calls = []

    async def fake_load(cfg, url, *, timeout=None):
        calls.append((cfg, url, timeout))
        return dict(SUMMARY)

    monkeypatch.setattr(cli_module, "load_page", fake_load)
    return calls


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "timeout": 1.0,
                "user_agent": "Agent/1.0",
                "credentials": {"docs.example": {"user": "alice", "password": "hidden"}},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "HelpView" in result.output


def test_show_config(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["user_agent"] == "Agent/1.0"
    assert data["credentials"] == {"docs.example": {"user": "alice"}}


def test_show_stdout(cfg_file, patch_load_page):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "show", "http://example.com/"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["url"] == "http://example.com/"
    cfg, url, timeout = patch_load_page[0]
    assert cfg.user_agent == "Agent/1.0"
    assert url == "http://example.com/"
    assert timeout is None


def test_show_text(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "show", "--text", "http://example.com/"])
    assert result.exit_code == 0
    assert result.output.strip() == "Hello help"


def test_show_json_file(cfg_file, tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--config", str(cfg_file), "show", "http://example.com/", "--json", str(out)]
    )
    assert result.exit_code == 0
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["resources"][0]["loaded"] is True


def test_show_local_file_becomes_file_url(cfg_file, tmp_path, patch_load_page):
    page = tmp_path / "index.html"
    page.write_text("<h1>Local</h1>", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "show", str(page)])
    assert result.exit_code == 0
    assert patch_load_page[0][1] == page.resolve().as_uri()


def test_to_url_leaves_urls_alone():
    assert to_url("http://example.com/a.html") == "http://example.com/a.html"
    assert to_url("doc://home") == "doc://home"


def test_show_failed_page(monkeypatch, cfg_file):
    async def failed(cfg, url, *, timeout=None):
        return {**SUMMARY, "url": None, "status": ["Failed to load http://x/: HTTP 404: Not Found"]}

    monkeypatch.setattr(cli_module, "load_page", failed)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "show", "http://x/"])
    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_show_timeout(monkeypatch, cfg_file):
    async def slow(cfg, url, *, timeout=None):
        raise asyncio.TimeoutError

    monkeypatch.setattr(cli_module, "load_page", slow)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "show", "http://example.com/", "--timeout", "1"])
    assert result.exit_code != 0
    assert "did not finish" in result.output


def test_bad_config_reported(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("timeout: -5", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output
