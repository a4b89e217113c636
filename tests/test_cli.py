"""Tests for the contact-scraper CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from cli.main import app
from cli.rendering import render_result, render_summary
from contact_scraper.scraper.errors import BatchTooLargeError
from contact_scraper.scraper.models import (
    ContactRecord,
    ExtractionResult,
    Person,
    ScrapeResult,
)

runner = CliRunner()


def _ok(url: str) -> ScrapeResult:
    data = ExtractionResult(
        contacts=[ContactRecord("Matti Meikäläinen", "toimitusjohtaja", "+358401234567")],
        phone_numbers=["+358401234567"],
        email_addresses=["info@yritys.fi"],
        people=[Person("Matti Meikäläinen", "toimitusjohtaja")],
    )
    return ScrapeResult.ok(url, data)


@pytest.fixture
def url_file(tmp_path):
    path = tmp_path / "urls.csv"
    path.write_text("URL\nhttps://yritys.fi\nhttps://toinen.fi\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# scrape
# ---------------------------------------------------------------------------

def test_scrape_prints_contacts(monkeypatch):
    monkeypatch.setattr("cli.main.scrape_url", _ok)

    result = runner.invoke(app, ["scrape", "--url", "https://yritys.fi"])
    assert result.exit_code == 0
    assert "✓ https://yritys.fi" in result.output
    assert "Matti Meikäläinen | toimitusjohtaja | +358401234567" in result.output


def test_scrape_json(monkeypatch):
    monkeypatch.setattr("cli.main.scrape_url", _ok)

    result = runner.invoke(app, ["scrape", "--url", "https://yritys.fi", "--json"])
    assert result.exit_code == 0
    payload = result.output[result.output.index("{"):]
    assert json.loads(payload)["data"]["emailAddresses"] == ["info@yritys.fi"]


def test_scrape_failure_exits_non_zero(monkeypatch):
    monkeypatch.setattr(
        "cli.main.scrape_url",
        lambda url: ScrapeResult.failed(url, "HTTP 403: Forbidden"),
    )

    result = runner.invoke(app, ["scrape", "--url", "https://yritys.fi"])
    assert result.exit_code == 1
    assert "HTTP 403: Forbidden" in result.output


# ---------------------------------------------------------------------------
# batch
# ---------------------------------------------------------------------------

def test_batch_writes_csv_to_stdout(monkeypatch, url_file):
    monkeypatch.setattr("cli.main.scrape_batch", lambda urls: [_ok(u) for u in urls])

    result = runner.invoke(app, ["batch", "--file", str(url_file)])
    assert result.exit_code == 0
    assert "URL,Name,Title,Phone,Email,Error" in result.output
    assert "https://toinen.fi,Matti Meikäläinen,toimitusjohtaja" in result.output


def test_batch_writes_csv_to_file(monkeypatch, url_file, tmp_path):
    monkeypatch.setattr("cli.main.scrape_batch", lambda urls: [_ok(u) for u in urls])
    out = tmp_path / "results.csv"

    result = runner.invoke(app, ["batch", "--file", str(url_file), "--out", str(out)])
    assert result.exit_code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "URL,Name,Title,Phone,Email,Error"
    assert len(lines) == 3


def test_batch_missing_file(tmp_path):
    result = runner.invoke(app, ["batch", "--file", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_batch_without_urls(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("URL\n", encoding="utf-8")

    result = runner.invoke(app, ["batch", "--file", str(path)])
    assert result.exit_code == 1
    assert "No valid URLs" in result.output


def test_batch_too_large(monkeypatch, url_file):
    def too_large(urls):
        raise BatchTooLargeError(51, 50)

    monkeypatch.setattr("cli.main.scrape_batch", too_large)

    result = runner.invoke(app, ["batch", "--file", str(url_file)])
    assert result.exit_code == 1
    assert "Maximum 50 URLs allowed per batch" in result.output


# ---------------------------------------------------------------------------
# rendering
# ---------------------------------------------------------------------------

def test_render_result_without_contacts():
    result = ScrapeResult.ok("https://yritys.fi", ExtractionResult())
    text = render_result(result)
    assert "contacts: (none)" in text
    assert "phones : (none)" in text


def test_render_summary():
    results = [_ok("https://yritys.fi"), ScrapeResult.failed("https://rikki.fi", "boom")]
    assert render_summary(results) == "1/2 URL(s) scraped, 1 contact(s) found"
