"""Tests for the storefront CLI."""

from __future__ import annotations

import json

import pytest
from conftest import FakeCatalog
from typer.testing import CliRunner

from storefront.cli import typer_app
from storefront.services.query_key import QueryKey, QueryMode
from storefront.shared.errors import ErrorCode, NotOkError, StorefrontNetworkError

runner = CliRunner()


class StubClient(FakeCatalog):
    """FakeCatalog usable in place of CatalogAPIClient."""

    instances: list[StubClient] = []
    failures: dict = {}
    category_error: Exception | None = None

    def __init__(self, settings=None) -> None:
        super().__init__(total=10)
        self.settings = settings
        self.failures = dict(StubClient.failures)
        StubClient.instances.append(self)

    async def __aenter__(self) -> StubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def list_categories(self):
        if StubClient.category_error is not None:
            raise StubClient.category_error
        return await super().list_categories()


@pytest.fixture(autouse=True)
def stub_client(mocker, monkeypatch, tmp_path):
    """Replace the HTTP client and run in an empty directory."""
    monkeypatch.chdir(tmp_path)
    StubClient.instances = []
    StubClient.failures = {}
    StubClient.category_error = None
    mocker.patch.object(typer_app, "CatalogAPIClient", StubClient)
    return StubClient


class TestBrowse:
    """The browse command."""

    def test_first_page_table(self):
        result = runner.invoke(typer_app.app, ["browse"])

        assert result.exit_code == 0, result.output
        assert "Product 1" in result.output
        assert "Product 4" in result.output
        assert "Product 5" not in result.output

    def test_multiple_pages_stop_at_last(self, stub_client):
        result = runner.invoke(typer_app.app, ["browse", "--pages", "5"])

        assert result.exit_code == 0, result.output
        assert "Product 10" in result.output
        requested = [key.skip for key in stub_client.instances[0].requests]
        assert requested == [0, 4, 8]

    def test_category_and_skip(self, stub_client):
        result = runner.invoke(typer_app.app, ["browse", "-c", "laptops", "--skip", "4", "--limit", "2"])

        assert result.exit_code == 0, result.output
        assert stub_client.instances[0].requests == [QueryKey(QueryMode.CATEGORY, "laptops", 2, 4)]

    def test_json_output(self):
        result = runner.invoke(typer_app.app, ["--json", "browse", "-q", "phone", "--pages", "2"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["command"] == "browse"
        pages = payload["data"]["pages"]
        assert [item["id"] for item in pages[1]["items"]] == [5, 6, 7, 8]
        assert pages[0]["filters"] == {"q": "phone", "limit": "4", "skip": "0"}
        assert pages[0]["can_go_prev"] is False
        assert pages[1]["can_go_prev"] is True

    def test_query_and_category_are_exclusive(self):
        result = runner.invoke(typer_app.app, ["browse", "-q", "phone", "-c", "laptops"])

        assert result.exit_code == 2

    def test_network_error_exit_code(self, stub_client):
        stub_client.failures = {
            QueryKey(QueryMode.SEARCH, "", 4, 0): StorefrontNetworkError(ErrorCode.NETWORK_ERROR, "offline"),
        }

        result = runner.invoke(typer_app.app, ["browse"])

        assert result.exit_code == 1
        assert "Error: Network error: offline" in result.output

    def test_not_ok_error_as_json(self, stub_client):
        stub_client.failures = {
            QueryKey(QueryMode.SEARCH, "", 4, 0): NotOkError(404, "Request failed with status 404"),
        }

        result = runner.invoke(typer_app.app, ["--json", "browse"])

        assert result.exit_code == 1
        assert '"success": false' in result.output
        assert '"status_code": 404' in result.output

    def test_category_failure_does_not_fail_browse(self, stub_client):
        stub_client.category_error = StorefrontNetworkError(ErrorCode.NETWORK_ERROR, "offline")

        result = runner.invoke(typer_app.app, ["browse"])

        assert result.exit_code == 0, result.output
        assert "Product 1" in result.output


class TestCategories:
    """The categories command."""

    def test_lists_categories(self, stub_client):
        result = runner.invoke(typer_app.app, ["categories"])

        assert result.exit_code == 0, result.output
        assert "laptops" in result.output
        assert "smartphones" in result.output
        assert stub_client.instances[0].category_requests == 1
        assert stub_client.instances[0].requests == []

    def test_json_output(self):
        result = runner.invoke(typer_app.app, ["--json", "categories"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["categories"] == ["laptops", "smartphones"]

    def test_failure(self, stub_client):
        stub_client.category_error = StorefrontNetworkError(ErrorCode.NETWORK_ERROR, "offline")

        result = runner.invoke(typer_app.app, ["categories"])

        assert result.exit_code == 1
        assert "Network error" in result.output


class TestMainCallback:
    """Global options."""

    def test_version(self):
        result = runner.invoke(typer_app.app, ["--version"])

        assert result.exit_code == 0
        assert "storefront 0.1.0" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(typer_app.app, ["--config", str(tmp_path / "nope.toml"), "categories"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_config_file_sets_default_limit(self, tmp_path, stub_client):
        config = tmp_path / "custom.toml"
        config.write_text("[query]\ndefault_limit = 3\n", encoding="utf-8")

        result = runner.invoke(typer_app.app, ["--config", str(config), "browse"])

        assert result.exit_code == 0, result.output
        assert stub_client.instances[0].requests[0].limit == 3
