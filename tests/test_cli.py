"""
Tests for the suiquest command line.
"""

import json

import httpx
import pytest
from typer.testing import CliRunner
from unittest.mock import AsyncMock, MagicMock, patch

from suiquest_api import __version__
from suiquest_api.cli import app
from suiquest_api.config import Settings

runner = CliRunner()


@pytest.fixture
def settings():
    return Settings(_env_file=None, db_uri=None, bridge_url="http://bridge.test")


@pytest.fixture(autouse=True)
def use_settings(settings):
    with patch("suiquest_api.cli.get_settings", return_value=settings):
        yield


def mock_wormhole(result=None, error=None) -> MagicMock:
    instance = MagicMock()
    instance.transfer_nft = AsyncMock(return_value=result, side_effect=error)
    instance.close = AsyncMock()
    return MagicMock(return_value=instance)


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_bridge_prints_result() -> None:
    client_cls = mock_wormhole(result={"txDigest": "9xQ", "status": "submitted"})
    with patch("suiquest_api.cli.WormholeClient", client_cls):
        result = runner.invoke(app, ["bridge", "0xnft", "ethereum"])

    assert result.exit_code == 0, result.output
    assert "sui -> ethereum" in result.output
    assert json.loads(result.output[result.output.index("{"):]) == {"txDigest": "9xQ", "status": "submitted"}
    client_cls.assert_called_once_with("http://bridge.test", timeout=30.0)
    client_cls.return_value.transfer_nft.assert_awaited_once_with(
        token_id="0xnft", from_chain="sui", to_chain="ethereum"
    )
    client_cls.return_value.close.assert_awaited_once()


def test_bridge_url_option() -> None:
    client_cls = mock_wormhole(result={})
    with patch("suiquest_api.cli.WormholeClient", client_cls):
        runner.invoke(app, ["bridge", "0xnft", "solana", "--bridge-url", "http://other.test"])
    client_cls.assert_called_once_with("http://other.test", timeout=30.0)


def test_bridge_failure_exits_1() -> None:
    client_cls = mock_wormhole(error=httpx.ConnectError("connection refused"))
    with patch("suiquest_api.cli.WormholeClient", client_cls):
        result = runner.invoke(app, ["bridge", "0xnft", "ethereum"])

    assert result.exit_code == 1
    client_cls.return_value.close.assert_awaited_once()


def test_check_db_without_uri_exits_1() -> None:
    result = runner.invoke(app, ["check-db"])
    assert result.exit_code == 1


def test_check_db_success() -> None:
    database = MagicMock()
    database.name = "suiquest"
    database.close = AsyncMock()

    with patch("suiquest_api.cli.connect_database", AsyncMock(return_value=database)):
        result = runner.invoke(app, ["check-db"])

    assert result.exit_code == 0
    assert "database: suiquest" in result.output
    database.close.assert_awaited_once()


def test_serve_applies_overrides(settings) -> None:
    with patch("suiquest_api.main.serve", new_callable=AsyncMock) as serve_api, \
            patch("suiquest_api.main.configure_logging"):
        result = runner.invoke(app, ["serve", "--port", "6000"])

    assert result.exit_code == 0, result.output
    served_settings = serve_api.await_args.args[0]
    assert served_settings.port == 6000
    assert served_settings.host == settings.host


def test_serve_overrides_reach_app_settings() -> None:
    """The lifespan logs from app.state.settings, so it must see the overrides."""
    from suiquest_api.main import app as api_app

    original = api_app.state.settings
    try:
        with patch("suiquest_api.main.serve", new_callable=AsyncMock), \
                patch("suiquest_api.main.configure_logging"):
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "6001"])

        assert result.exit_code == 0, result.output
        assert api_app.state.settings.port == 6001
        assert api_app.state.settings.host == "127.0.0.1"
    finally:
        api_app.state.settings = original


def test_bridge_non_json_response_exits_1() -> None:
    client_cls = mock_wormhole(error=ValueError("Expecting value: line 1 column 1 (char 0)"))
    with patch("suiquest_api.cli.WormholeClient", client_cls):
        result = runner.invoke(app, ["bridge", "0xnft", "ethereum"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    client_cls.return_value.close.assert_awaited_once()
