"""Tests for opening the browser at a provider's start-flow URL."""

from __future__ import annotations

import logging
import webbrowser
from unittest.mock import patch

import pytest

from clusterlogin.exceptions import BrowserOpenError
from clusterlogin.login.browser import WebBrowserOpener, open_start_flow, resolve_start_flow_url
from clusterlogin.output import OutputFormat, OutputManager

from conftest import CLUSTER_URL, FakeCluster, FakeOpener


@pytest.fixture
def output() -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)


class TestResolveStartFlowUrl:
    def test_relative_url_joined_to_cluster(self) -> None:
        with FakeCluster().client() as http:
            assert resolve_start_flow_url("/login?x=1", http) == f"{CLUSTER_URL}/login?x=1"

    def test_absolute_url_unchanged(self) -> None:
        with FakeCluster().client() as http:
            url = "https://idp.example.com/authorize"
            assert resolve_start_flow_url(url, http) == url


class TestOpenStartFlow:
    def test_opens_and_prints_link(self, output: OutputManager, capfd) -> None:
        opener = FakeOpener()
        with FakeCluster().client() as http:
            url = open_start_flow("/login", http, opener, output)
        assert url == f"{CLUSTER_URL}/login"
        assert opener.opened == [url]
        err = capfd.readouterr().err
        assert "If your browser didn't open, please follow this link:" in err
        assert f"    {url}" in err

    def test_link_printed_even_in_quiet_mode(self, output: OutputManager, capfd) -> None:
        assert output.is_quiet
        with FakeCluster().client() as http:
            open_start_flow("https://idp.example.com/a", http, FakeOpener(), output)
        assert "https://idp.example.com/a" in capfd.readouterr().err

    def test_open_failure_is_logged_not_raised(
        self, output: OutputManager, capfd, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.ERROR, logger="clusterlogin")
        opener = FakeOpener(fail=True)
        with FakeCluster().client() as http:
            open_start_flow("/login", http, opener, output)
        assert any("no runnable browser" in m for m in caplog.messages)
        assert f"{CLUSTER_URL}/login" in capfd.readouterr().err


class TestWebBrowserOpener:
    def test_success(self) -> None:
        with patch("clusterlogin.login.browser.webbrowser.open", return_value=True) as mock_open:
            WebBrowserOpener().open("https://x.example.com")
        mock_open.assert_called_once_with("https://x.example.com")

    def test_no_browser(self) -> None:
        with patch("clusterlogin.login.browser.webbrowser.open", return_value=False):
            with pytest.raises(BrowserOpenError):
                WebBrowserOpener().open("https://x.example.com")

    def test_webbrowser_error(self) -> None:
        with patch("clusterlogin.login.browser.webbrowser.open", side_effect=webbrowser.Error("boom")):
            with pytest.raises(BrowserOpenError, match="boom"):
                WebBrowserOpener().open("https://x.example.com")
