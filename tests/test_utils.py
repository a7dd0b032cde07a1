"""Unit tests for utility functions and configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest

from pydotsync.config import Config
from pydotsync.utils import (
    contract_home,
    expand_path,
    reroot_home_path,
    short_hash,
)


class TestExpandPath:
    """Tests for expand_path."""

    def test_tilde_is_expanded(self):
        with patch.dict("os.environ", {"HOME": "/home/bob"}):
            assert expand_path("~/.zshrc") == Path("/home/bob/.zshrc")

    def test_absolute_path_unchanged(self):
        assert expand_path("/etc/hosts") == Path("/etc/hosts")


class TestRerootHomePath:
    """Tests for reroot_home_path."""

    def test_other_user(self):
        assert reroot_home_path("/home/alice/.config/nvim") == "~/.config/nvim"

    def test_single_component(self):
        assert reroot_home_path("/home/alice/.vimrc") == "~/.vimrc"

    def test_home_directory_itself(self):
        assert reroot_home_path("/home/alice") is None

    def test_outside_home(self):
        assert reroot_home_path("/etc/hosts") is None
        assert reroot_home_path("~/.zshrc") is None


class TestContractHome:
    """Tests for contract_home."""

    def test_below_home(self):
        assert contract_home("/home/bob/.zshrc", home=Path("/home/bob")) == "~/.zshrc"

    def test_outside_home(self):
        assert contract_home("/tmp/x", home=Path("/home/bob")) == "/tmp/x"


class TestShortHash:
    """Tests for short_hash."""

    def test_truncates(self):
        assert short_hash("0123456789abcdef0123") == "0123456789ab"

    def test_missing_hash(self):
        assert short_hash(None) == "-"
        assert short_hash("") == "-"


class TestConfig:
    """Tests for Config."""

    def test_default_config_path(self, tmp_path):
        with patch.dict("os.environ", {}, clear=True):
            assert Config(tmp_path).get_config_path() == tmp_path / "config.json"

    def test_env_config_path(self, tmp_path):
        with patch.dict("os.environ", {"PYDOTSYNC_CONFIG": "/etc/dots.json"}):
            assert Config(tmp_path).get_config_path() == Path("/etc/dots.json")

    def test_override_wins(self, tmp_path):
        with patch.dict("os.environ", {"PYDOTSYNC_CONFIG": "/etc/dots.json"}):
            path = Config(tmp_path).get_config_path("/tmp/mine.json")
            assert path == Path("/tmp/mine.json")

    def test_workers_override(self):
        assert Config().get_max_workers(3) == 3

    def test_workers_from_env(self):
        with patch.dict("os.environ", {"PYDOTSYNC_WORKERS": "5"}):
            assert Config().get_max_workers() == 5

    @pytest.mark.parametrize("value", ["zero", "0", "-2"])
    def test_invalid_workers_env_falls_back(self, value):
        with patch.dict("os.environ", {"PYDOTSYNC_WORKERS": value}):
            with patch("pydotsync.config.os.cpu_count", return_value=7):
                assert Config().get_max_workers() == 7

    def test_workers_default_cpu_count(self):
        with patch.dict("os.environ", {}, clear=True):
            with patch("pydotsync.config.os.cpu_count", return_value=None):
                assert Config().get_max_workers() == 1
